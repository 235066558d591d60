"""Best-effort decoding of free-text model answers."""
from typing import Callable, List, Optional, Tuple
import json
import re

from ..core.logging import logger
from ..models.analysis import DecodedKind, DecodedResponse


FENCED_JSON = re.compile(r"```json\n([\s\S]*?)\n```")
FENCED_PLAIN = re.compile(r"```\n([\s\S]*?)\n```")
BRACE_SPAN = re.compile(r"\{[\s\S]*\}")

PREAMBLE = re.compile(r"^\s*(?:Voici|Bien sûr)[^\n]*\n+", re.I)
CODE_FENCE = re.compile(r"^\s*```[a-zA-Z]*\s*\n?|\n?\s*```\s*$")


def _fenced_json(text: str) -> Optional[str]:
    match = FENCED_JSON.search(text)
    return match.group(1) if match else None


def _fenced_plain(text: str) -> Optional[str]:
    match = FENCED_PLAIN.search(text)
    return match.group(1) if match else None


def _brace_span(text: str) -> Optional[str]:
    match = BRACE_SPAN.search(text)
    return match.group(0) if match else None


DECODERS: List[Tuple[str, Callable[[str], Optional[str]]]] = [
    ("fenced-json", _fenced_json),
    ("fenced", _fenced_plain),
    ("braces", _brace_span),
]


def decode_json_object(text: Optional[str]) -> DecodedResponse:
    """
    Extract a JSON object from a model answer.

    Decoders run in order (```` ```json ```` fence, plain fence, outermost
    brace span); the first candidate that parses to an object wins.

    Returns:
        ``structured`` response with the object, or ``raw`` with the text
    """
    text = text or ""
    for name, decoder in DECODERS:
        candidate = decoder(text)
        if candidate is None:
            continue
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return DecodedResponse(kind=DecodedKind.STRUCTURED, data=value, raw_text=text, strategy=name)

    logger.warning(f"Could not decode a JSON object from the model answer: {text[:200]!r}")
    return DecodedResponse(kind=DecodedKind.RAW, raw_text=text)


def strip_html_answer(text: str) -> str:
    """Drop code fences and a leading "Voici ..." or "Bien sûr ..." line around generated HTML."""
    cleaned = CODE_FENCE.sub("", text.strip())
    cleaned = PREAMBLE.sub("", cleaned)
    return CODE_FENCE.sub("", cleaned.strip()).strip()
