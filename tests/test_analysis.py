"""Tests for answer decoding and pricing inference."""

import pytest

from tool_scout.analysis.decoding import decode_json_object, strip_html_answer
from tool_scout.analysis.pricing import infer_pricing_type
from tool_scout.analysis.prompts import affiliate_prompt, content_prompt, pricing_prompt
from tool_scout.models.analysis import DecodedKind, PricingType

EXPECTED = {"name": "Clipforge", "pricingType": "FREEMIUM", "tags": ["video", "ai"]}
BODY = '{"name": "Clipforge", "pricingType": "FREEMIUM", "tags": ["video", "ai"]}'


@pytest.mark.parametrize("answer,strategy", [
    (f"Voici le résultat :\n```json\n{BODY}\n```\nBonne journée", "fenced-json"),
    (f"```\n{BODY}\n```", "fenced"),
    (f"Le JSON demandé est {BODY} comme prévu.", "braces"),
])
def test_decoders_recover_the_same_object(answer, strategy):
    decoded = decode_json_object(answer)

    assert decoded.kind == DecodedKind.STRUCTURED
    assert decoded.data == EXPECTED
    assert decoded.strategy == strategy


def test_non_object_fence_falls_through_to_next_decoder():
    decoded = decode_json_object(f"```json\n[{BODY}]\n```")

    assert decoded.is_structured
    assert decoded.data == EXPECTED
    assert decoded.strategy == "braces"


@pytest.mark.parametrize("answer", [
    "Je ne peux pas analyser ce site.",
    "```json\n[1, 2, 3]\n```",
    "{ clearly: not json }",
    "",
    None,
])
def test_unparsable_answers_are_raw(answer):
    decoded = decode_json_object(answer)

    assert decoded.kind == DecodedKind.RAW
    assert decoded.data is None
    default = {"confidence": 0}
    assert decoded.or_default(default) == default
    assert decoded.or_default(default) is not default


def test_strip_html_answer():
    assert strip_html_answer("```html\n<p>Bonjour</p>\n```") == "<p>Bonjour</p>"
    assert strip_html_answer("Voici la description :\n<p>Bonjour</p>") == "<p>Bonjour</p>"
    assert strip_html_answer("Bien sûr ! Voici :\n```html\n<p>Bonjour</p>\n```") == "<p>Bonjour</p>"
    assert strip_html_answer("<h2>Tarifs</h2>") == "<h2>Tarifs</h2>"


@pytest.mark.parametrize("text,expected", [
    ("L'outil est entièrement gratuit.", PricingType.FREE),
    ("Il existe une version gratuite limitée et un plan Pro.", PricingType.FREEMIUM),
    ("Un modèle freemium classique.", PricingType.FREEMIUM),
    ("Comptez 29 € par mois pour le plan Pro.", PricingType.PAID),
    ("", PricingType.PAID),
])
def test_infer_pricing_type(text, expected):
    assert infer_pricing_type(text) == expected


def test_free_offer_mention_is_classified_free():
    """'gratuit' also matches 'offre gratuite', which therefore reads as FREE."""
    assert infer_pricing_type("Une offre gratuite est disponible.") == PricingType.FREE


def test_prompts_embed_crawled_data():
    prompt = content_prompt("https://example.com", "Example", "PAGE TEXT", ["https://twitter.com/example"])
    assert "PAGE TEXT" in prompt
    assert "https://twitter.com/example" in prompt
    assert '"seoTitle"' in prompt

    assert "x" * 50_000 in pricing_prompt("https://example.com", "x" * 60_000)
    assert "x" * 50_001 not in pricing_prompt("https://example.com", "x" * 60_000)

    prompt = affiliate_prompt("https://example.com", [
        {"url": "https://example.com/affiliates", "text": "Affiliés", "content": "c" * 3000},
    ])
    assert "LIEN 1:" in prompt
    assert "c" * 1500 in prompt
    assert "c" * 1501 not in prompt
    assert "mostProbableAffiliateUrl" in prompt
