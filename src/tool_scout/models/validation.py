"""Models for URL probing and validation."""
from enum import Enum
from typing import List, Optional
from pydantic import Field

from .crawl import CamelModel


class ProbeResult(CamelModel):
    """Outcome of a DNS + redirect probe."""
    original_url: str
    final_url: str
    final_code: int = 0
    chain: str = ""
    error: Optional[str] = None


class ValidationState(str, Enum):
    """States of the URL validator; everything after RENDERING is terminal."""
    UNCHECKED = "unchecked"
    RESOLVING = "resolving"
    RENDERING = "rendering"
    VALID = "valid"
    INVALID_CLIENT_ERROR = "invalid_client_error"
    INVALID_SERVER_ERROR = "invalid_server_error"
    INVALID_DNS = "invalid_dns"
    INVALID_REDIRECT_INCOMPLETE = "invalid_redirect_incomplete"
    UNDETERMINED = "undetermined"

    @property
    def is_terminal(self) -> bool:
        return self not in (
            ValidationState.UNCHECKED,
            ValidationState.RESOLVING,
            ValidationState.RENDERING,
        )


class ValidationResult(CamelModel):
    """Result of validating one URL, optionally applied to a tool."""
    original_url: str
    final_url: str
    status_code: int = 0
    is_redirected: bool = False
    chain_of_redirects: List[str] = Field(default_factory=list)
    is_valid: bool = False
    message: str = ""
    state: ValidationState = ValidationState.UNCHECKED
    is_active: Optional[bool] = Field(default=None, description="Active flag written to the tool, if any")
