from __future__ import annotations

from typing import Optional


class MaterialEngineError(Exception):
    """Base exception for the material engine."""


class MalformedResponse(MaterialEngineError):
    """Raised when model output cannot be coerced into JSON."""

    def __init__(self, raw_text: str, message: str = "Model response is not valid JSON") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class SchemaMismatch(MaterialEngineError):
    """Raised when model output is JSON but not the expected shape."""

    def __init__(self, expected: str, raw_text: str = "", actual: str = "") -> None:
        detail = f"Expected a JSON {expected}"
        if actual:
            detail += f", got {actual}"
        super().__init__(detail)
        self.expected = expected
        self.actual = actual
        self.raw_text = raw_text


class RequestFailure(MaterialEngineError):
    """Raised when the generative API call itself fails."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SessionClosed(MaterialEngineError):
    """Raised when a chat session is used after close()."""


class InvalidDocument(MaterialEngineError):
    """Raised when an uploaded document cannot be read."""


class ConfigError(MaterialEngineError):
    """Raised when the settings file is unreadable."""
