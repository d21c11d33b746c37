"""
Pipeline Errors: one class per failure the caller must be able to tell apart.

Every error carries a stable client-facing `message`, an HTTP `status_code`
for the transport wrapper, and optional `details` for logs. Diagnostics
(raw snippets, parse errors) live in `details`, never in `message`.
"""

from typing import Any, Dict, Optional

# Max characters of model output kept for diagnostics
SNIPPET_CHARS = 200


def truncate(text: str, limit: int = SNIPPET_CHARS) -> str:
    if text is None:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit] + f"... [{len(text) - limit} more chars]"


class PitchPlotError(Exception):
    """Base exception for all pipeline-level failures."""

    status_code = 500
    default_message = "Failed to process image"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class NoImageProvided(PitchPlotError):
    """The request carried no image payload."""

    status_code = 400
    default_message = "No image provided"


class InvalidImage(PitchPlotError):
    """The image payload could not be decoded."""

    status_code = 400
    default_message = "Image payload could not be decoded"


class UpstreamUnavailable(PitchPlotError):
    """The model provider failed at the transport or authentication level."""

    status_code = 502
    default_message = "Model request failed"

    def __init__(self, provider_message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(f"{self.default_message}: {provider_message}", details)
        self.provider_message = provider_message


class NoJsonFound(PitchPlotError):
    """The model reply contained no `[`...`]` array."""

    status_code = 422
    default_message = "No JSON array found in model response"

    def __init__(self, raw_text: str) -> None:
        super().__init__(details={"snippet": truncate(raw_text)})
        self.raw_text = raw_text


class MalformedJson(PitchPlotError):
    """An array-shaped substring was found but did not decode."""

    status_code = 422
    default_message = "Model response contained malformed JSON"

    def __init__(self, parse_error: Exception, candidate: str) -> None:
        super().__init__(details={"parse_error": str(parse_error), "candidate": truncate(candidate)})
        self.parse_error = parse_error
        self.candidate = candidate
