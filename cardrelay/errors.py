"""
Exception types raised by the relay components.

Routes translate these into JSON error responses.
"""

from typing import Optional


class RelayError(Exception):
    """Base class for relay failures."""


class OCRError(RelayError):
    """The OCR provider could not return text for an image."""


class OCRConfigurationError(OCRError):
    """Vision credentials are present but unusable."""


class WebhookError(RelayError):
    """The inquiry webhook call failed.

    Attributes:
        status_code: HTTP status returned by the webhook, if any
        details: Response body text returned by the webhook, if any
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[str] = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class WebhookConfigurationError(WebhookError):
    """A required webhook setting is missing."""


class InvalidPayloadError(RelayError):
    """The submitted inquiry payload is not a JSON object."""
