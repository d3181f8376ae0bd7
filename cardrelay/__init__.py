"""
Source package initialization for the Business Card Relay API.
"""

from .parser import ContactParser, ContactRecord, parse_card_text
from .vision_ocr import VisionOCR
from .webhook import InquiryRelay, InquiryResult
from .errors import (
    RelayError,
    OCRError,
    OCRConfigurationError,
    WebhookError,
    WebhookConfigurationError,
    InvalidPayloadError
)

__all__ = [
    "ContactParser",
    "ContactRecord",
    "parse_card_text",
    "VisionOCR",
    "InquiryRelay",
    "InquiryResult",
    "RelayError",
    "OCRError",
    "OCRConfigurationError",
    "WebhookError",
    "WebhookConfigurationError",
    "InvalidPayloadError"
]
