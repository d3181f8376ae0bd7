"""
Google Cloud Vision OCR client for business card images.

Credentials are resolved in this order:
1. GOOGLE_VISION_JSON_BASE64 - base64-encoded service account JSON (container friendly)
2. Key file from GOOGLE_APPLICATION_CREDENTIALS, VISION_KEYFILE or ./vision-key.json
3. Google application default credentials
"""

import base64
import binascii
import json
import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from google.cloud import vision

from .errors import OCRError, OCRConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_KEYFILE = "vision-key.json"


class VisionOCR:
    """Text detection through the Google Cloud Vision API."""

    def __init__(self, client: Optional[Any] = None):
        """
        Initialize the OCR client.

        Args:
            client: Ready ImageAnnotatorClient. Application default
                credentials are used when omitted.
        """
        self.client = client or vision.ImageAnnotatorClient()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "VisionOCR":
        """Build a client from application settings.

        Args:
            config: Mapping with the Vision credential settings

        Returns:
            VisionOCR instance

        Raises:
            OCRConfigurationError: If the inline credentials cannot be decoded
        """
        encoded = config.get("GOOGLE_VISION_JSON_BASE64")
        if encoded:
            info = cls._decode_service_account(encoded)
            logger.info("Vision credentials: inline service account")
            return cls(vision.ImageAnnotatorClient.from_service_account_info(info))

        key_path = Path(
            config.get("GOOGLE_APPLICATION_CREDENTIALS")
            or config.get("VISION_KEYFILE")
            or os.path.join(os.getcwd(), DEFAULT_KEYFILE)
        )
        if key_path.is_file():
            logger.info(f"Vision keyfile: {key_path}")
            return cls(vision.ImageAnnotatorClient.from_service_account_file(str(key_path)))

        logger.info(f"Vision keyfile {key_path} not found, using default credentials")
        return cls()

    @staticmethod
    def _decode_service_account(encoded: str) -> dict:
        try:
            decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
            info = json.loads(decoded)
        except (binascii.Error, UnicodeDecodeError, ValueError) as e:
            raise OCRConfigurationError(
                f"GOOGLE_VISION_JSON_BASE64 is not valid base64 JSON: {e}"
            ) from e

        if not isinstance(info, dict):
            raise OCRConfigurationError("GOOGLE_VISION_JSON_BASE64 must encode a JSON object")
        return info

    def extract_text(self, image_bytes: bytes) -> str:
        """Run text detection on an image.

        Args:
            image_bytes: Raw image content

        Returns:
            Full detected text, empty if nothing was recognized

        Raises:
            OCRError: If the image is empty or the API reports an error
        """
        if not image_bytes:
            raise OCRError("Empty image")

        response = self.client.text_detection(image=vision.Image(content=image_bytes))

        if response.error.message:
            raise OCRError(response.error.message)

        text = response.full_text_annotation.text or ""
        logger.info(f"OCR text length: {len(text)}")
        return text
