"""
Tests for VisionOCR class.

The Google Cloud Vision client is mocked; no network calls are made.
"""

import base64
import json

import pytest
from unittest.mock import Mock, patch

from cardrelay.errors import OCRError, OCRConfigurationError
from cardrelay.vision_ocr import VisionOCR


def make_response(text="", error_message=""):
    """Build a fake AnnotateImageResponse."""
    response = Mock()
    response.error.message = error_message
    response.full_text_annotation.text = text
    return response


class TestVisionOCR:
    """Test cases for VisionOCR."""

    @pytest.fixture
    def client(self):
        """Create a mocked ImageAnnotatorClient."""
        return Mock()

    @pytest.fixture
    def ocr(self, client):
        """Create OCR instance around the mocked client."""
        return VisionOCR(client=client)

    def test_extract_text(self, ocr, client):
        """Test detected text is returned."""
        client.text_detection.return_value = make_response("John Smith\nAcme Corp")

        result = ocr.extract_text(b"fake image data")

        assert result == "John Smith\nAcme Corp"
        image = client.text_detection.call_args.kwargs["image"]
        assert image.content == b"fake image data"

    def test_extract_text_nothing_detected(self, ocr, client):
        """Test a card without text yields an empty string."""
        client.text_detection.return_value = make_response("")

        assert ocr.extract_text(b"fake image data") == ""

    def test_extract_text_api_error(self, ocr, client):
        """Test API error messages raise OCRError."""
        client.text_detection.return_value = make_response(error_message="Bad image data.")

        with pytest.raises(OCRError, match="Bad image data."):
            ocr.extract_text(b"fake image data")

    def test_extract_text_empty_image(self, ocr, client):
        """Test empty uploads are rejected before calling the API."""
        with pytest.raises(OCRError):
            ocr.extract_text(b"")

        client.text_detection.assert_not_called()

    @patch("cardrelay.vision_ocr.vision.ImageAnnotatorClient")
    def test_from_config_inline_credentials(self, mock_client_class):
        """Test base64 service account JSON is decoded and used."""
        info = {"type": "service_account", "project_id": "demo"}
        encoded = base64.b64encode(json.dumps(info).encode("utf-8")).decode("ascii")

        ocr = VisionOCR.from_config({"GOOGLE_VISION_JSON_BASE64": encoded})

        mock_client_class.from_service_account_info.assert_called_once_with(info)
        assert ocr.client is mock_client_class.from_service_account_info.return_value

    @pytest.mark.parametrize("encoded", ["not base64!!", base64.b64encode(b"[1, 2]").decode()])
    def test_from_config_invalid_inline_credentials(self, encoded):
        """Test unusable inline credentials raise OCRConfigurationError."""
        with pytest.raises(OCRConfigurationError):
            VisionOCR.from_config({"GOOGLE_VISION_JSON_BASE64": encoded})

    @patch("cardrelay.vision_ocr.vision.ImageAnnotatorClient")
    def test_from_config_keyfile(self, mock_client_class, tmp_path):
        """Test an existing key file is used."""
        keyfile = tmp_path / "key.json"
        keyfile.write_text("{}")

        ocr = VisionOCR.from_config({"VISION_KEYFILE": str(keyfile)})

        mock_client_class.from_service_account_file.assert_called_once_with(str(keyfile))
        assert ocr.client is mock_client_class.from_service_account_file.return_value

    @patch("cardrelay.vision_ocr.vision.ImageAnnotatorClient")
    def test_from_config_keyfile_precedence(self, mock_client_class, tmp_path):
        """Test GOOGLE_APPLICATION_CREDENTIALS wins over VISION_KEYFILE."""
        preferred = tmp_path / "preferred.json"
        preferred.write_text("{}")
        other = tmp_path / "other.json"
        other.write_text("{}")

        VisionOCR.from_config({
            "GOOGLE_APPLICATION_CREDENTIALS": str(preferred),
            "VISION_KEYFILE": str(other)
        })

        mock_client_class.from_service_account_file.assert_called_once_with(str(preferred))

    @patch("cardrelay.vision_ocr.vision.ImageAnnotatorClient")
    def test_from_config_default_credentials(self, mock_client_class, tmp_path, monkeypatch):
        """Test default credentials are used without a key file."""
        monkeypatch.chdir(tmp_path)

        ocr = VisionOCR.from_config({})

        mock_client_class.assert_called_once_with()
        mock_client_class.from_service_account_file.assert_not_called()
        assert ocr.client is mock_client_class.return_value
