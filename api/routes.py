"""
API routes for the Business Card Relay API.

Flask REST API endpoints for card OCR and inquiry relay.
"""

import logging
from typing import Optional

from flask import Blueprint, request, jsonify, current_app

from cardrelay.errors import (
    OCRError,
    WebhookError,
    WebhookConfigurationError,
    InvalidPayloadError
)
from cardrelay.parser import parse_card_text
from cardrelay.vision_ocr import VisionOCR
from cardrelay.webhook import InquiryRelay
from config import Config

logger = logging.getLogger(__name__)

# Create Blueprint
api_bp = Blueprint("api", __name__, url_prefix="/api")

# OCR client instance (lazy initialization)
_ocr: Optional[VisionOCR] = None


def get_ocr_client() -> VisionOCR:
    """Get or create the Vision OCR client.

    Returns:
        VisionOCR instance
    """
    global _ocr

    if _ocr is None:
        _ocr = VisionOCR.from_config(current_app.config)
        logger.info("Vision OCR client initialized")

    return _ocr


def get_inquiry_relay() -> InquiryRelay:
    """Create an inquiry relay from the current settings.

    Raises:
        WebhookConfigurationError: If the webhook URL or secret is missing
    """
    return InquiryRelay(
        webhook_url=current_app.config.get("N8N_WEBHOOK_URL"),
        secret=current_app.config.get("N8N_SECRET"),
        timeout=current_app.config.get("WEBHOOK_TIMEOUT")
    )


def card_response(text: str):
    """Build the extraction response body for OCR text."""
    parsed = parse_card_text(text).to_dict()
    return {
        "success": True,
        "text": text,
        "parsed": parsed,
        **parsed
    }


@api_bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint.

    Returns:
        JSON with health status
    """
    return jsonify({
        "ok": True,
        "success": True,
        "status": "healthy",
        "message": "Business Card Relay API is running",
        "version": "1.0.0"
    }), 200


@api_bp.route("/status", methods=["GET"])
def get_status():
    """Report which integrations are configured."""
    return jsonify({
        "success": True,
        "data": {
            "api_status": "running",
            "integrations": Config.get_integration_status(current_app.config)
        }
    }), 200


@api_bp.route("/extract-business-card", methods=["POST"])
def extract_business_card():
    """Run OCR on a business card image and parse contact fields.

    Expects:
        - multipart/form-data with 'cardImage' field

    Returns:
        JSON with OCR text and parsed contact fields
    """
    file = request.files.get("cardImage")

    if file is None:
        return jsonify({
            "success": False,
            "error": "No cardImage uploaded."
        }), 400

    try:
        ocr = get_ocr_client()
        text = ocr.extract_text(file.read())

        return jsonify(card_response(text)), 200

    except OCRError as e:
        logger.error(f"OCR error: {str(e)}")
        return jsonify({
            "success": False,
            "error": str(e) or "OCR failed"
        }), 500

    except Exception as e:
        logger.exception("OCR error FULL")
        return jsonify({
            "success": False,
            "error": str(e) or "OCR failed"
        }), 500


@api_bp.route("/parse-text", methods=["POST"])
def parse_text():
    """Parse raw text (skip OCR).

    Expects:
        - JSON body with 'text' field

    Returns:
        JSON with parsed contact data
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not isinstance(data.get("text"), str):
        return jsonify({
            "success": False,
            "error": "No text provided. Send JSON with 'text' field."
        }), 400

    return jsonify(card_response(data["text"])), 200


@api_bp.route("/submit-inquiry", methods=["POST"])
def submit_inquiry():
    """Relay an inquiry submission to the n8n webhook.

    Expects:
        - multipart/form-data with 'payload' field (JSON object as string)
        - Optional 'cardImage' file (accepted, not forwarded)
        - Optional 'attachments' files (metadata is forwarded)

    Returns:
        JSON with attachment count and the webhook response text
    """
    try:
        relay = get_inquiry_relay()
    except WebhookConfigurationError as e:
        logger.error(str(e))
        return jsonify({
            "success": False,
            "error": str(e)
        }), 500

    if len(request.files.getlist("cardImage")) > 1:
        return jsonify({
            "success": False,
            "error": "Only one cardImage allowed"
        }), 400

    files = request.files.getlist("attachments")
    max_attachments = current_app.config.get("MAX_ATTACHMENTS", Config.MAX_ATTACHMENTS)

    if len(files) > max_attachments:
        return jsonify({
            "success": False,
            "error": f"Too many attachments. Maximum: {max_attachments}"
        }), 400

    try:
        payload = relay.parse_payload(request.form.get("payload"))
    except InvalidPayloadError as e:
        return jsonify({
            "success": False,
            "error": str(e)
        }), 400

    try:
        attachments = relay.describe_attachments(files)
        result = relay.submit(payload, attachments)

        return jsonify({
            "success": True,
            **result.to_dict()
        }), 200

    except WebhookError as e:
        body = {
            "success": False,
            "error": str(e)
        }
        if e.details is not None:
            body["details"] = e.details
        return jsonify(body), 500

    except Exception as e:
        logger.exception("submit error")
        return jsonify({
            "success": False,
            "error": str(e) or "Submit failed"
        }), 500


# Error handlers
@api_bp.errorhandler(400)
def bad_request(error):
    """Handle 400 errors."""
    return jsonify({
        "success": False,
        "error": "Bad request"
    }), 400

