"""
Inquiry relay to the n8n automation webhook.

The submitted form payload is forwarded as JSON together with metadata
about the uploaded attachments. File contents are not forwarded.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

import requests

from .errors import InvalidPayloadError, WebhookConfigurationError, WebhookError

logger = logging.getLogger(__name__)

SECRET_HEADER = "x-hb-secret"


@dataclass
class InquiryResult:
    """Outcome of a successful webhook call."""
    attachments_count: int
    response_text: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": True,
            "attachmentsCount": self.attachments_count,
            "n8nResponse": self.response_text,
        }


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-01-31T09:15:00.123Z"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class InquiryRelay:
    """Forwards inquiry submissions to a webhook guarded by a shared secret."""

    # Request timeout in seconds
    TIMEOUT = 30

    def __init__(
        self,
        webhook_url: Optional[str],
        secret: Optional[str],
        timeout: Optional[float] = None
    ) -> None:
        """Initialize the relay.

        Args:
            webhook_url: n8n webhook URL
            secret: Shared secret sent in the x-hb-secret header
            timeout: Request timeout in seconds

        Raises:
            WebhookConfigurationError: If the URL or the secret is missing
        """
        if not webhook_url:
            raise WebhookConfigurationError("Missing N8N_WEBHOOK_URL in backend/.env")
        if not secret:
            raise WebhookConfigurationError("Missing N8N_SECRET in backend/.env")

        self.webhook_url = webhook_url
        self.secret = secret
        self.timeout = timeout or self.TIMEOUT

    @staticmethod
    def parse_payload(raw: Optional[str]) -> Dict[str, Any]:
        """Decode the JSON `payload` form field.

        Args:
            raw: Field value, "{}" is assumed when absent

        Returns:
            Decoded payload

        Raises:
            InvalidPayloadError: If the value is not a JSON object
        """
        try:
            payload = json.loads(raw or "{}")
        except ValueError as e:
            raise InvalidPayloadError(f"Invalid payload JSON: {e}") from e

        if not isinstance(payload, dict):
            raise InvalidPayloadError("Payload must be a JSON object")
        return payload

    @staticmethod
    def describe_attachments(files: Iterable[Any]) -> List[Dict[str, Any]]:
        """Collect name, MIME type and size of uploaded files.

        Args:
            files: Werkzeug FileStorage objects

        Returns:
            List of attachment metadata dicts
        """
        attachments = []
        for f in files:
            stream = f.stream
            position = stream.tell()
            stream.seek(0, 2)
            size = stream.tell()
            stream.seek(position)

            attachments.append({
                "name": f.filename,
                "type": f.mimetype,
                "size": size,
            })
        return attachments

    @staticmethod
    def build_body(
        payload: Dict[str, Any],
        attachments: List[Dict[str, Any]],
        now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """Merge the payload with attachment metadata for the webhook."""
        return {
            **payload,
            "attachments": attachments,
            # Flat list of names for spreadsheet columns
            "uploads": "; ".join(a["name"] or "" for a in attachments),
            "submittedAt": payload.get("submittedAt") or utc_timestamp(now),
        }

    def submit(
        self,
        payload: Dict[str, Any],
        attachments: List[Dict[str, Any]]
    ) -> InquiryResult:
        """POST an inquiry to the webhook.

        Args:
            payload: Decoded form payload
            attachments: Attachment metadata from describe_attachments()

        Returns:
            InquiryResult with the webhook response text

        Raises:
            WebhookError: On transport failure or a non-2xx response
        """
        body = self.build_body(payload, attachments)
        headers = {
            "Content-Type": "application/json",
            SECRET_HEADER: self.secret,
        }

        try:
            response = requests.post(
                self.webhook_url,
                data=json.dumps(body),
                headers=headers,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Webhook request failed: {str(e)}")
            raise WebhookError(f"Webhook request failed: {str(e)}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"n8n error: {response.text}")
            raise WebhookError(
                "n8n failed",
                status_code=response.status_code,
                details=response.text
            )

        logger.info(f"Inquiry relayed with {len(attachments)} attachment(s)")
        return InquiryResult(
            attachments_count=len(attachments),
            response_text=response.text
        )
