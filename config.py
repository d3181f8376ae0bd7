"""
Configuration management for the Business Card Relay API.

Handles environment variables, credentials and application settings.
"""

import os
import logging
from typing import Any, Mapping, Optional
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


class Config:
    """Application configuration class.

    Attributes:
        DEBUG: Enable debug mode
        TESTING: Enable testing mode
        MAX_CONTENT_LENGTH: Maximum request body size
        MAX_ATTACHMENTS: Maximum attachments per inquiry
        N8N_WEBHOOK_URL: Webhook receiving inquiry submissions
        N8N_SECRET: Shared secret sent to the webhook
        GOOGLE_VISION_JSON_BASE64: Inline base64 service account for Vision
    """

    # Flask Settings
    DEBUG: bool = os.getenv("CARD_API_DEBUG", "False").lower() == "true"
    TESTING: bool = os.getenv("CARD_API_TESTING", "False").lower() == "true"
    PORT: int = int(os.getenv("PORT", "5001"))

    # Upload Settings
    MAX_FILE_SIZE: int = 25 * 1024 * 1024  # 25MB per file
    MAX_ATTACHMENTS: int = 25
    # One card image plus the attachments
    MAX_CONTENT_LENGTH: int = int(os.getenv(
        "CARD_API_MAX_CONTENT_LENGTH",
        str(MAX_FILE_SIZE * (MAX_ATTACHMENTS + 1))
    ))

    # Google Vision credentials
    GOOGLE_VISION_JSON_BASE64: Optional[str] = os.getenv("GOOGLE_VISION_JSON_BASE64")
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    VISION_KEYFILE: Optional[str] = os.getenv("VISION_KEYFILE")

    # n8n webhook
    N8N_WEBHOOK_URL: Optional[str] = os.getenv("N8N_WEBHOOK_URL")
    N8N_SECRET: Optional[str] = os.getenv("N8N_SECRET")
    WEBHOOK_TIMEOUT: float = float(os.getenv("CARD_API_WEBHOOK_TIMEOUT", "30"))

    # Logging
    LOG_LEVEL: str = os.getenv("CARD_API_LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @classmethod
    def init_app(cls, app) -> None:
        """Initialize Flask app with configuration.

        Args:
            app: Flask application instance
        """
        app.config.from_object(cls)

        # Configure logging
        logging.basicConfig(
            level=getattr(logging, cls.LOG_LEVEL.upper()),
            format=cls.LOG_FORMAT
        )

        logger.info(f"N8N_WEBHOOK_URL: {cls.N8N_WEBHOOK_URL or '(not set)'}")
        logger.info("Configuration initialized successfully")

    @classmethod
    def get_integration_status(cls, settings: Optional[Mapping[str, Any]] = None) -> dict:
        """Get status of configured integrations.

        Args:
            settings: Active settings, e.g. a Flask app.config. Class
                attributes are used when omitted.

        Returns:
            Dictionary with integration availability status
        """
        if settings is None:
            settings = {key: getattr(cls, key) for key in dir(cls) if key.isupper()}

        return {
            "vision_inline_credentials": bool(settings.get("GOOGLE_VISION_JSON_BASE64")),
            "vision_keyfile": bool(
                settings.get("GOOGLE_APPLICATION_CREDENTIALS") or settings.get("VISION_KEYFILE")
            ),
            "webhook": bool(settings.get("N8N_WEBHOOK_URL") and settings.get("N8N_SECRET"))
        }


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    LOG_LEVEL = "INFO"


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    LOG_LEVEL = "DEBUG"
    # Never reach real services from tests
    N8N_WEBHOOK_URL = None
    N8N_SECRET = None
    GOOGLE_VISION_JSON_BASE64 = None


# Configuration mapping
config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig
}


def get_config(config_name: Optional[str] = None) -> Config:
    """Get configuration class by name.

    Args:
        config_name: Configuration name (development, production, testing)

    Returns:
        Configuration class
    """
    if config_name is None:
        config_name = os.getenv("CARD_API_ENV", "development")
    return config_by_name.get(config_name, DevelopmentConfig)
