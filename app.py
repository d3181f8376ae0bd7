"""
Business Card Relay API - Flask Application Entry Point.

Extracts contact fields from business card images via Google Cloud Vision
and relays inquiry submissions to an n8n webhook.
"""

import logging

from flask import Flask, jsonify
from flask_cors import CORS

from config import get_config
from api.routes import api_bp

logger = logging.getLogger(__name__)


def create_app(config_name: str = None) -> Flask:
    """Application factory for creating Flask app.

    Args:
        config_name: Configuration name (development, production, testing)

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)

    # Load configuration
    config_class = get_config(config_name)
    config_class.init_app(app)

    # Enable CORS
    CORS(app, resources={
        r"/api/*": {
            "origins": "*",
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"]
        }
    })

    # Register blueprints
    app.register_blueprint(api_bp)

    # Root endpoint - API info
    @app.route("/")
    def index():
        """API information endpoint."""
        return jsonify({
            "name": "Business Card Relay API",
            "version": "1.0.0",
            "description": "Extract contact fields from business card images and relay inquiries",
            "endpoints": {
                "health": "/api/health",
                "status": "/api/status",
                "extract": "POST /api/extract-business-card",
                "parse_text": "POST /api/parse-text",
                "submit_inquiry": "POST /api/submit-inquiry"
            }
        })

    # Global error handlers
    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({
            "success": False,
            "error": "Not found"
        }), 404

    @app.errorhandler(413)
    def request_entity_too_large(error):
        """Handle upload too large errors."""
        limit_mb = app.config["MAX_CONTENT_LENGTH"] // (1024 * 1024)
        return jsonify({
            "success": False,
            "error": f"Upload too large. Maximum size: {limit_mb}MB"
        }), 413

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        logger.error(f"Internal error: {str(error)}")
        return jsonify({
            "success": False,
            "error": "Internal server error"
        }), 500

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Handle uncaught exceptions."""
        # HTTP errors keep their own status
        code = getattr(error, "code", None)
        if isinstance(code, int) and code < 500:
            return jsonify({
                "success": False,
                "error": getattr(error, "description", str(error))
            }), code
        logger.error(f"Uncaught exception: {str(error)}", exc_info=True)
        return jsonify({
            "success": False,
            "error": "An unexpected error occurred"
        }), 500

    logger.info(f"Application created with config: {config_class.__name__}")

    return app


if __name__ == "__main__":
    app = create_app()

    port = app.config["PORT"]
    debug = app.config["DEBUG"]

    logger.info(f"Backend running on http://localhost:{port}")

    app.run(
        host="0.0.0.0",
        port=port,
        debug=debug
    )
