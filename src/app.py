"""Flask application factory."""
import logging
import re
from flask import Flask, jsonify, make_response
from typing import Optional, Dict, Any

from src.errors import LedgerError

logger = logging.getLogger(__name__)


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Optional configuration dictionary to override defaults.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Load configuration
    from src.config import get_config
    app.config.from_object(get_config())
    if config:
        app.config.update(config)

    if not app.config.get("TESTING"):
        from src.utils.startup_check import validate_environment
        validate_environment()

    # Initialize extensions
    from src.extensions import db, limiter
    db.init_app(app)
    limiter.init_app(app)

    # Initialize DI container
    from src.container import Container
    container = Container()
    container.config.from_dict({
        "venue_rooms": app.config.get("VENUE_ROOMS") or [],
        "expiry_warning_seconds": app.config.get("SESSION_EXPIRY_WARNING_SECONDS"),
        "proof_storage_url": app.config.get("PROOF_STORAGE_URL"),
        "proof_storage_key": app.config.get("PROOF_STORAGE_KEY"),
        "proof_storage_bucket": app.config.get("PROOF_STORAGE_BUCKET"),
        "proof_max_size_bytes": app.config.get("PROOF_MAX_SIZE_BYTES"),
    })

    # Flask-SQLAlchemy scopes db.session to the app context, so the
    # override holds for requests, CLI commands and the ticker alike
    container.db_session.override(db.session)
    app.container = container

    # Domain event handlers
    from src.handlers.session_handlers import register_session_handlers
    register_session_handlers(container.event_dispatcher(), container.activity_logger())

    # Register blueprints
    from src.routes.sessions import sessions_bp
    from src.routes.proofs import proofs_bp
    app.register_blueprint(sessions_bp)
    app.register_blueprint(proofs_bp)

    # CLI commands
    from src.cli.sessions import sessions_cli
    app.cli.add_command(sessions_cli)

    # Health check endpoint
    @app.route("/api/v1/health")
    def health():
        """Health check endpoint."""
        return jsonify({
            "status": "ok",
            "service": "session-ledger",
            "version": "0.1.0"
        }), 200

    # Error handlers
    @app.errorhandler(LedgerError)
    def ledger_error(error):
        """Render ledger errors with their code and status."""
        if error.status_code >= 500:
            logger.error(f"{error.code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({"success": False, "error": "Not found", "code": "not_found"}), 404

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        return jsonify({"success": False, "error": "Internal server error"}), 500

    @app.errorhandler(429)
    def ratelimit_handler(error):
        """Handle rate limit exceeded errors with JSON response."""
        response = make_response(jsonify({
            "success": False,
            "error": "Rate limit exceeded",
            "message": str(error.description)
        }), 429)
        match = re.search(r'(\d+)\s*(second|minute)', str(error.description).lower())
        if match:
            value = int(match.group(1))
            retry_after = value if match.group(2) == "second" else value * 60
            response.headers['Retry-After'] = str(retry_after)
        else:
            response.headers['Retry-After'] = '60'
        return response

    # Countdown ticker
    if app.config.get("START_SESSION_TICKER"):
        from src.services.session_ticker import SessionTicker
        ticker = SessionTicker(
            app,
            lambda: container.session_ledger_service(),
            interval=app.config.get("SESSION_TICK_INTERVAL_SECONDS", 1),
        )
        ticker.start()
        app.session_ticker = ticker

    return app
