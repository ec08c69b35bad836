"""Main Quart application for the Family Tree API."""

import logging
from pathlib import Path

from quart import Quart, jsonify
from quart_cors import cors

from family_tree import __version__
from family_tree.api import SERVICE_KEY
from family_tree.api.config import get_config
from family_tree.api.people import people_bp
from family_tree.api.relationships import relationships_bp
from family_tree.api.tree import tree_bp
from family_tree.config import Settings, settings
from family_tree.log import configure_logging
from family_tree.service import FamilyTreeService
from family_tree.storage.sqlite import FamilyTreeDatabase

logger = logging.getLogger(__name__)


def create_app(config_name: str = "development", db_path: Path | None = None) -> Quart:
    """Create and configure the Quart application.

    Args:
        config_name: Configuration environment name
        db_path: Optional database path overriding the configured one

    Returns:
        Configured Quart app
    """
    app = Quart(__name__)

    # Load configuration
    config = get_config(config_name)
    app.config.from_object(config)
    if db_path is not None:
        app.config["DB_PATH"] = db_path

    if not config.TESTING:
        configure_logging(settings.log_level)

    # Enable CORS for frontend (only needed in development)
    if config.DEBUG:
        app = cors(
            app,
            allow_origin=config.CORS_ORIGINS,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Authorization"],
        )

    # One store and service per app
    engine_settings = Settings(
        db_path=Path(app.config["DB_PATH"]),
        consanguinity_radius=app.config["CONSANGUINITY_RADIUS"],
        traversal_node_limit=app.config["TRAVERSAL_NODE_LIMIT"],
        traversal_timeout=app.config["TRAVERSAL_TIMEOUT"],
    )
    db = FamilyTreeDatabase(db_path=engine_settings.db_path)
    app.extensions[SERVICE_KEY] = FamilyTreeService(db, engine_settings)
    logger.info("Using database %s", engine_settings.db_path)

    # Register blueprints
    app.register_blueprint(people_bp)
    app.register_blueprint(tree_bp)
    app.register_blueprint(relationships_bp)

    # Register routes
    register_routes(app)

    return app


def register_routes(app: Quart) -> None:
    """Register API routes.

    Args:
        app: Quart application
    """

    @app.route("/api/health", methods=["GET"])
    async def health_check():
        """Health check endpoint."""
        return jsonify(
            {
                "status": "healthy",
                "service": "family-tree-api",
                "version": __version__,
            }
        )

    @app.route("/api/info", methods=["GET"])
    async def info():
        """Get API information."""
        return jsonify(
            {
                "service": "Family Tree API",
                "version": __version__,
                "endpoints": {
                    "health": "/api/health",
                    "people": "/api/people",
                    "tree": "/api/people/<id>/tree",
                    "relationships": "/api/relationships",
                    "check": "/api/relationships/check",
                },
            }
        )
