"""HTTP API blueprints and the helpers they share."""

import logging

from pydantic import ValidationError as SchemaValidationError
from quart import Response, current_app, jsonify

from family_tree.engine.cancellation import Deadline
from family_tree.errors import (
    FamilyTreeError,
    GraphStoreError,
    IncestuousOffspring,
    InconsistentGraph,
    PersonNotFound,
    RelationshipNotFound,
    TraversalCancelled,
    ValidationError,
)
from family_tree.service import FamilyTreeService

logger = logging.getLogger(__name__)

SERVICE_KEY = "family_tree"

# Checked in order, so subclasses must come before their bases
_STATUS_CODES: list[tuple[type[FamilyTreeError], int]] = [
    (PersonNotFound, 404),
    (RelationshipNotFound, 404),
    (ValidationError, 400),
    (IncestuousOffspring, 422),
    (InconsistentGraph, 409),
    (TraversalCancelled, 504),
    (GraphStoreError, 503),
]


def get_service() -> FamilyTreeService:
    """Get the service instance attached to the running app."""
    return current_app.extensions[SERVICE_KEY]


def request_deadline() -> Deadline:
    """Create a deadline for the current request from TRAVERSAL_TIMEOUT."""
    return Deadline(current_app.config.get("TRAVERSAL_TIMEOUT"))


def error_response(error: Exception) -> tuple[Response, int]:
    """Map an exception to a JSON error body and status code."""
    if isinstance(error, SchemaValidationError):
        details = error.errors(include_url=False, include_context=False, include_input=False)
        return jsonify({"error": "Invalid request body", "details": details}), 400

    for error_type, status in _STATUS_CODES:
        if isinstance(error, error_type):
            if status >= 500:
                logger.error("Request failed: %s", error)
            return jsonify({"error": str(error), "type": type(error).__name__}), status

    logger.exception("Unexpected error handling request")
    return jsonify({"error": f"Internal server error: {error!s}"}), 500
