"""Relationship API endpoints.

Every write goes through the edge guard, so a new or moved edge between people
who are already related is refused with 422.
"""

from quart import Blueprint, Response, jsonify, request

from family_tree.api import error_response, get_service, request_deadline
from family_tree.schemas.graph import RelatednessReport, RelationshipCreate, RelationshipOut

relationships_bp = Blueprint("relationships", __name__)


@relationships_bp.route("/api/relationships", methods=["GET"])
async def list_relationships() -> Response | tuple[Response, int]:
    """Get all relationships."""
    try:
        rels = get_service().list_relationships()
        return jsonify(
            {
                "success": True,
                "count": len(rels),
                "relationships": [RelationshipOut.model_validate(r).model_dump() for r in rels],
            }
        ), 200
    except Exception as e:
        return error_response(e)


@relationships_bp.route("/api/relationships", methods=["POST"])
async def create_relationship() -> Response | tuple[Response, int]:
    """Create a parent -> child relationship.

    Expects JSON body with:
        - parent_id: Id of the parent
        - child_id: Id of the child

    Returns:
        JSON with the new relationship id
    """
    try:
        body = RelationshipCreate.model_validate(await request.get_json(silent=True) or {})
        edge_id = get_service().add_relationship(
            body.parent_id, body.child_id, deadline=request_deadline()
        )
        return jsonify({"success": True, "id": edge_id}), 201
    except Exception as e:
        return error_response(e)


@relationships_bp.route("/api/relationships/batch", methods=["POST"])
async def create_relationships() -> Response | tuple[Response, int]:
    """Create several relationships at once; either all are added or none."""
    try:
        data = await request.get_json(silent=True)
        if not isinstance(data, list):
            return jsonify({"error": "Expected a JSON list of relationships"}), 400

        bodies = [RelationshipCreate.model_validate(item) for item in data]
        ids = get_service().add_relationships(
            [(b.parent_id, b.child_id) for b in bodies], deadline=request_deadline()
        )
        return jsonify({"success": True, "ids": ids}), 201
    except Exception as e:
        return error_response(e)


@relationships_bp.route("/api/relationships/check", methods=["GET"])
async def check_relationship() -> Response | tuple[Response, int]:
    """Report whether a parent -> child edge would be refused, without adding it.

    Query parameters:
        - parent: Id of the proposed parent
        - child: Id of the proposed child
    """
    try:
        parent_id = request.args.get("parent")
        child_id = request.args.get("child")
        if not parent_id or not child_id:
            return jsonify({"error": "Both parent and child are required"}), 400

        evidence = get_service().check_relationship(
            parent_id, child_id, deadline=request_deadline()
        )
        report = RelatednessReport(
            parent_id=parent_id,
            child_id=child_id,
            related=evidence.related,
            direct_edges=[e.id for e in evidence.direct_edges],
            shared_ancestors=evidence.shared_ancestors,
        )
        return jsonify({"success": True, **report.model_dump()}), 200
    except Exception as e:
        return error_response(e)


@relationships_bp.route("/api/relationships/<relationship_id>", methods=["PUT"])
async def update_relationship(relationship_id: str) -> tuple[Response | str, int]:
    """Move a relationship to new endpoints.

    Expects JSON body with:
        - parent_id: Id of the new parent
        - child_id: Id of the new child
    """
    try:
        body = RelationshipCreate.model_validate(await request.get_json(silent=True) or {})
        get_service().update_relationship(
            relationship_id, body.parent_id, body.child_id, deadline=request_deadline()
        )
        return "", 204
    except Exception as e:
        return error_response(e)


@relationships_bp.route("/api/relationships/<relationship_id>", methods=["DELETE"])
async def delete_relationship(relationship_id: str) -> tuple[Response | str, int]:
    """Delete a relationship."""
    try:
        get_service().delete_relationship(relationship_id)
        return "", 204
    except Exception as e:
        return error_response(e)
