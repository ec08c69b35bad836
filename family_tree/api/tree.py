"""Family tree API endpoints."""

from quart import Blueprint, Response, jsonify, request

from family_tree.api import error_response, get_service, request_deadline

tree_bp = Blueprint("tree", __name__)


@tree_bp.route("/api/people/<person_id>/tree", methods=["GET"])
async def get_tree(person_id: str) -> Response | tuple[Response, int]:
    """Get the ancestry tree of a person.

    Query parameters:
        - shape: "members" (flat list, default) or "nested"
        - children: "true" to also list children in the flat shape

    Returns:
        JSON with the tree in the requested shape
    """
    try:
        shape = request.args.get("shape", "members")
        include_children = request.args.get("children", "false").lower() in ("1", "true", "yes")
        service = get_service()

        if shape == "nested":
            root = service.ancestry_nested(person_id, deadline=request_deadline())
            return jsonify({"success": True, "root": root.model_dump()}), 200

        if shape != "members":
            return jsonify({"error": f"Unknown tree shape: {shape}"}), 400

        tree = service.ancestry_members(
            person_id, include_children=include_children, deadline=request_deadline()
        )
        return jsonify({"success": True, **tree.model_dump()}), 200
    except Exception as e:
        return error_response(e)
