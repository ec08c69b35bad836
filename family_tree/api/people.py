"""People API endpoints."""

from quart import Blueprint, Response, jsonify, request

from family_tree.api import error_response, get_service
from family_tree.schemas.graph import PersonCreate, PersonOut, PersonUpdate

people_bp = Blueprint("people", __name__)


def _person_json(person) -> dict:
    return PersonOut.model_validate(person).model_dump()


@people_bp.route("/api/people", methods=["GET"])
async def list_people() -> Response | tuple[Response, int]:
    """Get all people.

    Returns:
        JSON with list of people
    """
    try:
        people = get_service().list_people()
        return jsonify(
            {
                "success": True,
                "count": len(people),
                "people": [_person_json(p) for p in people],
            }
        ), 200
    except Exception as e:
        return error_response(e)


@people_bp.route("/api/people", methods=["POST"])
async def create_person() -> Response | tuple[Response, int]:
    """Create a person.

    Expects JSON body with:
        - name: Display name

    Returns:
        JSON with the created person
    """
    try:
        body = PersonCreate.model_validate(await request.get_json(silent=True) or {})
        person = get_service().add_person(body.name)
        return jsonify({"success": True, "person": _person_json(person)}), 201
    except Exception as e:
        return error_response(e)


@people_bp.route("/api/people/batch", methods=["POST"])
async def create_people() -> Response | tuple[Response, int]:
    """Create several people at once.

    Expects a JSON list of objects with a ``name`` each.
    """
    try:
        data = await request.get_json(silent=True)
        if not isinstance(data, list):
            return jsonify({"error": "Expected a JSON list of people"}), 400

        bodies = [PersonCreate.model_validate(item) for item in data]
        people = get_service().add_people([b.name for b in bodies])
        return jsonify(
            {
                "success": True,
                "ids": [p.id for p in people],
                "people": [_person_json(p) for p in people],
            }
        ), 201
    except Exception as e:
        return error_response(e)


@people_bp.route("/api/people/<person_id>", methods=["GET"])
async def get_person(person_id: str) -> Response | tuple[Response, int]:
    """Get one person."""
    try:
        person = get_service().get_person(person_id)
        return jsonify({"success": True, "person": _person_json(person)}), 200
    except Exception as e:
        return error_response(e)


@people_bp.route("/api/people/<person_id>", methods=["PATCH"])
async def update_person(person_id: str) -> Response | tuple[Response, int]:
    """Rename a person.

    Expects JSON body with:
        - name: New display name
    """
    try:
        body = PersonUpdate.model_validate(await request.get_json(silent=True) or {})
        person = get_service().update_person(person_id, body.name)
        return jsonify({"success": True, "person": _person_json(person)}), 200
    except Exception as e:
        return error_response(e)


@people_bp.route("/api/people/<person_id>", methods=["DELETE"])
async def delete_person(person_id: str) -> Response | tuple[Response, int]:
    """Delete a person and every relationship touching them."""
    try:
        get_service().delete_person(person_id)
        return jsonify({"success": True, "message": f"Person {person_id} deleted"}), 200
    except Exception as e:
        return error_response(e)
