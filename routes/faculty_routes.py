from flask import Blueprint, current_app, jsonify, request, send_from_directory

from models.project_model import REVIEW_STATUSES, Project
from utils.errors import NotFoundError, ValidationError

faculty_bp = Blueprint("faculty", __name__)


MARK_RANGE = (0, 100)


def parse_mark(value):
    """Marks arrive as JSON numbers or form-style strings; blank means no mark."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError("Invalid mark")
    try:
        mark = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError("Invalid mark")
    # also rejects nan and infinities
    if not MARK_RANGE[0] <= mark <= MARK_RANGE[1]:
        raise ValidationError("Invalid mark")
    return int(mark) if mark.is_integer() else mark


@faculty_bp.route("/project/review/<project_id>", methods=["PUT"])
def review_project(project_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    status = data.get("status")
    if status not in REVIEW_STATUSES:
        raise ValidationError("Invalid status")

    Project.review(project_id, status, mark=parse_mark(data.get("mark")), reason=data.get("reason"))
    return jsonify({"message": f"Project {status} successfully"})


@faculty_bp.route("/projects")
def all_projects():
    return jsonify({"projects": [Project.to_public(p) for p in Project.list_all()]})


@faculty_bp.route("/projects/pending")
def pending_projects():
    return jsonify({"projects": [Project.to_public(p) for p in Project.list_pending()]})


@faculty_bp.route("/project/<project_id>")
def get_project(project_id):
    project = Project.get(project_id)
    if project is None:
        raise NotFoundError("Project not found")
    return jsonify({"project": Project.to_public(project)})


@faculty_bp.route("/public/<path:filename>")
def uploaded_document(filename):
    return send_from_directory(current_app.config["UPLOAD_DIR"], filename)
