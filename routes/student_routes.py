from flask import Blueprint, current_app, jsonify, request

from models.project_model import Project
from models.user_model import User
from utils.errors import NotFoundError, ValidationError
from utils.upload_utils import discard_document, save_document

student_bp = Blueprint("student", __name__)


@student_bp.route("/project/submit", methods=["POST"])
def submit_project():
    student_id = (request.form.get("studentId") or "").strip()
    if not student_id:
        raise ValidationError("Missing studentId")

    upload = request.files.get("document")
    if upload is None or not upload.filename:
        raise ValidationError("No file uploaded")

    if User.get_student(student_id) is None:
        raise NotFoundError("Student not found")

    max_reviews = current_app.config["MAX_REVIEWS"]
    # capacity is checked before anything is written to disk
    Project.next_review_no(student_id, max_reviews)

    document = save_document(upload, current_app.config["UPLOAD_DIR"])
    try:
        project = Project.submit(
            student_id,
            request.form.get("title"),
            request.form.get("description"),
            document,
            max_reviews,
        )
    except Exception:
        discard_document(document)
        raise

    review_no = project["reviewNo"]
    return jsonify({
        "message": f"Project submitted successfully as Review {review_no}",
        "projectId": str(project["_id"]),
        "reviewNo": review_no,
        "studentId": student_id,
        "documentUrl": document.url,
    })


@student_bp.route("/projects/student/<student_id>")
def student_projects(student_id):
    projects = Project.list_for_student(student_id)
    return jsonify({
        "studentId": student_id,
        "projects": [Project.to_public(p) for p in projects],
    })
