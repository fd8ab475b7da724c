import logging

from flask import Blueprint, jsonify, request

from models.user_model import ROLES, User
from utils.errors import AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


def _credentials():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    email = str(data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    role = data.get("role") or ""

    if not email or not password or not role:
        raise ValidationError("Missing fields")
    if role not in ROLES:
        raise ValidationError("Invalid role")
    return data, email, password, role


@auth_bp.route("/register", methods=["POST"])
def register():
    data, email, password, role = _credentials()
    user = User.register(role, email, password, name=data.get("name") or "")
    return jsonify({"message": "Registered successfully", "user": User.to_public(user)}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    _, email, password, role = _credentials()
    user = User.authenticate(role, email, password)
    if user is None:
        # same answer for unknown email and wrong password
        logger.info("Failed %s login", role)
        raise AuthenticationError("Invalid credentials")

    logger.info("%s %s logged in", role.capitalize(), user["_id"])
    return jsonify({"message": "Login successful", "user": User.to_public(user)})
