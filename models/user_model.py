import logging

from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError
from werkzeug.security import check_password_hash, generate_password_hash

from models import db, to_object_id, utcnow
from utils.errors import ConflictError

logger = logging.getLogger(__name__)

ROLES = ("student", "faculty")
COLLECTIONS = {"student": "students", "faculty": "faculty"}


class User:
    """Accounts, kept in one collection per role."""

    @staticmethod
    def collection(role):
        return db.collection(COLLECTIONS[role])

    @classmethod
    def create_indexes(cls):
        for role in ROLES:
            cls.collection(role).create_index([("email", ASCENDING)], unique=True)

    @classmethod
    def find_by_email(cls, role, email):
        return cls.collection(role).find_one({"email": email})

    @classmethod
    def get_student(cls, student_id):
        oid = to_object_id(student_id)
        if oid is None:
            return None
        return cls.collection("student").find_one({"_id": oid})

    @classmethod
    def register(cls, role, email, password, name=""):
        if cls.find_by_email(role, email):
            raise ConflictError("Email already exists")

        doc = {
            "name": name or "",
            "email": email,
            "role": role,
            "password": generate_password_hash(password),
            "createdAt": utcnow(),
        }
        try:
            result = cls.collection(role).insert_one(doc)
        except DuplicateKeyError:
            # lost a race against another registration for the same email
            raise ConflictError("Email already exists")
        doc["_id"] = result.inserted_id
        logger.info("Registered %s account %s", role, result.inserted_id)
        return doc

    @classmethod
    def authenticate(cls, role, email, password):
        """Return the account, or ``None`` for an unknown email or a bad password."""
        user = cls.find_by_email(role, email)
        if user is None or not check_password_hash(user["password"], password):
            return None
        return user

    @staticmethod
    def to_public(user):
        return {
            "id": str(user["_id"]),
            "name": user.get("name", ""),
            "email": user["email"],
            "role": user["role"],
        }
