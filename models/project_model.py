import logging
from datetime import datetime, timezone

from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError

from models import db, isoformat, to_object_id, utcnow
from utils.errors import CapacityError, NotFoundError

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"
REVIEW_STATUSES = ("approve", "reject")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _sort_time(value):
    if not isinstance(value, datetime):
        return _EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Project:
    """One document per review round: a student gets at most MAX_REVIEWS of them."""

    @staticmethod
    def collection():
        return db.collection("projects")

    @classmethod
    def create_indexes(cls):
        projects = cls.collection()
        # rejects a second insert of the same round, see submit()
        projects.create_index(
            [("studentId", ASCENDING), ("reviewNo", ASCENDING)], unique=True
        )
        projects.create_index([("status", ASCENDING)])

    @classmethod
    def count_for_student(cls, student_id):
        return cls.collection().count_documents({"studentId": student_id})

    @classmethod
    def next_review_no(cls, student_id, max_reviews):
        review_no = cls.count_for_student(student_id) + 1
        if review_no > max_reviews:
            raise CapacityError(f"Maximum {max_reviews} reviews allowed")
        return review_no

    @classmethod
    def submit(cls, student_id, title, description, document, max_reviews):
        """
        Store a new pending project under the student's next review number.

        Two concurrent submissions can count the same number of projects; the
        unique (studentId, reviewNo) index lets only one of them insert, the
        other recounts and either takes the following number or hits the cap.
        """
        for _ in range(max_reviews):
            review_no = cls.next_review_no(student_id, max_reviews)
            doc = {
                "studentId": student_id,
                "title": title,
                "description": description,
                "reviewNo": review_no,
                "documentUrl": document.url,
                "fileType": document.file_type,
                "fileName": document.file_name,
                "status": STATUS_PENDING,
                "mark": None,
                "reviewReason": None,
                "createdAt": utcnow(),
                "reviewedAt": None,
            }
            try:
                result = cls.collection().insert_one(doc)
            except DuplicateKeyError:
                logger.info(
                    "Review %d for student %s was taken concurrently, retrying",
                    review_no,
                    student_id,
                )
                continue
            doc["_id"] = result.inserted_id
            logger.info(
                "Student %s submitted project %s as review %d",
                student_id,
                result.inserted_id,
                review_no,
            )
            return doc
        raise CapacityError(f"Maximum {max_reviews} reviews allowed")

    @classmethod
    def review(cls, project_id, status, mark=None, reason=None):
        oid = to_object_id(project_id)
        if oid is None:
            raise NotFoundError("Project not found")

        changes = {
            "status": status,
            "mark": mark,
            "reviewReason": reason or "",
            "reviewedAt": utcnow(),
        }
        result = cls.collection().update_one({"_id": oid}, {"$set": changes})
        if result.matched_count == 0:
            raise NotFoundError("Project not found")
        logger.info("Project %s marked %s (mark=%s)", project_id, status, mark)
        return changes

    @classmethod
    def get(cls, project_id):
        oid = to_object_id(project_id)
        if oid is None:
            return None
        return cls.collection().find_one({"_id": oid})

    @classmethod
    def list_all(cls):
        return list(cls.collection().find().sort("createdAt", ASCENDING))

    @classmethod
    def list_pending(cls):
        return list(
            cls.collection().find({"status": STATUS_PENDING}).sort("createdAt", ASCENDING)
        )

    @classmethod
    def list_for_student(cls, student_id):
        return list(
            cls.collection().find({"studentId": student_id}).sort("reviewNo", ASCENDING)
        )

    @classmethod
    def migrate_nested_reviews(cls, max_reviews):
        """
        Turn legacy ``{..., reviews: [...]}`` parents into one flat project per
        review and return how many reviews were moved.

        Review numbers are reassigned per student after the flat projects they
        already own, oldest review first.
        """
        projects = cls.collection()
        legacy = list(projects.find({"reviews": {"$exists": True}}))
        if not legacy:
            return 0

        by_student = {}
        for parent in legacy:
            by_student.setdefault(parent.get("studentId"), []).append(parent)

        migrated = 0
        for student_id, parents in by_student.items():
            parent_ids = [parent["_id"] for parent in parents]
            # leftovers of an interrupted run are rebuilt from the parents
            projects.delete_many({"legacyProjectId": {"$in": parent_ids}})

            entries = []
            for parent in parents:
                reviews = parent.get("reviews") or []
                if not reviews:
                    logger.warning(
                        "Dropping legacy project %s of student %s: it has no reviews",
                        parent["_id"],
                        student_id,
                    )
                entries.extend((parent, review) for review in reviews)
            entries.sort(
                key=lambda entry: (
                    _sort_time(entry[1].get("createdAt")),
                    entry[1].get("reviewNo") or 0,
                )
            )

            review_no = projects.count_documents(
                {"studentId": student_id, "reviews": {"$exists": False}}
            )
            docs = []
            for parent, review in entries:
                review_no += 1
                docs.append(
                    {
                        "studentId": student_id,
                        "title": parent.get("title"),
                        "description": parent.get("description"),
                        "reviewNo": review_no,
                        "documentUrl": review.get("documentUrl"),
                        "fileType": review.get("fileType"),
                        "fileName": review.get("fileName"),
                        "status": review.get("status", STATUS_PENDING),
                        "mark": review.get("mark"),
                        "reviewReason": review.get("reviewReason"),
                        "createdAt": review.get("createdAt") or parent.get("createdAt"),
                        "reviewedAt": review.get("reviewedAt"),
                        "legacyProjectId": parent["_id"],
                        "legacyReviewId": review.get("id"),
                    }
                )
            if review_no > max_reviews:
                logger.warning(
                    "Student %s has %d reviews after migration, above the limit of %d",
                    student_id,
                    review_no,
                    max_reviews,
                )

            if docs:
                projects.insert_many(docs)
            projects.delete_many({"_id": {"$in": parent_ids}})
            migrated += len(docs)
        return migrated

    @staticmethod
    def to_public(project):
        data = {key: value for key, value in project.items() if key != "_id"}
        data["id"] = str(project["_id"])
        if "legacyProjectId" in data:
            data["legacyProjectId"] = str(data["legacyProjectId"])
        for key in ("createdAt", "reviewedAt"):
            data[key] = isoformat(data.get(key))
        return data
