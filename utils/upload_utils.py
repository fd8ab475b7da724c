# utils/upload_utils.py
import logging
import os
import time
import uuid
from collections import namedtuple

from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/public"

StoredDocument = namedtuple("StoredDocument", "url path file_type file_name")


def save_document(file, upload_dir):
    """
    Write an uploaded document as ``<epoch millis>-<random>-<name>`` under upload_dir.
    Returns where it landed and the metadata recorded on the project.
    """
    os.makedirs(upload_dir, exist_ok=True)
    safe_name = secure_filename(file.filename or "") or "document"
    stored_name = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}-{safe_name}"
    path = os.path.join(upload_dir, stored_name)
    file.save(path)
    logger.info("Stored upload %s (%s)", stored_name, file.mimetype)
    return StoredDocument(
        url=f"{PUBLIC_PREFIX}/{stored_name}",
        path=path,
        file_type=file.mimetype or "application/octet-stream",
        file_name=file.filename,
    )


def discard_document(document):
    try:
        os.remove(document.path)
    except FileNotFoundError:
        logger.warning("Upload %s was already gone", document.path)
