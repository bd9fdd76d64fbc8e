# /classroom-backend/app/services/class_helpers/crud.py

import logging
import secrets
import string
import uuid
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError

from ...models import class_model
from ..database_service import DatabaseService
from ..exceptions import ClassNotFoundError, NotAuthorizedError
from ...db.models.class_models import Class  # Import the SQLAlchemy model

logger = logging.getLogger(__name__)

CODE_LENGTH = 6
CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_INSERT_ATTEMPTS = 3


# --- JOIN CODES ---

def generate_class_code(code_exists: Callable[[str], bool]) -> str:
    """
    Draws random codes until one is not held by any existing class.
    Codes are compared against the whole store, not just the caller's classes.
    """
    attempts = 0
    while True:
        attempts += 1
        code = "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
        if not code_exists(code):
            if attempts > 1:
                logger.debug("Join code %s found after %d attempts", code, attempts)
            return code


# --- CLASS-RELATED CORE BUSINESS LOGIC ---

def create_class(class_data: class_model.ClassCreate, db: DatabaseService, teacher_id: str) -> Class:
    """
    Creates a new class owned by `teacher_id` and returns the SQLAlchemy object.
    A code taken by a concurrent creation between the check and the insert
    trips the unique index; the insert is then retried with a fresh code.
    """
    schedule = [slot.model_dump(mode="json") for slot in class_data.schedule]
    for attempt in range(1, CODE_INSERT_ATTEMPTS + 1):
        new_class_record = {
            "id": f"cls_{uuid.uuid4().hex[:12]}",
            "name": class_data.name,
            "code": generate_class_code(db.class_code_exists),
            "teacher_id": teacher_id,
            "schedule": schedule,
        }
        try:
            new_class_object = db.add_class(new_class_record)
            break
        except IntegrityError:
            db.rollback()
            logger.warning("Join code %s was taken concurrently (attempt %d)", new_class_record["code"], attempt)
    else:
        raise RuntimeError(f"Could not allocate a unique join code after {CODE_INSERT_ATTEMPTS} attempts.")
    logger.info("Created class %s (%s) for teacher %s", new_class_object.id, new_class_object.code, teacher_id)
    return new_class_object


def get_class_or_raise(class_id: str, db: DatabaseService) -> Class:
    db_class = db.get_class_by_id(class_id)
    if db_class is None:
        raise ClassNotFoundError(class_id)
    return db_class


def is_owning_teacher(db_class: Class, user_id: Optional[str]) -> bool:
    return user_id is not None and db_class.teacher_id == user_id


def ensure_owner(db_class: Class, user_id: Optional[str]) -> None:
    """Teacher-only mutations must come from the teacher who owns the class."""
    if not is_owning_teacher(db_class, user_id):
        raise NotAuthorizedError(f"User {user_id} is not the teacher of class {db_class.id}.")


def set_archived(class_id: str, archived: bool, db: DatabaseService, user_id: str) -> Class:
    ensure_owner(get_class_or_raise(class_id, db), user_id)

    def _mutate(db_class: Class) -> Class:
        db_class.is_archived = archived
        return db_class

    return db.update_class_aggregate(class_id, _mutate)
