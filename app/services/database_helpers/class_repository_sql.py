# /classroom-backend/app/services/database_helpers/class_repository_sql.py

"""
This module contains all the raw SQLAlchemy queries for the Class aggregate:
the class row, its memberships, its pending join requests and its columns.

Reads are plain queries. Every roster or column mutation goes through
`update_class_aggregate`, the single read-modify-write entry point, which
relies on the `version` column of `classes` to detect a concurrent writer and
retries the whole mutation against a freshly loaded aggregate.
"""

import logging
import os
from typing import Callable, Dict, List, Optional, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.db.models.class_models import Class, ClassMembership, utcnow
from ..exceptions import ClassNotFoundError, ConcurrentUpdateError

logger = logging.getLogger(__name__)

MAX_UPDATE_ATTEMPTS = int(os.getenv("CLASS_UPDATE_MAX_RETRIES", "3"))

T = TypeVar("T")


class ClassRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Class Methods ---

    def get_class_by_id(self, class_id: str) -> Optional[Class]:
        return self.db.query(Class).filter(Class.id == class_id).first()

    def get_class_by_code(self, code: str) -> Optional[Class]:
        return self.db.query(Class).filter(Class.code == code).first()

    def code_exists(self, code: str) -> bool:
        return self.db.query(Class.id).filter(Class.code == code).first() is not None

    def add_class(self, record: Dict) -> Class:
        """
        Creates a new Class record.
        This function expects the `teacher_id` and `code` to be present in the
        `record` dictionary, stamped by the calling service.
        """
        new_class = Class(**record)
        self.db.add(new_class)
        self.db.commit()
        self.db.refresh(new_class)
        return new_class

    def get_classes_taught_by(self, teacher_id: str) -> List[Class]:
        return (
            self.db.query(Class)
            .filter(Class.teacher_id == teacher_id)
            .order_by(Class.created_at.asc())
            .all()
        )

    def get_classes_enrolled_in(self, student_id: str) -> List[Class]:
        return (
            self.db.query(Class)
            .join(ClassMembership, ClassMembership.class_id == Class.id)
            .filter(ClassMembership.student_id == student_id)
            .order_by(Class.created_at.asc())
            .all()
        )

    def get_memberships_for_classes(self, class_ids: List[str]) -> List[Dict]:
        """Flat membership rows, shaped for DataFrame aggregation."""
        if not class_ids:
            return []
        rows = (
            self.db.query(ClassMembership.class_id, ClassMembership.student_id)
            .filter(ClassMembership.class_id.in_(class_ids))
            .all()
        )
        return [{"class_id": class_id, "student_id": student_id} for class_id, student_id in rows]

    # --- Aggregate Update ---

    def update_class_aggregate(self, class_id: str, mutate: Callable[[Class], T]) -> T:
        """
        Loads the class, applies `mutate` to it and commits the result as one
        unit. Whenever the mutation changed anything, the class row is touched
        so its version is checked and bumped; if another writer committed in
        between, the session is rolled back and the mutation is replayed
        against the fresh state. Record Store writes that `mutate` issues with
        `commit=False` share the transaction, so they are replayed or rolled
        back together with the roster/column change.

        Business errors raised by `mutate` roll back and propagate unchanged.
        """
        for attempt in range(1, MAX_UPDATE_ATTEMPTS + 1):
            db_class = self.get_class_by_id(class_id)
            if db_class is None:
                raise ClassNotFoundError(class_id)
            try:
                result = mutate(db_class)
                # A mutation that changed nothing (e.g. declining an absent
                # request) leaves the version alone.
                if self.db.new or self.db.dirty or self.db.deleted:
                    db_class.updated_at = utcnow()
                self.db.commit()
            except (StaleDataError, IntegrityError) as e:
                self.db.rollback()
                logger.warning(
                    "Concurrent update of class %s detected (attempt %d/%d): %s",
                    class_id, attempt, MAX_UPDATE_ATTEMPTS, e.__class__.__name__,
                )
                continue
            except Exception:
                self.db.rollback()
                raise
            return result
        raise ConcurrentUpdateError(class_id, MAX_UPDATE_ATTEMPTS)
