# /classroom-backend/app/services/database_service.py

from typing import Callable, Dict, Generator, Iterable, List, Optional, TypeVar
from sqlalchemy.orm import Session
from fastapi import Depends

# --- Core Database Setup ---
from app.db.database import get_db

# --- Repository Imports ---
from .database_helpers.class_repository_sql import ClassRepositorySQL
from .database_helpers.record_repository_sql import RecordRepositorySQL
from .database_helpers.notification_repository_sql import NotificationRepositorySQL

T = TypeVar("T")


class DatabaseService:
    def __init__(self, db_session: Session):
        """
        Initializes the DatabaseService over a single SQLAlchemy session.
        Every repository shares that session, so a request sees one
        consistent view of the data.
        """
        if db_session is None:
            raise ValueError("A database session is required.")
        self.session = db_session
        self.class_repo = ClassRepositorySQL(db_session)
        self.record_repo = RecordRepositorySQL(db_session)
        self.notification_repo = NotificationRepositorySQL(db_session)

    def rollback(self): self.session.rollback()

    # --- CLASS AGGREGATE METHODS (DELEGATED) ---
    def get_class_by_id(self, class_id: str): return self.class_repo.get_class_by_id(class_id)
    def get_class_by_code(self, code: str): return self.class_repo.get_class_by_code(code)
    def class_code_exists(self, code: str) -> bool: return self.class_repo.code_exists(code)
    def add_class(self, class_record: Dict): return self.class_repo.add_class(class_record)
    def get_classes_taught_by(self, teacher_id: str) -> List: return self.class_repo.get_classes_taught_by(teacher_id)
    def get_classes_enrolled_in(self, student_id: str) -> List: return self.class_repo.get_classes_enrolled_in(student_id)
    def get_memberships_for_classes(self, class_ids: List[str]) -> List[Dict]: return self.class_repo.get_memberships_for_classes(class_ids)
    def update_class_aggregate(self, class_id: str, mutate: Callable[..., T]) -> T: return self.class_repo.update_class_aggregate(class_id, mutate)

    # --- RECORD STORE METHODS (DELEGATED) ---
    def upsert_record(self, class_id: str, student_id: str, column_id: str, value): return self.record_repo.upsert(class_id, student_id, column_id, value)
    def create_default_record(self, class_id: str, student_id: str, column_id: str, kind: str, commit: bool = True) -> bool: return self.record_repo.create_default(class_id, student_id, column_id, kind, commit=commit)
    def delete_records_by_student(self, class_id: str, student_id: str, commit: bool = True) -> int: return self.record_repo.delete_by_class_and_student(class_id, student_id, commit=commit)
    def delete_records_by_column(self, class_id: str, column_id: str, commit: bool = True) -> int: return self.record_repo.delete_by_class_and_column(class_id, column_id, commit=commit)
    def find_records(self, class_id: str, student_id: Optional[str] = None, column_ids: Optional[Iterable[str]] = None) -> List:
        return self.record_repo.find(class_id, student_id=student_id, column_ids=column_ids)

    # --- NOTIFICATION METHODS (DELEGATED) ---
    def add_notification(self, record: Dict): return self.notification_repo.add_notification(record)
    def get_notification_by_id(self, notification_id: str): return self.notification_repo.get_notification_by_id(notification_id)
    def get_notifications_by_user_id(self, user_id: str) -> List: return self.notification_repo.get_notifications_by_user_id(user_id)
    def mark_notification_as_read(self, notification): return self.notification_repo.mark_as_read(notification)


def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """
    FastAPI dependency that provides a DatabaseService instance bound to the
    request's session.
    """
    yield DatabaseService(db_session=db)
