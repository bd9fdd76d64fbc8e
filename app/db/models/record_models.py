# /classroom-backend/app/db/models/record_models.py

from sqlalchemy import Column, String, DateTime, JSON, UniqueConstraint

from ..base_class import Base
from .class_models import utcnow


class ClassRecord(Base):
    """
    SQLAlchemy model for one cell of the matrix: the value of one column for
    one student within one class.

    `column_id` points into `matrix_columns` but is deliberately not a foreign
    key: records are removed by the explicit cascade in the matrix service, and
    the composite unique constraint is what the conditional inserts rely on.
    """
    __tablename__ = "class_records"
    __table_args__ = (
        UniqueConstraint("class_id", "student_id", "column_id", name="uq_record_class_student_column"),
    )

    id = Column(String, primary_key=True, index=True)
    class_id = Column(String, nullable=False, index=True)
    student_id = Column(String, nullable=False, index=True)
    column_id = Column(String, nullable=False, index=True)
    # 'Present'/'Absent'/..., a number, or free text depending on the column kind.
    value = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
