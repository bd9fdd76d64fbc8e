# /classroom-backend/app/db/models/class_models.py

"""
This module defines the SQLAlchemy ORM models for the `Class` aggregate: the
class itself, its enrolled students, its pending join requests and the ordered
columns of its matrix.

The `Class` row carries a `version` counter that SQLAlchemy checks on every
UPDATE. Roster and column mutations always touch the class row, so two
concurrent writers of the same aggregate cannot both commit against the same
version.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from ..base_class import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Class(Base):
    """
    SQLAlchemy model representing a teaching unit owned by a single teacher.
    """
    __tablename__ = "classes"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    # Human-shareable join code. Globally unique and never changed after creation.
    code = Column(String(6), unique=True, index=True, nullable=False)
    teacher_id = Column(String, index=True, nullable=False)
    is_archived = Column(Boolean, nullable=False, default=False)
    schedule = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    students = relationship(
        "ClassMembership",
        back_populates="class_",
        cascade="all, delete-orphan",
        order_by="ClassMembership.joined_at",
    )
    join_requests = relationship(
        "JoinRequest",
        back_populates="class_",
        cascade="all, delete-orphan",
        order_by="JoinRequest.requested_at",
    )
    columns = relationship(
        "MatrixColumn",
        back_populates="class_",
        cascade="all, delete-orphan",
        order_by="MatrixColumn.created_at",
    )


class ClassMembership(Base):
    """An approved, active enrollment of a student in a class."""
    __tablename__ = "class_memberships"
    __table_args__ = (UniqueConstraint("class_id", "student_id", name="uq_membership_class_student"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    class_id = Column(String, ForeignKey("classes.id"), nullable=False, index=True)
    student_id = Column(String, nullable=False, index=True)
    roll_number = Column(String, nullable=True)
    joined_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    class_ = relationship("Class", back_populates="students")


class JoinRequest(Base):
    """A student's pending, unapproved request to enroll."""
    __tablename__ = "join_requests"
    __table_args__ = (UniqueConstraint("class_id", "student_id", name="uq_join_request_class_student"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    class_id = Column(String, ForeignKey("classes.id"), nullable=False, index=True)
    student_id = Column(String, nullable=False, index=True)
    roll_number = Column(String, nullable=True)
    requested_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    class_ = relationship("Class", back_populates="join_requests")


class MatrixColumn(Base):
    """
    A tracked attribute of the class matrix. `kind` and `visibility` are fixed
    at creation; `created_at` doubles as the default display date.
    """
    __tablename__ = "matrix_columns"

    id = Column(String, primary_key=True, index=True)
    class_id = Column(String, ForeignKey("classes.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    kind = Column(String, nullable=False, default="attendance")
    visibility = Column(String, nullable=False, default="public")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    class_ = relationship("Class", back_populates="columns")
