# /classroom-backend/app/services/class_service.py

"""
This service module acts as the primary business logic layer for class-level
operations: creating, listing, viewing, archiving and exporting classes.

It serves as a facade, orchestrating calls to the `crud` helper and the
`DatabaseService`. Everything that changes the roster or the columns of a
class lives in `matrix_service`, which owns the consistency of the records.
"""

import pandas as pd
from typing import List

from ..models import class_model
from ..models.column_model import ColumnVisibility, MatrixColumn
from ..models.roster_model import Membership, PendingJoinRequest
from .database_service import DatabaseService
from .exceptions import NotAuthorizedError

# Import the specialist helper modules this service orchestrates.
from .class_helpers import crud, roster
from .class_helpers.columns import sorted_columns


# --- Facade Methods for CRUD Operations ---

def create_class(class_data: class_model.ClassCreate, db: DatabaseService, user_id: str) -> class_model.Class:
    """
    Business logic to create a new class for the authenticated teacher.
    The join code is generated by the CRUD helper.
    """
    new_class = crud.create_class(class_data=class_data, db=db, teacher_id=user_id)
    return class_model.Class.model_validate(new_class)


def archive_class(class_id: str, db: DatabaseService, user_id: str) -> class_model.Class:
    return class_model.Class.model_validate(crud.set_archived(class_id, True, db=db, user_id=user_id))


def unarchive_class(class_id: str, db: DatabaseService, user_id: str) -> class_model.Class:
    return class_model.Class.model_validate(crud.set_archived(class_id, False, db=db, user_id=user_id))


# --- Data Assembly & Export Logic ---

def get_all_classes_with_summary(user_id: str, db: DatabaseService, include_archived: bool = True) -> List[class_model.ClassSummary]:
    """
    Business logic to retrieve every class the user teaches or attends,
    enriched with student counts.
    """
    taught = [(cls, "teacher") for cls in db.get_classes_taught_by(user_id)]
    enrolled = [(cls, "student") for cls in db.get_classes_enrolled_in(user_id)]
    all_classes = [(cls, role) for cls, role in taught + enrolled if include_archived or not cls.is_archived]
    if not all_classes:
        return []

    memberships_df = pd.DataFrame(db.get_memberships_for_classes([cls.id for cls, _ in all_classes]))
    student_counts = {}
    if not memberships_df.empty and 'class_id' in memberships_df.columns:
        student_counts = memberships_df.groupby('class_id').size().to_dict()

    return [
        class_model.ClassSummary(
            id=cls.id,
            name=cls.name,
            code=cls.code,
            is_archived=cls.is_archived,
            role=role,
            studentCount=int(student_counts.get(cls.id, 0)),
        )
        for cls, role in all_classes
    ]


def get_class_details_by_id(class_id: str, user_id: str, db: DatabaseService) -> class_model.ClassDetails:
    """
    Assembles the full details for the class page. Pending join requests and
    private columns are only shown to the owning teacher.
    """
    db_class = crud.get_class_or_raise(class_id, db)
    is_owner = crud.is_owning_teacher(db_class, user_id)
    if not is_owner and not roster.is_enrolled(db_class, user_id):
        raise NotAuthorizedError(f"User {user_id} cannot view class {class_id}.")

    columns = sorted_columns(db_class.columns)
    if not is_owner:
        columns = [c for c in columns if c.visibility == ColumnVisibility.PUBLIC.value]

    return class_model.ClassDetails(
        **class_model.Class.model_validate(db_class).model_dump(),
        columns=[MatrixColumn.model_validate(c) for c in columns],
        students=[Membership.model_validate(m) for m in db_class.students],
        join_requests=[PendingJoinRequest.model_validate(r) for r in db_class.join_requests] if is_owner else [],
    )


def export_matrix_as_csv(class_id: str, user_id: str, db: DatabaseService) -> str:
    """
    Generates a CSV of the whole matrix: one row per enrolled student, one
    column per matrix column in display order. Teacher only.
    """
    db_class = crud.get_class_or_raise(class_id, db)
    crud.ensure_owner(db_class, user_id)

    columns = sorted_columns(db_class.columns)
    values = {(r.student_id, r.column_id): r.value for r in db.find_records(class_id)}

    header = ['Roll Number', 'Student ID'] + [c.name for c in columns]
    export_rows = [
        [m.roll_number or "", m.student_id] + [values.get((m.student_id, c.id), "") for c in columns]
        for m in db_class.students
    ]

    df = pd.DataFrame(export_rows, columns=header) if export_rows else pd.DataFrame(columns=header)
    return df.to_csv(index=False)


def export_file_name(class_id: str, db: DatabaseService) -> str:
    db_class = db.get_class_by_id(class_id)
    class_name = db_class.name if db_class else 'class_matrix'
    return f"matrix_{class_name.replace(' ', '_').lower()}.csv"
