# /classroom-backend/app/services/matrix_service.py

"""
This service module keeps the class matrix consistent: every enrolled student
has exactly one record for every existing column of their class.

Each roster or column operation runs in two steps:

1. inside one `DatabaseService.update_class_aggregate` transaction, mutate the
   roster/columns and bring the Record Store in line with the delta: backfill
   default records for new (student, column) pairs, or cascade-delete records
   of a removed student/column. The commit is version-checked on the class
   row, so a writer that changed the roster or columns in the meantime forces
   the whole step, record writes included, to be replayed on fresh state;
2. notify the affected student, fire-and-forget.

Backfill writes are conditional inserts, so running them twice, concurrently,
or as a later repair pass never duplicates or overwrites a record. A failure
half-way through a backfill still commits the membership/column and the
records written so far before the error is raised; `repair_matrix` completes
the rest.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from ..db.models.class_models import Class, utcnow
from ..models.column_model import ColumnCreate, ColumnKind, ColumnVisibility, MatrixColumn
from ..models.notification_model import NotificationType
from ..models.record_model import (
    ClassRecord,
    CellValue,
    ColumnBackfill,
    MatrixView,
    RepairSummary,
    RosterUpdate,
    coerce_cell_value,
)
from ..models.roster_model import ActionAck, JoinRequestReceipt, Membership
from . import notification_service
from .class_helpers import columns as column_manager
from .class_helpers import roster as roster_manager
from .class_helpers.crud import ensure_owner, get_class_or_raise, is_owning_teacher
from .database_service import DatabaseService
from .exceptions import (
    ClassNotFoundError,
    ColumnNotFoundError,
    InvalidCellValueError,
    NotAuthorizedError,
    StudentNotEnrolledError,
)

logger = logging.getLogger(__name__)

# (column_id, kind) pairs of the aggregate being mutated.
ColumnKeys = List[Tuple[str, str]]

# Records created, and the write error that stopped the backfill, if any.
BackfillOutcome = Tuple[int, Optional[Exception]]


def _column_keys(db_class: Class) -> ColumnKeys:
    return [(c.id, c.kind) for c in db_class.columns]


def _student_ids(db_class: Class) -> List[str]:
    return [m.student_id for m in db_class.students]


def _touch(db_class: Class) -> None:
    # Record-only writes must still go through the version check.
    db_class.updated_at = utcnow()


# --- Backfill ---

def _backfill(db: DatabaseService, class_id: str, pairs: Iterable[Tuple[str, str, str]]) -> BackfillOutcome:
    """
    Creates the default record for every (student_id, column_id, kind) triple
    that does not have one yet, inside the caller's aggregate transaction.
    The first failing write stops the backfill; it is logged and handed back
    so the aggregate can commit what was done before the error is raised.
    """
    created = 0
    for student_id, column_id, kind in pairs:
        try:
            if db.create_default_record(class_id, student_id, column_id, kind, commit=False):
                created += 1
        except Exception as e:
            logger.error(
                "Backfill of class %s stopped at (student=%s, column=%s) after %d records; "
                "run a matrix repair to complete it.",
                class_id, student_id, column_id, created,
            )
            return created, e
    return created, None


def _backfill_student(db: DatabaseService, class_id: str, student_id: str, column_keys: ColumnKeys) -> BackfillOutcome:
    return _backfill(db, class_id, ((student_id, column_id, kind) for column_id, kind in column_keys))


def _backfill_column(db: DatabaseService, class_id: str, column_id: str, kind: str, student_ids: List[str]) -> BackfillOutcome:
    return _backfill(db, class_id, ((student_id, column_id, kind) for student_id in student_ids))


def _roster_update(db: DatabaseService, class_id: str, membership) -> RosterUpdate:
    return RosterUpdate(
        student=Membership.model_validate(membership),
        records=[ClassRecord.model_validate(r) for r in db.find_records(class_id, student_id=membership.student_id)],
    )


# --- Roster Operations ---

def request_join(class_code: str, student_id: str, roll_number: Optional[str], db: DatabaseService) -> JoinRequestReceipt:
    """A student asks to join the class holding `class_code`."""
    db_class = db.get_class_by_code(class_code)
    if db_class is None:
        raise ClassNotFoundError(class_code)
    class_id, class_name = db_class.id, db_class.name

    db.update_class_aggregate(class_id, lambda c: roster_manager.request_join(c, student_id, roll_number))
    logger.info("Student %s requested to join class %s", student_id, class_id)
    return JoinRequestReceipt(class_id=class_id, class_name=class_name, student_id=student_id, roll_number=roll_number)


def approve_request(class_id: str, student_id: str, db: DatabaseService, user_id: str) -> RosterUpdate:
    """
    Moves a pending request into the roster, backfills the student's records
    for every existing column and tells the student they were accepted.
    """
    ensure_owner(get_class_or_raise(class_id, db), user_id)

    def _mutate(db_class: Class):
        membership = roster_manager.approve(db_class, student_id)
        outcome = _backfill_student(db, class_id, student_id, _column_keys(db_class))
        return membership, db_class.name, outcome

    membership, class_name, (created, error) = db.update_class_aggregate(class_id, _mutate)
    if error is not None:
        raise error
    logger.info("Approved student %s into class %s; backfilled %d records", student_id, class_id, created)

    notification_service.notify(
        db,
        user_id=student_id,
        message=f"You have been accepted into class {class_name}",
        type_tag=NotificationType.INFO,
        link=notification_service.class_link(class_id),
    )
    return _roster_update(db, class_id, membership)


def decline_request(class_id: str, student_id: str, db: DatabaseService, user_id: str) -> ActionAck:
    """Discards a pending request. Declining an absent request still succeeds."""
    ensure_owner(get_class_or_raise(class_id, db), user_id)
    declined = db.update_class_aggregate(class_id, lambda c: roster_manager.decline(c, student_id))
    if not declined:
        logger.debug("No pending request from %s in class %s to decline", student_id, class_id)
    return ActionAck(message="Request declined")


def enroll_student(class_id: str, student_id: str, roll_number: Optional[str], db: DatabaseService, user_id: str) -> RosterUpdate:
    """
    Enrolls a student directly, bypassing the request/approval cycle. The new
    student is backfilled exactly like an approved one.
    """
    ensure_owner(get_class_or_raise(class_id, db), user_id)

    def _mutate(db_class: Class):
        membership = roster_manager.enroll_direct(db_class, student_id, roll_number)
        return membership, _backfill_student(db, class_id, student_id, _column_keys(db_class))

    membership, (created, error) = db.update_class_aggregate(class_id, _mutate)
    if error is not None:
        raise error
    logger.info("Enrolled student %s into class %s; backfilled %d records", student_id, class_id, created)
    return _roster_update(db, class_id, membership)


def remove_student(class_id: str, student_id: str, db: DatabaseService, user_id: str) -> ActionAck:
    """
    Drops the student from the roster and deletes all their records in the
    class. Records are deleted even when there was no membership, so orphans
    left behind by an earlier failure are cleaned up too.
    """
    ensure_owner(get_class_or_raise(class_id, db), user_id)

    def _mutate(db_class: Class):
        removed = roster_manager.remove(db_class, student_id)
        deleted = db.delete_records_by_student(class_id, student_id, commit=False)
        if deleted:
            _touch(db_class)
        return removed, deleted

    removed, deleted = db.update_class_aggregate(class_id, _mutate)
    logger.info("Removed student %s from class %s (member=%s, records deleted=%d)", student_id, class_id, removed, deleted)
    return ActionAck(message="Student removed")


# --- Column Operations ---

def add_column(class_id: str, column_data: ColumnCreate, db: DatabaseService, user_id: str) -> ColumnBackfill:
    """Appends a column and backfills a default record for every enrolled student."""
    ensure_owner(get_class_or_raise(class_id, db), user_id)
    kind = ColumnKind(column_data.kind).value
    visibility = ColumnVisibility(column_data.visibility).value

    def _mutate(db_class: Class):
        column = column_manager.add_column(db_class, column_data.name, kind, visibility)
        return column, _backfill_column(db, class_id, column.id, kind, _student_ids(db_class))

    column, (created, error) = db.update_class_aggregate(class_id, _mutate)
    if error is not None:
        raise error
    logger.info("Added %s column %s to class %s; backfilled %d records", kind, column.id, class_id, created)

    return ColumnBackfill(
        column=MatrixColumn.model_validate(column),
        records=[ClassRecord.model_validate(r) for r in db.find_records(class_id, column_ids=[column.id])],
    )


def delete_column(class_id: str, column_id: str, db: DatabaseService, user_id: str) -> ActionAck:
    """Removes a column and every record under it. An absent column is not an error."""
    ensure_owner(get_class_or_raise(class_id, db), user_id)

    def _mutate(db_class: Class):
        removed = column_manager.delete_column(db_class, column_id)
        deleted = db.delete_records_by_column(class_id, column_id, commit=False)
        if deleted:
            _touch(db_class)
        return removed, deleted

    removed, deleted = db.update_class_aggregate(class_id, _mutate)
    logger.info("Deleted column %s of class %s (existed=%s, records deleted=%d)", column_id, class_id, removed, deleted)
    return ActionAck(message="Column deleted")


# --- Cell Operations ---

def _cell_notification(class_name: str, column_name: str, kind: str, value: CellValue):
    """(message, type, status) for a public cell update."""
    if kind == ColumnKind.ATTENDANCE.value:
        return f"Attendance for {column_name}: {value}", NotificationType.ATTENDANCE, value
    if kind == ColumnKind.MARKS.value:
        return f"Marks for {column_name}: {value}", NotificationType.MARKS, None
    return f"New update in {class_name}: {column_name}", NotificationType.INFO, None


def update_cell(
    class_id: str,
    student_id: str,
    column_id: str,
    value: CellValue,
    db: DatabaseService,
    user_id: str,
) -> ClassRecord:
    """
    Writes one cell, creating the record if backfill never did. The value must
    fit the column kind. Updates to public columns notify the student once;
    private columns stay silent.
    """
    db_class = get_class_or_raise(class_id, db)
    ensure_owner(db_class, user_id)

    column = column_manager.find_column(db_class, column_id)
    if column is None:
        raise ColumnNotFoundError(class_id, column_id)
    if not roster_manager.is_enrolled(db_class, student_id):
        raise StudentNotEnrolledError(class_id, student_id)

    try:
        canonical = coerce_cell_value(column.kind, value)
    except ValueError as e:
        raise InvalidCellValueError(f"Invalid value for {column.kind} column '{column.name}': {e}") from e

    # Read everything the notification needs before the upsert commits.
    class_name, column_name, kind, visibility = db_class.name, column.name, column.kind, column.visibility

    record = db.upsert_record(class_id, student_id, column_id, canonical)

    if visibility == ColumnVisibility.PUBLIC.value:
        message, type_tag, status = _cell_notification(class_name, column_name, kind, canonical)
        notification_service.notify(
            db,
            user_id=student_id,
            message=message,
            type_tag=type_tag,
            link=notification_service.class_link(class_id),
            status=status,
        )
    return ClassRecord.model_validate(record)


# --- Views & Repair ---

def get_matrix(class_id: str, db: DatabaseService, user_id: str) -> MatrixView:
    """
    The owning teacher sees the whole matrix. An enrolled student sees only
    their own row, restricted to public columns.
    """
    db_class = get_class_or_raise(class_id, db)
    ordered = column_manager.sorted_columns(db_class.columns)

    if is_owning_teacher(db_class, user_id):
        return MatrixView(
            class_id=class_id,
            columns=[MatrixColumn.model_validate(c) for c in ordered],
            students=[Membership.model_validate(m) for m in db_class.students],
            records=[ClassRecord.model_validate(r) for r in db.find_records(class_id)],
        )

    membership = roster_manager.find_membership(db_class, user_id)
    if membership is None:
        raise NotAuthorizedError(f"User {user_id} is neither the teacher nor a student of class {class_id}.")

    public = [c for c in ordered if c.visibility == ColumnVisibility.PUBLIC.value]
    records = db.find_records(class_id, student_id=user_id, column_ids=[c.id for c in public])
    return MatrixView(
        class_id=class_id,
        columns=[MatrixColumn.model_validate(c) for c in public],
        students=[Membership.model_validate(membership)],
        records=[ClassRecord.model_validate(r) for r in records],
    )


def repair_matrix(class_id: str, db: DatabaseService, user_id: str) -> RepairSummary:
    """Re-runs backfill for every (student, column) pair, skipping existing records."""
    ensure_owner(get_class_or_raise(class_id, db), user_id)

    def _mutate(db_class: Class) -> BackfillOutcome:
        student_ids = _student_ids(db_class)
        column_keys = _column_keys(db_class)
        outcome = _backfill(
            db,
            class_id,
            ((student_id, column_id, kind) for student_id in student_ids for column_id, kind in column_keys),
        )
        if outcome[0]:
            _touch(db_class)
        return outcome

    created, error = db.update_class_aggregate(class_id, _mutate)
    if error is not None:
        raise error
    if created:
        logger.warning("Matrix repair of class %s created %d missing records", class_id, created)
    return RepairSummary(class_id=class_id, recordsCreated=created)
