# /classroom-backend/app/services/class_helpers/roster.py

"""
Roster Manager: the authoritative enrolled-student set and pending-request set
of a class.

Every function here works on a loaded `Class` aggregate and only mutates it
in memory. Persisting the change (and detecting a concurrent writer) is the
job of `DatabaseService.update_class_aggregate`. Ownership checks happen
before these functions are reached.
"""

from typing import Optional

from app.db.models.class_models import Class, ClassMembership, JoinRequest
from ..exceptions import AlreadyEnrolledError, RequestAlreadyPendingError, RequestNotFoundError


def find_membership(db_class: Class, student_id: str) -> Optional[ClassMembership]:
    return next((m for m in db_class.students if m.student_id == student_id), None)


def find_join_request(db_class: Class, student_id: str) -> Optional[JoinRequest]:
    return next((r for r in db_class.join_requests if r.student_id == student_id), None)


def is_enrolled(db_class: Class, student_id: str) -> bool:
    return find_membership(db_class, student_id) is not None


def request_join(db_class: Class, student_id: str, roll_number: Optional[str] = None) -> JoinRequest:
    """Records a pending request. A student may hold at most one per class."""
    if is_enrolled(db_class, student_id):
        raise AlreadyEnrolledError(db_class.id, student_id)
    if find_join_request(db_class, student_id) is not None:
        raise RequestAlreadyPendingError(db_class.id, student_id)

    join_request = JoinRequest(student_id=student_id, roll_number=roll_number)
    db_class.join_requests.append(join_request)
    return join_request


def approve(db_class: Class, student_id: str) -> ClassMembership:
    """
    Promotes a pending request to a membership, carrying over the roll number.
    The caller is responsible for backfilling the new student's records.
    """
    join_request = find_join_request(db_class, student_id)
    if join_request is None:
        raise RequestNotFoundError(db_class.id, student_id)

    db_class.join_requests.remove(join_request)
    membership = ClassMembership(student_id=student_id, roll_number=join_request.roll_number)
    db_class.students.append(membership)
    return membership


def decline(db_class: Class, student_id: str) -> bool:
    """Discards a pending request. Declining an absent request is a no-op."""
    join_request = find_join_request(db_class, student_id)
    if join_request is None:
        return False
    db_class.join_requests.remove(join_request)
    return True


def remove(db_class: Class, student_id: str) -> bool:
    """Drops a membership. Returns whether one existed."""
    membership = find_membership(db_class, student_id)
    if membership is None:
        return False
    db_class.students.remove(membership)
    return True


def enroll_direct(db_class: Class, student_id: str, roll_number: Optional[str] = None) -> ClassMembership:
    """
    Enrolls a student without the request/approval cycle. A pending request
    from the same student is settled by the enrollment and dropped.
    """
    if is_enrolled(db_class, student_id):
        raise AlreadyEnrolledError(db_class.id, student_id)

    pending = find_join_request(db_class, student_id)
    if pending is not None:
        db_class.join_requests.remove(pending)
        roll_number = roll_number if roll_number is not None else pending.roll_number

    membership = ClassMembership(student_id=student_id, roll_number=roll_number)
    db_class.students.append(membership)
    return membership
