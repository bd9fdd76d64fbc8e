# /classroom-backend/app/routers/classes_router.py

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from typing import List

from ..core.deps import get_current_user_id
from ..models import class_model, column_model, record_model, roster_model
from ..services import class_service, matrix_service, database_service
from ..services.exceptions import (
    ConcurrentUpdateError,
    ConflictError,
    MatrixError,
    NotAuthorizedError,
    NotFoundError,
)

router = APIRouter()


def _to_http_exception(e: MatrixError) -> HTTPException:
    """Translates a business error from the service layer into an HTTP error."""
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, NotAuthorizedError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    if isinstance(e, ConcurrentUpdateError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if isinstance(e, ConflictError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if isinstance(e, ValueError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# --- CLASS COLLECTION ENDPOINTS (/api/classes) ---

@router.get("", response_model=List[class_model.ClassSummary], summary="Get All Classes with Student Counts")
def get_all_classes(include_archived: bool = True, user_id: str = Depends(get_current_user_id), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return class_service.get_all_classes_with_summary(user_id=user_id, db=db, include_archived=include_archived)

@router.post("", response_model=class_model.Class, status_code=status.HTTP_201_CREATED, summary="Create a New Class")
def create_new_class(class_create: class_model.ClassCreate, user_id: str = Depends(get_current_user_id), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    return class_service.create_class(class_data=class_create, db=db, user_id=user_id)

@router.post("/join", response_model=roster_model.JoinRequestReceipt, status_code=status.HTTP_202_ACCEPTED, summary="Request to Join a Class by Code")
def join_class(payload: roster_model.JoinClassRequest, user_id: str = Depends(get_current_user_id), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return matrix_service.request_join(class_code=payload.code, student_id=user_id, roll_number=payload.rollNumber, db=db)
    except MatrixError as e:
        raise _to_http_exception(e)

# --- INDIVIDUAL CLASS RESOURCE ENDPOINTS (/api/classes/{class_id}) ---

@router.get("/{class_id}", response_model=class_model.ClassDetails, summary="Get a Single Class with Full Details")
def get_class_by_id(class_id: str, user_id: str = Depends(get_current_user_id), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return class_service.get_class_details_by_id(class_id=class_id, user_id=user_id, db=db)
    except MatrixError as e:
        raise _to_http_exception(e)

@router.put("/{class_id}/archive", response_model=class_model.Class, summary="Archive a Class")
def archive_class(class_id: str, user_id: str = Depends(get_current_user_id), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return class_service.archive_class(class_id=class_id, db=db, user_id=user_id)
    except MatrixError as e:
        raise _to_http_exception(e)

@router.put("/{class_id}/unarchive", response_model=class_model.Class, summary="Unarchive a Class")
def unarchive_class(class_id: str, user_id: str = Depends(get_current_user_id), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return class_service.unarchive_class(class_id=class_id, db=db, user_id=user_id)
    except MatrixError as e:
        raise _to_http_exception(e)

@router.get("/{class_id}/export", summary="Export the Class Matrix as CSV", response_class=StreamingResponse)
def export_class_matrix_csv(class_id: str, user_id: str = Depends(get_current_user_id), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        csv_string = class_service.export_matrix_as_csv(class_id=class_id, user_id=user_id, db=db)
    except MatrixError as e:
        raise _to_http_exception(e)
    file_name = class_service.export_file_name(class_id, db)
    return StreamingResponse(iter([csv_string]), media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={file_name}"})

# --- ROSTER SUB-RESOURCE ENDPOINTS ---

@router.post("/{class_id}/enroll", response_model=record_model.RosterUpdate, status_code=status.HTTP_201_CREATED, summary="Enroll a Student Directly")
def enroll_student(class_id: str, payload: roster_model.DirectEnrollment, user_id: str = Depends(get_current_user_id), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return matrix_service.enroll_student(class_id=class_id, student_id=payload.studentId, roll_number=payload.rollNumber, db=db, user_id=user_id)
    except MatrixError as e:
        raise _to_http_exception(e)

@router.put("/{class_id}/approve", response_model=record_model.RosterUpdate, summary="Approve a Join Request")
def approve_request(class_id: str, payload: roster_model.StudentAction, user_id: str = Depends(get_current_user_id), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return matrix_service.approve_request(class_id=class_id, student_id=payload.studentId, db=db, user_id=user_id)
    except MatrixError as e:
        raise _to_http_exception(e)

@router.put("/{class_id}/decline", response_model=roster_model.ActionAck, summary="Decline a Join Request")
def decline_request(class_id: str, payload: roster_model.StudentAction, user_id: str = Depends(get_current_user_id), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return matrix_service.decline_request(class_id=class_id, student_id=payload.studentId, db=db, user_id=user_id)
    except MatrixError as e:
        raise _to_http_exception(e)

@router.put("/{class_id}/remove", response_model=roster_model.ActionAck, summary="Remove a Student from a Class")
def remove_student(class_id: str, payload: roster_model.StudentAction, user_id: str = Depends(get_current_user_id), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return matrix_service.remove_student(class_id=class_id, student_id=payload.studentId, db=db, user_id=user_id)
    except MatrixError as e:
        raise _to_http_exception(e)

# --- MATRIX SUB-RESOURCE ENDPOINTS ---

@router.post("/{class_id}/columns", response_model=record_model.ColumnBackfill, status_code=status.HTTP_201_CREATED, summary="Add a Column to the Matrix")
def add_column(class_id: str, column_create: column_model.ColumnCreate, user_id: str = Depends(get_current_user_id), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return matrix_service.add_column(class_id=class_id, column_data=column_create, db=db, user_id=user_id)
    except MatrixError as e:
        raise _to_http_exception(e)

@router.delete("/{class_id}/columns/{column_id}", response_model=roster_model.ActionAck, summary="Delete a Column")
def delete_column(class_id: str, column_id: str, user_id: str = Depends(get_current_user_id), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return matrix_service.delete_column(class_id=class_id, column_id=column_id, db=db, user_id=user_id)
    except MatrixError as e:
        raise _to_http_exception(e)

@router.put("/{class_id}/cells", response_model=record_model.ClassRecord, summary="Update a Cell Value")
def update_cell(class_id: str, payload: record_model.CellUpdate, user_id: str = Depends(get_current_user_id), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return matrix_service.update_cell(
            class_id=class_id, student_id=payload.studentId, column_id=payload.columnId,
            value=payload.value, db=db, user_id=user_id,
        )
    except MatrixError as e:
        raise _to_http_exception(e)

@router.get("/{class_id}/matrix", response_model=record_model.MatrixView, summary="Get the Class Matrix")
def get_matrix(class_id: str, user_id: str = Depends(get_current_user_id), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return matrix_service.get_matrix(class_id=class_id, db=db, user_id=user_id)
    except MatrixError as e:
        raise _to_http_exception(e)

@router.post("/{class_id}/matrix/repair", response_model=record_model.RepairSummary, summary="Backfill Missing Records")
def repair_matrix(class_id: str, user_id: str = Depends(get_current_user_id), db: database_service.DatabaseService = Depends(database_service.get_db_service)):
    try:
        return matrix_service.repair_matrix(class_id=class_id, db=db, user_id=user_id)
    except MatrixError as e:
        raise _to_http_exception(e)
