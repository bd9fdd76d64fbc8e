# /classroom-backend/app/services/exceptions.py

"""
Business errors raised by the service layer. Routers translate them into HTTP
responses; nothing below the routers knows about status codes.
"""


class MatrixError(Exception):
    """Base class for every business-rule failure in the class matrix."""


# --- Not Found ---

class NotFoundError(MatrixError):
    pass

class ClassNotFoundError(NotFoundError):
    def __init__(self, class_ref: str):
        super().__init__(f"Class {class_ref} not found.")
        self.class_ref = class_ref

class RequestNotFoundError(NotFoundError):
    def __init__(self, class_id: str, student_id: str):
        super().__init__(f"No pending join request from student {student_id} in class {class_id}.")

class ColumnNotFoundError(NotFoundError):
    def __init__(self, class_id: str, column_id: str):
        super().__init__(f"Column {column_id} not found in class {class_id}.")

class StudentNotEnrolledError(NotFoundError):
    def __init__(self, class_id: str, student_id: str):
        super().__init__(f"Student {student_id} is not enrolled in class {class_id}.")

class NotificationNotFoundError(NotFoundError):
    def __init__(self, notification_id: str):
        super().__init__(f"Notification {notification_id} not found.")


# --- Conflicts ---

class ConflictError(MatrixError):
    pass

class AlreadyEnrolledError(ConflictError):
    def __init__(self, class_id: str, student_id: str):
        super().__init__(f"Student {student_id} is already enrolled in class {class_id}.")

class RequestAlreadyPendingError(ConflictError):
    def __init__(self, class_id: str, student_id: str):
        super().__init__(f"Student {student_id} already has a pending request for class {class_id}.")

class ConcurrentUpdateError(ConflictError):
    def __init__(self, class_id: str, attempts: int):
        super().__init__(f"Class {class_id} kept changing underneath the update; gave up after {attempts} attempts.")


# --- Authorization ---

class NotAuthorizedError(MatrixError):
    pass


# --- Validation ---

class InvalidCellValueError(MatrixError, ValueError):
    pass
