from typing import Optional


class GradNetError(Exception):
    """Base class for errors raised by the service layer."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GradNetError):
    """A required field was missing or a value is not allowed."""


class StoreError(GradNetError):
    """The Supabase data store rejected or failed a request."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class NotFoundError(GradNetError):
    """A referenced row no longer exists."""

    def __init__(self, table: str, row_id: str):
        super().__init__(f"{table} row '{row_id}' not found")
        self.table = table
        self.row_id = row_id
