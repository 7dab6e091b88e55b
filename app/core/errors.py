"""Domain errors raised by the data-access layer.

Each error carries the HTTP status the API answers with, so routes can let
them propagate and ``app.main`` translates them in one place.
"""


class LibraryError(Exception):
    status_code = 400


class NotFoundError(LibraryError):
    status_code = 404


class InvalidOperation(LibraryError):
    status_code = 400


class IntegrityViolation(LibraryError):
    """Foreign key, NOT NULL or uniqueness constraint rejected the write."""
    status_code = 409


class CheckOptionViolation(LibraryError):
    """A row written through a filtered view no longer satisfies its filter."""
    status_code = 409

    def __init__(self, view_name, key):
        super().__init__(f"write through view '{view_name}' would hide row {key} (check option)")
        self.view_name = view_name
        self.key = key


class NonUpdatableViewError(LibraryError):
    status_code = 405

    def __init__(self, view_name):
        super().__init__(f"view '{view_name}' is read-only")
        self.view_name = view_name
