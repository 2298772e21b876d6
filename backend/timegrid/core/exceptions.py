class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with id {resource_id} not found",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )

class InvariantViolationError(AppError):
    """Raised when an operation would break a store invariant. State is left unchanged."""
    def __init__(self, message: str, status_code: int = 409, details: dict = None):
        super().__init__(message, status_code=status_code, details=details)

class UnknownTableError(ResourceNotFoundError):
    def __init__(self, table_id: str):
        self.table_id = table_id
        super().__init__("Table", table_id)

class LastTableError(InvariantViolationError):
    """Raised when removing the only remaining table."""
    def __init__(self, table_id: str):
        self.table_id = table_id
        super().__init__(
            f"Table {table_id} is the last remaining table and cannot be removed",
            details={"table_id": table_id},
        )

class EntryIndexError(InvariantViolationError, IndexError):
    """Raised when an entry index does not address an entry in the table."""
    def __init__(self, table_id: str, entry_index: int, size: int):
        self.table_id = table_id
        self.entry_index = entry_index
        super().__init__(
            f"Entry index {entry_index} out of range for table {table_id} ({size} entries)",
            status_code=404,
            details={"table_id": table_id, "entry_index": entry_index, "size": size},
        )

class UnknownDayError(AppError, ValueError):
    def __init__(self, day: str):
        self.day = day
        super().__init__(f"Unknown day label {day!r}", status_code=422, details={"day": day})

class DragNotActiveError(ResourceNotFoundError):
    def __init__(self, drag_key: str):
        self.drag_key = drag_key
        super().__init__("Drag", drag_key)

class DragConflictError(AppError):
    """Raised when a second drag is started for an entry that is already being dragged."""
    def __init__(self, drag_key: str):
        self.drag_key = drag_key
        super().__init__(
            f"Entry {drag_key} is already being dragged",
            status_code=409,
            details={"drag_key": drag_key},
        )

class CatalogFetchError(AppError):
    """Raised when the catalog source cannot deliver a resource. Never an empty result."""
    def __init__(self, resource: str, reason: str):
        self.resource = resource
        self.reason = reason
        super().__init__(
            f"Failed to fetch catalog resource {resource}: {reason}",
            status_code=502,
            details={"resource": resource, "reason": reason},
        )

class UnknownCatalogResourceError(ResourceNotFoundError):
    def __init__(self, resource: str):
        self.resource = resource
        super().__init__("Catalog resource", resource)

