class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class SchedulerError(AppError):
    """Raised when auto-generation cannot start, e.g. no subject has a teacher."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)

class ResourceNotFoundError(AppError):
    """Raised when a referenced teacher, subject, classroom or entry is absent."""
    def __init__(self, resource_type: str, resource_id: str):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

class PlacementRejectedError(AppError):
    """Raised when a write is blocked by conflict, capacity or policy errors."""
    def __init__(self, message: str, errors: list[str], warnings: list[str] = None):
        self.errors = list(errors)
        self.warnings = list(warnings or [])
        super().__init__(
            message,
            status_code=409,
            details={"errors": self.errors, "warnings": self.warnings},
        )

class ConfigurationError(AppError):
    """Raised when system configuration is invalid."""
    def __init__(self, message: str):
        super().__init__(message, status_code=500)
