class TaskCrabError(Exception):
    """Base exception for all TaskCrab errors."""
    pass

class RecoverableError(TaskCrabError):
    """An error that can be recovered from without data loss."""
    pass

class FatalError(TaskCrabError):
    """An error that requires application termination or major intervention."""
    pass

class CorruptionError(FatalError):
    """Corrupted Data Error - from JSON syntax errors, to task lists that are not task lists"""
    pass

class FileOperationError(RecoverableError):
    """File operation failed but can be retried."""
    pass
