"""Domain errors - worker lifecycle, events and cache operations."""


class WorkerError(Exception):
    """Base class for worker runtime errors."""

    def __init__(self, message: str = "Worker error"):
        self.message = message
        super().__init__(self.message)


class InstallError(WorkerError):
    """Install step failed; the new version never activates."""

    def __init__(self, message: str = "Worker install failed"):
        super().__init__(message)


class InvalidStateError(WorkerError):
    """Event API used outside its allowed window."""

    def __init__(self, message: str = "Invalid state"):
        super().__init__(message)


class SecurityError(WorkerError):
    """Registration scope exceeds what the script is allowed to control."""

    def __init__(self, message: str = "Scope not allowed"):
        super().__init__(message)


class CacheError(WorkerError):
    """Request or response rejected by the cache (bad method, scheme, status)."""

    def __init__(self, message: str = "Cache operation rejected"):
        super().__init__(message)
