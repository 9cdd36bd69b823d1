"""Worker lifecycle states."""

from enum import StrEnum


class WorkerState(StrEnum):
    """Lifecycle states of a worker version."""

    PARSED = "parsed"
    INSTALLING = "installing"
    INSTALLED = "installed"
    ACTIVATING = "activating"
    ACTIVATED = "activated"
    REDUNDANT = "redundant"
