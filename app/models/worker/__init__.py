"""Worker domain models - script definition and lifecycle states."""

from app.models.worker.script import WorkerScript
from app.models.worker.state import WorkerState

__all__ = [
    "WorkerScript",
    "WorkerState",
]
