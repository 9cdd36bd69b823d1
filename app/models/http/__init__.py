"""HTTP models - requests and responses flowing through the worker."""

from app.models.http.request import Request
from app.models.http.response import RESPONSE_TYPES, Response

__all__ = [
    "Request",
    "Response",
    "RESPONSE_TYPES",
]
