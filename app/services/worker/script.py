"""Worker script as served at /sw.js, plus an in-process loader for it."""

from app.models.http import Request, Response
from app.models.worker import WorkerScript
from settings import WORKER_SCOPE, WORKER_SCRIPT_PATH


def build_worker_script() -> WorkerScript:
    """Current worker definition from settings."""
    return WorkerScript()


def worker_script_headers() -> dict[str, str]:
    # Service-Worker-Allowed widens control to the whole origin
    return {
        "content-type": "application/json",
        "service-worker-allowed": WORKER_SCOPE,
        "cache-control": "no-cache",
    }


async def load_local_script(url: str) -> Response:
    """Same bytes and headers as GET /sw.js, without a network round trip."""
    if Request(url).path != WORKER_SCRIPT_PATH:
        return Response(b"", status=404, status_text="Not Found", url=url)
    return Response(build_worker_script().to_bytes(), headers=worker_script_headers(), url=url)
