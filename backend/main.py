"""MDS Vehicle Registry: FastAPI backend."""
import logging
import os
import subprocess
import sys
import time

from fastapi import FastAPI, Request, Response, status

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

from api.errors import ApiError, api_error_handler, authentication_error_handler
from api.routes import router
from api.vehicles import router as vehicles_router
from utils.auth import AuthenticationError, TokenVerifier, load_public_key
from utils.config import MDS_CONTENT_TYPE, PORT, PUBLIC_KEY_PATH

LOG = logging.getLogger(__name__)

# Paths served without the MDS content-type rule.
_CONTENT_TYPE_EXEMPT = {"/health"}

app = FastAPI(
    title="MDS Vehicle Registry",
    description="Provider-scoped registry of shared mobility vehicles",
    version="0.1.0",
)

app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(AuthenticationError, authentication_error_handler)
app.include_router(router)
app.include_router(vehicles_router)


def _has_body(request: Request) -> bool:
    if "transfer-encoding" in request.headers:
        return True
    try:
        return int(request.headers.get("content-length", "0")) > 0
    except ValueError:
        return True


@app.middleware("http")
async def require_mds_content_type(request: Request, call_next):
    """Reject request bodies that are not application/vnd.mds+json with 415."""
    if request.url.path not in _CONTENT_TYPE_EXEMPT and _has_body(request):
        media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
        if media_type != MDS_CONTENT_TYPE:
            return Response(status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE)
    return await call_next(request)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request."""
    started = time.perf_counter()
    response = await call_next(request)
    LOG.info(
        "%s %s %d %.1fms",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response


@app.on_event("startup")
def startup() -> None:
    """Run DB migrations and load the token verification key."""
    backend_dir = os.path.dirname(os.path.abspath(__file__))
    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        cwd=backend_dir,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise RuntimeError(f"Alembic upgrade failed: {result.stderr or result.stdout}")
    # Loaded once; changing the key requires a restart.
    app.state.token_verifier = TokenVerifier(load_public_key(PUBLIC_KEY_PATH))
    LOG.info("Loaded token verification key from %s", PUBLIC_KEY_PATH)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=PORT)
