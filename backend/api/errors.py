"""API error exception and its JSON rendering."""
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse

from schemas.errors import ApiErrorBody, ApiErrorType
from utils.auth import WWW_AUTHENTICATE, AuthenticationError


class ApiError(Exception):
    """Raised by handlers and dependencies to answer with an {error, error_description, error_details} body."""

    def __init__(self, status_code: int, kind: ApiErrorType, details: list[str] | None = None):
        super().__init__(kind.value)
        self.status_code = status_code
        self.body = ApiErrorBody.of(kind, details)


def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Exception handler registered on the app for ApiError."""
    return JSONResponse(status_code=exc.status_code, content=exc.body.model_dump(mode="json"))


def authentication_error_handler(request: Request, exc: AuthenticationError) -> Response:
    """401 with a Bearer challenge and no body; the cause is only logged."""
    return Response(
        status_code=status.HTTP_401_UNAUTHORIZED,
        headers={"WWW-Authenticate": WWW_AUTHENTICATE},
    )
