from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class ApiError(Exception):
    """Base error carrying an HTTP status, a message and an optional code."""

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, code: str | None = None):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)

    def to_json(self) -> dict:
        if self.code is None:
            return {"message": self.message}
        return {"code": self.code, "message": self.message}


class ValidationFailed(ApiError):
    """Bad input: blank fields, taken usernames, invalid credentials."""

    def __init__(self, message: str):
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class AuthenticationFailed(ApiError):
    """Missing or unusable bearer token."""

    def __init__(self, code: str, message: str):
        super().__init__(message, status_code=status.HTTP_401_UNAUTHORIZED, code=code)


def credentials_required() -> AuthenticationFailed:
    return AuthenticationFailed("credentials_required", "No authorization token was found")


def credentials_bad_scheme() -> AuthenticationFailed:
    return AuthenticationFailed("credentials_bad_scheme", "Format is Authorization: Bearer [token]")


def invalid_token(message: str = "invalid token") -> AuthenticationFailed:
    return AuthenticationFailed("invalid_token", message)


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_json())


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "invalid request body"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
