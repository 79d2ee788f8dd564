"""
Application error taxonomy.

AuthError covers identity failures (bad credentials, duplicate account,
password policy, missing session, insufficient role). DataError wraps any
failure of the data layer. Absence is not an error: lookups return None.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code: int = 400

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": self.__class__.__name__, "detail": self.message}


class AuthError(AppError):
    status_code = 401


class DataError(AppError):
    status_code = 400


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthError)
    async def _auth_error(request: Request, exc: AuthError):
        logger.info("auth error on %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(DataError)
    async def _data_error(request: Request, exc: DataError):
        logger.warning("data error on %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
