"""Structured API errors for the mock commerce backend"""

import logging
from typing import Any, Union

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class CommerceError(Exception):
    """Error rendered as ``{"error": {"type": ..., "message": ...}}``"""

    def __init__(self, status_code: int, error_type: str, message: Union[str, list[dict[str, Any]]]):
        super().__init__(f"{error_type}: {message}")
        self.status_code = status_code
        self.error_type = error_type
        self.message = message


def validation_error(errors: list[tuple[str, str]]) -> CommerceError:
    """One ``{param, error}`` entry per offending field"""
    return CommerceError(
        status_code=422,
        error_type="validation",
        message=[{"param": param, "error": error} for param, error in errors],
    )


def not_found(what: str) -> CommerceError:
    return CommerceError(status_code=404, error_type="not_found", message=f"{what} not found")


async def commerce_error_handler(request: Request, exc: CommerceError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error_type}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status_code": exc.status_code,
            "error": {"type": exc.error_type, "message": exc.message},
        },
    )
