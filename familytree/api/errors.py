"""
Exception handlers for the family tree API.

Store errors become JSON bodies of the form {"error": "..."} with a status
chosen by error class. Unexpected exceptions are logged with their traceback
and answered with a generic 500.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from familytree.store.errors import (
    DuplicateError,
    FamilyTreeError,
    NotFoundError,
    ReferentialConflictError,
    StoreFailureError,
    ValidationError,
)


logger = logging.getLogger(__name__)

# Checked in order; first matching class wins
STATUS_BY_ERROR = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ReferentialConflictError, status.HTTP_409_CONFLICT),
    (DuplicateError, status.HTTP_409_CONFLICT),
    (StoreFailureError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]

GENERIC_MESSAGE = "Internal server error"


def status_for(exc: FamilyTreeError) -> int:
    for error_class, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_error_handlers(app: FastAPI) -> None:
    """Attach handlers for request validation, store errors and the catch-all."""
    
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = [
            {
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        logger.warning(f"Validation error on {request.method} {request.url.path}: {details}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request body", "details": details},
        )
    
    @app.exception_handler(FamilyTreeError)
    async def store_exception_handler(request: Request, exc: FamilyTreeError):
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error(f"Store failure on {request.method} {request.url.path}", exc_info=exc)
            return JSONResponse(status_code=status_code, content={"error": GENERIC_MESSAGE})
        
        logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=status_code, content={"error": exc.message})
    
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": GENERIC_MESSAGE},
        )
