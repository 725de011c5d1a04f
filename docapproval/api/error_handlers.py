"""Global exception handlers mapping approval errors to HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from docapproval.core.approval.errors import (
    ApprovalError,
    ConcurrentVoteError,
    InvalidStateError,
    PolicyConfigurationError,
    UnknownApproverError,
    UnknownDocumentError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    UnknownDocumentError: status.HTTP_404_NOT_FOUND,
    UnknownApproverError: status.HTTP_404_NOT_FOUND,
    InvalidStateError: status.HTTP_409_CONFLICT,
    ConcurrentVoteError: status.HTTP_409_CONFLICT,
    PolicyConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: ApprovalError) -> int:
    for error_type, http_status in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def register_error_handlers(app: FastAPI) -> None:
    """Register approval error handlers on the FastAPI app."""

    @app.exception_handler(ApprovalError)
    async def approval_error_handler(request: Request, exc: ApprovalError):
        http_status = status_for(exc)
        if http_status >= 500:
            logger.error(f"{exc.code} on {request.url.path}: {exc.message}")
        else:
            logger.info(f"{exc.code} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=http_status, content={"error": exc.to_dict()})
