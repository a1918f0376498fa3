"""
Translation of service errors into HTTP error responses.

The status table is configuration: ``create_app`` receives it and stores an
``ErrorMapper`` on ``app.state``, and routers fetch it through the
``get_error_mapper`` dependency.  Lookups walk the exception's MRO, so a
``PostNotFoundError`` matches an entry for ``NotFoundError``.
"""
import logging
from collections.abc import Mapping

from fastapi.responses import JSONResponse

from app.exceptions import InvalidInputError, NotFoundError
from app.schemas import ErrorResponse

logger = logging.getLogger(__name__)

DEFAULT_ERROR_STATUSES: Mapping[type[Exception], int] = {
    NotFoundError: 404,
    InvalidInputError: 400,
}


class ErrorMapper:
    def __init__(
        self,
        statuses: Mapping[type[Exception], int] | None = None,
        default_status: int = 500,
    ) -> None:
        self._statuses = dict(DEFAULT_ERROR_STATUSES if statuses is None else statuses)
        self._default_status = default_status

    def status_for(self, exc: Exception) -> int:
        for cls in type(exc).__mro__:
            if cls in self._statuses:
                return self._statuses[cls]
        return self._default_status

    def response(self, message: str, exc: Exception) -> JSONResponse:
        """Build a ``{"message", "cause"}`` problem response for *exc*."""
        status_code = self.status_for(exc)
        if status_code >= 500:
            logger.error("%s: %s", message, exc)
        else:
            logger.warning("%s: %s", message, exc)

        body = ErrorResponse(message=message, cause=str(exc))
        return JSONResponse(
            status_code=status_code,
            content=body.model_dump(),
            media_type="application/problem+json",
        )
