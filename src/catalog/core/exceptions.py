"""Domain errors and the exception handlers that render them with request_id."""

from dataclasses import dataclass
from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.catalog.core.logging import get_logger

logger = get_logger(__name__)


class CatalogError(Exception):
    """Base class for errors the catalog reports to its callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message}


class RegistryError(CatalogError):
    """Collection registry is misconfigured. Raised at startup, never per request."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UnknownCollection(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, collection: str):
        super().__init__(f"Unknown collection '{collection}'")
        self.collection = collection


class UnknownReference(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, collection: str, field: str):
        super().__init__(f"'{field}' is not a reference field of '{collection}'")
        self.collection = collection
        self.field = field


class InvalidIdentifier(CatalogError):
    """Caller-supplied id is neither a native key nor a sequence id."""

    def __init__(self, collection: str, raw_id: Any, field: str | None = None):
        target = field or collection
        super().__init__(f"Invalid {target} ID format: {raw_id!r}")
        self.collection = collection
        self.raw_id = raw_id
        self.field = field


class EntityNotFound(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, collection: str, raw_id: Any, label: str | None = None):
        super().__init__(f"{label or collection} not found")
        self.collection = collection
        self.raw_id = raw_id


@dataclass(frozen=True)
class ReferenceFailure:
    """One relationship that failed the existence guard."""

    field: str
    target: str
    value: Any
    label: str

    @property
    def message(self) -> str:
        return f"{self.label} not found or inactive"


class ReferenceNotFound(CatalogError):
    """One or more referenced entities are missing or inactive at write time."""

    def __init__(self, failures: list[ReferenceFailure]):
        if not failures:
            raise ValueError("ReferenceNotFound requires at least one failure")
        super().__init__("; ".join(f.message for f in failures))
        self.failures = failures

    @property
    def field(self) -> str:
        return self.failures[0].field

    def to_dict(self) -> dict[str, Any]:
        return {
            "detail": self.message,
            "errors": [
                {"field": f.field, "value": f.value, "message": f.message}
                for f in self.failures
            ],
        }


class MissingActor(CatalogError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self) -> None:
        super().__init__("Authenticated user ID not found")


class SequenceGenerationError(CatalogError):
    """The counter store could not issue an id. The entity is not created."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, collection: str, reason: str):
        super().__init__(f"Could not allocate a sequence id for '{collection}': {reason}")
        self.collection = collection


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(CatalogError)
    async def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("Catalog failure", error=exc.message, path=request.url.path)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                **exc.to_dict(),
                "success": False,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "success": False,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "success": False,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "success": False,
                "request_id": request_id,
            },
        )
