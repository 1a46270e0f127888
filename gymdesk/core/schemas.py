"""Response envelopes shared by every router.

Searches return a ``PaginatedResponse``; failures are rendered by the
exception handlers in ``gymdesk.core.exceptions`` with the shape described by
``ErrorResponse``, which routers reference in their OpenAPI ``responses``.
"""

import math
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from gymdesk.core.constants import MAX_PAGE_SIZE

T = TypeVar("T")


class PaginationMeta(BaseModel):
    total: int = Field(..., ge=0, description="Number of matches across all pages")
    page: int = Field(..., ge=1, description="1-based page number")
    limit: int = Field(..., ge=1, le=MAX_PAGE_SIZE)
    pages: int = Field(..., ge=0)
    has_next: bool
    has_prev: bool

    @classmethod
    def for_page(cls, total: int, page: int, limit: int) -> "PaginationMeta":
        pages = math.ceil(total / limit)
        return cls(
            total=total,
            page=page,
            limit=limit,
            pages=pages,
            has_next=page < pages,
            has_prev=page > 1,
        )


class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    data: list[T]
    meta: PaginationMeta


def paginated_response(data: list[T], total: int, page: int, limit: int) -> PaginatedResponse[T]:
    """Wrap one page of results with its pagination metadata.

    Example:
        packages, total = service.search_packages(params)
        return paginated_response(items, total, params.page, params.limit)
    """
    return PaginatedResponse(data=data, meta=PaginationMeta.for_page(total, page, limit))


class ErrorBody(BaseModel):
    code: str = Field(..., examples=["NOT_FOUND"])
    message: str
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Body of every non-2xx response raised through ``AppError``."""

    success: bool = False
    error: ErrorBody


def error_responses(*status_codes: int) -> dict[int | str, dict[str, Any]]:
    """OpenAPI ``responses`` entries documenting the error envelope.

    Example:
        @router.delete("/{package_id}", responses=error_responses(404, 409))
    """
    return {code: {"model": ErrorResponse} for code in status_codes}
