"""Page/per_page handling shared by every list endpoint."""

from dataclasses import dataclass

from fastapi import Query
from sqlalchemy.orm import Query as SQLAlchemyQuery

DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100


@dataclass
class PaginationParams:
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    def pages(self, total: int) -> int:
        """Number of pages needed for ``total`` rows (0 when there are none)."""
        if self.per_page <= 0:
            return 0
        return -(-total // self.per_page)


def get_pagination(
    page: int = Query(1, ge=1, description="1-based page number"),
    per_page: int = Query(
        DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE, description=f"Rows per page (max {MAX_PER_PAGE})"
    ),
) -> PaginationParams:
    return PaginationParams(page=page, per_page=per_page)


def paginate_query(query: SQLAlchemyQuery, pagination: PaginationParams) -> tuple[list, int]:
    """Run ``query`` for one page. Returns (rows, total_count)."""
    total = query.count()
    rows = query.offset(pagination.offset).limit(pagination.per_page).all()
    return rows, total
