"""
Pagination utilities
"""

from pydantic import BaseModel, Field

from regalia.schemas.base import CamelSchema

class PaginationParams(BaseModel):
    """Pagination parameters"""
    page: int = Field(1, ge=1, description="Page number")
    limit: int = Field(20, ge=1, description="Page size")

    @property
    def offset(self) -> int:
        """Calculate offset"""
        return (self.page - 1) * self.limit

class Pagination(CamelSchema):
    """Pagination block of a listing response"""
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, params: PaginationParams, total: int) -> "Pagination":
        """
        Describe the page window for a result set

        Args:
            params: Requested page and page size
            total: Count of all matching rows, not just this page

        Returns:
            Pagination metadata
        """
        total_pages = (total + params.limit - 1) // params.limit
        return cls(
            page=params.page,
            limit=params.limit,
            total=total,
            total_pages=total_pages,
            has_next=params.page * params.limit < total,
            has_prev=params.page > 1,
        )
