"""Pagination — page/pageSize arithmetic shared by list endpoints."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Page:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def envelope(self, key: str, items: list, total: int) -> dict:
        """Build the list response: items plus total/page/pageSize/totalPages."""
        return {
            key: items,
            "total": total,
            "page": self.page,
            "pageSize": self.page_size,
            "totalPages": math.ceil(total / self.page_size) if self.page_size else 0,
        }
