"""Fixed-size pagination for post listings"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Page:
    number: int                 # 1-based
    total:  int                 # total number of pages
    posts:  list[Any] = field(default_factory=list)

    @property
    def has_prev(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total


def paginate(items: list, per_page: int) -> list[Page]:
    """Split items into pages of per_page. Always returns at least one (possibly empty) page."""
    if per_page < 1:
        raise ValueError(f"per_page must be >= 1, got {per_page}")
    chunks = [items[i:i + per_page] for i in range(0, len(items), per_page)] or [[]]
    return [Page(number=n, total=len(chunks), posts=chunk) for n, chunk in enumerate(chunks, start=1)]


def page_path(number: int) -> str:
    """Site-relative path of an index page: index.html for page 1, page/<n>.html after."""
    return "index.html" if number == 1 else f"page/{number}.html"
