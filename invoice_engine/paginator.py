"""Split taxed lines into fixed-size pages for print layouts."""
from __future__ import annotations

from typing import List, Sequence

from .schemas import Page, TaxedLineItem

# rows per page used by the existing paper templates
PAGE_SIZES = {
    "compact": 24,
    "standard": 34,
    "tall": 38,
    "a4": 40,
}


class InvalidPageSizeError(ValueError):
    """Raised when a caller asks for pages of a non-positive or non-integer size."""


def paginate(taxed_lines: Sequence[TaxedLineItem], page_size: int) -> List[Page]:
    """Chunk ``taxed_lines`` into pages of at most ``page_size`` lines.

    Always returns at least one page; an empty invoice gets a single empty
    page so footers still have somewhere to go. ``start_index`` carries the
    running line offset for continuous serial numbers.
    """
    if isinstance(page_size, bool) or not isinstance(page_size, int):
        raise InvalidPageSizeError(f"page_size must be a positive integer, got {page_size!r}")
    if page_size <= 0:
        raise InvalidPageSizeError(f"page_size must be a positive integer, got {page_size}")

    lines = tuple(taxed_lines)
    chunks = [lines[start:start + page_size] for start in range(0, len(lines), page_size)] or [()]
    total_pages = len(chunks)

    pages: List[Page] = []
    start_index = 0
    for number, chunk in enumerate(chunks, start=1):
        pages.append(
            Page(
                items=chunk,
                start_index=start_index,
                page_number=number,
                total_pages=total_pages,
                is_last_page=number == total_pages,
            )
        )
        start_index += len(chunk)
    return pages
