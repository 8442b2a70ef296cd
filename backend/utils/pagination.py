"""Offset pagination: query parameter parsing and first/last/prev/next link computation."""
from collections.abc import Mapping
from typing import NamedTuple, Optional

from starlette.datastructures import URL

from schemas.pagination import PaginationLinks
from utils.config import MAX_PAGE_LIMIT

LIMIT_PARAM = "page[limit]"
OFFSET_PARAM = "page[offset]"

# Largest value bound into a LIMIT/OFFSET clause; fits a 32-bit INTEGER on every backend.
MAX_QUERY_INT = 2**31 - 1

LIMIT_MISSING = f"{LIMIT_PARAM}: missing required parameter"
LIMIT_INVALID = f"{LIMIT_PARAM}: must be a positive integer"
LIMIT_CLAMPED = f"{LIMIT_PARAM}: must be less than or equal to {MAX_PAGE_LIMIT}"
OFFSET_INVALID = f"{OFFSET_PARAM}: must be non-negative integer"


class PageParams(NamedTuple):
    limit: int
    offset: int = 0


class LinkOffsets(NamedTuple):
    first: int
    last: int
    prev: Optional[int]
    next: Optional[int]


def _parse_int(raw: str) -> Optional[int]:
    """Plain ASCII digits within MAX_QUERY_INT, else None. Signs, spaces and underscores are rejected."""
    if not (raw.isascii() and raw.isdigit()):
        return None
    value = int(raw)
    return value if value <= MAX_QUERY_INT else None


def parse_page_params(query: Mapping[str, str]) -> tuple[PageParams, list[str], list[str]]:
    """
    Read page[limit] and page[offset] from a query mapping.
    Returns (params, errors, warnings). Any error means the request must be rejected;
    warnings (limit clamped to MAX_PAGE_LIMIT) are reported but the request proceeds.
    """
    errors: list[str] = []
    warnings: list[str] = []

    offset = 0
    raw_offset = query.get(OFFSET_PARAM)
    if raw_offset:
        parsed = _parse_int(raw_offset)
        if parsed is None or parsed < 0:
            errors.append(OFFSET_INVALID)
        else:
            offset = parsed

    limit = 0
    raw_limit = query.get(LIMIT_PARAM)
    if not raw_limit:
        errors.append(LIMIT_MISSING)
    else:
        parsed = _parse_int(raw_limit)
        if parsed is None or parsed <= 0:
            errors.append(LIMIT_INVALID)
        elif parsed > MAX_PAGE_LIMIT:
            limit = MAX_PAGE_LIMIT
            warnings.append(LIMIT_CLAMPED)
        else:
            limit = parsed

    return PageParams(limit=limit, offset=offset), errors, warnings


def compute_link_offsets(total: int, limit: int, offset: int) -> LinkOffsets:
    """
    Offsets for the first, last, prev and next pages; prev/next are None when there is no such page.
    last is the largest multiple of limit not above total, so when total is an exact
    multiple of limit the last page is empty.
    """
    last = (total // limit) * limit
    prev = offset - limit
    # An offset past the end still links back to the last page.
    if prev > last:
        prev = last
    nxt = offset + limit
    return LinkOffsets(
        first=0,
        last=last,
        prev=prev if prev >= 0 else None,
        next=nxt if nxt <= last else None,
    )


def _with_offset(url: URL, offset: int) -> str:
    return str(url.include_query_params(**{OFFSET_PARAM: offset}))


def build_links(url: URL, offsets: LinkOffsets) -> PaginationLinks:
    """Render offsets as full URLs: the request URL with page[offset] replaced."""
    return PaginationLinks(
        first=_with_offset(url, offsets.first),
        last=_with_offset(url, offsets.last),
        prev=_with_offset(url, offsets.prev) if offsets.prev is not None else None,
        next=_with_offset(url, offsets.next) if offsets.next is not None else None,
    )
