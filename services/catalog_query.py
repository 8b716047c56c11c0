"""
Catalog query building.

Turns SearchFilters into the query string of GET /api/parts and back, and
holds the pagination arithmetic shared by the storefront and the API.
"""

import math
from typing import Mapping

from enums.catalog_sort import CatalogSort
from models.search_filters import ALL, SearchFilters

# SearchFilters field -> query parameter, in the order they are emitted
_FILTER_PARAMS = [
    ("search", "search"),
    ("make", "make"),
    ("category", "category"),
    ("brand", "brand"),
    ("condition", "condition"),
    ("min_price", "minPrice"),
    ("max_price", "maxPrice"),
]


def _is_unset(value) -> bool:
    return value is None or value == "" or value == ALL


def build_params(filters: SearchFilters, page: int | None = None,
                 sort_by: CatalogSort | str | None = None) -> dict[str, str]:
    """
    Build the listing query parameters.

    page, limit and sortBy are always present. Filter values that are empty,
    None or "all" are left out; inStock is sent only when true.

    Example:
        >>> build_params(SearchFilters(make="Toyota", in_stock=True), page=2)
        {'page': '2', 'limit': '20', 'sortBy': 'name', 'make': 'Toyota', 'inStock': 'true'}
    """
    sort_value = sort_by if sort_by is not None else filters.sort_by
    if isinstance(sort_value, CatalogSort):
        sort_value = sort_value.value

    params = {
        "page": str(page if page is not None else filters.page),
        "limit": str(filters.limit),
        "sortBy": sort_value,
    }
    for field, param in _FILTER_PARAMS:
        value = getattr(filters, field)
        if not _is_unset(value):
            params[param] = str(value)
    if filters.in_stock:
        params["inStock"] = "true"
    return params


def filters_from_query(query: Mapping[str, str], limit: int | None = None) -> SearchFilters:
    """Rebuild SearchFilters from URL query parameters (e.g. a shared catalog link)."""
    values = {}
    for field, param in _FILTER_PARAMS:
        if param in query:
            values[field] = query[param]
    values["in_stock"] = str(query.get("inStock", "")).lower() == "true"
    if "page" in query:
        values["page"] = query["page"]
    sort_value = query.get("sortBy")
    if sort_value in {s.value for s in CatalogSort}:
        values["sort_by"] = CatalogSort(sort_value)
    if limit is not None:
        values["limit"] = limit
    return SearchFilters(**values)


def total_pages(total: int, limit: int) -> int:
    if limit <= 0:
        return 0
    return math.ceil(total / limit)


def clamp_page(page: int, total: int, limit: int) -> int:
    """Keep a requested page inside [1, max(total_pages, 1)]."""
    return min(max(page, 1), max(total_pages(total, limit), 1))
