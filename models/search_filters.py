from pydantic import BaseModel, field_validator

from enums.catalog_sort import CatalogSort

ALL = "all"
DEFAULT_PAGE_SIZE = 20
# Keeps the row offset inside a 64-bit SQL integer
MAX_PAGE = 100_000


class SearchFilters(BaseModel):
    """
    Catalog search criteria as the storefront holds them.

    Select-style fields use "all" for "no constraint". Price bounds are raw
    strings and are passed through without checking min <= max. page is
    clamped to [1, MAX_PAGE]; a page past the last one is simply empty.
    """

    search: str = ""
    make: str = ALL
    category: str = ALL
    brand: str = ALL
    condition: str = ALL
    min_price: str = ""
    max_price: str = ""
    in_stock: bool = False
    sort_by: CatalogSort = CatalogSort.NAME
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    @field_validator('page', mode='before')
    @classmethod
    def validate_page(cls, v):
        try:
            page = int(v)
        except (TypeError, ValueError):
            return 1
        return min(max(page, 1), MAX_PAGE)

    @field_validator('make', 'category', 'brand', 'condition', mode='before')
    @classmethod
    def validate_select(cls, v):
        if v is None or v == "":
            return ALL
        return v

    @field_validator('min_price', 'max_price', 'search', mode='before')
    @classmethod
    def validate_text(cls, v):
        if v is None:
            return ""
        return str(v)
