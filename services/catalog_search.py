import logging

import config
from enums.catalog_sort import CatalogSort
from enums.message_scope import MessageScope
from enums.search_state import SearchState
from exceptions.catalog import CatalogUnavailableException
from models.search_filters import SearchFilters
from services.catalog_client import CatalogClient
from services.catalog_query import build_params, clamp_page, total_pages
from utils.debounce import Debouncer
from utils.localizator import Localizator

logger = logging.getLogger(__name__)


class CatalogSearch:
    """
    Catalog listing controller.

    Owns the filter state, the current page and the last result set. Every
    fetch is tagged with a generation number; a response that arrives after a
    newer fetch was started is dropped, so the visible results always match
    the latest criteria.

    Typed search text goes through a Debouncer; every other change applies
    at once. Any change of criteria resets the page to 1.
    """

    def __init__(self, client: CatalogClient, page_size: int | None = None,
                 debounce_ms: int | None = None):
        self.client = client
        self.page_size = page_size or config.CATALOG_PAGE_SIZE
        self.filters = SearchFilters(limit=self.page_size)
        self.results: list[dict] = []
        self.total = 0
        self.facets: dict[str, list[str]] = {"categories": [], "brands": [], "makes": []}
        self.state = SearchState.IDLE
        self.error: str | None = None
        self._generation = 0
        delay_ms = debounce_ms if debounce_ms is not None else config.SEARCH_DEBOUNCE_MS
        self._debouncer = Debouncer(delay_ms / 1000, self._apply_search_text)

    @property
    def page(self) -> int:
        return self.filters.page

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.filters.limit)

    @property
    def is_loading(self) -> bool:
        return self.state == SearchState.LOADING

    async def search(self) -> bool:
        """
        Fetch the listing for the current filters.

        Returns:
            True if this response was applied, False if it failed or was stale
        """
        self._generation += 1
        generation = self._generation
        self.state = SearchState.LOADING
        params = build_params(self.filters)

        try:
            data = await self.client.list_parts(params)
        except CatalogUnavailableException as e:
            if generation != self._generation:
                logger.debug(f"Discarding stale catalog failure (generation {generation})")
                return False
            logger.error(f"Catalog search failed: {e}")
            self.results = []
            self.total = 0
            self.error = Localizator.get_text(MessageScope.CUSTOMER, "catalog_search_failed")
            self.state = SearchState.ERROR
            return False

        if generation != self._generation:
            logger.debug(f"Discarding stale catalog response (generation {generation}, latest {self._generation})")
            return False

        self.results = data.get("parts") or []
        pagination = data.get("pagination") or {}
        self.total = data.get("total") or pagination.get("totalCount") or 0
        facets = data.get("filters") or {}
        for key in self.facets:
            self.facets[key] = facets.get(key) or []
        self.error = None
        self.state = SearchState.LOADED if self.results else SearchState.EMPTY
        return True

    async def set_filters(self, **changes) -> bool:
        self.filters = self.filters.model_copy(update={**changes, "page": 1})
        return await self.search()

    def type_search(self, text: str) -> None:
        """Record typed text; the search fires once input has been quiet for the debounce delay."""
        self._debouncer.push(text)

    async def settle(self) -> None:
        """Apply pending typed text immediately (e.g. on Enter)."""
        await self._debouncer.flush()

    async def wait_for_input(self) -> None:
        await self._debouncer.wait()

    async def _apply_search_text(self, text: str) -> None:
        await self.set_filters(search=text)

    async def set_sort(self, sort_by: CatalogSort) -> bool:
        return await self.set_filters(sort_by=sort_by)

    async def clear_filters(self) -> bool:
        self._debouncer.cancel()
        self.filters = SearchFilters(limit=self.page_size)
        return await self.search()

    async def go_to_page(self, page: int) -> bool:
        target = clamp_page(page, self.total, self.filters.limit)
        self.filters = self.filters.model_copy(update={"page": target})
        return await self.search()

    async def next_page(self) -> bool:
        return await self.go_to_page(self.page + 1)

    async def previous_page(self) -> bool:
        return await self.go_to_page(self.page - 1)
