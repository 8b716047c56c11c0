import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from db import session_commit
from enums.part_condition import PartCondition
from exceptions.part import PartNotFoundException, DuplicatePartNumberException, InvalidPartDataException
from models.part import PartDTO
from models.search_filters import ALL, SearchFilters
from repositories.part import PartRepository
from services.catalog_query import total_pages
from utils.money import to_cents

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100

# Admin-editable columns
UPDATABLE_FIELDS = {
    "name", "description", "category", "subcategory", "brand", "manufacturer",
    "vehicle_make", "vehicle_model", "condition", "price_cents", "cost_price_cents",
    "stock", "low_stock_threshold", "sku", "location", "image_url", "tags",
    "is_active", "is_featured",
}


class PartService:

    @staticmethod
    def _price_bound(field: str, raw: str) -> int | None:
        if raw == "":
            return None
        try:
            return to_cents(raw)
        except ValueError:
            raise InvalidPartDataException(field, f"'{raw}' is not a valid price")

    @staticmethod
    def _condition(raw: str | None) -> PartCondition | None:
        if raw is None or raw == ALL:
            return None
        try:
            return PartCondition(raw)
        except ValueError:
            raise InvalidPartDataException("condition", f"unknown condition '{raw}'")

    @staticmethod
    async def list_parts(filters: SearchFilters, session: AsyncSession) -> dict:
        """
        Catalog listing with pagination and facet values.

        Returns:
            {"parts": [PartDTO], "total", "pagination": {...}, "filters": {...}}

        Raises:
            InvalidPartDataException: If a price bound or condition cannot be parsed
        """
        limit = max(1, min(filters.limit, MAX_PAGE_SIZE))
        parts, total = await PartRepository.search(
            session,
            search=filters.search.strip() or None,
            make=None if filters.make == ALL else filters.make,
            category=None if filters.category == ALL else filters.category,
            brand=None if filters.brand == ALL else filters.brand,
            condition=PartService._condition(filters.condition),
            min_price_cents=PartService._price_bound("minPrice", filters.min_price),
            max_price_cents=PartService._price_bound("maxPrice", filters.max_price),
            in_stock=filters.in_stock,
            sort_by=filters.sort_by,
            page=filters.page,
            limit=limit,
        )
        facets = await PartRepository.get_facets(session)
        return {
            "parts": parts,
            "total": total,
            "pagination": {
                "page": filters.page,
                "limit": limit,
                "totalCount": total,
                "totalPages": total_pages(total, limit),
            },
            "filters": facets,
        }

    @staticmethod
    async def get_part(part_id: int, session: AsyncSession) -> PartDTO:
        part = await PartRepository.get_by_id(part_id, session)
        if part is None or not part.is_active:
            raise PartNotFoundException(part_id)
        return part

    @staticmethod
    async def create_part(values: dict, session: AsyncSession) -> PartDTO:
        """
        Raises:
            DuplicatePartNumberException: If the part number is already used
        """
        part_number = values["part_number"]
        if await PartRepository.get_by_part_number(part_number, session) is not None:
            raise DuplicatePartNumberException(part_number)

        stock = values.get("stock") or 0
        part_dto = PartDTO(**values)
        if values.get("low_stock_threshold") is None:
            part_dto.low_stock_threshold = min(stock, 10)
        if values.get("condition") is not None:
            part_dto.condition = PartService._condition(values["condition"])

        part = await PartRepository.create(part_dto, session)
        await session_commit(session)
        logger.info(f"Part {part.part_number} created (id={part.id})")
        return part

    @staticmethod
    async def update_part(part_id: int, values: dict, session: AsyncSession) -> PartDTO:
        """
        Apply a partial update to a part.

        Unknown keys are ignored; changing the part number checks uniqueness.
        """
        part = await PartRepository.get_by_id(part_id, session)
        if part is None:
            raise PartNotFoundException(part_id)

        changes = {key: value for key, value in values.items() if key in UPDATABLE_FIELDS}
        new_number = values.get("part_number")
        if new_number and new_number != part.part_number:
            if await PartRepository.get_by_part_number(new_number, session) is not None:
                raise DuplicatePartNumberException(new_number)
            changes["part_number"] = new_number
        if "condition" in changes:
            changes["condition"] = PartService._condition(changes["condition"])
        for field in ("price_cents", "stock"):
            if field in changes and (changes[field] is None or changes[field] < 0):
                raise InvalidPartDataException(field, "must be zero or positive")

        if changes:
            changes["updated_at"] = datetime.now()
            await PartRepository.update(part_id, changes, session)
            await session_commit(session)
        return await PartRepository.get_by_id(part_id, session)

    @staticmethod
    async def delete_part(part_id: int, session: AsyncSession) -> None:
        """Soft delete: the part leaves the catalog but stays referenced by past orders."""
        part = await PartRepository.get_by_id(part_id, session)
        if part is None or not part.is_active:
            raise PartNotFoundException(part_id)
        await PartRepository.deactivate(part_id, session)
        await session_commit(session)
        logger.info(f"Part {part.part_number} deactivated")
