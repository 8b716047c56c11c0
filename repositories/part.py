from sqlalchemy import select, func, update, or_, asc, desc
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush, session_refresh
from enums.catalog_sort import CatalogSort
from models.part import Part, PartDTO

# Sort key -> (column, direction); id breaks ties so pages never overlap
_SORT_COLUMNS = {
    CatalogSort.NAME: (Part.name, asc),
    CatalogSort.PRICE: (Part.price_cents, asc),
    CatalogSort.PRICE_DESC: (Part.price_cents, desc),
    CatalogSort.VEHICLE_MAKE: (Part.vehicle_make, asc),
    CatalogSort.CATEGORY: (Part.category, asc),
}


class PartRepository:

    @staticmethod
    async def get_by_id(part_id: int, session: AsyncSession) -> PartDTO | None:
        stmt = select(Part).where(Part.id == part_id).execution_options(populate_existing=True)
        part = await session_execute(stmt, session)
        part = part.scalar()
        if part is not None:
            return PartDTO.model_validate(part, from_attributes=True)
        else:
            return None

    @staticmethod
    async def get_by_ids(part_ids: list[int], session: AsyncSession) -> dict[int, PartDTO]:
        """
        Batch load parts for order creation.

        Prevents N+1 queries by loading all parts in a single query.
        """
        if not part_ids:
            return {}
        stmt = select(Part).where(Part.id.in_(part_ids))
        parts = await session_execute(stmt, session)
        return {part.id: PartDTO.model_validate(part, from_attributes=True) for part in parts.scalars().all()}

    @staticmethod
    async def get_by_part_number(part_number: str, session: AsyncSession) -> PartDTO | None:
        stmt = select(Part).where(Part.part_number == part_number)
        part = await session_execute(stmt, session)
        part = part.scalar()
        if part is not None:
            return PartDTO.model_validate(part, from_attributes=True)
        return None

    @staticmethod
    async def search(
        session: AsyncSession,
        search: str | None = None,
        make: str | None = None,
        category: str | None = None,
        brand: str | None = None,
        condition: str | None = None,
        min_price_cents: int | None = None,
        max_price_cents: int | None = None,
        in_stock: bool = False,
        sort_by: CatalogSort = CatalogSort.NAME,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[PartDTO], int]:
        """
        Filtered, sorted, paginated listing of active parts.

        Text search is case-insensitive over name, part number and description.
        Bounds are applied as given, min > max simply yields nothing.

        Returns:
            (parts on the requested page, total matching count)
        """
        conditions = [Part.is_active == True]
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(
                Part.name.ilike(pattern),
                Part.part_number.ilike(pattern),
                Part.description.ilike(pattern),
            ))
        if make:
            conditions.append(Part.vehicle_make == make)
        if category:
            conditions.append(Part.category == category)
        if brand:
            conditions.append(Part.brand == brand)
        if condition:
            conditions.append(Part.condition == condition)
        if min_price_cents is not None:
            conditions.append(Part.price_cents >= min_price_cents)
        if max_price_cents is not None:
            conditions.append(Part.price_cents <= max_price_cents)
        if in_stock:
            conditions.append(Part.stock > 0)

        count_stmt = select(func.count(Part.id)).where(*conditions)
        total = await session_execute(count_stmt, session)
        total = total.scalar_one()

        column, direction = _SORT_COLUMNS[sort_by]
        stmt = (select(Part)
                .where(*conditions)
                .order_by(direction(column), Part.id)
                .offset((page - 1) * limit)
                .limit(limit))
        parts = await session_execute(stmt, session)
        return [PartDTO.model_validate(part, from_attributes=True) for part in parts.scalars().all()], total

    @staticmethod
    async def get_facets(session: AsyncSession) -> dict[str, list[str]]:
        """Distinct categories, brands and vehicle makes of active parts."""
        facets = {}
        for key, column in (("categories", Part.category), ("brands", Part.brand), ("makes", Part.vehicle_make)):
            stmt = (select(column)
                    .where(Part.is_active == True, column.is_not(None))
                    .distinct()
                    .order_by(column))
            result = await session_execute(stmt, session)
            facets[key] = list(result.scalars().all())
        return facets

    @staticmethod
    async def create(part_dto: PartDTO, session: AsyncSession) -> PartDTO:
        part = Part(**part_dto.model_dump(exclude={'id', 'created_at', 'updated_at'}))
        session.add(part)
        await session_flush(session)
        await session_refresh(session, part)
        return PartDTO.model_validate(part, from_attributes=True)

    @staticmethod
    async def update(part_id: int, values: dict, session: AsyncSession) -> None:
        stmt = update(Part).where(Part.id == part_id).values(**values)
        await session_execute(stmt, session)

    @staticmethod
    async def deactivate(part_id: int, session: AsyncSession) -> None:
        stmt = update(Part).where(Part.id == part_id).values(is_active=False)
        await session_execute(stmt, session)

    @staticmethod
    async def decrement_stock(part_id: int, quantity: int, session: AsyncSession) -> bool:
        """
        Take units out of stock if enough are left.

        The stock check and the decrement run as one UPDATE so two concurrent
        orders cannot both take the last unit.

        Returns:
            True if the stock was decremented, False if not enough was left
        """
        stmt = (update(Part)
                .where(Part.id == part_id, Part.stock >= quantity)
                .values(stock=Part.stock - quantity))
        result = await session_execute(stmt, session)
        return result.rowcount == 1

    @staticmethod
    async def increment_stock(part_id: int, quantity: int, session: AsyncSession) -> None:
        stmt = update(Part).where(Part.id == part_id).values(stock=Part.stock + quantity)
        await session_execute(stmt, session)

    @staticmethod
    async def get_stock_statistics(session: AsyncSession) -> dict[str, int]:
        """Active parts and how many of them are at or below their low-stock threshold."""
        stmt = (select(func.count(Part.id),
                       func.count(Part.id).filter(Part.stock <= Part.low_stock_threshold))
                .where(Part.is_active == True))
        result = await session_execute(stmt, session)
        total, low_stock = result.one()
        return {"total": total, "lowStock": low_stock}
