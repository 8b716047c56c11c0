from enum import Enum


class CatalogSort(str, Enum):
    """
    Sort keys accepted by the parts listing.

    A leading "-" means descending, everything else sorts ascending.
    """

    NAME = "name"
    PRICE = "price"
    PRICE_DESC = "-price"
    VEHICLE_MAKE = "vehicleMake"
    CATEGORY = "category"
