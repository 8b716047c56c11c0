from enum import Enum


class BusinessType(str, Enum):
    GARAGE = "garage"
    WORKSHOP = "workshop"
    DEALER = "dealer"
    MECHANIC = "mechanic"
    OTHER = "other"
