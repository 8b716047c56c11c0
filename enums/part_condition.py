from enum import Enum


class PartCondition(str, Enum):
    NEW = "new"
    USED = "used"
    REFURBISHED = "refurbished"
