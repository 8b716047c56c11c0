from enum import Enum


class Currency(str, Enum):
    MUR = "MUR"
    USD = "USD"
    EUR = "EUR"
