from enum import Enum


class PaymentMethod(str, Enum):
    CARD = "card"
    COD = "cod"
    BANK_TRANSFER = "bank_transfer"
