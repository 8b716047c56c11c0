from enum import Enum


class MessageScope(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"
    COMMON = "common"
