from enum import Enum


class RuntimeEnvironment(Enum):
    DEV = "dev"
    PROD = "prod"
    TEST = "test"
