from enum import Enum


class SearchState(Enum):
    IDLE = "idle"          # Nothing requested yet
    LOADING = "loading"    # Request in flight
    LOADED = "loaded"      # Results present
    EMPTY = "empty"        # Request succeeded with zero results
    ERROR = "error"        # Request failed, results cleared
