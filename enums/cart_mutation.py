from enum import Enum


class CartMutation(Enum):
    """Outcome of Cart.add_item()."""

    ADDED = "added"                            # New line inserted with quantity 1
    QUANTITY_UPDATED = "quantity_updated"      # Existing line incremented
    STOCK_LIMIT_REACHED = "stock_limit_reached"  # Already at stock, nothing changed
