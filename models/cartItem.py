from pydantic import BaseModel, Field


# Session cart line; lives in Redis, never in the database
class CartItemDTO(BaseModel):
    id: str
    part_number: str
    name: str
    price_cents: int = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    stock: int = Field(ge=0)
    image: str | None = None
