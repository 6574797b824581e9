from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ProductIn(BaseModel):
    name: str = Field(min_length=1)
    price: float = Field(ge=0, allow_inf_nan=False)

    @field_validator("price")
    @classmethod
    def _two_decimals(cls, v: float) -> float:
        # Stored as NUMERIC(10,2).
        return round(v, 2)


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    price: float


class RatingIn(BaseModel):
    product_id: int
    rating: int
    rating_text: Optional[str] = None


class RatingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rating_id: int
    product_id: Optional[int]
    rating: int
    # The ORM attribute is `text` (column `info`).
    rating_text: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("rating_text", "text"),
    )


class DeleteResult(BaseModel):
    result: str = "success"
