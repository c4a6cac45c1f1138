# product_service/schemas.py

from datetime import date, datetime
from typing import Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductBase(BaseModel):
    # Wire and document keys keep the Portuguese names used by the collection
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., alias="nome", min_length=1, max_length=255)
    description: Optional[str] = Field(None, alias="descricao", max_length=2000)
    quantity: int = Field(..., alias="quantidade", ge=0)
    price: float = Field(..., alias="preco", gt=0, allow_inf_nan=False)
    discount: Optional[float] = Field(
        None,
        alias="desconto",
        ge=0,
        le=100,
        allow_inf_nan=False,
        description="Discount percentage applied to the price.",
    )
    discount_date: Optional[date] = Field(None, alias="dataDesconto")
    category: str = Field(..., alias="categoria", min_length=1, max_length=100)
    image: Optional[str] = Field(
        None, alias="imagem", max_length=2048, description="URL of the product image."
    )


class ProductCreate(ProductBase):
    pass


# PUT carries the whole product, so it is validated against the full schema
class ProductUpdate(ProductBase):
    pass


class ProductResponse(ProductBase):
    id: str = Field(..., alias="_id", description="Unique ID of the product.")

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, value):
        if isinstance(value, ObjectId):
            return str(value)
        return value

    @field_validator("discount_date", mode="before")
    @classmethod
    def datetime_to_date(cls, value):
        if isinstance(value, datetime):
            return value.date()
        return value


class ProductEnvelope(BaseModel):
    message: str
    product: ProductResponse


class MessageResponse(BaseModel):
    message: str
