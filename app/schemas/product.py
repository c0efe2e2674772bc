"""Product schemas."""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator


class ProductType(str, Enum):
    SIMPLE = "simple"
    VARIABLE = "variable"
    GROUPED = "grouped"
    EXTERNAL = "external"


class PublicationStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    DISCONTINUED = "discontinued"
    PRIVATE = "private"


Money = Optional[Decimal]


class ProductBase(BaseModel):
    """Fields shared by product payloads and responses."""
    model_config = ConfigDict(use_enum_values=True)

    slug: Optional[str] = Field(None, max_length=255)
    type: Optional[ProductType] = None
    publication_status: Optional[PublicationStatus] = None
    active: Optional[bool] = None
    description: Optional[str] = None
    short_description: Optional[str] = None
    sku: Optional[str] = Field(None, max_length=100)
    barcode: Optional[str] = Field(None, max_length=100)
    brand: Optional[str] = Field(None, max_length=255)

    # Pricing
    cost: Money = Field(None, ge=0)
    mrp: Money = Field(None, ge=0)
    price: Money = Field(None, ge=0)
    sale_price: Money = Field(None, ge=0)

    # Tax
    taxable: Optional[bool] = None
    tax_hsn_code: Optional[str] = Field(None, max_length=20)
    tax_rate: Money = Field(None, ge=0, le=100)
    tax_inclusive: Optional[bool] = None

    # Stock
    stock_track: Optional[bool] = None
    stock_quantity: Optional[int] = None
    stock_low_threshold: Optional[int] = Field(None, ge=0)

    # Dimensions and shipping
    length: Money = Field(None, ge=0)
    width: Money = Field(None, ge=0)
    height: Money = Field(None, ge=0)
    weight: Money = Field(None, ge=0)
    unit: Optional[str] = Field(None, max_length=20)
    shipping_weight: Money = Field(None, ge=0)
    shipping_required: Optional[bool] = None
    shipping_taxable: Optional[bool] = None
    shipping_class_id: Optional[int] = Field(None, ge=0)

    # Media and relations
    image: Optional[str] = Field(None, max_length=500)
    images: Optional[list[str]] = None
    external_url: Optional[str] = Field(None, max_length=500)
    categories: Optional[list[Any]] = None
    tags: Optional[list[str]] = None
    attributes: Optional[list[Any]] = None
    variations: Optional[list[Any]] = None
    meta_data: Optional[list[Any]] = None
    related_ids: Optional[list[int]] = None
    upsell_ids: Optional[list[int]] = None
    cross_sell_ids: Optional[list[int]] = None


class ProductCreate(ProductBase):
    """Schema for creating a product."""
    name: str = Field(..., min_length=1, max_length=255)


class ProductUpdate(ProductBase):
    """Schema for updating a product. Every field is optional."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)

    @field_validator("name", "slug")
    @classmethod
    def not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("This field cannot be null")
        return v


class ProductResponse(ProductBase):
    """Schema for product response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    effective_price: Decimal
    discount_percentage: float
    in_stock: bool
    low_stock: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
