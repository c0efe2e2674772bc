"""Estimate schemas."""
from datetime import date as Date, datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator


class EstimateType(str, Enum):
    ESTIMATE = "ESTIMATE"
    QUOTATION = "QUOTATION"
    PROPOSAL = "PROPOSAL"


class EstimateStatus(str, Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"
    INVOICED = "INVOICED"


class SalesChannel(str, Enum):
    ONLINE = "Online"
    OFFLINE = "Offline"


class EstimateItem(BaseModel):
    """One line of an estimate."""
    model_config = ConfigDict(extra="allow")

    product_id: Optional[int] = None
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    quantity: float = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)
    discount: Optional[float] = Field(None, ge=0)
    tax_rate: Optional[float] = Field(None, ge=0, le=100)
    total: float = Field(..., ge=0)


class EstimateBase(BaseModel):
    """Fields shared by estimate payloads and responses."""
    model_config = ConfigDict(use_enum_values=True)

    type: Optional[EstimateType] = None
    validity: Optional[int] = Field(None, ge=1, le=365)
    status: Optional[EstimateStatus] = None
    active: Optional[bool] = None
    refrence: Optional[str] = Field(None, max_length=100)
    salesperson: Optional[str] = Field(None, max_length=100)
    branch_id: Optional[str] = Field(None, max_length=50)
    channel: Optional[SalesChannel] = None

    # Document options
    tax_inclusive: Optional[bool] = None
    show_bank_details: Optional[bool] = None
    bank_id: Optional[str] = Field(None, max_length=50)
    show_signature: Optional[bool] = None
    show_upi_qr: Optional[bool] = None

    customer_billing: Optional[dict[str, Any]] = None
    customer_shipping: Optional[dict[str, Any]] = None

    # Totals
    subtotal: Optional[float] = Field(None, ge=0)
    total_cost: Optional[float] = Field(None, ge=0)
    taxable_amount: Optional[float] = Field(None, ge=0)
    total_tax: Optional[float] = Field(None, ge=0)
    shipping_charges: Optional[float] = Field(None, ge=0)
    other_charges: Optional[float] = Field(None, ge=0)
    adjustment: Optional[float] = None
    round_off: Optional[float] = None
    grand_total: Optional[float] = Field(None, ge=0)

    terms: Optional[str] = None
    notes: Optional[str] = None


class EstimateCreate(EstimateBase):
    """Schema for creating an estimate."""
    number: str = Field(..., min_length=1, max_length=50)
    date: Date
    customer_id: str = Field(..., min_length=1, max_length=50)
    items: list[EstimateItem] = Field(..., min_length=1)


class EstimateUpdate(EstimateBase):
    """Schema for updating an estimate."""
    number: Optional[str] = Field(None, min_length=1, max_length=50)
    date: Optional[Date] = None
    customer_id: Optional[str] = Field(None, min_length=1, max_length=50)
    items: Optional[list[EstimateItem]] = Field(None, min_length=1)

    @field_validator("number", "date", "customer_id", "items")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("This field cannot be null")
        return v


class EstimateResponse(EstimateBase):
    """Schema for estimate response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    number: str
    date: Date
    customer_id: str
    items: list[dict[str, Any]] = []
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
