"""Estimate model."""
from sqlalchemy import JSON, Boolean, Column, Date, DateTime, Index, Integer, Numeric, String, Text

from app.core.database import Base, utcnow
from app.core.resources import api_resource
from app.models.mixins import ResourceMixin
from app.schemas.estimate import (
    EstimateCreate, EstimateResponse, EstimateStatus, EstimateType, EstimateUpdate, SalesChannel
)

ESTIMATE_STATUSES = [status.value for status in EstimateStatus]
SALES_CHANNELS = [channel.value for channel in SalesChannel]

TOTAL_FIELDS = (
    "subtotal", "total_cost", "taxable_amount", "total_tax", "shipping_charges",
    "other_charges", "adjustment", "round_off", "grand_total",
)

ADDRESS_PROPERTIES = {
    "name": {"type": "string", "required": True},
    "address": {"type": "string", "required": True},
    "city": {"type": "string", "required": True},
    "state": {"type": "string", "required": True},
    "pincode": {"type": "string", "required": True},
    "phone": {"type": "string", "required": False},
    "email": {"type": "string", "required": False},
}


def _options(values: list[str]) -> list[dict]:
    return [{"value": value, "label": value.title()} for value in values]


def _total_field(field: str, label: str, required: bool = False, signed: bool = False) -> dict:
    definition = {
        "field": field,
        "type": "decimal",
        "label": label,
        "required": required,
        "default": 0.00,
    }
    if not signed:
        definition["min"] = 0
    return definition


@api_resource(
    uri="estimates",
    create_schema=EstimateCreate,
    update_schema=EstimateUpdate,
    response_schema=EstimateResponse,
)
class Estimate(ResourceMixin, Base):
    """Sales estimate (quotation) with line items and flattened totals."""

    __tablename__ = "estimates"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(20), default=EstimateType.ESTIMATE.value, nullable=False)
    number = Column(String(50), unique=True, nullable=False)
    date = Column(Date, nullable=False)
    validity = Column(Integer, default=5, nullable=False)
    status = Column(String(20), default=EstimateStatus.DRAFT.value, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    refrence = Column(String(100))
    branch_id = Column(String(50))
    channel = Column(String(20), default=SalesChannel.ONLINE.value, nullable=False)
    salesperson = Column(String(100))

    # Document options
    tax_inclusive = Column(Boolean, default=False, nullable=False)
    show_bank_details = Column(Boolean, default=True, nullable=False)
    bank_id = Column(String(50))
    show_signature = Column(Boolean, default=True, nullable=False)
    show_upi_qr = Column(Boolean, default=True, nullable=False)

    # Customer
    customer_id = Column(String(50), nullable=False, index=True)
    customer_billing = Column(JSON)
    customer_shipping = Column(JSON)

    # Line items
    items = Column(JSON, nullable=False)

    # Totals
    subtotal = Column(Numeric(15, 2, asdecimal=False), default=0, nullable=False)
    total_cost = Column(Numeric(15, 2, asdecimal=False), default=0, nullable=False)
    taxable_amount = Column(Numeric(15, 2, asdecimal=False), default=0, nullable=False)
    total_tax = Column(Numeric(15, 2, asdecimal=False), default=0, nullable=False)
    shipping_charges = Column(Numeric(15, 2, asdecimal=False), default=0, nullable=False)
    other_charges = Column(Numeric(15, 2, asdecimal=False), default=0, nullable=False)
    adjustment = Column(Numeric(15, 2, asdecimal=False), default=0, nullable=False)
    round_off = Column(Numeric(15, 2, asdecimal=False), default=0, nullable=False)
    grand_total = Column(Numeric(15, 2, asdecimal=False), default=0, nullable=False)

    terms = Column(Text)
    notes = Column(Text)

    # Audit
    created_by = Column(String(50), index=True)
    updated_by = Column(String(50))

    # Timestamps
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    deleted_at = Column(DateTime, index=True)

    __table_args__ = (
        Index("idx_estimate_status_date", "status", "date"),
    )

    soft_deletes = True

    database_defaults = {
        "type": EstimateType.ESTIMATE.value,
        "validity": 5,
        "status": EstimateStatus.DRAFT.value,
        "active": True,
        "channel": SalesChannel.ONLINE.value,
        "tax_inclusive": False,
        "show_bank_details": True,
        "show_signature": True,
        "show_upi_qr": True,
        **{field: 0.0 for field in TOTAL_FIELDS},
    }

    api_filters = {
        "status": {"label": "Status", "values": ESTIMATE_STATUSES},
        "channel": {"label": "Channel", "values": SALES_CHANNELS},
    }

    index_columns = [
        {"field": "number", "label": "Estimate Number", "sortable": True, "clickable": True, "search": True},
        {"field": "date", "label": "Date", "sortable": True, "format": "date"},
        {"field": "customer_id", "label": "Customer", "sortable": True, "search": True},
        {"field": "status", "label": "Status", "sortable": True, "search": True},
        {"field": "salesperson", "label": "Salesperson", "sortable": True, "search": True},
        {"field": "grand_total", "label": "Total Amount", "sortable": True, "format": "currency"},
        {"field": "validity", "label": "Validity (Days)", "sortable": True, "format": "number", "align": "center"},
        {"field": "active", "label": "Active", "sortable": True, "format": "boolean"},
    ]

    api_schema = [
        {
            "group": "General Information",
            "fields": [
                {"field": "active", "type": "checkbox", "label": "Active", "required": False, "default": True},
                {"field": "type", "type": "select", "label": "Estimate Type", "required": True,
                 "default": EstimateType.ESTIMATE.value,
                 "options": _options([t.value for t in EstimateType])},
                {"field": "number", "label": "Estimate Number", "placeholder": "EST-001",
                 "required": True, "maxLength": 50, "unique": True},
                {"field": "date", "type": "date", "label": "Estimate Date", "required": True},
                {"field": "validity", "type": "number", "label": "Validity (Days)", "placeholder": "5",
                 "required": False, "default": 5, "min": 1, "max": 365},
                {"field": "status", "type": "select", "label": "Status", "required": True,
                 "default": EstimateStatus.DRAFT.value, "options": _options(ESTIMATE_STATUSES)},
                {"field": "refrence", "label": "Reference", "placeholder": "Enter reference number",
                 "required": False, "maxLength": 100},
                {"field": "channel", "type": "select", "label": "Channel", "required": False,
                 "default": SalesChannel.ONLINE.value,
                 "options": [{"value": c, "label": c} for c in SALES_CHANNELS]},
            ],
        },
        {
            "group": "Customer Information",
            "fields": [
                {"field": "customer_id", "label": "Customer ID", "placeholder": "Select customer",
                 "required": True, "maxLength": 50},
                {"field": "salesperson", "label": "Sales Person", "placeholder": "Enter salesperson name",
                 "required": False, "maxLength": 100},
                {"field": "branch_id", "label": "Branch ID", "placeholder": "Select branch",
                 "required": False, "maxLength": 50},
                {"field": "customer_billing", "type": "object", "label": "Billing Address",
                 "required": False, "properties": ADDRESS_PROPERTIES},
                {"field": "customer_shipping", "type": "object", "label": "Shipping Address",
                 "required": False, "properties": ADDRESS_PROPERTIES},
            ],
        },
        {
            "group": "Items",
            "fields": [
                {"field": "items", "type": "array", "label": "Estimate Items", "required": True,
                 "minItems": 1,
                 "properties": {
                     "product_id": {"type": "number", "required": False},
                     "name": {"type": "string", "required": True},
                     "description": {"type": "string", "required": False},
                     "quantity": {"type": "number", "required": True, "min": 1},
                     "unit_price": {"type": "decimal", "required": True, "min": 0},
                     "discount": {"type": "decimal", "required": False, "min": 0},
                     "tax_rate": {"type": "decimal", "required": False, "min": 0, "max": 100},
                     "total": {"type": "decimal", "required": True, "min": 0},
                 }},
            ],
        },
        {
            "group": "Totals",
            "fields": [
                _total_field("subtotal", "Subtotal"),
                _total_field("total_cost", "Total Cost"),
                _total_field("taxable_amount", "Taxable Amount"),
                _total_field("total_tax", "Total Tax"),
                _total_field("shipping_charges", "Shipping Charges"),
                _total_field("other_charges", "Other Charges"),
                _total_field("adjustment", "Adjustment", signed=True),
                _total_field("round_off", "Round Off", signed=True),
                _total_field("grand_total", "Grand Total", required=True),
            ],
        },
        {
            "group": "Options",
            "fields": [
                {"field": "tax_inclusive", "type": "checkbox", "label": "Tax Inclusive",
                 "required": False, "default": False},
                {"field": "show_bank_details", "type": "checkbox", "label": "Show Bank Details",
                 "required": False, "default": True},
                {"field": "bank_id", "label": "Bank ID", "placeholder": "Select bank",
                 "required": False, "maxLength": 50},
                {"field": "show_signature", "type": "checkbox", "label": "Show Signature",
                 "required": False, "default": True},
                {"field": "show_upi_qr", "type": "checkbox", "label": "Show UPI QR Code",
                 "required": False, "default": True},
            ],
        },
        {
            "group": "Terms & Notes",
            "fields": [
                {"field": "terms", "type": "textarea", "label": "Terms & Conditions",
                 "placeholder": "Enter terms and conditions", "required": False},
                {"field": "notes", "type": "textarea", "label": "Notes",
                 "placeholder": "Enter additional notes", "required": False},
            ],
        },
    ]

    def __repr__(self):
        return f"<Estimate {self.number}>"
