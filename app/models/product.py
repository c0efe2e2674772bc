"""Product model."""
import re
from decimal import Decimal
from sqlalchemy import (
    JSON, Column, Integer, String, Text, Numeric, Boolean, DateTime, Index
)

from app.core.database import Base, utcnow
from app.core.resources import api_resource
from app.models.mixins import ResourceMixin
from app.schemas.product import (
    ProductCreate, ProductResponse, ProductType, ProductUpdate, PublicationStatus
)

ZERO = Decimal("0.00")


def slugify(value: str) -> str:
    """Lowercase letters and digits, runs of anything else collapsed to one hyphen."""
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")[:250]


def _money_field(field: str, label: str, **extra) -> dict:
    return {
        "field": field,
        "type": "decimal",
        "label": label,
        "placeholder": "0.00",
        "required": False,
        "default": 0.00,
        "min": 0,
        "step": 0.01,
        **extra,
    }


def _dimension_field(field: str, label: str, suffix: str) -> dict:
    return {
        "field": field,
        "type": "decimal",
        "label": label,
        "placeholder": "0.00",
        "required": False,
        "min": 0,
        "step": 0.01,
        "suffix": suffix,
    }


@api_resource(
    uri="products",
    create_schema=ProductCreate,
    update_schema=ProductUpdate,
    response_schema=ProductResponse,
)
class Product(ResourceMixin, Base):
    """Product model."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    type = Column(String(20), default=ProductType.SIMPLE.value, nullable=False)
    publication_status = Column(String(20), default=PublicationStatus.DRAFT.value, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    description = Column(Text)
    short_description = Column(Text)
    sku = Column(String(100), unique=True)
    barcode = Column(String(100))
    brand = Column(String(255), default="ASENSAR", nullable=False)

    # Pricing
    cost = Column(Numeric(10, 2), default=ZERO, nullable=False)
    mrp = Column(Numeric(10, 2), default=ZERO, nullable=False)
    price = Column(Numeric(10, 2), default=ZERO, nullable=False, index=True)
    sale_price = Column(Numeric(10, 2), default=ZERO, nullable=False)

    # Tax
    taxable = Column(Boolean, default=True, nullable=False)
    tax_hsn_code = Column(String(20))
    tax_rate = Column(Numeric(5, 2), default=Decimal("18.00"), nullable=False)
    tax_inclusive = Column(Boolean, default=True, nullable=False)

    # Stock
    stock_track = Column(Boolean, default=False, nullable=False)
    stock_quantity = Column(Integer, default=0, nullable=False)
    stock_low_threshold = Column(Integer, default=0, nullable=False)

    # Dimensions
    length = Column(Numeric(8, 2))
    width = Column(Numeric(8, 2))
    height = Column(Numeric(8, 2))
    weight = Column(Numeric(8, 2))
    unit = Column(String(20), default="nos", nullable=False)

    # Shipping
    shipping_weight = Column(Numeric(8, 2))
    shipping_required = Column(Boolean, default=True, nullable=False)
    shipping_taxable = Column(Boolean, default=True, nullable=False)
    shipping_class_id = Column(Integer, default=0, nullable=False)

    # Media
    image = Column(String(500))
    images = Column(JSON)
    external_url = Column(String(500))

    # Catalogue relations
    categories = Column(JSON)
    tags = Column(JSON)
    attributes = Column(JSON)
    variations = Column(JSON)
    meta_data = Column(JSON)
    related_ids = Column(JSON)
    upsell_ids = Column(JSON)
    cross_sell_ids = Column(JSON)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_product_publication_active", "publication_status", "active"),
    )

    database_defaults = {
        "type": ProductType.SIMPLE.value,
        "publication_status": PublicationStatus.DRAFT.value,
        "active": True,
        "brand": "ASENSAR",
        "cost": 0.00,
        "mrp": 0.00,
        "price": 0.00,
        "sale_price": 0.00,
        "taxable": True,
        "tax_rate": 18.00,
        "tax_inclusive": True,
        "stock_track": False,
        "stock_quantity": 0,
        "stock_low_threshold": 0,
        "unit": "nos",
        "shipping_required": True,
        "shipping_taxable": True,
        "shipping_class_id": 0,
    }

    index_columns = [
        {"field": "name", "label": "Product Name", "sortable": True, "clickable": True, "search": True},
        {"field": "cost", "label": "Cost", "format": "currency"},
        {"field": "price", "label": "Price", "sortable": True, "format": "currency"},
        {"field": "mrp", "label": "MRP", "format": "currency"},
        {"field": "stock_quantity", "label": "Stock", "sortable": True, "format": "number"},
    ]

    api_schema = [
        {
            "group": "General Information",
            "fields": [
                {"field": "active", "type": "checkbox", "label": "Active",
                 "required": False, "default": True},
                {"field": "name", "label": "Product Name", "placeholder": "Enter product name",
                 "required": True, "maxLength": 255},
                {"field": "slug", "label": "URL Slug", "placeholder": "auto-generated-from-name",
                 "required": False, "maxLength": 255, "unique": True},
                {"field": "type", "type": "select", "label": "Product Type", "default": "simple",
                 "options": [
                     {"value": "simple", "label": "Simple Product"},
                     {"value": "variable", "label": "Variable Product"},
                     {"value": "grouped", "label": "Grouped Product"},
                     {"value": "external", "label": "External Product"},
                 ]},
                {"field": "publication_status", "type": "select", "label": "Publication Status",
                 "default": "draft",
                 "options": [
                     {"value": "draft", "label": "Draft"},
                     {"value": "published", "label": "Published"},
                     {"value": "discontinued", "label": "Discontinued"},
                     {"value": "private", "label": "Private"},
                 ]},
                {"field": "sku", "label": "SKU", "placeholder": "Enter SKU",
                 "required": False, "maxLength": 100, "unique": True},
                {"field": "barcode", "label": "Barcode", "placeholder": "Enter barcode",
                 "required": False, "maxLength": 100},
                {"field": "brand", "label": "Brand", "placeholder": "Enter brand",
                 "required": False, "default": "ASENSAR", "maxLength": 255},
            ],
        },
        {
            "group": "Price & Inventory",
            "fields": [
                _money_field("cost", "Cost Price", prefix="₹"),
                _money_field("mrp", "MRP", prefix="₹"),
                _money_field("price", "Regular Price", prefix="₹", required=True),
                _money_field("sale_price", "Sale Price", prefix="₹"),
                {"field": "stock_track", "type": "checkbox", "label": "Track Stock",
                 "required": False, "default": False},
                {"field": "stock_quantity", "type": "number", "label": "Stock Quantity",
                 "placeholder": "0", "required": False, "default": 0, "step": 1},
                {"field": "stock_low_threshold", "type": "number", "label": "Low Stock Threshold",
                 "placeholder": "5", "required": False, "default": 0, "min": 0, "step": 1},
            ],
        },
        {
            "group": "TAX",
            "fields": [
                {"field": "taxable", "type": "checkbox", "label": "Taxable",
                 "required": False, "default": True},
                {"field": "tax_hsn_code", "label": "HSN Code", "placeholder": "Enter HSN code",
                 "required": False, "maxLength": 20},
                {"field": "tax_rate", "type": "percentage", "label": "Tax Rate (%)",
                 "placeholder": "18.00", "required": False, "default": 18.00,
                 "min": 0, "max": 100, "step": 0.01, "suffix": "%"},
                {"field": "tax_inclusive", "type": "checkbox", "label": "Tax Inclusive",
                 "required": False, "default": True},
            ],
        },
        {
            "group": "Shipping",
            "fields": [
                _dimension_field("length", "Length", "cm"),
                _dimension_field("width", "Width", "cm"),
                _dimension_field("height", "Height", "cm"),
                _dimension_field("weight", "Weight", "kg"),
                {"field": "unit", "label": "Unit", "placeholder": "nos",
                 "required": False, "default": "nos", "maxLength": 20},
                _dimension_field("shipping_weight", "Shipping Weight", "kg"),
                {"field": "shipping_required", "type": "checkbox", "label": "Shipping Required",
                 "required": False, "default": True},
                {"field": "shipping_taxable", "type": "checkbox", "label": "Shipping Taxable",
                 "required": False, "default": True},
                {"field": "shipping_class_id", "type": "number", "label": "Shipping Class ID",
                 "placeholder": "0", "required": False, "default": 0, "min": 0, "step": 1},
            ],
        },
        {
            "group": "Other",
            "fields": [
                {"field": "description", "type": "textarea", "label": "Description",
                 "placeholder": "Enter product description", "required": False,
                 "attributes": {"rows": 4}},
                {"field": "short_description", "type": "textarea", "label": "Short Description",
                 "placeholder": "Enter brief description", "required": False,
                 "attributes": {"rows": 2}},
                {"field": "image", "type": "image", "label": "Image", "required": False,
                 "accept": "image/*"},
                {"field": "external_url", "type": "url", "label": "External URL", "required": False},
                {"field": "tags", "type": "tags", "label": "Tags",
                 "placeholder": "Enter tags separated by commas", "required": False},
                {"field": "attributes", "type": "array", "label": "Attributes", "required": False},
                {"field": "variations", "type": "array", "label": "Variations", "required": False},
                {"field": "related_ids", "type": "array", "label": "Related Ids", "required": False},
                {"field": "upsell_ids", "type": "array", "label": "Upsell Ids", "required": False},
                {"field": "cross_sell_ids", "type": "array", "label": "Cross Sell Ids", "required": False},
                {"field": "meta_data", "type": "array", "label": "Meta Data", "required": False},
            ],
        },
    ]

    @classmethod
    def prepare_data(cls, data: dict, is_update: bool = False) -> dict:
        """Derive the slug from the name when none is given."""
        if not is_update and not data.get("slug"):
            data["slug"] = slugify(data["name"])
        return data

    @property
    def effective_price(self) -> Decimal:
        """Sale price when one is set, otherwise the regular price."""
        sale_price = self.sale_price or ZERO
        return sale_price if sale_price > 0 else (self.price or ZERO)

    @property
    def discount_percentage(self) -> float:
        price = self.price or ZERO
        sale_price = self.sale_price or ZERO
        if sale_price <= 0 or price <= 0:
            return 0.0
        return round(float((price - sale_price) / price * 100), 2)

    @property
    def in_stock(self) -> bool:
        if not self.stock_track:
            return True
        return (self.stock_quantity or 0) > 0

    @property
    def low_stock(self) -> bool:
        if not self.stock_track:
            return False
        return (self.stock_quantity or 0) <= (self.stock_low_threshold or 0)

    def __repr__(self):
        return f"<Product {self.name}>"
