"""Schema and column metadata: declarations, generation and endpoints."""
import pytest
from sqlalchemy import Boolean, Column, Integer, Numeric, String, Text

from app.core.database import Base
from app.core.resources import ResourceRegistry, api_resource, pluralize, registry, resource_uri_for
from app.models import Estimate, Product, User
from app.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from app.services.metadata import (
    detect_field_type, generate_columns, generate_schema, normalize_columns, normalize_schema
)


class Gadget(Base):
    """Table without any declared metadata."""

    __tablename__ = "test_gadgets"

    id = Column(Integer, primary_key=True)
    name = Column(String(120), nullable=False)
    contact_email = Column(String(255))
    unit_price = Column(Numeric(10, 2))
    discount_rate = Column(Numeric(5, 2))
    stock_quantity = Column(Integer, default=0, nullable=False)
    notes = Column(Text)
    enabled = Column(Boolean, default=True)


def test_pluralize_and_uri():
    assert pluralize("product") == "products"
    assert pluralize("category") == "categories"
    assert pluralize("box") == "boxes"
    assert resource_uri_for("SalesOrder") == "sales-orders"
    assert resource_uri_for("Estimate") == "estimates"


def test_normalize_columns_fills_defaults():
    columns = normalize_columns([
        {"field": "unit_price", "format": "currency"},
        {"field": "enabled", "format": "boolean", "sortable": True},
    ])

    assert columns[0] == {
        "field": "unit_price",
        "label": "Unit Price",
        "sortable": False,
        "clickable": False,
        "search": False,
        "format": "currency",
        "align": "right",
    }
    assert columns[1]["align"] == "center"
    assert columns[1]["sortable"] is True


@pytest.mark.parametrize("columns", [
    [{"label": "No field"}],
    [{"field": "name"}, {"field": "name"}],
    [{"field": "name", "format": "money"}],
])
def test_normalize_columns_rejects_bad_declarations(columns):
    with pytest.raises(ValueError):
        normalize_columns(columns)


def test_normalize_schema_defaults_type_and_label():
    groups = normalize_schema([{"group": "Main", "fields": [{"field": "tax_rate", "required": True}]}])

    field = groups[0]["fields"][0]
    assert field["type"] == "string"
    assert field["label"] == "Tax Rate"
    assert field["required"] is True


@pytest.mark.parametrize("groups", [
    [{"group": "Main", "fields": [{"field": "x", "type": "colour"}]}],
    [{"group": "Main", "fields": [{"field": "x", "tooltip": "?"}]}],
    [{"group": "Main", "fields": [{"field": "x", "min": "0"}]}],
    [{"group": "Main", "fields": [{"field": "x", "required": "yes"}]}],
    [{"group": "A", "fields": [{"field": "x"}]}, {"group": "B", "fields": [{"field": "x"}]}],
    [{"fields": []}],
])
def test_normalize_schema_rejects_bad_declarations(groups):
    with pytest.raises(ValueError):
        normalize_schema(groups)


def test_detect_field_type():
    columns = Gadget.__table__.columns
    assert detect_field_type(columns["name"]) == "string"
    assert detect_field_type(columns["contact_email"]) == "email"
    assert detect_field_type(columns["unit_price"]) == "decimal"
    assert detect_field_type(columns["discount_rate"]) == "percentage"
    assert detect_field_type(columns["stock_quantity"]) == "number"
    assert detect_field_type(columns["notes"]) == "textarea"
    assert detect_field_type(columns["enabled"]) == "checkbox"


def test_generate_schema_skips_system_fields():
    groups = generate_schema(Gadget)

    assert len(groups) == 1
    assert groups[0]["group"] == "General"
    fields = {field["field"]: field for field in groups[0]["fields"]}
    assert "id" not in fields
    assert fields["name"]["required"] is True
    assert fields["name"]["maxLength"] == 120
    assert fields["stock_quantity"]["required"] is False
    assert fields["unit_price"]["prefix"] == "₹"
    assert fields["discount_rate"]["max"] == 100


def test_generate_schema_skips_hidden_fields():
    fields = [field["field"] for field in generate_schema(User)[0]["fields"]]

    assert "password" not in fields
    assert "created_at" not in fields
    assert fields[:3] == ["name", "username", "email"]


def test_generate_columns_starts_with_id():
    columns = generate_columns(Gadget)

    assert [column["field"] for column in columns] == ["id", "name"]
    assert columns[1]["search"] is True


def test_registry_rejects_a_second_model_on_the_same_path():
    registry = ResourceRegistry()
    decorate = api_resource(
        uri="things",
        create_schema=ProductCreate,
        update_schema=ProductUpdate,
        response_schema=ProductResponse,
        target=registry,
    )

    class Thing:
        index_columns = [{"field": "name", "search": True}]

    class OtherThing:
        pass

    decorate(Thing)
    assert "/api/v1/things" in registry
    assert Thing.__resource__.columns[0]["label"] == "Name"
    assert len(registry) == 1

    with pytest.raises(ValueError):
        decorate(OtherThing)


def test_registered_resources():
    assert Product.__resource__.path == "/api/v1/products"
    assert Product.__resource__.soft_deletes is False
    assert Estimate.__resource__.soft_deletes is True
    assert registry.get("users").model is User


async def test_schema_endpoint(client, auth_headers):
    response = await client.get("/api/v1/products/schema", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Schema retrieved successfully"
    general = body["data"][0]
    assert general["group"] == "General Information"
    name = next(field for field in general["fields"] if field["field"] == "name")
    assert name["type"] == "string"
    assert name["required"] is True


async def test_columns_endpoint(client, auth_headers):
    response = await client.get("/api/v1/estimates/columns", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Columns retrieved successfully"
    assert body["data"] == body["columns"]
    validity = next(column for column in body["data"] if column["field"] == "validity")
    assert validity["align"] == "center"
    assert validity["format"] == "number"


async def test_user_schema_never_includes_password_values(client, user, auth_headers):
    body = (await client.get("/api/v1/users", headers=auth_headers)).json()

    assert all("password" not in item for item in body["data"])
    security = next(group for group in body["schema"] if group["group"] == "Security")
    assert security["fields"][0]["type"] == "password"
