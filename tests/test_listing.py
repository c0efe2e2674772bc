"""Index endpoint: search, filter, sort and pagination."""
from decimal import Decimal

from tests.factories import create_estimate, create_product, create_products

PRODUCTS = "/api/v1/products"
ESTIMATES = "/api/v1/estimates"


def messages(body: dict) -> list[str]:
    return [n["message"] for n in body["notifications"] or []]


async def test_list_envelope_shape(client, db, auth_headers):
    await create_products(db, 3)

    response = await client.get(PRODUCTS, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {
        "success", "message", "data", "pagination", "search", "sort",
        "filters", "schema", "columns", "notifications",
    }
    assert body["message"] == "Resources retrieved successfully"
    assert len(body["data"]) == 3
    assert body["search"] is None
    assert body["sort"] is None
    assert body["filters"] is None
    assert body["notifications"] is None
    assert [group["group"] for group in body["schema"]] == [
        "General Information", "Price & Inventory", "TAX", "Shipping", "Other",
    ]
    assert [column["field"] for column in body["columns"]] == [
        "name", "cost", "price", "mrp", "stock_quantity",
    ]


async def test_default_order_is_id_ascending(client, db, auth_headers):
    products = await create_products(db, 4)

    body = (await client.get(PRODUCTS, headers=auth_headers)).json()

    assert [item["id"] for item in body["data"]] == [p.id for p in products]


async def test_pagination_metadata(client, db, auth_headers):
    await create_products(db, 7)

    body = (await client.get(f"{PRODUCTS}?page=2&per_page=3&sort=name", headers=auth_headers)).json()

    pagination = body["pagination"]
    assert pagination["totalItems"] == 7
    assert pagination["currentPage"] == 2
    assert pagination["itemsPerPage"] == 3
    assert pagination["totalPages"] == 3
    assert pagination["nextPage"] == "3"
    assert pagination["prevPage"] == "1"
    assert pagination["urlPath"] == "http://test/api/v1/products"
    assert pagination["urlQuery"] == "sort=name"
    assert len(body["data"]) == 3


async def test_empty_listing(client, auth_headers):
    body = (await client.get(f"{PRODUCTS}?page=4", headers=auth_headers)).json()

    assert body["data"] == []
    assert body["pagination"]["totalItems"] == 0
    assert body["pagination"]["currentPage"] == 1
    assert body["pagination"]["totalPages"] == 1
    assert body["pagination"]["urlQuery"] is None
    assert body["notifications"] is None


async def test_page_past_the_end_is_clamped(client, db, auth_headers):
    await create_products(db, 4)

    body = (await client.get(f"{PRODUCTS}?page=9&per_page=2", headers=auth_headers)).json()

    assert body["pagination"]["currentPage"] == 2
    assert body["pagination"]["nextPage"] is None
    assert messages(body) == ["Requested page 9 exceeds available pages. Showing page 2."]


async def test_invalid_page_and_size_fall_back_with_notifications(client, db, auth_headers):
    await create_products(db, 2)

    body = (await client.get(f"{PRODUCTS}?page=zero&per_page=500", headers=auth_headers)).json()

    assert body["pagination"]["currentPage"] == 1
    assert body["pagination"]["itemsPerPage"] == 100
    assert messages(body) == [
        "Invalid page number, using page 1",
        "Page size exceeds maximum of 100, using maximum 100.",
    ]
    assert all(n["type"] == "warning" for n in body["notifications"])


async def test_search_matches_flagged_columns(client, db, auth_headers):
    await create_product(db, name="Blue Ceramic Mug")
    await create_product(db, name="Red Ceramic Plate")
    await create_product(db, name="Steel Spoon")

    body = (await client.get(f"{PRODUCTS}?search=ceramic", headers=auth_headers)).json()

    assert body["search"] == "ceramic"
    assert sorted(item["name"] for item in body["data"]) == ["Blue Ceramic Mug", "Red Ceramic Plate"]


async def test_short_search_is_ignored(client, db, auth_headers):
    await create_products(db, 2)

    body = (await client.get(f"{PRODUCTS}?search=a", headers=auth_headers)).json()

    assert body["search"] is None
    assert len(body["data"]) == 2
    assert messages(body) == ["Search term too short (minimum 2 characters), search ignored"]


async def test_search_treats_wildcards_literally(client, db, auth_headers):
    await create_product(db, name="100% Cotton Towel")
    await create_product(db, name="Cotton Sheet")

    body = (await client.get(PRODUCTS, params={"search": "0% C"}, headers=auth_headers)).json()

    assert [item["name"] for item in body["data"]] == ["100% Cotton Towel"]


async def test_sort_descending(client, db, auth_headers):
    await create_product(db, name="Alpha", price=Decimal("30.00"))
    await create_product(db, name="Bravo", price=Decimal("10.00"))
    await create_product(db, name="Charlie", price=Decimal("20.00"))

    body = (await client.get(f"{PRODUCTS}?sort=price&dir=DESC", headers=auth_headers)).json()

    assert body["sort"] == {"column": "price", "dir": "desc"}
    assert [item["name"] for item in body["data"]] == ["Alpha", "Charlie", "Bravo"]


async def test_unknown_sort_column_falls_back_to_id(client, db, auth_headers):
    await create_products(db, 2)

    body = (await client.get(f"{PRODUCTS}?sort=cost&dir=sideways", headers=auth_headers)).json()

    assert body["sort"] == {"column": "id", "dir": "asc"}
    assert messages(body) == [
        "Sort column 'cost' not found, using default 'id'",
        "Sort direction 'sideways' not recognized, using 'asc'",
    ]


async def test_bad_direction_without_sort_column_is_reported(client, db, auth_headers):
    products = await create_products(db, 3)

    body = (await client.get(f"{PRODUCTS}?dir=sideways", headers=auth_headers)).json()

    assert body["sort"] is None
    assert [item["id"] for item in body["data"]] == [p.id for p in products]
    assert body["notifications"] == [
        {"type": "warning", "message": "Sort direction 'sideways' not recognized, using 'asc'"}
    ]


async def test_filter_on_declared_field(client, db, auth_headers):
    await create_estimate(db, status="SENT")
    await create_estimate(db, status="DRAFT")
    await create_estimate(db, status="SENT")

    body = (await client.get(f"{ESTIMATES}?filter=status:SENT", headers=auth_headers)).json()

    assert len(body["data"]) == 2
    assert all(item["status"] == "SENT" for item in body["data"])
    filters = body["filters"]
    assert filters["applied"] == {"field": "status", "value": "SENT"}
    assert [f["field"] for f in filters["available"]] == ["status", "channel"]
    assert filters["available"][1]["values"] == ["Online", "Offline"]


async def test_filter_all_means_no_filter(client, db, auth_headers):
    await create_estimate(db, status="SENT")
    await create_estimate(db, status="DRAFT")

    body = (await client.get(f"{ESTIMATES}?filter=status:all", headers=auth_headers)).json()

    assert len(body["data"]) == 2
    assert body["filters"]["applied"] is None
    assert body["notifications"] is None


async def test_invalid_filters_are_ignored_with_notifications(client, db, auth_headers):
    await create_estimate(db)

    bad_field = (await client.get(f"{ESTIMATES}?filter=colour:red", headers=auth_headers)).json()
    assert messages(bad_field) == ["Invalid filter field: colour"]
    assert len(bad_field["data"]) == 1

    bad_value = (await client.get(f"{ESTIMATES}?filter=status:LOST", headers=auth_headers)).json()
    assert messages(bad_value) == ["Invalid filter value 'LOST' for field 'status'"]

    bad_format = (await client.get(f"{ESTIMATES}?filter=status", headers=auth_headers)).json()
    assert messages(bad_format) == ["Filter format 'status' not recognized, filter ignored"]


async def test_filter_on_resource_without_filters(client, db, auth_headers):
    await create_products(db, 1)

    body = (await client.get(f"{PRODUCTS}?filter=brand:ASENSAR", headers=auth_headers)).json()

    assert body["filters"] is None
    assert messages(body) == ["Filtering is not supported for this resource"]


async def test_search_filter_and_sort_combine(client, db, auth_headers):
    await create_estimate(db, number="EST-2001", status="SENT", salesperson="Meera")
    await create_estimate(db, number="EST-2002", status="SENT", salesperson="Ravi")
    await create_estimate(db, number="EST-2003", status="DRAFT", salesperson="Meera")
    await create_estimate(db, number="EST-2004", status="SENT", salesperson="Meera")

    body = (await client.get(
        f"{ESTIMATES}?search=meera&filter=status:SENT&sort=number&dir=desc",
        headers=auth_headers,
    )).json()

    assert [item["number"] for item in body["data"]] == ["EST-2004", "EST-2001"]
    assert body["pagination"]["urlQuery"] == "search=meera&filter=status%3ASENT&sort=number&dir=desc"
