"""Menu, health and root endpoints."""


async def test_menu_requires_authentication(client):
    response = await client.get("/api/v1/menu")

    assert response.status_code == 401


async def test_menu(client, auth_headers):
    response = await client.get("/api/v1/menu", headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Menu items retrieved successfully"
    assert body["data"][0]["name"] == "Home"
    sections = [entry["title"] for entry in body["data"] if entry["type"] == "section"]
    assert sections == ["List", "Sales", "Administration"]
    paths = [item["path"] for entry in body["data"] if entry["type"] == "section" for item in entry["items"]]
    assert "/list/products" in paths
    assert "/list/estimates" in paths


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_readiness_checks_database(client):
    response = await client.get("/health/ready")

    body = response.json()
    assert body["status"] == "healthy"
    assert body["checks"] == {"database": "healthy"}
    assert body["resources"] == 3


async def test_liveness(client):
    response = await client.get("/health/live")

    assert response.json() == {"status": "alive"}


async def test_root_lists_resources(client):
    body = (await client.get("/")).json()

    assert sorted(body["resources"]) == ["/api/v1/estimates", "/api/v1/products", "/api/v1/users"]


async def test_request_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})

    assert response.headers["X-Request-ID"] == "abc123"
