"""Integration tests for the HTTP API."""

import pytest
from httpx import AsyncClient

from tests.conftest import register_user


async def create_element(client: AsyncClient, admin: dict, width: int, height: int) -> int:
    resp = await client.post("/api/admin/elements", json={
        "image_url": f"/sprites/{width}x{height}.png",
        "width": width,
        "height": height,
        "is_static": True,
    }, headers=admin["headers"])
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


async def create_space(client: AsyncClient, user: dict, width: int, height: int, name: str = "Room") -> int:
    resp = await client.post("/api/spaces/", json={
        "name": name, "width": width, "height": height,
    }, headers=user["headers"])
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_detailed_health(client: AsyncClient):
    resp = await client.get("/api/health/detailed")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["services"]["database"] == "healthy"


@pytest.mark.asyncio
async def test_maps_require_authentication(client: AsyncClient):
    resp = await client.get("/api/maps/")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_admin_routes_reject_users(client: AsyncClient):
    user = await register_user(client, "alice")
    resp = await client.post("/api/admin/elements", json={
        "image_url": "/x.png", "width": 1, "height": 1,
    }, headers=user["headers"])
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_catalog_listing(client: AsyncClient):
    admin = await register_user(client, "admin", role="admin")
    element_id = await create_element(client, admin, 2, 3)

    resp = await client.get("/api/elements")
    assert resp.status_code == 200
    assert [e["id"] for e in resp.json()] == [element_id]

    resp = await client.put(f"/api/admin/elements/{element_id}", json={
        "image_url": "/new.png",
    }, headers=admin["headers"])
    assert resp.status_code == 200
    assert resp.json()["image_url"] == "/new.png"
    assert resp.json()["width"] == 2


@pytest.mark.asyncio
async def test_admin_creates_map_with_code_and_user_joins(client: AsyncClient):
    admin = await register_user(client, "admin", role="admin")
    user = await register_user(client, "alice")
    element_id = await create_element(client, admin, 1, 1)

    resp = await client.post("/api/admin/maps", json={
        "name": "Lobby",
        "width": 20,
        "height": 15,
        "default_elements": [{"element_id": element_id, "x": 3, "y": 4}],
    }, headers=admin["headers"])
    assert resp.status_code == 201, resp.text
    created = resp.json()
    assert len(created["access_code"]) == 6

    resp = await client.get(f"/api/maps/code/{created['access_code'].lower()}", headers=user["headers"])
    assert resp.status_code == 200
    assert resp.json()["id"] == created["id"]
    assert resp.json()["owner"] == "admin"

    resp = await client.post(f"/api/maps/{created['id']}/visit", headers=user["headers"])
    assert resp.status_code == 200

    resp = await client.get("/api/maps/joined", headers=user["headers"])
    joined = resp.json()
    assert [m["id"] for m in joined] == [created["id"]]
    assert joined[0]["is_owner"] is False

    resp = await client.get(f"/api/maps/{created['id']}", headers=user["headers"])
    detail = resp.json()
    assert [(e["x"], e["y"]) for e in detail["elements"]] == [(3, 4)]


@pytest.mark.asyncio
async def test_unknown_access_code(client: AsyncClient):
    user = await register_user(client, "alice")
    resp = await client.get("/api/maps/code/ZZZZZZ", headers=user["headers"])
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_clone_template_flow(client: AsyncClient):
    admin = await register_user(client, "admin", role="admin")
    user = await register_user(client, "alice")
    chair = await create_element(client, admin, 1, 1)

    resp = await client.post("/api/admin/maps", json={
        "name": "Office", "width": 20, "height": 20, "is_template": True,
    }, headers=admin["headers"])
    template = resp.json()
    assert template["access_code"] is None

    room = await create_space(client, admin, 5, 5)
    resp = await client.post(f"/api/spaces/{room}/elements", json={
        "element_id": chair, "x": 1, "y": 1,
    }, headers=admin["headers"])
    assert resp.status_code == 201
    resp = await client.post(f"/api/maps/{template['id']}/spaces", json={
        "space_id": room, "x": 0, "y": 0,
    }, headers=admin["headers"])
    assert resp.status_code == 201, resp.text

    resp = await client.get("/api/maps/templates", headers=user["headers"])
    assert [t["id"] for t in resp.json()] == [template["id"]]
    assert resp.json()[0]["creator_name"] == "admin"

    resp = await client.post(f"/api/maps/templates/{template['id']}/clone", json={
        "name": "My office",
    }, headers=user["headers"])
    assert resp.status_code == 201, resp.text
    clone = resp.json()
    assert len(clone["access_code"]) == 6

    resp = await client.get(f"/api/maps/{clone['id']}/edit", headers=user["headers"])
    assert resp.status_code == 200
    detail = resp.json()
    assert detail["template_id"] == template["id"]
    assert len(detail["map_spaces"]) == 1
    assert detail["map_spaces"][0]["space_id"] != room
    assert len(detail["map_spaces"][0]["elements"]) == 1

    # Cloning joins the new map
    resp = await client.get("/api/maps/joined", headers=user["headers"])
    assert [m["id"] for m in resp.json()] == [clone["id"]]
    assert resp.json()[0]["is_owner"] is True

    resp = await client.get("/api/maps/owned", headers=user["headers"])
    assert [m["id"] for m in resp.json()] == [clone["id"]]

    # The template is not editable by the user
    resp = await client.get(f"/api/maps/{template['id']}/edit", headers=user["headers"])
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found_or_access_denied"


@pytest.mark.asyncio
async def test_clone_unknown_template(client: AsyncClient):
    user = await register_user(client, "alice")
    resp = await client.post("/api/maps/templates/9999/clone", json={"name": "x"}, headers=user["headers"])
    assert resp.status_code == 404
    assert resp.json()["error"] == "template_not_found"


@pytest.mark.asyncio
async def test_space_placement_errors(client: AsyncClient):
    user = await register_user(client, "alice")
    big = await create_space(client, user, 4, 4, name="Big")
    huge = await create_space(client, user, 5, 5, name="Huge")
    own = await create_space(client, user, 10, 10, name="Canvas")

    resp = await client.post("/api/maps/from-space", json={"space_id": own, "name": "Canvas"},
                             headers=user["headers"])
    assert resp.status_code == 201, resp.text
    map_id = resp.json()["id"]

    resp = await client.post(f"/api/maps/{map_id}/spaces", json={"space_id": huge, "x": 6, "y": 6},
                             headers=user["headers"])
    assert resp.status_code == 400
    assert resp.json()["error"] == "out_of_bounds"

    resp = await client.post(f"/api/maps/{map_id}/spaces", json={"space_id": big, "x": 0, "y": 0},
                             headers=user["headers"])
    assert resp.status_code == 201
    placed_id = resp.json()["id"]

    resp = await client.post(f"/api/maps/{map_id}/spaces", json={"space_id": big, "x": 2, "y": 2},
                             headers=user["headers"])
    assert resp.status_code == 409
    assert resp.json()["error"] == "collides_with_space"

    resp = await client.delete(f"/api/maps/{map_id}/spaces/{placed_id}", headers=user["headers"])
    assert resp.status_code == 200

    resp = await client.post(f"/api/maps/{map_id}/spaces", json={"space_id": big, "x": 2, "y": 2},
                             headers=user["headers"])
    assert resp.status_code == 201


@pytest.mark.asyncio
async def test_foreign_map_is_hidden(client: AsyncClient):
    alice = await register_user(client, "alice")
    bob = await register_user(client, "bob")
    canvas = await create_space(client, alice, 10, 10)
    resp = await client.post("/api/maps/from-space", json={"space_id": canvas, "name": "Mine"},
                             headers=alice["headers"])
    map_id = resp.json()["id"]
    room = await create_space(client, bob, 2, 2)

    foreign = await client.post(f"/api/maps/{map_id}/spaces", json={"space_id": room, "x": 0, "y": 0},
                                headers=bob["headers"])
    missing = await client.post("/api/maps/9999/spaces", json={"space_id": room, "x": 0, "y": 0},
                                headers=bob["headers"])
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json()

    resp = await client.post("/api/maps/from-space", json={"space_id": canvas, "name": "Theft"},
                             headers=bob["headers"])
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_space_endpoints(client: AsyncClient):
    admin = await register_user(client, "admin", role="admin")
    alice = await register_user(client, "alice")
    bob = await register_user(client, "bob")
    chair = await create_element(client, admin, 1, 1)
    room = await create_space(client, alice, 5, 5, name="Study")

    resp = await client.post(f"/api/spaces/{room}/elements", json={"element_id": chair, "x": 9, "y": 0},
                             headers=alice["headers"])
    assert resp.status_code == 400
    assert resp.json()["error"] == "out_of_bounds"

    resp = await client.post(f"/api/spaces/{room}/elements", json={"element_id": chair, "x": 2, "y": 2},
                             headers=alice["headers"])
    space_element_id = resp.json()["id"]

    resp = await client.get(f"/api/spaces/{room}", headers=bob["headers"])
    assert resp.status_code == 200
    assert [e["id"] for e in resp.json()["elements"]] == [space_element_id]

    resp = await client.get("/api/spaces/all", headers=bob["headers"])
    assert [(s["name"], s["owner"], s["is_owner"]) for s in resp.json()] == [("Study", "alice", False)]

    resp = await client.delete(f"/api/spaces/elements/{space_element_id}", headers=bob["headers"])
    assert resp.status_code == 404
    resp = await client.delete(f"/api/spaces/elements/{space_element_id}", headers=alice["headers"])
    assert resp.status_code == 200

    resp = await client.delete(f"/api/spaces/{room}", headers=alice["headers"])
    assert resp.status_code == 200
    resp = await client.get("/api/spaces/", headers=alice["headers"])
    assert resp.json() == []


@pytest.mark.asyncio
async def test_space_requires_dimensions(client: AsyncClient):
    user = await register_user(client, "alice")
    resp = await client.post("/api/spaces/", json={"name": "Nothing"}, headers=user["headers"])
    assert resp.status_code == 422
