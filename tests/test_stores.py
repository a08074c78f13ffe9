from sqlalchemy import create_engine, text

from conftest import DB_PATH, auth_header, create_store, register


def _review(client, token, store_id, rating, comment="ok"):
    r = client.post(
        "/api/reviews",
        json={"store_id": store_id, "rating": rating, "comment": comment},
        headers=auth_header(token),
    )
    assert r.status_code == 201, r.text
    return r.json()["data"]


def test_store_without_reviews_has_null_average_and_zero_count(client, alice):
    store = create_store(client, alice["token"])
    assert store["created_by"] == alice["user"]["id"]

    listed = client.get("/api/stores").json()["data"]
    assert len(listed) == 1
    assert listed[0]["average_rating"] is None
    assert listed[0]["review_count"] == 0


def test_average_rating_is_rounded_to_one_decimal(client, alice, bob):
    carol = register(client, "carol")
    store = create_store(client, alice["token"])
    _review(client, alice["token"], store["id"], 5)
    _review(client, bob["token"], store["id"], 4)
    _review(client, carol["token"], store["id"], 4)

    detail = client.get(f"/api/stores/{store['id']}").json()["data"]
    assert detail["store"]["review_count"] == 3
    assert detail["store"]["average_rating"] == 4.3
    assert len(detail["recent_reviews"]) == 3
    assert {r["username"] for r in detail["recent_reviews"]} == {"alice", "bob", "carol"}


def test_store_detail_for_unknown_id_is_404(client):
    r = client.get("/api/stores/999")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Store not found"}


def test_create_store_requires_name_address_category(client, alice):
    r = client.post("/api/stores", data={"name": "Only a name"}, headers=auth_header(alice["token"]))
    assert r.status_code == 400
    body = r.json()
    assert body["message"] == "Name, address, and category are required"
    assert set(body["errors"]) == {"address", "category"}


def test_create_store_requires_authentication(client):
    r = client.post("/api/stores", data={"name": "x", "address": "y", "category": "z"})
    assert r.status_code == 401


def test_search_is_case_insensitive_across_name_category_address(client, alice):
    create_store(client, alice["token"], name="Book Corner", category="Books", address="Chicago")
    create_store(client, alice["token"], name="Coffee Beans", category="Food", address="Seattle")
    create_store(client, alice["token"], name="Fashion Hub", category="Clothing", address="Los Angeles")

    def names(q):
        return [s["name"] for s in client.get(f"/api/stores/search/{q}").json()["data"]]

    assert names("book") == ["Book Corner"]
    assert names("SEATTLE") == ["Coffee Beans"]
    assert names("cloth") == ["Fashion Hub"]
    assert names("o") == ["Book Corner", "Coffee Beans", "Fashion Hub"]
    assert names("nothing-here") == []


def test_category_listing_orders_by_average_rating(client, alice, bob):
    low = create_store(client, alice["token"], name="Low", category="Books")
    high = create_store(client, alice["token"], name="High", category="Books")
    create_store(client, alice["token"], name="Unrated", category="Books")
    create_store(client, alice["token"], name="Elsewhere", category="Grocery")
    _review(client, alice["token"], low["id"], 2)
    _review(client, alice["token"], high["id"], 5)
    _review(client, bob["token"], high["id"], 4)

    listed = client.get("/api/stores/category/Books").json()["data"]
    assert [s["name"] for s in listed] == ["High", "Low", "Unrated"]
    assert listed[0]["average_rating"] == 4.5


def test_update_store_keeps_fields_that_were_not_sent(client, alice, bob):
    store = create_store(client, alice["token"], description="old description")
    # any authenticated user may edit a store
    r = client.put(f"/api/stores/{store['id']}", data={"name": "Renamed"}, headers=auth_header(bob["token"]))
    assert r.status_code == 200
    updated = r.json()["data"]
    assert updated["name"] == "Renamed"
    assert updated["description"] == "old description"
    assert updated["address"] == store["address"]


def test_update_store_stamps_updated_at_even_without_changes(client, alice):
    store = create_store(client, alice["token"])
    eng = create_engine(f"sqlite:///{DB_PATH}")
    with eng.begin() as conn:
        conn.execute(text("UPDATE stores SET updated_at = '2000-01-01 00:00:00' WHERE id = :id"), {"id": store["id"]})
    eng.dispose()

    r = client.put(f"/api/stores/{store['id']}", data={"name": store["name"]}, headers=auth_header(alice["token"]))
    assert r.status_code == 200
    assert not r.json()["data"]["updated_at"].startswith("2000-01-01")


def test_update_unknown_store_is_404(client, alice):
    r = client.put("/api/stores/42", data={"name": "x"}, headers=auth_header(alice["token"]))
    assert r.status_code == 404


def test_deleting_store_removes_its_reviews(client, alice, bob):
    store = create_store(client, alice["token"])
    ids = [
        _review(client, alice["token"], store["id"], 5)["id"],
        _review(client, bob["token"], store["id"], 3)["id"],
    ]

    r = client.delete(f"/api/stores/{store['id']}", headers=auth_header(bob["token"]))
    assert r.status_code == 200
    assert r.json()["message"] == "Store deleted successfully"

    for review_id in ids:
        assert client.get(f"/api/reviews/{review_id}").status_code == 404
    assert client.get("/api/reviews").json()["pagination"]["total_reviews"] == 0
    assert client.delete(f"/api/stores/{store['id']}", headers=auth_header(bob["token"])).status_code == 404


def test_store_image_upload_is_served(client, alice):
    png = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
    r = client.post(
        "/api/stores",
        data={"name": "Pic Shop", "address": "2 Side St", "category": "Retail"},
        files={"image": ("shop.png", png, "image/png")},
        headers=auth_header(alice["token"]),
    )
    assert r.status_code == 201, r.text
    image_url = r.json()["data"]["image_url"]
    assert image_url.startswith("/uploads/") and image_url.endswith(".png")

    served = client.get(image_url)
    assert served.status_code == 200
    assert served.content == png


def test_store_image_must_be_an_image(client, alice):
    r = client.post(
        "/api/stores",
        data={"name": "Doc Shop", "address": "3 Side St", "category": "Retail"},
        files={"image": ("notes.txt", b"hello", "text/plain")},
        headers=auth_header(alice["token"]),
    )
    assert r.status_code == 400
    assert "image" in r.json()["errors"]
