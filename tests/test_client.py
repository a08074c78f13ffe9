import pytest

from store_ratings.client import ApiError, ApiSession


@pytest.fixture
def session_for(client):
    def make(token=None):
        return ApiSession("http://testserver", token=token, http=client)
    return make


def test_sessions_hold_their_own_tokens(session_for):
    alice = session_for()
    bob = session_for()
    alice.register("alice", "alice@x.com", "password1")
    bob.register("bob", "bob@x.com", "password1")
    assert alice.token != bob.token
    assert alice.profile()["username"] == "alice"
    assert bob.profile()["username"] == "bob"


def test_login_and_logout_manage_the_token(session_for):
    session_for().register("alice", "alice@x.com", "password1")
    s = session_for()
    assert not s.authenticated
    s.login("alice@x.com", "password1")
    assert s.authenticated
    assert s.user["username"] == "alice"
    s.logout()
    assert not s.authenticated
    with pytest.raises(ApiError) as exc:
        s.profile()
    assert exc.value.status_code == 401


def test_review_flow_through_client(session_for):
    alice = session_for()
    alice.register("alice", "alice@x.com", "password1")
    store = alice.create_store("Coffee Beans", "Seattle", "Food & Beverage", description="espresso")
    review = alice.create_review(store["id"], 5, "great")
    assert review["username"] == "alice"

    assert [s["name"] for s in alice.search_stores("coffee")] == ["Coffee Beans"]
    assert alice.stores_by_category("Food & Beverage")[0]["review_count"] == 1
    assert alice.get_store(store["id"])["store"]["average_rating"] == 5.0

    with pytest.raises(ApiError) as exc:
        alice.create_review(store["id"], 4)
    assert exc.value.status_code == 400
    assert exc.value.message == "You have already reviewed this store"

    bob = session_for()
    bob.register("bob", "bob@x.com", "password1")
    with pytest.raises(ApiError) as exc:
        bob.update_review(review["id"], rating=1)
    assert exc.value.status_code == 403

    assert alice.update_review(review["id"], comment="still great")["rating"] == 5
    listing = bob.store_reviews(store["id"])
    assert listing["rating_stats"]["five_star"] == 1
    alice.delete_review(review["id"])
    assert bob.store_reviews(store["id"])["data"] == []


def test_validation_errors_surface_field_messages(session_for):
    with pytest.raises(ApiError) as exc:
        session_for().register("al", "bad", "short")
    assert exc.value.status_code == 400
    assert set(exc.value.errors) == {"username", "email", "password"}
