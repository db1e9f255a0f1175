import psycopg
import pytest

from tests.test_doubles import FakeStore

# Backend API JSON contract: status codes, error bodies and CORS headers.
pytestmark = pytest.mark.api


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def api_client(store):
    from kudos_api import create_app

    app = create_app(test_config={"TESTING": True}, store=store)
    return app.test_client()


def test_root_welcome_and_cors_headers(api_client):
    """Ensure the API root answers with a welcome message and permissive CORS."""
    response = api_client.get("/")

    assert response.get_json() == {"message": "Welcome to Kudos Board API"}
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert "DELETE" in response.headers["Access-Control-Allow-Methods"]


def test_list_and_get_board_with_cards(api_client):
    boards = api_client.get("/api/boards")
    board = api_client.get("/api/boards/b1")

    assert boards.status_code == 200
    assert [b["id"] for b in boards.get_json()] == ["b1"]
    assert board.get_json()["cards"][0]["id"] == "c1"


def test_create_board_returns_201(api_client, store):
    payload = {"title": "Launch", "category": "feedback", "image": "https://g/3.gif"}

    response = api_client.post("/api/boards", json=payload)

    assert response.status_code == 201
    assert response.get_json()["title"] == "Launch"
    assert "b-new" in store.boards


@pytest.mark.parametrize(
    "payload, errors",
    [
        ({}, ["Title is required", "Category is required", "Image is required"]),
        (
            {"title": "x", "category": "party", "image": "i"},
            ["Category must be one of: celebration, thank you, inspiration, feedback"],
        ),
    ],
)
def test_create_board_validation_returns_400(api_client, payload, errors):
    response = api_client.post("/api/boards", json=payload)

    assert response.status_code == 400
    assert response.get_json() == {"errors": errors}


def test_update_board_and_missing_board(api_client):
    payload = {"title": "Renamed", "category": "celebration", "image": "i"}

    updated = api_client.put("/api/boards/b1", json=payload)
    missing = api_client.put("/api/boards/zz", json=payload)

    assert updated.get_json()["title"] == "Renamed"
    assert missing.status_code == 404
    assert missing.get_json() == {"error": "Board not found"}


def test_delete_returns_204_then_404(api_client):
    first = api_client.delete("/api/boards/b1")
    second = api_client.delete("/api/boards/b1")

    assert first.status_code == 204
    assert first.get_data() == b""
    assert second.status_code == 404


def test_counters_increment(api_client):
    assert api_client.post("/api/boards/b1/like").get_json()["likes"] == 1
    assert api_client.post("/api/cards/c1/upvote").get_json()["votes"] == 1
    assert api_client.post("/api/cards/c1/like").get_json()["likes"] == 1
    assert api_client.post("/api/cards/zz/upvote").status_code == 404
    assert api_client.post("/api/boards/zz/like").get_json() == {"error": "Board not found"}


def test_card_endpoints(api_client, store):
    created = api_client.post("/api/boards/b1/cards", json={"title": "Hi", "image": "i"})
    orphan = api_client.post("/api/boards/zz/cards", json={"title": "Hi", "image": "i"})
    invalid = api_client.post("/api/boards/b1/cards", json={"title": "Hi"})

    assert created.status_code == 201
    assert created.get_json()["boardId"] == "b1"
    assert orphan.status_code == 404
    assert invalid.get_json() == {"errors": ["Image is required"]}
    assert len(api_client.get("/api/boards/b1/cards").get_json()) == 2
    assert api_client.put("/api/cards/c1", json={"title": "Edited", "image": "i"}).status_code == 200
    assert api_client.delete("/api/cards/c1").status_code == 204
    assert api_client.delete("/api/cards/c1").get_json() == {"error": "Card not found"}


def test_comment_endpoints(api_client):
    created = api_client.post("/api/cards/c1/comments", json={"message": "Nice"})
    blank = api_client.post("/api/cards/c1/comments", json={"message": "  "})
    orphan = api_client.post("/api/cards/zz/comments", json={"message": "Nice"})

    assert created.status_code == 201
    assert created.get_json()["cardId"] == "c1"
    assert blank.get_json() == {"errors": ["Message is required"]}
    assert orphan.status_code == 404
    assert [c["id"] for c in api_client.get("/api/cards/c1/comments").get_json()] == ["m-new"]
    assert api_client.delete("/api/comments/m-new").status_code == 204
    assert api_client.delete("/api/comments/m-new").get_json() == {"error": "Comment not found"}


def test_store_failure_returns_500_with_message(api_client, store):
    """Ensure database failures surface as a 500 JSON error, not a traceback."""
    store.fail_with = psycopg.OperationalError("connection refused")

    response = api_client.get("/api/boards")

    assert response.status_code == 500
    assert response.get_json() == {"error": "Failed to fetch boards"}
    assert response.headers["Access-Control-Allow-Origin"] == "*"
