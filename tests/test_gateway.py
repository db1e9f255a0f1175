"""Transport-level tests for the Backend API gateway and the GIF provider."""

import io
import json
from email.message import Message
from urllib import error

import pytest

from kudos import gateway as gateway_module
from kudos import giphy
from kudos.errors import ApiError, MalformedPayloadError, NetworkError
from kudos.gateway import Gateway, Result, attempt
from kudos.models import Origin
from tests.test_doubles import FakeResponse

pytestmark = pytest.mark.gateway

API = "http://api.test/api"

BOARD_PAYLOAD = {
    "id": "b1",
    "title": "Team Appreciation",
    "description": None,
    "category": "celebration",
    "image": "https://media.giphy.com/media/x/giphy.gif",
    "author": "Team Lead",
    "createdAt": "2025-06-01T12:00:00.000Z",
    "likes": 2,
}


def _http_error(status, body=b""):
    return error.HTTPError(f"{API}/x", status, "error", Message(), io.BytesIO(body))


@pytest.fixture
def transport(monkeypatch):
    """Replace ``urlopen`` with a queue of canned responses/exceptions."""
    state = {"requests": [], "responses": []}

    def fake_urlopen(req, timeout=None):
        state["requests"].append((req, timeout))
        outcome = state["responses"].pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    monkeypatch.setattr(gateway_module, "urlopen", fake_urlopen)
    return state


def test_list_boards_parses_server_entities(transport):
    transport["responses"].append(FakeResponse([BOARD_PAYLOAD]))

    boards = Gateway(API).list_boards()

    req, timeout = transport["requests"][0]
    assert req.get_method() == "GET"
    assert req.full_url == f"{API}/boards"
    assert timeout is None
    assert len(boards) == 1
    assert boards[0].id == "b1"
    assert boards[0].likes == 2
    assert boards[0].origin is Origin.SERVER
    assert boards[0].created_at.year == 2025


def test_create_board_posts_json_body(transport):
    transport["responses"].append(FakeResponse(BOARD_PAYLOAD, status=201))
    data = {"title": "Team Appreciation", "category": "celebration", "image": "x"}

    board = Gateway(API + "/", timeout=5).create_board(data)

    req, timeout = transport["requests"][0]
    assert req.get_method() == "POST"
    assert req.full_url == f"{API}/boards"
    assert req.get_header("Content-type") == "application/json"
    assert json.loads(req.data) == data
    assert timeout == 5
    assert board.title == "Team Appreciation"


def test_delete_returns_true_on_no_content(transport):
    transport["responses"].append(FakeResponse(status=204))

    assert Gateway(API).delete_comment("m1") is True
    assert transport["requests"][0][0].full_url == f"{API}/comments/m1"
    assert transport["requests"][0][0].get_method() == "DELETE"


def test_endpoint_paths_and_id_quoting(transport):
    card = {
        "id": "c1", "title": "t", "image": "i", "boardId": "b 1",
        "createdAt": "2025-06-01T12:00:00Z", "votes": 1, "likes": 0,
    }
    transport["responses"].extend([FakeResponse([card]), FakeResponse(card), FakeResponse(card)])
    client = Gateway(API)

    client.list_cards("b 1")
    client.upvote_card("c1")
    client.like_card("c1")

    urls = [req.full_url for req, _ in transport["requests"]]
    assert urls == [
        f"{API}/boards/b%201/cards",
        f"{API}/cards/c1/upvote",
        f"{API}/cards/c1/like",
    ]


CARD_PAYLOAD = {
    "id": "c1", "title": "t", "image": "i", "boardId": "b1",
    "createdAt": "2025-06-01T12:00:00Z", "votes": 1, "likes": 0,
}
COMMENT_PAYLOAD = {"id": "m1", "message": "Nice", "cardId": "c1", "createdAt": "2025-06-01T12:00:00Z"}
BODY = {"title": "t", "image": "i"}


@pytest.mark.parametrize(
    "operation, args, response, method, path",
    [
        ("list_boards", (), [BOARD_PAYLOAD], "GET", "/boards"),
        ("get_board", ("b1",), BOARD_PAYLOAD, "GET", "/boards/b1"),
        ("create_board", (BODY,), BOARD_PAYLOAD, "POST", "/boards"),
        ("update_board", ("b1", BODY), BOARD_PAYLOAD, "PUT", "/boards/b1"),
        ("delete_board", ("b1",), None, "DELETE", "/boards/b1"),
        ("like_board", ("b1",), BOARD_PAYLOAD, "POST", "/boards/b1/like"),
        ("list_cards", ("b1",), [CARD_PAYLOAD], "GET", "/boards/b1/cards"),
        ("create_card", ("b1", BODY), CARD_PAYLOAD, "POST", "/boards/b1/cards"),
        ("update_card", ("c1", BODY), CARD_PAYLOAD, "PUT", "/cards/c1"),
        ("delete_card", ("c1",), None, "DELETE", "/cards/c1"),
        ("upvote_card", ("c1",), CARD_PAYLOAD, "POST", "/cards/c1/upvote"),
        ("like_card", ("c1",), CARD_PAYLOAD, "POST", "/cards/c1/like"),
        ("list_comments", ("c1",), [COMMENT_PAYLOAD], "GET", "/cards/c1/comments"),
        ("create_comment", ("c1", {"message": "Nice"}), COMMENT_PAYLOAD, "POST", "/cards/c1/comments"),
        ("delete_comment", ("m1",), None, "DELETE", "/comments/m1"),
    ],
)
def test_every_operation_targets_its_endpoint(transport, operation, args, response, method, path):
    """Ensure each gateway operation sends the documented method to the documented URL."""
    status = 204 if response is None else 200
    transport["responses"].append(FakeResponse(response, status=status))

    getattr(Gateway(API), operation)(*args)

    req, _ = transport["requests"][0]
    assert (req.get_method(), req.full_url) == (method, f"{API}{path}")
    if len(args) > 1 or (args and isinstance(args[0], dict)):
        assert json.loads(req.data) == args[-1]
    else:
        assert req.data is None


def test_non_2xx_uses_error_field_from_body(transport):
    transport["responses"].append(_http_error(404, b'{"error": "Board not found"}'))

    with pytest.raises(ApiError) as excinfo:
        Gateway(API).get_board("missing")

    assert excinfo.value.status == 404
    assert excinfo.value.message == "Board not found"


def test_non_2xx_without_error_field_uses_generic_message(transport):
    transport["responses"].append(_http_error(503, b"<html>down</html>"))

    with pytest.raises(ApiError) as excinfo:
        Gateway(API).list_boards()

    assert excinfo.value.status == 503
    assert str(excinfo.value) == "HTTP error! status: 503"


def test_transport_failure_raises_network_error(transport):
    transport["responses"].append(error.URLError(ConnectionRefusedError(111, "refused")))

    with pytest.raises(NetworkError):
        Gateway(API).list_boards()


def test_timeout_raises_network_error(transport):
    transport["responses"].append(TimeoutError("timed out"))

    with pytest.raises(NetworkError):
        Gateway(API).list_comments("c1")


@pytest.mark.parametrize(
    "body",
    [b"not json", json.dumps({"boards": []}).encode(), json.dumps([{"id": "b1"}]).encode()],
)
def test_malformed_payloads_raise(transport, body):
    transport["responses"].append(FakeResponse(body))

    with pytest.raises(MalformedPayloadError):
        Gateway(API).list_boards()


def test_attempt_captures_failures_as_results(transport):
    transport["responses"].extend([
        FakeResponse([BOARD_PAYLOAD]),
        _http_error(500, b'{"error": "Failed to fetch boards"}'),
    ])
    client = Gateway(API)

    ok = attempt(client.list_boards)
    failed = attempt(client.list_boards)

    assert ok.ok and ok.value[0].id == "b1"
    assert not failed.ok
    assert isinstance(failed.failure, ApiError)
    assert failed.value is None
    assert Result.success(3).value == 3


# GIF provider

GIPHY_BODY = {
    "data": [
        {
            "id": "g1",
            "title": "party",
            "images": {
                "fixed_height": {"url": "https://giphy.test/g1-200.gif"},
                "original": {"url": "https://giphy.test/g1.gif"},
            },
        }
    ]
}


@pytest.fixture
def gif_transport(monkeypatch):
    state = {"urls": [], "responses": []}

    def fake_urlopen(req, timeout=None):
        state["urls"].append(req.full_url)
        outcome = state["responses"].pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    monkeypatch.setattr(giphy, "urlopen", fake_urlopen)
    return state


def test_gif_search_formats_results(gif_transport):
    gif_transport["responses"].append(FakeResponse(GIPHY_BODY))

    gifs = giphy.GifProvider("key", base_url="https://giphy.test/v1/gifs").search("party", limit=5)

    assert gifs == [giphy.Gif("g1", "party", "https://giphy.test/g1-200.gif", "https://giphy.test/g1.gif")]
    url = gif_transport["urls"][0]
    assert url.startswith("https://giphy.test/v1/gifs/search?")
    assert "q=party" in url and "limit=5" in url and "rating=g" in url


def test_gif_search_blank_query_skips_request(gif_transport):
    assert giphy.GifProvider("key").search("   ") == []
    assert gif_transport["urls"] == []


@pytest.mark.parametrize(
    "outcome",
    [
        _http_error(403),
        error.URLError("offline"),
        FakeResponse({"data": [{"id": "broken"}]}),
    ],
)
def test_gif_failures_fall_back_to_palette(gif_transport, outcome):
    gif_transport["responses"].append(outcome)

    gifs = giphy.GifProvider("key").trending()

    assert [g.id for g in gifs] == [f"fallback-{i}" for i in range(6)]
    assert gifs[0].title == "Fallback GIF 1"
    assert gifs[0].url == gifs[0].original_url
    assert "/trending?" in gif_transport["urls"][0]
