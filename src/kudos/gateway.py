"""HTTP client for the Kudos Board Backend API.

Every operation maps to one REST endpoint and either returns parsed entities
or raises one of :class:`~kudos.errors.NetworkError`,
:class:`~kudos.errors.ApiError` or :class:`~kudos.errors.MalformedPayloadError`.
The gateway never retries; callers decide what a failure means.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any
from urllib import error, request
from urllib.parse import quote
from urllib.request import urlopen

from kudos.errors import ApiError, KudosError, MalformedPayloadError, NetworkError
from kudos.models import Board, Card, Comment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Result:
    """Outcome of a gateway call: exactly one of ``value`` or ``failure`` is meaningful."""

    value: Any = None
    failure: KudosError | None = None

    @property
    def ok(self):
        return self.failure is None

    @classmethod
    def success(cls, value):
        return cls(value=value)

    @classmethod
    def failed(cls, failure):
        return cls(failure=failure)


def _error_message(exc):
    """Extract the ``error`` field from an HTTP error body, if there is one."""
    try:
        body = json.loads(exc.read() or b"{}")
    except (ValueError, OSError):
        return None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return None


def _parse_list(payload, model):
    if not isinstance(payload, list):
        raise MalformedPayloadError(f"Expected a JSON array, got {type(payload).__name__}")
    return [model.from_payload(item) for item in payload]


def attempt(operation, *args, **kwargs):
    """Run one gateway operation and capture its failure as a :class:`Result`.

    :param operation: Bound gateway method, e.g. ``gateway.list_boards``.
    :type operation: collections.abc.Callable
    :returns: Successful or failed result; never raises ``KudosError``.
    :rtype: Result
    """
    try:
        return Result.success(operation(*args, **kwargs))
    except KudosError as exc:
        logger.warning("%s failed: %s", getattr(operation, "__name__", operation), exc)
        return Result.failed(exc)


class Gateway:
    """Thin wrapper around the Backend API's REST surface.

    :param base_url: API root, e.g. ``http://localhost:3000/api``.
    :type base_url: str
    :param timeout: Optional socket timeout in seconds; ``None`` waits forever.
    :type timeout: float | None
    """

    def __init__(self, base_url, timeout=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _url(self, *segments):
        return "/".join([self.base_url, *(quote(str(s), safe="") for s in segments)])

    def _send(self, method, url, payload=None, expect_body=True):
        headers = {"Accept": "application/json"}
        data = None
        if payload is not None:
            headers["Content-Type"] = "application/json"
            data = json.dumps(payload).encode("utf-8")
        req = request.Request(url, data=data, headers=headers, method=method)

        try:
            with urlopen(req, timeout=self.timeout) as response:
                status = response.status
                content = response.read()
        except error.HTTPError as exc:
            raise ApiError(exc.code, _error_message(exc)) from exc
        except (error.URLError, TimeoutError, ConnectionError, OSError) as exc:
            raise NetworkError(f"{method} {url} failed: {exc}") from exc

        if not 200 <= status < 300:
            raise ApiError(status)
        if not expect_body:
            return True
        try:
            return json.loads(content)
        except ValueError as exc:
            raise MalformedPayloadError(f"{method} {url} returned invalid JSON") from exc

    # Boards

    def list_boards(self):
        return _parse_list(self._send("GET", self._url("boards")), Board)

    def get_board(self, board_id):
        return Board.from_payload(self._send("GET", self._url("boards", board_id)))

    def create_board(self, data):
        return Board.from_payload(self._send("POST", self._url("boards"), data))

    def update_board(self, board_id, data):
        return Board.from_payload(self._send("PUT", self._url("boards", board_id), data))

    def delete_board(self, board_id):
        return self._send("DELETE", self._url("boards", board_id), expect_body=False)

    def like_board(self, board_id):
        return Board.from_payload(self._send("POST", self._url("boards", board_id, "like")))

    # Cards

    def list_cards(self, board_id):
        return _parse_list(self._send("GET", self._url("boards", board_id, "cards")), Card)

    def create_card(self, board_id, data):
        return Card.from_payload(self._send("POST", self._url("boards", board_id, "cards"), data))

    def update_card(self, card_id, data):
        return Card.from_payload(self._send("PUT", self._url("cards", card_id), data))

    def delete_card(self, card_id):
        return self._send("DELETE", self._url("cards", card_id), expect_body=False)

    def upvote_card(self, card_id):
        return Card.from_payload(self._send("POST", self._url("cards", card_id, "upvote")))

    def like_card(self, card_id):
        return Card.from_payload(self._send("POST", self._url("cards", card_id, "like")))

    # Comments

    def list_comments(self, card_id):
        return _parse_list(self._send("GET", self._url("cards", card_id, "comments")), Comment)

    def create_comment(self, card_id, data):
        return Comment.from_payload(
            self._send("POST", self._url("cards", card_id, "comments"), data)
        )

    def delete_comment(self, comment_id):
        return self._send("DELETE", self._url("comments", comment_id), expect_body=False)
