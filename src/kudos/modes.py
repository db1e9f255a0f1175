"""Per-scope live/degraded mode tracking.

A scope is one loaded resource: the board list, one board with its cards, or
one card's comments. Loading a scope asks the gateway first and falls back to
synthetic placeholder data when the gateway fails. The resulting mode sticks
until the scope is loaded again; mutations never change it.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from kudos import placeholders
from kudos.gateway import attempt
from kudos.models import Board, Card, Origin

logger = logging.getLogger(__name__)

DEMO_CARD_NOTICE = "This is a demo card. Comments are simulated."
OFFLINE_COMMENTS_NOTICE = "Unable to reach the server. Showing simulated comments."


class ScopeStatus(Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    LIVE = "live"
    DEGRADED = "degraded"


class ScopeKind(Enum):
    BOARDS = "boards"
    BOARD = "board"
    COMMENTS = "comments"


@dataclass
class Scope:
    """State of one loaded resource.

    ``entities`` holds the scope's list: boards for ``BOARDS``, cards for
    ``BOARD`` and comments for ``COMMENTS``. ``board`` and ``card`` hold the
    parent entity for the latter two kinds.
    """

    kind: ScopeKind
    key: str | None = None
    status: ScopeStatus = ScopeStatus.UNINITIALIZED
    entities: list = field(default_factory=list)
    board: Board | None = None
    card: Card | None = None
    errors: list = field(default_factory=list)
    notice: str | None = None

    @property
    def live(self):
        return self.status is ScopeStatus.LIVE

    @property
    def degraded(self):
        return self.status is ScopeStatus.DEGRADED

    def index_of(self, entity_id):
        for index, entity in enumerate(self.entities):
            if entity.id == entity_id:
                return index
        return None

    def find(self, entity_id):
        index = self.index_of(entity_id)
        return None if index is None else self.entities[index]


class ModeController:
    """Owns every scope for one UI session and decides each scope's mode.

    :param gateway: Backend API client exposing the list/get operations.
    :param rng: Random source for placeholder counters.
    """

    def __init__(self, gateway, rng=None):
        self.gateway = gateway
        self.rng = rng or random.Random()
        self._scopes = {}

    def get(self, kind, key=None):
        return self._scopes.get((kind, key))

    def discard(self, kind, key=None):
        self._scopes.pop((kind, key), None)

    def scopes(self):
        return list(self._scopes.values())

    def any_degraded(self):
        return any(scope.degraded for scope in self._scopes.values())

    def _begin(self, kind, key=None):
        scope = Scope(kind=kind, key=key, status=ScopeStatus.LOADING)
        self._scopes[(kind, key)] = scope
        return scope

    def _settle(self, scope, status, reason=None):
        scope.status = status
        if status is ScopeStatus.DEGRADED:
            logger.info("%s scope %r degraded: %s", scope.kind.value, scope.key, reason)
        else:
            logger.info("%s scope %r is live", scope.kind.value, scope.key)
        return scope

    def load_boards(self):
        """Load the board list, falling back to six synthetic boards."""
        scope = self._begin(ScopeKind.BOARDS)
        result = attempt(self.gateway.list_boards)
        if result.ok:
            scope.entities = list(result.value)
            return self._settle(scope, ScopeStatus.LIVE)
        scope.entities = placeholders.fallback_boards(rng=self.rng)
        return self._settle(scope, ScopeStatus.DEGRADED, result.failure)

    def load_board(self, board_id, known=None):
        """Load one board and its cards.

        :param board_id: Requested board id.
        :type board_id: str
        :param known: Board already held by the UI, if any. Boards that are
            not server-issued are never requested from the gateway.
        :type known: kudos.models.Board | None
        :returns: The freshly loaded scope.
        :rtype: Scope
        """
        scope = self._begin(ScopeKind.BOARD, board_id)
        if known is not None and known.origin is not Origin.SERVER:
            scope.board = known
            scope.entities = placeholders.fallback_cards(known.id, rng=self.rng)
            return self._settle(scope, ScopeStatus.DEGRADED, f"{known.origin.value} board")

        result = attempt(self.gateway.get_board, board_id)
        if result.ok:
            board = result.value
            result = attempt(self.gateway.list_cards, board_id)
            if result.ok:
                scope.board = board
                scope.entities = list(result.value)
                return self._settle(scope, ScopeStatus.LIVE)

        scope.board = placeholders.fallback_board(board_id, rng=self.rng)
        scope.entities = placeholders.fallback_cards(scope.board.id, rng=self.rng)
        return self._settle(scope, ScopeStatus.DEGRADED, result.failure)

    def load_comments(self, card):
        """Load a card's comments; demo cards always get simulated comments."""
        scope = self._begin(ScopeKind.COMMENTS, card.id)
        scope.card = card
        if card.origin is not Origin.SERVER:
            scope.entities = placeholders.fallback_comments(card.id)
            scope.notice = DEMO_CARD_NOTICE
            return self._settle(scope, ScopeStatus.DEGRADED, f"{card.origin.value} card")

        result = attempt(self.gateway.list_comments, card.id)
        if result.ok:
            scope.entities = list(result.value)
            return self._settle(scope, ScopeStatus.LIVE)
        scope.entities = placeholders.fallback_comments(card.id)
        scope.notice = OFFLINE_COMMENTS_NOTICE
        return self._settle(scope, ScopeStatus.DEGRADED, result.failure)

    def find_board(self, board_id):
        """Look up a board in the loaded board list or board scopes."""
        boards = self.get(ScopeKind.BOARDS)
        if boards is not None:
            board = boards.find(board_id)
            if board is not None:
                return board
        detail = self.get(ScopeKind.BOARD, board_id)
        if detail is not None:
            return detail.board
        return None

    def find_card(self, board_id, card_id):
        detail = self.get(ScopeKind.BOARD, board_id)
        if detail is None:
            return None
        return detail.find(card_id)
