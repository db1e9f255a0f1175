"""Route user actions to the Backend API or to local state transitions.

:func:`route` is the whole decision table and has no side effects.
:class:`MutationRouter` applies the decision to a scope owned by a
:class:`~kudos.modes.ModeController`.
"""

import logging
import time
from enum import Enum

from kudos.errors import ActionRejected, MutationFailed, UnknownEntityError
from kudos.gateway import attempt
from kudos.models import Board, Card, Comment, Origin
from kudos.modes import ScopeKind, ScopeStatus
from kudos.validation import require_board, require_card, require_comment

logger = logging.getLogger(__name__)


class Action(Enum):
    CREATE_BOARD = "create_board"
    DELETE_BOARD = "delete_board"
    LIKE_BOARD = "like_board"
    CREATE_CARD = "create_card"
    DELETE_CARD = "delete_card"
    UPVOTE_CARD = "upvote_card"
    LIKE_CARD = "like_card"
    CREATE_COMMENT = "create_comment"
    DELETE_COMMENT = "delete_comment"


class Route(Enum):
    REMOTE = "remote"
    LOCAL = "local"
    REJECT = "reject"


FAILURE_MESSAGES = {
    Action.CREATE_BOARD: "Failed to create board. Please try again.",
    Action.DELETE_BOARD: "Failed to delete board. Please try again.",
    Action.LIKE_BOARD: "Failed to like board. Please try again.",
    Action.CREATE_CARD: "Failed to create card. Please try again.",
    Action.DELETE_CARD: "Failed to delete card. Please try again.",
    Action.UPVOTE_CARD: "Failed to upvote card. Please try again.",
    Action.LIKE_CARD: "Failed to like card. Please try again.",
    Action.CREATE_COMMENT: "Failed to add comment. Please try again.",
    Action.DELETE_COMMENT: "Failed to delete comment. Please try again.",
}

BOARD_FIELDS = ("title", "description", "category", "image", "author")
CARD_FIELDS = ("title", "message", "image", "author")
COMMENT_FIELDS = ("message", "author")


def route(status, origin, action):
    """Decide where an action runs.

    :param status: Mode of the scope that holds the target.
    :type status: kudos.modes.ScopeStatus
    :param origin: Origin of the target entity (the parent, for creates).
    :type origin: kudos.models.Origin
    :param action: The user action.
    :type action: Action
    :returns: Where the action runs.
    :rtype: Route
    :raises ValueError: If the scope has not finished loading.
    """
    if action is Action.DELETE_COMMENT and origin is Origin.SYNTHETIC:
        return Route.REJECT
    if status is ScopeStatus.DEGRADED:
        return Route.LOCAL
    if status is not ScopeStatus.LIVE:
        raise ValueError(f"Cannot route {action.value} while scope is {status.value}")
    if origin is Origin.SERVER:
        return Route.REMOTE
    return Route.LOCAL


def affordances(entity):
    """Return the actions the UI should enable for an entity."""
    synthetic = entity.origin is Origin.SYNTHETIC
    if isinstance(entity, Board):
        return frozenset({Action.LIKE_BOARD, Action.DELETE_BOARD, Action.CREATE_CARD})
    if isinstance(entity, Card):
        enabled = {Action.LIKE_CARD, Action.CREATE_COMMENT}
        if not synthetic:
            enabled.update({Action.UPVOTE_CARD, Action.DELETE_CARD})
        return frozenset(enabled)
    if isinstance(entity, Comment):
        return frozenset() if synthetic else frozenset({Action.DELETE_COMMENT})
    raise TypeError(f"Unsupported entity: {entity!r}")


def _clean(data, fields):
    """Keep known fields, strip strings and drop blank optional values."""
    cleaned = {}
    for key in fields:
        value = data.get(key)
        if isinstance(value, str):
            value = value.strip()
        if value not in (None, ""):
            cleaned[key] = value
    return cleaned


class MutationRouter:
    """Single entry point for every mutating user action.

    :param controller: Owner of the scopes being mutated.
    :type controller: kudos.modes.ModeController
    :param gateway: Backend API client; defaults to the controller's.
    :param clock: Returns the current time in seconds, used for local ids.
    """

    def __init__(self, controller, gateway=None, clock=time.time):
        self.controller = controller
        self.gateway = gateway or controller.gateway
        self.clock = clock
        self._last_stamp = 0

    def _stamp(self):
        # Strictly increasing so two local entities never share an id.
        stamp = int(self.clock() * 1000)
        if stamp <= self._last_stamp:
            stamp = self._last_stamp + 1
        self._last_stamp = stamp
        return stamp

    def _scope(self, kind, key=None):
        scope = self.controller.get(kind, key)
        if scope is None or scope.status not in (ScopeStatus.LIVE, ScopeStatus.DEGRADED):
            raise UnknownEntityError(f"{kind.value} scope {key!r} is not loaded")
        return scope

    @staticmethod
    def _target(scope, entity_id):
        entity = scope.find(entity_id)
        if entity is None:
            raise UnknownEntityError(f"{entity_id!r} is not part of {scope.kind.value} scope")
        return entity

    @staticmethod
    def _decide(scope, origin, action, entity_id=None):
        decision = route(scope.status, origin, action)
        logger.debug("%s(%s) -> %s", action.value, entity_id, decision.value)
        if decision is Route.REJECT:
            raise ActionRejected("Demo comments cannot be deleted.")
        return decision

    @staticmethod
    def _fail(scope, action, failure):
        error = MutationFailed(FAILURE_MESSAGES[action], failure)
        scope.errors.append(error.message)
        raise error from failure

    def _remote(self, scope, action, operation, *args):
        result = attempt(operation, *args)
        if not result.ok:
            self._fail(scope, action, result.failure)
        scope.errors.clear()
        return result.value

    def _create(self, scope, action, origin, operation, args, synthesize):
        """Create remotely or locally and prepend the new entity to the scope."""
        if self._decide(scope, origin, action) is Route.LOCAL:
            entity = synthesize()
        else:
            result = attempt(operation, *args)
            if result.ok:
                entity = result.value
                scope.errors.clear()
            elif self.controller.any_degraded():
                logger.info("%s failed while offline elsewhere; creating locally", action.value)
                entity = synthesize()
            else:
                self._fail(scope, action, result.failure)
        scope.entities.insert(0, entity)
        return entity

    def _replace(self, scope, updated):
        scope.entities[scope.index_of(updated.id)] = updated
        return updated

    # Boards

    def create_board(self, data):
        """Create a board in the board-list scope.

        :raises ValidationError: If title, category or image is missing.
        :raises MutationFailed: If the API call fails and nothing is degraded.
        """
        payload = require_board(_clean(data, BOARD_FIELDS))
        scope = self._scope(ScopeKind.BOARDS)

        def synthesize():
            return Board(id=f"local-{self._stamp()}", origin=Origin.LOCAL, **payload)

        return self._create(
            scope, Action.CREATE_BOARD, Origin.SERVER,
            self.gateway.create_board, (payload,), synthesize,
        )

    def delete_board(self, board_id):
        scope = self._scope(ScopeKind.BOARDS)
        board = self._target(scope, board_id)
        if self._decide(scope, board.origin, Action.DELETE_BOARD, board_id) is Route.REMOTE:
            self._remote(scope, Action.DELETE_BOARD, self.gateway.delete_board, board_id)
        del scope.entities[scope.index_of(board_id)]
        self.controller.discard(ScopeKind.BOARD, board_id)
        return board

    def like_board(self, board_id):
        scope = self._scope(ScopeKind.BOARDS)
        board = self._target(scope, board_id)
        if self._decide(scope, board.origin, Action.LIKE_BOARD, board_id) is Route.REMOTE:
            updated = self._remote(scope, Action.LIKE_BOARD, self.gateway.like_board, board_id)
        else:
            updated = board.liked()
        self._replace(scope, updated)
        detail = self.controller.get(ScopeKind.BOARD, board_id)
        if detail is not None and detail.board is not None and detail.board.id == board_id:
            detail.board = updated
        return updated

    # Cards

    def create_card(self, board_id, data):
        """Create a card on a loaded board.

        :raises ValidationError: If title or image is missing.
        :raises MutationFailed: If the API call fails and nothing is degraded.
        """
        payload = require_card(_clean(data, CARD_FIELDS))
        scope = self._scope(ScopeKind.BOARD, board_id)
        board = scope.board

        def synthesize():
            return Card(
                id=f"local-card-{self._stamp()}",
                board_id=board.id,
                origin=Origin.LOCAL,
                **payload,
            )

        return self._create(
            scope, Action.CREATE_CARD, board.origin,
            self.gateway.create_card, (board.id, payload), synthesize,
        )

    def delete_card(self, board_id, card_id):
        scope = self._scope(ScopeKind.BOARD, board_id)
        card = self._target(scope, card_id)
        if self._decide(scope, card.origin, Action.DELETE_CARD, card_id) is Route.REMOTE:
            self._remote(scope, Action.DELETE_CARD, self.gateway.delete_card, card_id)
        del scope.entities[scope.index_of(card_id)]
        self.controller.discard(ScopeKind.COMMENTS, card_id)
        return card

    def _bump_card(self, board_id, card_id, action, operation, local_update):
        scope = self._scope(ScopeKind.BOARD, board_id)
        card = self._target(scope, card_id)
        if self._decide(scope, card.origin, action, card_id) is Route.REMOTE:
            updated = self._remote(scope, action, operation, card_id)
        else:
            updated = local_update(card)
        self._replace(scope, updated)
        comments = self.controller.get(ScopeKind.COMMENTS, card_id)
        if comments is not None:
            comments.card = updated
        return updated

    def upvote_card(self, board_id, card_id):
        return self._bump_card(
            board_id, card_id, Action.UPVOTE_CARD, self.gateway.upvote_card, Card.upvoted
        )

    def like_card(self, board_id, card_id):
        return self._bump_card(
            board_id, card_id, Action.LIKE_CARD, self.gateway.like_card, Card.liked
        )

    # Comments

    def create_comment(self, card_id, data):
        """Add a comment to a card whose comments are loaded.

        :raises ValidationError: If the message is blank.
        :raises MutationFailed: If the API call fails and nothing is degraded.
        """
        payload = require_comment(_clean(data, COMMENT_FIELDS))
        scope = self._scope(ScopeKind.COMMENTS, card_id)
        card = scope.card

        def synthesize():
            return Comment(
                id=f"local-comment-{self._stamp()}",
                card_id=card.id,
                origin=Origin.LOCAL,
                **payload,
            )

        return self._create(
            scope, Action.CREATE_COMMENT, card.origin,
            self.gateway.create_comment, (card.id, payload), synthesize,
        )

    def delete_comment(self, card_id, comment_id):
        """Delete a comment; simulated demo comments are read-only.

        :raises ActionRejected: If the comment is synthetic.
        """
        scope = self._scope(ScopeKind.COMMENTS, card_id)
        comment = self._target(scope, comment_id)
        decision = self._decide(scope, comment.origin, Action.DELETE_COMMENT, comment_id)
        if decision is Route.REMOTE:
            self._remote(scope, Action.DELETE_COMMENT, self.gateway.delete_comment, comment_id)
        del scope.entities[scope.index_of(comment_id)]
        return comment
