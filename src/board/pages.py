"""Route handlers for the dashboard, board details and card comments pages."""

import functools

from flask import Blueprint, abort, current_app, jsonify, render_template, request, url_for

from kudos.errors import ActionRejected, MutationFailed, UnknownEntityError, ValidationError
from kudos.filters import FILTER_CHOICES, displayed_boards
from kudos.models import CATEGORIES
from kudos.modes import ScopeKind
from kudos.router import Action, affordances

bp = Blueprint('pages', __name__)


@bp.app_template_filter('format_date')
def _format_date(value):
    return value.strftime('%b %d, %Y %H:%M')


@bp.app_context_processor
def _inject_affordances():
    return {'affordances': affordances, 'Action': Action, 'categories': CATEGORIES}


def _session():
    return current_app.extensions['kudos']


def _serialized(view):
    """Run the view while holding the session lock so scopes change one request at a time."""

    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        with _session()['lock']:
            return view(*args, **kwargs)

    return wrapper


def _ensure_boards():
    controller = _session()['controller']
    return controller.get(ScopeKind.BOARDS) or controller.load_boards()


def _ensure_board(board_id):
    controller = _session()['controller']
    scope = controller.get(ScopeKind.BOARD, board_id)
    if scope is None:
        scope = controller.load_board(board_id, known=controller.find_board(board_id))
    return scope


def _ensure_comments(board_id, card_id):
    controller = _session()['controller']
    scope = controller.get(ScopeKind.COMMENTS, card_id)
    if scope is None:
        _ensure_board(board_id)
        card = controller.find_card(board_id, card_id)
        if card is None:
            abort(404)
        scope = controller.load_comments(card)
    return scope


def _render_dashboard(scope, **context):
    board_filter = request.values.get('filter', 'all')
    if board_filter not in FILTER_CHOICES:
        board_filter = 'all'
    query = request.values.get('q', '')
    return render_template(
        'pages/dashboard.html',
        scope=scope,
        boards=displayed_boards(scope.entities, board_filter, query),
        board_filter=board_filter,
        query=query,
        filters=FILTER_CHOICES,
        **context,
    )


def _render_board(scope, **context):
    return render_template('pages/board.html', scope=scope, board=scope.board, **context)


def _render_card(board_id, scope, **context):
    return render_template(
        'pages/card.html', scope=scope, board_id=board_id, card=scope.card, **context
    )


def _perform(render, action, retry_url):
    """Run a router action and render the affected page.

    Validation problems render with status 400, disabled actions with 403 and
    unknown ids with 404. A failed live-mode mutation renders the page with a
    plain-language error, plus a link that reloads ``retry_url`` when the
    failure is transient.
    """
    try:
        action()
    except ValidationError as exc:
        return render(form_errors=exc.errors, form=request.form), 400
    except ActionRejected as exc:
        return render(error=str(exc)), 403
    except MutationFailed as exc:
        current_app.logger.warning('%s (%s)', exc.message, exc.cause)
        return render(error=exc.message, retry_url=retry_url if exc.retryable else None)
    except UnknownEntityError:
        abort(404)
    return render()


# Dashboard

@bp.route('/')
@bp.route('/boards')
@_serialized
def dashboard():
    """Render the dashboard, reloading the board list.

    :returns: Rendered HTML response.
    :rtype: str
    """
    scope = _session()['controller'].load_boards()
    return _render_dashboard(scope)


@bp.route('/boards', methods=['POST'])
@_serialized
def create_board():
    scope = _ensure_boards()
    router = _session()['router']
    return _perform(
        lambda **ctx: _render_dashboard(scope, **ctx),
        lambda: router.create_board(request.form),
        url_for('pages.dashboard'),
    )


@bp.route('/boards/<board_id>/delete', methods=['POST'])
@_serialized
def delete_board(board_id):
    scope = _ensure_boards()
    router = _session()['router']
    return _perform(
        lambda **ctx: _render_dashboard(scope, **ctx),
        lambda: router.delete_board(board_id),
        url_for('pages.dashboard'),
    )


@bp.route('/boards/<board_id>/like', methods=['POST'])
@_serialized
def like_board(board_id):
    scope = _ensure_boards()
    router = _session()['router']
    return _perform(
        lambda **ctx: _render_dashboard(scope, **ctx),
        lambda: router.like_board(board_id),
        url_for('pages.dashboard'),
    )


# Board details

@bp.route('/boards/<board_id>')
@_serialized
def board_details(board_id):
    """Render one board with its cards, reloading both."""
    controller = _session()['controller']
    scope = controller.load_board(board_id, known=controller.find_board(board_id))
    return _render_board(scope)


@bp.route('/boards/<board_id>/cards', methods=['POST'])
@_serialized
def create_card(board_id):
    scope = _ensure_board(board_id)
    router = _session()['router']
    return _perform(
        lambda **ctx: _render_board(scope, **ctx),
        lambda: router.create_card(board_id, request.form),
        url_for('pages.board_details', board_id=board_id),
    )


@bp.route('/boards/<board_id>/cards/<card_id>/<verb>', methods=['POST'])
@_serialized
def card_action(board_id, card_id, verb):
    """Handle the delete, upvote and like buttons on a card."""
    router = _session()['router']
    handlers = {
        'delete': router.delete_card,
        'upvote': router.upvote_card,
        'like': router.like_card,
    }
    if verb not in handlers:
        abort(404)
    scope = _ensure_board(board_id)
    return _perform(
        lambda **ctx: _render_board(scope, **ctx),
        lambda: handlers[verb](board_id, card_id),
        url_for('pages.board_details', board_id=board_id),
    )


# Card comments

@bp.route('/boards/<board_id>/cards/<card_id>')
@_serialized
def card_details(board_id, card_id):
    """Render a card with its comments, reloading the comments."""
    controller = _session()['controller']
    _ensure_board(board_id)
    card = controller.find_card(board_id, card_id)
    if card is None:
        abort(404)
    scope = controller.load_comments(card)
    return _render_card(board_id, scope)


@bp.route('/boards/<board_id>/cards/<card_id>/comments', methods=['POST'])
@_serialized
def create_comment(board_id, card_id):
    scope = _ensure_comments(board_id, card_id)
    router = _session()['router']
    return _perform(
        lambda **ctx: _render_card(board_id, scope, **ctx),
        lambda: router.create_comment(card_id, request.form),
        url_for('pages.card_details', board_id=board_id, card_id=card_id),
    )


@bp.route('/boards/<board_id>/cards/<card_id>/comments/<comment_id>/delete', methods=['POST'])
@_serialized
def delete_comment(board_id, card_id, comment_id):
    scope = _ensure_comments(board_id, card_id)
    router = _session()['router']
    return _perform(
        lambda **ctx: _render_card(board_id, scope, **ctx),
        lambda: router.delete_comment(card_id, comment_id),
        url_for('pages.card_details', board_id=board_id, card_id=card_id),
    )


# GIF picker

@bp.route('/gifs')
def gifs():
    """Return GIF candidates as JSON: search results, or trending when ``q`` is blank."""
    provider = _session()['gifs']
    query = request.args.get('q', '')
    results = provider.search(query) if query.strip() else provider.trending()
    return jsonify([gif.to_payload() for gif in results])
