"""JSON route handlers for the Kudos Board REST API."""

import functools

import psycopg
from flask import Blueprint, current_app, jsonify, request

from kudos.validation import validate_board, validate_card, validate_comment

bp = Blueprint('api', __name__, url_prefix='/api')

STORE_ERRORS = (psycopg.Error, RuntimeError, OSError)


def _store():
    return current_app.extensions['kudos_store']


def _body():
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _not_found(noun):
    return jsonify({'error': f'{noun} not found'}), 404


def _invalid(errors):
    return jsonify({'errors': errors}), 400


def _store_errors(message):
    """Answer 500 with ``message`` when the data layer fails."""

    def decorator(view):
        @functools.wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except STORE_ERRORS:
                current_app.logger.exception(message)
                return jsonify({'error': message}), 500

        return wrapper

    return decorator


# Boards

@bp.route('/boards')
@_store_errors('Failed to fetch boards')
def list_boards():
    return jsonify(_store().list_boards())


@bp.route('/boards/<board_id>')
@_store_errors('Failed to fetch board')
def get_board(board_id):
    board = _store().get_board(board_id, include_cards=True)
    if board is None:
        return _not_found('Board')
    return jsonify(board)


@bp.route('/boards', methods=['POST'])
@_store_errors('Failed to create board')
def create_board():
    data = _body()
    errors = validate_board(data)
    if errors:
        return _invalid(errors)
    return jsonify(_store().create_board(data)), 201


@bp.route('/boards/<board_id>', methods=['PUT'])
@_store_errors('Failed to update board')
def update_board(board_id):
    data = _body()
    errors = validate_board(data)
    if errors:
        return _invalid(errors)
    board = _store().update_board(board_id, data)
    if board is None:
        return _not_found('Board')
    return jsonify(board)


@bp.route('/boards/<board_id>', methods=['DELETE'])
@_store_errors('Failed to delete board')
def delete_board(board_id):
    if not _store().delete_board(board_id):
        return _not_found('Board')
    return '', 204


@bp.route('/boards/<board_id>/like', methods=['POST'])
@_store_errors('Failed to like board')
def like_board(board_id):
    board = _store().like_board(board_id)
    if board is None:
        return _not_found('Board')
    return jsonify(board)


# Cards

@bp.route('/boards/<board_id>/cards')
@_store_errors('Failed to fetch cards')
def list_cards(board_id):
    return jsonify(_store().list_cards(board_id))


@bp.route('/boards/<board_id>/cards', methods=['POST'])
@_store_errors('Failed to create card')
def create_card(board_id):
    data = _body()
    errors = validate_card(data)
    if errors:
        return _invalid(errors)
    store = _store()
    if store.get_board(board_id) is None:
        return _not_found('Board')
    return jsonify(store.create_card(board_id, data)), 201


@bp.route('/cards/<card_id>', methods=['PUT'])
@_store_errors('Failed to update card')
def update_card(card_id):
    data = _body()
    errors = validate_card(data)
    if errors:
        return _invalid(errors)
    card = _store().update_card(card_id, data)
    if card is None:
        return _not_found('Card')
    return jsonify(card)


@bp.route('/cards/<card_id>', methods=['DELETE'])
@_store_errors('Failed to delete card')
def delete_card(card_id):
    if not _store().delete_card(card_id):
        return _not_found('Card')
    return '', 204


@bp.route('/cards/<card_id>/upvote', methods=['POST'])
@_store_errors('Failed to upvote card')
def upvote_card(card_id):
    card = _store().upvote_card(card_id)
    if card is None:
        return _not_found('Card')
    return jsonify(card)


@bp.route('/cards/<card_id>/like', methods=['POST'])
@_store_errors('Failed to like card')
def like_card(card_id):
    card = _store().like_card(card_id)
    if card is None:
        return _not_found('Card')
    return jsonify(card)


# Comments

@bp.route('/cards/<card_id>/comments')
@_store_errors('Failed to fetch comments')
def list_comments(card_id):
    return jsonify(_store().list_comments(card_id))


@bp.route('/cards/<card_id>/comments', methods=['POST'])
@_store_errors('Failed to create comment')
def create_comment(card_id):
    data = _body()
    errors = validate_comment(data)
    if errors:
        return _invalid(errors)
    store = _store()
    if store.get_card(card_id) is None:
        return _not_found('Card')
    return jsonify(store.create_comment(card_id, data)), 201


@bp.route('/comments/<comment_id>', methods=['DELETE'])
@_store_errors('Failed to delete comment')
def delete_comment(comment_id):
    if not _store().delete_comment(comment_id):
        return _not_found('Comment')
    return '', 204
