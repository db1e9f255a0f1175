"""PostgreSQL data layer for boards, cards and comments."""

# Each call opens its own connection, mirroring how the loader scripts talk to the DB.
import uuid

import psycopg
from psycopg.rows import dict_row

from kudos.models import format_timestamp

BOARD_COLUMNS = ("title", "description", "category", "image", "author")
CARD_COLUMNS = ("title", "message", "image", "author")

_JSON_KEYS = {"created_at": "createdAt", "board_id": "boardId", "card_id": "cardId"}


def serialize(row):
    """Convert a DB row into the API's camelCase JSON shape.

    :param row: Row mapping from a ``dict_row`` cursor.
    :type row: dict
    :returns: JSON-ready dictionary.
    :rtype: dict
    """
    if row is None:
        return None
    payload = {}
    for key, value in row.items():
        if key == "created_at" and value is not None:
            value = format_timestamp(value)
        payload[_JSON_KEYS.get(key, key)] = value
    return payload


class KudosStore:
    """CRUD and counter operations over the ``boards``/``cards``/``comments`` tables.

    Lookups of unknown ids return ``None`` (or ``False`` for deletes) so the
    route layer can answer 404. Database failures propagate as
    ``psycopg.Error``.

    :param conn_info: psycopg connection string.
    :type conn_info: str
    """

    def __init__(self, conn_info):
        self.conn_info = conn_info

    def _connect(self):
        return psycopg.connect(self.conn_info, row_factory=dict_row)

    def _fetchall(self, query, params=()):
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return [serialize(row) for row in cur.fetchall()]

    def _fetchone(self, query, params=()):
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                row = cur.fetchone()
            conn.commit()
            return serialize(row)

    def _delete(self, query, params):
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                deleted = cur.fetchone() is not None
            conn.commit()
            return deleted

    # Boards

    def list_boards(self):
        return self._fetchall("SELECT * FROM boards ORDER BY created_at DESC;")

    def get_board(self, board_id, include_cards=False):
        board = self._fetchone("SELECT * FROM boards WHERE id = %s;", (board_id,))
        if board is not None and include_cards:
            board["cards"] = self.list_cards(board_id)
        return board

    def create_board(self, data):
        values = [data.get(column) for column in BOARD_COLUMNS]
        return self._fetchone(
            """
            INSERT INTO boards (id, title, description, category, image, author)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING *;
            """,
            (str(uuid.uuid4()), *values),
        )

    def update_board(self, board_id, data):
        values = [data.get(column) for column in BOARD_COLUMNS]
        return self._fetchone(
            """
            UPDATE boards
            SET title = %s, description = %s, category = %s, image = %s, author = %s
            WHERE id = %s
            RETURNING *;
            """,
            (*values, board_id),
        )

    def delete_board(self, board_id):
        return self._delete("DELETE FROM boards WHERE id = %s RETURNING id;", (board_id,))

    def like_board(self, board_id):
        return self._fetchone(
            "UPDATE boards SET likes = likes + 1 WHERE id = %s RETURNING *;", (board_id,)
        )

    # Cards

    def list_cards(self, board_id):
        return self._fetchall(
            "SELECT * FROM cards WHERE board_id = %s ORDER BY created_at DESC;", (board_id,)
        )

    def create_card(self, board_id, data):
        values = [data.get(column) for column in CARD_COLUMNS]
        return self._fetchone(
            """
            INSERT INTO cards (id, title, message, image, author, board_id)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING *;
            """,
            (str(uuid.uuid4()), *values, board_id),
        )

    def get_card(self, card_id):
        return self._fetchone("SELECT * FROM cards WHERE id = %s;", (card_id,))

    def update_card(self, card_id, data):
        values = [data.get(column) for column in CARD_COLUMNS]
        return self._fetchone(
            """
            UPDATE cards
            SET title = %s, message = %s, image = %s, author = %s
            WHERE id = %s
            RETURNING *;
            """,
            (*values, card_id),
        )

    def delete_card(self, card_id):
        return self._delete("DELETE FROM cards WHERE id = %s RETURNING id;", (card_id,))

    def upvote_card(self, card_id):
        return self._fetchone(
            "UPDATE cards SET votes = votes + 1 WHERE id = %s RETURNING *;", (card_id,)
        )

    def like_card(self, card_id):
        return self._fetchone(
            "UPDATE cards SET likes = likes + 1 WHERE id = %s RETURNING *;", (card_id,)
        )

    # Comments

    def list_comments(self, card_id):
        return self._fetchall(
            "SELECT * FROM comments WHERE card_id = %s ORDER BY created_at DESC;", (card_id,)
        )

    def create_comment(self, card_id, data):
        return self._fetchone(
            """
            INSERT INTO comments (id, message, author, card_id)
            VALUES (%s, %s, %s, %s)
            RETURNING *;
            """,
            (str(uuid.uuid4()), data.get("message"), data.get("author"), card_id),
        )

    def delete_comment(self, comment_id):
        return self._delete("DELETE FROM comments WHERE id = %s RETURNING id;", (comment_id,))
