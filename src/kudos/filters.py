"""Dashboard filtering and search over a loaded board list."""

RECENT_LIMIT = 6
FILTER_CHOICES = ("all", "recent", "celebration", "thank you", "inspiration", "feedback")


def displayed_boards(boards, board_filter="all", query=""):
    """Select the boards the dashboard shows for a filter and search query.

    ``recent`` ignores the query and returns the newest six boards. Every
    other filter matches on category (``all`` matches everything) and on a
    case-insensitive title substring.

    :param boards: Boards from the loaded scope.
    :type boards: list[kudos.models.Board]
    :param board_filter: One of :data:`FILTER_CHOICES`.
    :type board_filter: str
    :param query: Optional title search text.
    :type query: str
    :returns: Boards to display, in display order.
    :rtype: list[kudos.models.Board]
    """
    if board_filter == "recent":
        ordered = sorted(boards, key=lambda board: board.created_at, reverse=True)
        return ordered[:RECENT_LIMIT]
    needle = (query or "").strip().lower()
    return [
        board
        for board in boards
        if (board_filter in ("all", "", None) or board.category == board_filter)
        and (not needle or needle in board.title.lower())
    ]
