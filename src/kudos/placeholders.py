"""Synthetic boards, cards and comments used when the Backend API is unreachable."""

# Shapes (counts, id prefixes, field presence) are exact; numeric fields are random.
import random
from datetime import timedelta

from kudos.models import CATEGORIES, Board, Card, Comment, Origin, utcnow

FALLBACK_GIFS = (
    "https://media.giphy.com/media/3o6Zt6KHxJTbX20WTS/giphy.gif",
    "https://media.giphy.com/media/l0MYt5jPR6QX5pnqM/giphy.gif",
    "https://media.giphy.com/media/ZfK4cXKJTTay1Ava29/giphy.gif",
    "https://media.giphy.com/media/xTiN0L7EW5trfOvEk0/giphy.gif",
    "https://media.giphy.com/media/3oEjI6SIIHBdRxXI40/giphy.gif",
    "https://media.giphy.com/media/l46CyJmS9KUbokzsI/giphy.gif",
)

BOARD_COUNT = 6
CARD_COUNT = 4
COMMENT_COUNT = 3
COMMENT_AUTHORS = ("System", "Demo User", "Anonymous")

_BOARD_TITLES = {
    "celebration": "Team Celebration",
    "thank you": "Thank You Wall",
    "inspiration": "Daily Inspiration",
    "feedback": "Open Feedback",
}


def fallback_boards(rng=random, now=None):
    """Generate the board list shown when the board list cannot be loaded.

    :param rng: Random source exposing ``randint``.
    :param now: Optional timestamp used as ``created_at``.
    :type now: datetime.datetime | None
    :returns: Six synthetic boards cycling through every category.
    :rtype: list[kudos.models.Board]
    """
    created = now or utcnow()
    boards = []
    for index in range(BOARD_COUNT):
        category = CATEGORIES[index % len(CATEGORIES)]
        boards.append(
            Board(
                id=f"default-{index}",
                title=f"{_BOARD_TITLES[category]} #{index + 1}",
                description=f"A sample {category} board shown while the server is unavailable.",
                category=category,
                image=FALLBACK_GIFS[index % len(FALLBACK_GIFS)],
                author="System",
                created_at=created,
                likes=rng.randint(0, 9),
                origin=Origin.SYNTHETIC,
            )
        )
    return boards


def fallback_board(requested_id, rng=random, now=None):
    """Generate the single board shown when one board cannot be loaded."""
    return Board(
        id=f"default-{requested_id}",
        title="Sample Kudos Board",
        description="This board is showing sample content while the server is unavailable.",
        category="celebration",
        image=FALLBACK_GIFS[0],
        author="System",
        created_at=now or utcnow(),
        likes=rng.randint(0, 9),
        origin=Origin.SYNTHETIC,
    )


def fallback_cards(board_id, rng=random, now=None):
    """Generate the four sample cards attached to a degraded board."""
    created = now or utcnow()
    return [
        Card(
            id=f"default-card-{index}",
            title=f"Sample Kudos #{index + 1}",
            message="Thanks for everything you do for the team!",
            image=FALLBACK_GIFS[index % len(FALLBACK_GIFS)],
            author="System",
            created_at=created,
            votes=rng.randint(0, 4),
            likes=rng.randint(0, 2),
            board_id=board_id,
            origin=Origin.SYNTHETIC,
        )
        for index in range(CARD_COUNT)
    ]


def fallback_comments(card_id, now=None):
    """Generate three sample comments, each one hour older than the previous.

    :param card_id: Id of the card the comments belong to.
    :type card_id: str
    :param now: Optional reference timestamp for the newest comment.
    :type now: datetime.datetime | None
    :returns: Comments ordered newest first.
    :rtype: list[kudos.models.Comment]
    """
    newest = now or utcnow()
    return [
        Comment(
            id=f"default-comment-{index}",
            message=f"Sample comment #{index + 1}. Comments will sync once the server is back.",
            author=COMMENT_AUTHORS[index % len(COMMENT_AUTHORS)],
            created_at=newest - timedelta(hours=index),
            card_id=card_id,
            origin=Origin.SYNTHETIC,
        )
        for index in range(COMMENT_COUNT)
    ]
