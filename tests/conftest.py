import sys
from pathlib import Path

import pytest

# Enforce marker discipline so each test maps to a documented suite category.
ALLOWED_MARKERS = {
    "web",
    "api",
    "gateway",
    "modes",
    "router",
    "placeholders",
    "db",
    "config",
    "integration",
}

# Keep `board`, `kudos` and `tests` importable when pytest is launched from different working dirs.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
for path in (PROJECT_ROOT, PROJECT_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from tests.test_doubles import (  # noqa: E402
    FakeGateway,
    FakeGifProvider,
    make_board,
    make_card,
    make_comment,
)


@pytest.fixture
def fake_gateway():
    """Backend double seeded with one board, two cards and one comment."""
    return FakeGateway(
        boards=[make_board("b1"), make_board("b2", title="Thank You Wall", category="thank you")],
        cards=[make_card("c1", "b1"), make_card("c2", "b1", title="Thanks for the mentorship")],
        comments=[make_comment("m1", "c1")],
    )


@pytest.fixture
def offline_gateway(fake_gateway):
    fake_gateway.online = False
    return fake_gateway


@pytest.fixture
def fake_gifs():
    return FakeGifProvider()


@pytest.fixture
def app(fake_gateway, fake_gifs):
    """Create the UI app wired to the in-memory backend double."""
    from board import create_app

    app = create_app(
        test_config={"TESTING": True},
        gateway=fake_gateway,
        gif_provider=fake_gifs,
    )
    yield app


@pytest.fixture
def client(app):
    """Create test client from the shared app."""
    return app.test_client()


def pytest_collection_modifyitems(session, config, items):
    unmarked = []
    for item in items:
        # Accept tests carrying any one approved marker; multiple markers are also valid.
        if not ALLOWED_MARKERS.intersection(item.keywords):
            unmarked.append(item.nodeid)

    if unmarked:
        # Fail collection early so CI does not run partially categorized suites.
        joined = "\n".join(f"- {nodeid}" for nodeid in unmarked)
        raise pytest.UsageError(
            "Each test must include at least one approved marker "
            f"({', '.join(sorted(ALLOWED_MARKERS))}).\n"
            "Unmarked tests:\n"
            f"{joined}"
        )
