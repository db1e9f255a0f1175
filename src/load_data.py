"""PostgreSQL provisioning and sample-data seeding for the Kudos Board API."""

# Keep connection settings centralized so provisioning and seeding share the same DB target.
import os
import sys
import traceback
import uuid

import psycopg
from psycopg import sql

from kudos.config import get_admin_conn_info, get_db_conn_info, get_db_name
from kudos.placeholders import FALLBACK_GIFS

base_conn_info = get_admin_conn_info()
DBNAME = get_db_name()
conn_info = get_db_conn_info()

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS boards (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        description TEXT,
        category TEXT NOT NULL,
        image TEXT NOT NULL,
        author TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        likes INTEGER NOT NULL DEFAULT 0 CHECK (likes >= 0)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS cards (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        message TEXT,
        image TEXT NOT NULL,
        author TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        votes INTEGER NOT NULL DEFAULT 0 CHECK (votes >= 0),
        likes INTEGER NOT NULL DEFAULT 0 CHECK (likes >= 0),
        board_id TEXT NOT NULL REFERENCES boards (id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS comments (
        id TEXT PRIMARY KEY,
        message TEXT NOT NULL CHECK (length(trim(message)) > 0),
        author TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        card_id TEXT NOT NULL REFERENCES cards (id) ON DELETE CASCADE
    );
    """,
    'CREATE INDEX IF NOT EXISTS cards_board_id_idx ON cards (board_id);',
    'CREATE INDEX IF NOT EXISTS comments_card_id_idx ON comments (card_id);',
)

SAMPLE_BOARDS = [
    {
        'title': 'Team Appreciation',
        'description': "Share your appreciation with the team members who've gone above and beyond!",
        'category': 'celebration',
        'image': FALLBACK_GIFS[0],
        'author': 'Team Lead',
        'cards': [
            {
                'title': 'Great work on the launch!',
                'message': 'Your dedication and hard work made our product launch a huge success. '
                           'Thank you for all the late nights and attention to detail.',
                'image': FALLBACK_GIFS[1],
                'author': 'Sarah',
                'votes': 5,
            },
            {
                'title': 'Thanks for the mentorship',
                'message': "I've learned so much from working with you. "
                           'Your guidance has been invaluable to my professional growth.',
                'image': FALLBACK_GIFS[2],
                'author': 'Michael',
                'votes': 3,
            },
        ],
    },
    {
        'title': 'Project Milestone',
        'description': "We've reached 1000 users! Let's celebrate this amazing achievement together.",
        'category': 'celebration',
        'image': FALLBACK_GIFS[3],
        'author': 'Product Manager',
        'cards': [
            {
                'title': 'Excellent customer service',
                'message': 'You went above and beyond for our clients! '
                           'Your dedication to customer satisfaction is truly inspiring.',
                'image': FALLBACK_GIFS[4],
                'author': 'Client Success Manager',
                'votes': 7,
            },
        ],
    },
    {
        'title': 'Customer Support be like',
        'description': 'Recognize our support team for their hard work and dedication to our customers.',
        'category': 'thank you',
        'image': FALLBACK_GIFS[5],
        'author': 'Support Manager',
        'cards': [],
    },
    {
        'title': 'Stating the Obvious',
        'description': 'Share your innovative ideas and inspirations for our next big project!',
        'category': 'inspiration',
        'image': FALLBACK_GIFS[2],
        'author': 'Innovation Team',
        'cards': [
            {
                'title': 'AI-powered customer insights',
                'message': 'What if we used machine learning to analyze customer feedback '
                           'and automatically identify trends and pain points?',
                'image': FALLBACK_GIFS[0],
                'author': 'Data Scientist',
                'votes': 10,
            },
        ],
    },
    {
        'title': 'Feedback',
        'description': 'A safe space to share constructive feedback and help us all grow together.',
        'category': 'feedback',
        'image': FALLBACK_GIFS[4],
        'author': 'HR Director',
        'cards': [],
    },
]


def create_db_if_not_exists():
    """Create the application database when unmanaged local defaults are used.

    If ``DATABASE_URL`` is explicitly set, provisioning is assumed to be
    managed externally and this function exits immediately.

    :returns: ``None``.
    :rtype: None
    """
    if os.getenv('DATABASE_URL'):
        return
    # Connect to default 'postgres' db to perform administrative task
    with psycopg.connect(base_conn_info, autocommit=True) as conn:
        with conn.cursor() as cur:
            cur.execute('SELECT 1 FROM pg_database WHERE datname = %s', (DBNAME,))
            exists = cur.fetchone()

            if not exists:
                print(f'Database {DBNAME} not found. Creating it now...')
                stmt = sql.SQL('CREATE DATABASE {db_name}').format(
                    db_name=sql.Identifier(DBNAME)
                )
                cur.execute(stmt)
            else:
                print(f'Database {DBNAME} already exists.')


def provision_schema():
    """Create the boards/cards/comments tables and indexes if missing.

    :returns: ``None``.
    :rtype: None
    """
    with psycopg.connect(conn_info) as conn:
        with conn.cursor() as cur:
            for statement in SCHEMA_STATEMENTS:
                cur.execute(statement)
        conn.commit()


def seed_sample_boards(boards=None):
    """Replace all boards and cards with the sample data set.

    :param boards: Optional board definitions; defaults to :data:`SAMPLE_BOARDS`.
    :type boards: list[dict] | None
    :returns: Number of boards inserted.
    :rtype: int
    """
    boards = SAMPLE_BOARDS if boards is None else boards
    with psycopg.connect(conn_info) as conn:
        with conn.cursor() as cur:
            # Cascades clear cards and comments too.
            cur.execute('DELETE FROM boards;')
            print('Cleared existing data')
            for board in boards:
                board_id = str(uuid.uuid4())
                cur.execute(
                    """
                    INSERT INTO boards (id, title, description, category, image, author)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (
                        board_id,
                        board['title'],
                        board.get('description'),
                        board['category'],
                        board['image'],
                        board.get('author'),
                    ),
                )
                for card in board.get('cards', []):
                    cur.execute(
                        """
                        INSERT INTO cards (id, title, message, image, author, votes, board_id)
                        VALUES (%s, %s, %s, %s, %s, %s, %s)
                        """,
                        (
                            str(uuid.uuid4()),
                            card['title'],
                            card.get('message'),
                            card['image'],
                            card.get('author'),
                            card.get('votes', 0),
                            board_id,
                        ),
                    )
                print(f"Created board: {board['title']} with {len(board.get('cards', []))} cards")
        conn.commit()
    return len(boards)


def main(argv=None):
    """Provision the database and optionally seed it (``--seed``).

    :returns: Process exit status.
    :rtype: int
    """
    argv = sys.argv[1:] if argv is None else argv
    try:
        create_db_if_not_exists()
        provision_schema()
        print('SUCCESS: Schema ready')
        if '--seed' in argv:
            seed_sample_boards()
            print('Seeding completed successfully!')
    except psycopg.Error as exc:
        print(f'Database setup failed: {exc}')
        traceback.print_exc()
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
