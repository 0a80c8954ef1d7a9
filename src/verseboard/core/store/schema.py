"""
SQLite schema for the verseboard fact store.

Defines the relational facts the progress core reads from. The store is
populated by the translation platform; verseboard never edits it beyond
creating the schema on a fresh database.

Schema Design:
- editions: Source-text editions (a named collection of books)
- books: Books, each belonging to exactly one edition
- chapters: Chapters, each belonging to exactly one book
- verses: Verses, each belonging to exactly one chapter
- language_entities: Languages a project can translate from or into
- projects: Translation projects with an optional target language
- audio_segments: Recorded audio, referencing a start and an end verse
- text_versions: Written translations, scoped to one language
- verse_texts: Links a text version to a verse
- schema_info: Version tracking

Every relationship is enforced with a foreign key so that a chapter is always
reachable from exactly one edition through its book.
"""

import sqlite3

# Schema version for migrations
SCHEMA_VERSION = 1

# Tables in dependency order (parents before children)
TABLES = [
    "editions",
    "books",
    "chapters",
    "verses",
    "language_entities",
    "projects",
    "audio_segments",
    "text_versions",
    "verse_texts",
]

# Review states an audio segment can be in
CHECK_STATUSES = [
    "pending",
    "approved",
    "rejected",
    "requires_review",
    "completed",
]


SCHEMA_DDL = """
-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_info (
    version INTEGER PRIMARY KEY,
    applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    description TEXT
);

CREATE TABLE IF NOT EXISTS editions (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    structure_notes TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
);

CREATE TABLE IF NOT EXISTS books (
    id TEXT PRIMARY KEY,
    edition_id TEXT NOT NULL,
    name TEXT NOT NULL,
    book_number INTEGER NOT NULL,
    global_order INTEGER,

    FOREIGN KEY (edition_id) REFERENCES editions(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS chapters (
    id TEXT PRIMARY KEY,
    book_id TEXT NOT NULL,
    chapter_number INTEGER NOT NULL,
    total_verses INTEGER NOT NULL DEFAULT 0,
    global_order INTEGER,

    FOREIGN KEY (book_id) REFERENCES books(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS verses (
    id TEXT PRIMARY KEY,
    chapter_id TEXT NOT NULL,
    verse_number INTEGER NOT NULL,
    global_order INTEGER,

    FOREIGN KEY (chapter_id) REFERENCES chapters(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS language_entities (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS projects (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT,
    source_language_entity_id TEXT,
    target_language_entity_id TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP,

    FOREIGN KEY (source_language_entity_id) REFERENCES language_entities(id),
    FOREIGN KEY (target_language_entity_id) REFERENCES language_entities(id)
);

-- Recorded audio; either endpoint may be missing while a file is being tagged
CREATE TABLE IF NOT EXISTS audio_segments (
    id TEXT PRIMARY KEY,
    project_id TEXT NOT NULL,
    start_verse_id TEXT,
    end_verse_id TEXT,
    remote_path TEXT,
    check_status TEXT,
    upload_status TEXT,
    created_at TIMESTAMP,
    updated_at TIMESTAMP,

    FOREIGN KEY (project_id) REFERENCES projects(id) ON DELETE CASCADE,
    FOREIGN KEY (start_verse_id) REFERENCES verses(id) ON DELETE SET NULL,
    FOREIGN KEY (end_verse_id) REFERENCES verses(id) ON DELETE SET NULL
);

CREATE TABLE IF NOT EXISTS text_versions (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    language_entity_id TEXT NOT NULL,
    edition_id TEXT,

    FOREIGN KEY (language_entity_id) REFERENCES language_entities(id),
    FOREIGN KEY (edition_id) REFERENCES editions(id)
);

CREATE TABLE IF NOT EXISTS verse_texts (
    id TEXT PRIMARY KEY,
    text_version_id TEXT NOT NULL,
    verse_id TEXT NOT NULL,
    verse_text TEXT NOT NULL DEFAULT '',
    created_at TIMESTAMP,
    updated_at TIMESTAMP,

    FOREIGN KEY (text_version_id) REFERENCES text_versions(id) ON DELETE CASCADE,
    FOREIGN KEY (verse_id) REFERENCES verses(id) ON DELETE CASCADE
);

-- Indexes for the coverage joins
CREATE INDEX IF NOT EXISTS idx_books_edition ON books(edition_id);
CREATE INDEX IF NOT EXISTS idx_chapters_book ON chapters(book_id);
CREATE INDEX IF NOT EXISTS idx_verses_chapter ON verses(chapter_id);
CREATE INDEX IF NOT EXISTS idx_audio_segments_project ON audio_segments(project_id);
CREATE INDEX IF NOT EXISTS idx_audio_segments_updated_at ON audio_segments(updated_at);
CREATE INDEX IF NOT EXISTS idx_text_versions_language ON text_versions(language_entity_id);
CREATE INDEX IF NOT EXISTS idx_verse_texts_version ON verse_texts(text_version_id);
CREATE INDEX IF NOT EXISTS idx_verse_texts_verse ON verse_texts(verse_id);
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """
    Create the database schema.

    Executes all DDL statements to create tables and indexes.
    This is idempotent - safe to call multiple times.

    Args:
        conn: SQLite database connection

    Example:
        >>> import sqlite3
        >>> conn = sqlite3.connect(":memory:")
        >>> create_schema(conn)
        >>> cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        >>> tables = [row[0] for row in cursor.fetchall()]
        >>> assert "chapters" in tables
        >>> assert "verse_texts" in tables
    """
    conn.executescript(SCHEMA_DDL)

    conn.execute(
        """
        INSERT OR REPLACE INTO schema_info (version, description)
        VALUES (?, ?)
        """,
        (SCHEMA_VERSION, "Scripture structure, projects, audio segments and verse texts"),
    )

    conn.commit()


def get_schema_version(conn: sqlite3.Connection) -> int | None:
    """
    Get the current schema version from the database.

    Args:
        conn: SQLite database connection

    Returns:
        Current schema version, or None if schema_info table doesn't exist
    """
    try:
        cursor = conn.execute("SELECT MAX(version) AS version FROM schema_info")
        row = cursor.fetchone()
    except sqlite3.OperationalError:
        # schema_info table doesn't exist
        return None

    if row is None:
        return None
    version = row["version"] if isinstance(row, dict) else row[0]
    return version


def needs_schema(conn: sqlite3.Connection) -> bool:
    """
    Check if the database still needs the schema applied.

    Args:
        conn: SQLite database connection

    Returns:
        True if the schema is missing or older than SCHEMA_VERSION

    Example:
        >>> import sqlite3
        >>> conn = sqlite3.connect(":memory:")
        >>> assert needs_schema(conn) is True
        >>> create_schema(conn)
        >>> assert needs_schema(conn) is False
    """
    current_version = get_schema_version(conn)
    if current_version is None:
        return True
    return current_version < SCHEMA_VERSION


def validate_check_status(check_status: str) -> None:
    """
    Validate that a check status is one of the known review states.

    Raises:
        ValueError: If the status is unknown
    """
    if check_status not in CHECK_STATUSES:
        raise ValueError(
            f"Invalid check status: {check_status}. "
            f"Must be one of: {', '.join(CHECK_STATUSES)}"
        )
