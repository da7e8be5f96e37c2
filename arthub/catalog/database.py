# -*- coding: utf-8 -*-
"""
Catalog Database - SQLite-backed store for catalogs, artifacts and installs.

Provides the CatalogDatabase class that owns all persisted state: the
registered catalogs, the artifacts indexed from each catalog manifest
(with an FTS5 full-text index kept in sync by triggers) and the records
of artifacts installed into the workspace.

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-02-06

Modified
--------
2026-02-06
"""

# Standard library
import json
import logging
import re
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# Artifact Hub internal
from arthub.catalog.exceptions import (
    ArtifactNotFoundError,
    CatalogConflictError,
)
from arthub.catalog.models import (
    Artifact,
    CatalogRecord,
    Installation,
    SearchQuery,
    SearchResult,
)
from arthub.catalog.paths import ensure_config_dir, resolve_catalog_path


_SCHEMA_VERSION_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL
);
"""

_BASE_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS catalogs (
    id TEXT PRIMARY KEY,
    url TEXT NOT NULL UNIQUE,
    enabled INTEGER NOT NULL DEFAULT 1,
    metadata TEXT NOT NULL,
    last_fetched TEXT,
    status TEXT NOT NULL DEFAULT 'healthy'
        CHECK(status IN ('healthy', 'updating', 'error')),
    error TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS artifacts (
    id TEXT NOT NULL,
    catalog_id TEXT NOT NULL,
    type TEXT NOT NULL,
    name TEXT NOT NULL,
    description TEXT,
    path TEXT NOT NULL,
    version TEXT NOT NULL,
    category TEXT NOT NULL,
    tags TEXT,
    keywords TEXT,
    language TEXT,
    framework TEXT,
    use_case TEXT,
    difficulty TEXT,
    source_url TEXT NOT NULL,
    metadata TEXT,
    author TEXT,
    compatibility TEXT,
    dependencies TEXT,
    estimated_time TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now')),
    PRIMARY KEY (id, catalog_id),
    FOREIGN KEY (catalog_id) REFERENCES catalogs(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS installations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    artifact_id TEXT NOT NULL,
    catalog_id TEXT NOT NULL,
    version TEXT NOT NULL,
    installed_path TEXT NOT NULL,
    installed_at TEXT NOT NULL DEFAULT (datetime('now')),
    last_used TEXT,
    UNIQUE(artifact_id, catalog_id)
);

CREATE INDEX IF NOT EXISTS idx_artifacts_catalog ON artifacts(catalog_id);
CREATE INDEX IF NOT EXISTS idx_artifacts_type ON artifacts(type);
CREATE INDEX IF NOT EXISTS idx_artifacts_category ON artifacts(category);
CREATE INDEX IF NOT EXISTS idx_installations_artifact
    ON installations(artifact_id, catalog_id);
"""

_FTS_SCHEMA_SQL = """
CREATE VIRTUAL TABLE IF NOT EXISTS artifacts_fts USING fts5(
    name, description, tags, keywords, category,
    content='artifacts', content_rowid='rowid'
);
"""

_FTS_TRIGGERS_SQL = """
CREATE TRIGGER IF NOT EXISTS artifacts_ai AFTER INSERT ON artifacts BEGIN
    INSERT INTO artifacts_fts(rowid, name, description, tags, keywords, category)
    VALUES (new.rowid, new.name, new.description, new.tags, new.keywords,
            new.category);
END;

CREATE TRIGGER IF NOT EXISTS artifacts_ad AFTER DELETE ON artifacts BEGIN
    INSERT INTO artifacts_fts(artifacts_fts, rowid, name, description, tags,
                              keywords, category)
    VALUES ('delete', old.rowid, old.name, old.description, old.tags,
            old.keywords, old.category);
END;

CREATE TRIGGER IF NOT EXISTS artifacts_au AFTER UPDATE ON artifacts BEGIN
    INSERT INTO artifacts_fts(artifacts_fts, rowid, name, description, tags,
                              keywords, category)
    VALUES ('delete', old.rowid, old.name, old.description, old.tags,
            old.keywords, old.category);
    INSERT INTO artifacts_fts(rowid, name, description, tags, keywords, category)
    VALUES (new.rowid, new.name, new.description, new.tags, new.keywords,
            new.category);
END;
"""

_INSTALLATIONS_FK_SQL = """
CREATE TABLE installations_new (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    artifact_id TEXT NOT NULL,
    catalog_id TEXT NOT NULL,
    version TEXT NOT NULL,
    installed_path TEXT NOT NULL,
    installed_at TEXT NOT NULL DEFAULT (datetime('now')),
    last_used TEXT,
    UNIQUE(artifact_id, catalog_id),
    FOREIGN KEY (catalog_id) REFERENCES catalogs(id) ON DELETE CASCADE,
    FOREIGN KEY (artifact_id, catalog_id)
        REFERENCES artifacts(id, catalog_id) ON DELETE CASCADE
);

INSERT INTO installations_new
    (id, artifact_id, catalog_id, version, installed_path, installed_at,
     last_used)
SELECT id, artifact_id, catalog_id, version, installed_path, installed_at,
       last_used
FROM installations;

DROP TABLE installations;

ALTER TABLE installations_new RENAME TO installations;

CREATE INDEX IF NOT EXISTS idx_installations_artifact
    ON installations(artifact_id, catalog_id);
"""


def _table_sql(conn: sqlite3.Connection, table: str) -> Optional[str]:
    row = conn.execute(
        "SELECT sql FROM sqlite_master WHERE type = 'table' AND name = ?",
        (table,),
    ).fetchone()
    return row[0] if row else None


def _table_columns(conn: sqlite3.Connection, table: str) -> List[str]:
    return [r[1] for r in conn.execute(f"PRAGMA table_info({table})")]


def _migrate_base_schema(conn: sqlite3.Connection) -> None:
    """Version 1: catalogs, artifacts, installations and the FTS index."""
    conn.executescript(_BASE_SCHEMA_SQL)
    conn.executescript(_FTS_SCHEMA_SQL)
    conn.executescript(_FTS_TRIGGERS_SQL)


def _migrate_installation_foreign_keys(conn: sqlite3.Connection) -> None:
    """Version 2: rebuild installations with cascading foreign keys."""
    sql = _table_sql(conn, 'installations')
    if sql is None or 'FOREIGN KEY' in sql:
        return

    logger.info("Adding foreign key constraints to installations table")
    # SQLite cannot add constraints in place. Enforcement is off while the
    # table is copied so rows of since-removed artifacts survive the copy.
    conn.commit()
    conn.execute("PRAGMA foreign_keys = OFF")
    try:
        conn.executescript(f"BEGIN;\n{_INSTALLATIONS_FK_SQL}\nCOMMIT;")
    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.execute("PRAGMA foreign_keys = ON")


def _migrate_supporting_files(conn: sqlite3.Connection) -> None:
    """Version 3: add the artifacts.supporting_files column."""
    if _table_sql(conn, 'artifacts') is None:
        return
    if 'supporting_files' in _table_columns(conn, 'artifacts'):
        return

    logger.info("Adding supporting_files column to artifacts table")
    conn.execute("ALTER TABLE artifacts ADD COLUMN supporting_files TEXT")
    conn.commit()


_CURRENT_SCHEMA_VERSION = 3

# Migration functions: (target_version, callable). Each step checks its
# own marker, so re-running one against a migrated store is a no-op.
_MIGRATIONS: List[Tuple[int, Callable[[sqlite3.Connection], None]]] = [
    (1, _migrate_base_schema),
    (2, _migrate_installation_foreign_keys),
    (3, _migrate_supporting_files),
]

_ARTIFACT_COLUMNS = (
    'id', 'catalog_id', 'type', 'name', 'description', 'path', 'version',
    'category', 'tags', 'keywords', 'language', 'framework', 'use_case',
    'difficulty', 'source_url', 'metadata', 'author', 'compatibility',
    'dependencies', 'supporting_files', 'estimated_time',
)

_UPSERT_ARTIFACT_SQL = (
    f"INSERT INTO artifacts ({', '.join(_ARTIFACT_COLUMNS)}) "
    f"VALUES ({', '.join('?' for _ in _ARTIFACT_COLUMNS)}) "
    f"ON CONFLICT(id, catalog_id) DO UPDATE SET "
    + ', '.join(
        f"{c} = excluded.{c}" for c in _ARTIFACT_COLUMNS
        if c not in ('id', 'catalog_id')
    )
    + ", updated_at = datetime('now')"
)

_CATALOG_SELECT_SQL = """
SELECT c.*,
       (SELECT COUNT(*) FROM artifacts a WHERE a.catalog_id = c.id)
           AS artifact_count
FROM catalogs c
"""

_INSTALLATION_COLUMNS = (
    "id, artifact_id, catalog_id, version, installed_path, installed_at, "
    "last_used"
)

_SORT_SQL = {
    'rating': "COALESCE(json_extract(a.metadata, '$.rating'), 0) DESC",
    'downloads': "COALESCE(json_extract(a.metadata, '$.downloads'), 0) DESC",
    'updated': (
        "COALESCE(json_extract(a.metadata, '$.lastUpdated'), a.updated_at) "
        "DESC"
    ),
}


def _fts_expression(text: str) -> Optional[str]:
    """Turn free text into an FTS5 query of quoted prefix terms.

    ``code-review`` becomes ``"code"* "review"*``; FTS operators in user
    input are never interpreted.
    """
    tokens = re.findall(r'\w+', text)
    if not tokens:
        return None
    return ' '.join(f'"{t}"*' for t in tokens)


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def _dumps(value: Any) -> str:
    return json.dumps(value)


def _loads(value: Optional[str], default: Any) -> Any:
    if value is None:
        return default
    try:
        loaded = json.loads(value)
    except json.JSONDecodeError:
        return default
    return default if loaded is None else loaded


class CatalogDatabase:
    """SQLite-backed store for catalogs, artifacts and installations.

    Parameters
    ----------
    db_path : Optional[Path]
        Path to the SQLite database file. If None, resolved via
        the catalog path priority chain (env var > config > default).
        ``":memory:"`` opens a private in-memory store.
    """

    def __init__(self, db_path: Optional[Path] = None) -> None:
        if db_path is None:
            ensure_config_dir()
            db_path = resolve_catalog_path()

        if str(db_path) == ':memory:':
            self._db_path = None
            target = ':memory:'
        else:
            self._db_path = Path(db_path)
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            target = str(self._db_path)

        # Refresh sweeps may run on a scheduler thread; every access goes
        # through self._lock.
        self._lock = threading.RLock()
        self._conn = sqlite3.connect(target, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        if self._db_path is not None:
            self._conn.execute("PRAGMA journal_mode = WAL")
        self._run_migrations()

    def _run_migrations(self) -> None:
        """Run any pending schema migrations."""
        with self._lock:
            self._conn.executescript(_SCHEMA_VERSION_SQL)
            row = self._conn.execute(
                "SELECT version FROM schema_version"
            ).fetchone()
            current = row['version'] if row else 0
            if row is None:
                self._conn.execute(
                    "INSERT INTO schema_version (version) VALUES (0)"
                )
                self._conn.commit()

            for target_version, migrate_fn in _MIGRATIONS:
                if target_version > current:
                    logger.info(
                        "Running migration to schema version %d",
                        target_version,
                    )
                    migrate_fn(self._conn)
                    self._conn.execute(
                        "UPDATE schema_version SET version = ?",
                        (target_version,),
                    )
                    self._conn.commit()
                    current = target_version

    @property
    def schema_version(self) -> int:
        """Current schema version."""
        with self._lock:
            row = self._conn.execute(
                "SELECT version FROM schema_version"
            ).fetchone()
        return row['version'] if row else 0

    @property
    def path(self) -> Optional[Path]:
        return self._db_path

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._conn.close()

    def __enter__(self) -> 'CatalogDatabase':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run a block of writes atomically.

        Nested use joins the enclosing transaction. Any exception rolls
        the whole unit back and is re-raised.
        """
        with self._lock:
            if self._conn.in_transaction:
                yield self._conn
                return
            self._conn.execute("BEGIN")
            try:
                yield self._conn
            except BaseException:
                self._conn.rollback()
                raise
            else:
                self._conn.commit()

    def _fetchall(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        with self._lock:
            return self._conn.execute(sql, params).fetchall()

    def _fetchone(self, sql: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        with self._lock:
            return self._conn.execute(sql, params).fetchone()

    # ------------------------------------------------------------------
    # Catalogs
    # ------------------------------------------------------------------

    def add_catalog(
        self,
        catalog_id: str,
        url: str,
        metadata: Dict[str, Any],
        enabled: bool = True,
    ) -> None:
        """Register a new catalog.

        Raises
        ------
        CatalogConflictError
            If the id or the URL is already registered.
        """
        try:
            with self.transaction() as conn:
                conn.execute(
                    """INSERT INTO catalogs
                    (id, url, enabled, metadata, status, last_fetched)
                    VALUES (?, ?, ?, ?, 'healthy', datetime('now'))""",
                    (catalog_id, url, int(enabled), _dumps(metadata)),
                )
        except sqlite3.IntegrityError as e:
            raise CatalogConflictError(catalog_id, str(e)) from e

    def upsert_catalog(
        self,
        catalog_id: str,
        url: str,
        metadata: Dict[str, Any],
        enabled: bool = True,
        status: str = 'healthy',
        error: Optional[str] = None,
    ) -> None:
        """Insert a catalog or overwrite its URL, metadata and status.

        Existing artifacts and installations are kept; an update never
        goes through delete-and-reinsert.

        Raises
        ------
        CatalogConflictError
            If the URL belongs to a different catalog.
        """
        try:
            with self.transaction() as conn:
                conn.execute(
                    """INSERT INTO catalogs
                    (id, url, enabled, metadata, status, error, last_fetched)
                    VALUES (?, ?, ?, ?, ?, ?, datetime('now'))
                    ON CONFLICT(id) DO UPDATE SET
                        url = excluded.url,
                        enabled = excluded.enabled,
                        metadata = excluded.metadata,
                        status = excluded.status,
                        error = excluded.error,
                        last_fetched = excluded.last_fetched,
                        updated_at = datetime('now')""",
                    (catalog_id, url, int(enabled), _dumps(metadata),
                     status, error),
                )
        except sqlite3.IntegrityError as e:
            raise CatalogConflictError(catalog_id, str(e)) from e

    def set_catalog_status(
        self,
        catalog_id: str,
        status: str,
        error: Optional[str] = None,
    ) -> None:
        with self.transaction() as conn:
            conn.execute(
                """UPDATE catalogs SET status = ?, error = ?,
                updated_at = datetime('now') WHERE id = ?""",
                (status, error, catalog_id),
            )

    def update_catalog_settings(
        self,
        catalog_id: str,
        enabled: Optional[bool] = None,
        url: Optional[str] = None,
    ) -> bool:
        """Change the enabled flag and/or URL of a catalog.

        Returns
        -------
        bool
            True if the catalog exists.
        """
        if self.get_catalog(catalog_id) is None:
            return False
        try:
            with self.transaction() as conn:
                if enabled is not None:
                    conn.execute(
                        """UPDATE catalogs SET enabled = ?,
                        updated_at = datetime('now') WHERE id = ?""",
                        (int(enabled), catalog_id),
                    )
                if url:
                    conn.execute(
                        """UPDATE catalogs SET url = ?,
                        updated_at = datetime('now') WHERE id = ?""",
                        (url, catalog_id),
                    )
        except sqlite3.IntegrityError as e:
            raise CatalogConflictError(catalog_id, str(e)) from e
        return True

    def delete_catalog(self, catalog_id: str) -> bool:
        """Delete a catalog with its artifacts and installation records.

        Returns
        -------
        bool
            True if a catalog was removed.
        """
        with self.transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM catalogs WHERE id = ?", (catalog_id,)
            )
        return cursor.rowcount > 0

    def get_catalog(self, catalog_id: str) -> Optional[CatalogRecord]:
        row = self._fetchone(
            _CATALOG_SELECT_SQL + " WHERE c.id = ?", (catalog_id,)
        )
        return self._row_to_catalog(row) if row is not None else None

    def list_catalogs(self) -> List[CatalogRecord]:
        rows = self._fetchall(
            _CATALOG_SELECT_SQL + " ORDER BY c.created_at ASC, c.id ASC"
        )
        return [self._row_to_catalog(r) for r in rows]

    # ------------------------------------------------------------------
    # Artifacts
    # ------------------------------------------------------------------

    def replace_artifacts(
        self,
        catalog_id: str,
        artifacts: Sequence[Artifact],
    ) -> int:
        """Make the catalog's artifact set exactly ``artifacts``.

        Runs as one transaction: readers see either the old or the new
        set. Entries still listed are updated in place so installation
        records for them survive; entries no longer listed are deleted
        (cascading to their installation records).

        Returns
        -------
        int
            Number of artifacts now indexed for the catalog.
        """
        with self.transaction() as conn:
            existing = {
                r['id'] for r in conn.execute(
                    "SELECT id FROM artifacts WHERE catalog_id = ?",
                    (catalog_id,),
                )
            }
            incoming = set()
            for artifact in artifacts:
                conn.execute(
                    _UPSERT_ARTIFACT_SQL,
                    self._artifact_params(catalog_id, artifact),
                )
                incoming.add(artifact.id)

            stale = sorted(existing - incoming)
            conn.executemany(
                "DELETE FROM artifacts WHERE catalog_id = ? AND id = ?",
                [(catalog_id, artifact_id) for artifact_id in stale],
            )
        logger.debug(
            "Indexed %d artifacts for catalog '%s' (%d removed)",
            len(incoming), catalog_id, len(stale),
        )
        return len(incoming)

    def get_artifact(
        self,
        catalog_id: str,
        artifact_id: str,
    ) -> Optional[Artifact]:
        """Get an artifact by catalog and id, or None."""
        row = self._fetchone(
            "SELECT * FROM artifacts WHERE catalog_id = ? AND id = ?",
            (catalog_id, artifact_id),
        )
        return self._row_to_artifact(row) if row is not None else None

    def find_artifact(self, artifact_id: str) -> Optional[Artifact]:
        """First artifact with this id in any enabled catalog, or None."""
        row = self._fetchone(
            "SELECT a.* FROM artifacts a "
            "INNER JOIN catalogs c ON c.id = a.catalog_id "
            "WHERE a.id = ? AND c.enabled = 1 "
            "ORDER BY a.catalog_id LIMIT 1",
            (artifact_id,),
        )
        return self._row_to_artifact(row) if row is not None else None

    def list_artifacts(self, catalog_id: Optional[str] = None) -> List[Artifact]:
        """List artifacts, optionally restricted to one catalog."""
        if catalog_id is not None:
            rows = self._fetchall(
                "SELECT * FROM artifacts WHERE catalog_id = ? ORDER BY name, id",
                (catalog_id,),
            )
        else:
            rows = self._fetchall(
                "SELECT * FROM artifacts ORDER BY name, catalog_id, id"
            )
        return [self._row_to_artifact(r) for r in rows]

    def count_artifacts(self, catalog_id: str) -> int:
        row = self._fetchone(
            "SELECT COUNT(*) AS count FROM artifacts WHERE catalog_id = ?",
            (catalog_id,),
        )
        return row['count']

    def search(self, query: Optional[SearchQuery] = None) -> SearchResult:
        """Full-text search and faceted filtering over enabled catalogs.

        Parameters
        ----------
        query : Optional[SearchQuery]
            Text, filters, sort order and page. None lists everything.

        Returns
        -------
        SearchResult
        """
        query = query or SearchQuery()
        joins = ["INNER JOIN catalogs c ON c.id = a.catalog_id"]
        conditions = ["c.enabled = 1"]
        params: List[Any] = []

        fts = _fts_expression(query.query) if query.query else None
        if fts is not None:
            joins.append(
                "INNER JOIN artifacts_fts ON artifacts_fts.rowid = a.rowid"
            )
            conditions.append("artifacts_fts MATCH ?")
            params.append(fts)

        for column, values in (
            ('a.type', query.types),
            ('a.category', query.category),
            ('a.difficulty', query.difficulty),
            ('a.catalog_id', query.catalog),
        ):
            if values:
                conditions.append(
                    f"{column} IN ({', '.join('?' for _ in values)})"
                )
                params.extend(values)

        for column, values in (
            ('a.language', query.language),
            ('a.framework', query.framework),
            ('a.tags', query.tags),
        ):
            if values:
                conditions.append(
                    f"EXISTS (SELECT 1 FROM json_each({column}) j "
                    f"WHERE j.value IN ({', '.join('?' for _ in values)}))"
                )
                params.extend(values)

        from_sql = (
            f"FROM artifacts a {' '.join(joins)} "
            f"WHERE {' AND '.join(conditions)}"
        )

        if query.sort_by == 'relevance':
            order = (
                "artifacts_fts.rank, a.name" if fts is not None else "a.name"
            )
        else:
            order = f"{_SORT_SQL[query.sort_by]}, a.name"
        order += ", a.catalog_id, a.id"

        offset = (query.page - 1) * query.page_size
        with self._lock:
            total = self._conn.execute(
                f"SELECT COUNT(*) {from_sql}", params
            ).fetchone()[0]
            rows = self._conn.execute(
                f"SELECT a.* {from_sql} ORDER BY {order} LIMIT ? OFFSET ?",
                [*params, query.page_size, offset],
            ).fetchall()

        artifacts = [self._row_to_artifact(r) for r in rows]
        return SearchResult(
            artifacts=artifacts,
            total=total,
            page=query.page,
            page_size=query.page_size,
            has_more=offset + len(artifacts) < total,
        )

    # ------------------------------------------------------------------
    # Installations
    # ------------------------------------------------------------------

    def record_installation(
        self,
        catalog_id: str,
        artifact_id: str,
        version: str,
        installed_path: str,
    ) -> Installation:
        """Insert or overwrite the installation record of an artifact.

        Raises
        ------
        ArtifactNotFoundError
            If the artifact is not indexed in the catalog.
        """
        try:
            with self.transaction() as conn:
                conn.execute(
                    """INSERT INTO installations
                    (artifact_id, catalog_id, version, installed_path,
                     installed_at)
                    VALUES (?, ?, ?, ?, datetime('now'))
                    ON CONFLICT(artifact_id, catalog_id) DO UPDATE SET
                        version = excluded.version,
                        installed_path = excluded.installed_path,
                        installed_at = excluded.installed_at""",
                    (artifact_id, catalog_id, version, installed_path),
                )
        except sqlite3.IntegrityError as e:
            raise ArtifactNotFoundError(catalog_id, artifact_id) from e
        return self.get_installation(catalog_id, artifact_id)

    def delete_installation(self, catalog_id: str, artifact_id: str) -> bool:
        with self.transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM installations "
                "WHERE catalog_id = ? AND artifact_id = ?",
                (catalog_id, artifact_id),
            )
        return cursor.rowcount > 0

    def get_installation(
        self,
        catalog_id: str,
        artifact_id: str,
    ) -> Optional[Installation]:
        row = self._fetchone(
            f"SELECT {_INSTALLATION_COLUMNS} FROM installations "
            f"WHERE catalog_id = ? AND artifact_id = ?",
            (catalog_id, artifact_id),
        )
        return self._row_to_installation(row) if row is not None else None

    def list_installations(
        self,
        catalog_id: Optional[str] = None,
    ) -> List[Installation]:
        """List installation records, most recent first."""
        sql = f"SELECT {_INSTALLATION_COLUMNS} FROM installations"
        params: Tuple[Any, ...] = ()
        if catalog_id is not None:
            sql += " WHERE catalog_id = ?"
            params = (catalog_id,)
        sql += " ORDER BY installed_at DESC, id DESC"
        return [self._row_to_installation(r) for r in self._fetchall(sql, params)]

    def mark_installation_used(self, catalog_id: str, artifact_id: str) -> bool:
        with self.transaction() as conn:
            cursor = conn.execute(
                "UPDATE installations SET last_used = datetime('now') "
                "WHERE catalog_id = ? AND artifact_id = ?",
                (catalog_id, artifact_id),
            )
        return cursor.rowcount > 0

    # ------------------------------------------------------------------
    # Row conversion
    # ------------------------------------------------------------------

    @staticmethod
    def _artifact_params(catalog_id: str, artifact: Artifact) -> Tuple[Any, ...]:
        return (
            artifact.id,
            catalog_id,
            artifact.artifact_type,
            artifact.name,
            artifact.description,
            artifact.path,
            artifact.version,
            artifact.category,
            _dumps(artifact.tags),
            _dumps(artifact.keywords),
            _dumps(artifact.language),
            _dumps(artifact.framework),
            _dumps(artifact.use_case),
            artifact.difficulty,
            artifact.source_url,
            _dumps(artifact.metadata),
            _dumps(artifact.author),
            _dumps(artifact.compatibility),
            _dumps(artifact.dependencies),
            _dumps(artifact.supporting_files),
            artifact.estimated_time,
        )

    @staticmethod
    def _row_to_artifact(row: sqlite3.Row) -> Artifact:
        """Convert a database row to an Artifact instance."""
        return Artifact(
            id=row['id'],
            catalog_id=row['catalog_id'],
            artifact_type=row['type'],
            name=row['name'],
            path=row['path'],
            version=row['version'],
            source_url=row['source_url'],
            description=row['description'] or '',
            category=row['category'],
            tags=_loads(row['tags'], []),
            keywords=_loads(row['keywords'], []),
            language=_loads(row['language'], []),
            framework=_loads(row['framework'], []),
            use_case=_loads(row['use_case'], []),
            difficulty=row['difficulty'],
            estimated_time=row['estimated_time'],
            author=_loads(row['author'], None),
            compatibility=_loads(row['compatibility'], None),
            metadata=_loads(row['metadata'], {}),
            dependencies=_loads(row['dependencies'], []),
            supporting_files=_loads(row['supporting_files'], []),
        )

    @staticmethod
    def _row_to_catalog(row: sqlite3.Row) -> CatalogRecord:
        return CatalogRecord(
            id=row['id'],
            url=row['url'],
            enabled=bool(row['enabled']),
            metadata=_loads(row['metadata'], {}),
            status=row['status'],
            error=row['error'],
            last_fetched=_parse_timestamp(row['last_fetched']),
            created_at=_parse_timestamp(row['created_at']),
            updated_at=_parse_timestamp(row['updated_at']),
            artifact_count=row['artifact_count'],
        )

    @staticmethod
    def _row_to_installation(row: sqlite3.Row) -> Installation:
        return Installation(
            id=row['id'],
            artifact_id=row['artifact_id'],
            catalog_id=row['catalog_id'],
            version=row['version'],
            installed_path=row['installed_path'],
            installed_at=_parse_timestamp(row['installed_at']),
            last_used=_parse_timestamp(row['last_used']),
        )
