"""DatabaseBackend: SQL storage through SQLModel, one session per operation."""

from __future__ import annotations

import logging
import os
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import or_
from sqlmodel import Session, SQLModel, col, create_engine, select

from .types import DirEntry, FileInfo
from .utils import glob_to_sql_like, join_virtual, normalize_path, split_path

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Engine

    from omnifs.models.entries import EntryBase

    from .protocol import ListVisitor

logger = logging.getLogger(__name__)

DATABASE_SCHEME = "db://"
DATABASE_URL_ENV = "OMNIFS_DATABASE_URL"


class DatabaseBackend:
    """Database-backed file tree registered under ``db://<name>``.

    Every entry is a row of *entry_model* keyed by ``(namespace, path)``;
    the namespace is the backend name, so several backends can share one
    table.  The root directory is implicit.  Works with any SQLAlchemy
    dialect; listings are ordered by name with the database's collation.

    Name patterns handed to :meth:`list_dir` are pushed down as SQL
    ``LIKE`` filters when every pattern is expressible in ``LIKE``.  Some
    dialects compare ``LIKE`` case-insensitively, so the filter may return
    extra rows; callers re-validate names.
    """

    name = "database file system"

    def __init__(
        self,
        engine: Engine,
        name: str = "default",
        *,
        entry_model: type[EntryBase] | None = None,
        create_tables: bool = True,
    ) -> None:
        if entry_model is None:
            from omnifs.models.entries import Entry

            entry_model = Entry

        self.engine = engine
        self.namespace = name
        self.prefix = f"{DATABASE_SCHEME}{name}"
        self._model = entry_model

        if create_tables:
            SQLModel.metadata.create_all(engine, tables=[entry_model.__table__])  # type: ignore[attr-defined]

    @classmethod
    def from_url(cls, url: str | None = None, name: str = "default") -> DatabaseBackend:
        """Create a backend from a database URL.

        Falls back to the ``OMNIFS_DATABASE_URL`` environment variable.
        """
        resolved = url or os.environ.get(DATABASE_URL_ENV)
        if not resolved:
            raise ValueError(
                f"No database URL provided. Pass url= or set the {DATABASE_URL_ENV} "
                "environment variable."
            )
        return cls(create_engine(resolved, echo=False), name)

    # =========================================================================
    # Row helpers
    # =========================================================================

    def _get(self, session: Session, path: str) -> EntryBase | None:
        model = self._model
        return session.exec(
            select(model).where(
                model.namespace == self.namespace,
                model.path == path,
            )
        ).first()

    def _require_parent_dir(self, session: Session, path: str) -> tuple[str, str]:
        parent_path, name = split_path(path)
        if not name:
            raise FileExistsError(f"Root directory: {path}")
        if parent_path != "/":
            parent = self._get(session, parent_path)
            if parent is None:
                raise FileNotFoundError(f"Parent directory not found: {parent_path}")
            if not parent.is_directory:
                raise NotADirectoryError(f"Not a directory: {parent_path}")
        return parent_path, name

    # =========================================================================
    # Core protocol
    # =========================================================================

    def list_dir(
        self,
        path: str,
        visit: ListVisitor,
        patterns: Sequence[str] | None = None,
    ) -> None:
        path = normalize_path(path)
        model = self._model
        with Session(self.engine) as session:
            if path != "/":
                node = self._get(session, path)
                if node is None:
                    raise FileNotFoundError(f"Directory not found: {path}")
                if not node.is_directory:
                    raise NotADirectoryError(f"Not a directory: {path}")

            stmt = select(model.name, model.is_directory).where(
                model.namespace == self.namespace,
                model.parent_path == path,
            )
            if patterns:
                likes = [glob_to_sql_like(p) for p in patterns]
                if all(like is not None for like in likes):
                    stmt = stmt.where(
                        or_(*(col(model.name).like(like, escape="\\") for like in likes))
                    )
                else:
                    logger.debug("No LIKE pushdown for patterns %r", patterns)
            rows = session.exec(stmt.order_by(col(model.name))).all()

        for name, is_dir in rows:
            if visit(DirEntry(name=name, is_directory=is_dir)) is False:
                return

    def stat(self, path: str) -> FileInfo | None:
        path = normalize_path(path)
        if path == "/":
            return FileInfo(path="/", name="", is_directory=True)
        with Session(self.engine) as session:
            entry = self._get(session, path)
            if entry is None:
                return None
            return FileInfo(
                path=entry.path,
                name=entry.name,
                is_directory=entry.is_directory,
                size_bytes=None if entry.is_directory else entry.size_bytes,
                modified_at=entry.updated_at,
            )

    def join_clean(self, *parts: str) -> str:
        if parts and parts[0].startswith(self.prefix):
            parts = (parts[0][len(self.prefix):], *parts[1:])
        return join_virtual(*parts)

    # =========================================================================
    # Capabilities
    # =========================================================================

    def read_bytes(self, path: str) -> bytes:
        path = normalize_path(path)
        with Session(self.engine) as session:
            entry = self._get(session, path)
            if entry is None:
                raise FileNotFoundError(f"File not found: {path}")
            if entry.is_directory:
                raise IsADirectoryError(f"Is a directory: {path}")
            return entry.content or b""

    def write_bytes(self, path: str, data: bytes) -> None:
        path = normalize_path(path)
        with Session(self.engine) as session:
            parent_path, name = self._require_parent_dir(session, path)
            entry = self._get(session, path)
            if entry is not None and entry.is_directory:
                raise IsADirectoryError(f"Is a directory: {path}")
            if entry is None:
                entry = self._model(
                    namespace=self.namespace,
                    path=path,
                    parent_path=parent_path,
                    name=name,
                )
            entry.content = bytes(data)
            entry.size_bytes = len(data)
            entry.updated_at = datetime.now(UTC)
            session.add(entry)
            session.commit()

    def make_dir(self, path: str, parents: bool = False) -> None:
        path = normalize_path(path)
        if path == "/":
            if parents:
                return
            raise FileExistsError("Root directory: /")
        if parents:
            existing_info = self.stat(path)
            if existing_info is not None and existing_info.is_directory:
                return
            parent_path = split_path(path)[0]
            if self.stat(parent_path) is None:
                self.make_dir(parent_path, parents=True)
        with Session(self.engine) as session:
            if self._get(session, path) is not None:
                raise FileExistsError(f"Already exists: {path}")
            parent_path, name = self._require_parent_dir(session, path)
            session.add(
                self._model(
                    namespace=self.namespace,
                    path=path,
                    parent_path=parent_path,
                    name=name,
                    is_directory=True,
                )
            )
            session.commit()

    def remove(self, path: str) -> None:
        path = normalize_path(path)
        model = self._model
        with Session(self.engine) as session:
            entry = self._get(session, path)
            if entry is None:
                raise FileNotFoundError(f"Not found: {path}")
            if entry.is_directory:
                child = session.exec(
                    select(model.id).where(
                        model.namespace == self.namespace,
                        model.parent_path == path,
                    )
                ).first()
                if child is not None:
                    raise OSError(f"Directory not empty: {path}")
            session.delete(entry)
            session.commit()

    def __repr__(self) -> str:
        return f"DatabaseBackend(name={self.namespace!r})"
