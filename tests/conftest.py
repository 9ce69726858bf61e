"""Shared fixtures for omnifs tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlmodel import SQLModel, create_engine

from omnifs.fs.database import DatabaseBackend
from omnifs.fs.memory import MemoryBackend
from omnifs.fs.registry import Registry
from omnifs.handle import Handle

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping
    from pathlib import Path

    from sqlalchemy import Engine


# Sample tree used across glob and walk tests. ``None`` marks a directory.
SAMPLE_TREE: dict[str, bytes | None] = {
    "a/b/c/Hello/World/x/file1.txt": b"one",
    "a/b/c/Hello/World/x/file2.txt": b"two",
    "a/b/c/Hello/World/y": None,
    "a/b/c/cFile": b"c",
}


def build_tree(root: Handle, files: Mapping[str, bytes | None]) -> None:
    """Create *files* below *root* through the handle API."""
    for rel, data in files.items():
        target = root.join(*rel.split("/"))
        if data is None:
            target.make_dir(parents=True)
            continue
        target.parent().make_dir(parents=True)
        target.write_bytes(data)


@pytest.fixture
def engine() -> Iterator[Engine]:
    """In-memory SQLite engine with all tables created."""
    eng = create_engine("sqlite://", echo=False)
    SQLModel.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def registry() -> Registry:
    """An isolated registry; the default registry is never touched."""
    return Registry()


@pytest.fixture
def memory(registry: Registry) -> MemoryBackend:
    backend = MemoryBackend("test")
    registry.register(backend)
    return backend


@pytest.fixture
def database(registry: Registry, engine: Engine) -> DatabaseBackend:
    backend = DatabaseBackend(engine, name="test")
    registry.register(backend)
    return backend


@pytest.fixture
def sample_tree() -> dict[str, bytes | None]:
    return dict(SAMPLE_TREE)


@pytest.fixture
def make_tree() -> Callable[[Handle, Mapping[str, bytes | None]], None]:
    return build_tree


@pytest.fixture(params=["memory", "local", "database"])
def backend_root(
    request: pytest.FixtureRequest,
    registry: Registry,
    tmp_path: Path,
) -> Handle:
    """An empty root directory handle on each backend in turn."""
    if request.param == "memory":
        backend = request.getfixturevalue("memory")
        return Handle(backend.prefix + "/", registry=registry)
    if request.param == "database":
        backend = request.getfixturevalue("database")
        return Handle(backend.prefix + "/", registry=registry)
    return Handle(str(tmp_path), registry=registry)


@pytest.fixture
def sample_root(backend_root: Handle) -> Handle:
    """:data:`SAMPLE_TREE` built on each backend in turn."""
    build_tree(backend_root, SAMPLE_TREE)
    return backend_root
