"""Tests for Handle: canonical identity and routed operations."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

import pytest

from omnifs.fs.exceptions import (
    BackendError,
    CancellationError,
    CapabilityNotSupportedError,
    InvalidBackendError,
)
from omnifs.fs.memory import MemoryBackend
from omnifs.fs.registry import Registry
from omnifs.fs.types import DirEntry
from omnifs.handle import INVALID_HANDLE, Handle

if TYPE_CHECKING:
    from pathlib import Path


class ListOnlyBackend:
    """Implements the core protocol only."""

    name = "list-only file system"
    prefix = "ro://x"

    def list_dir(self, path, visit, patterns=None):
        visit(DirEntry("only", False))

    def stat(self, path):
        return None

    def join_clean(self, *parts: str) -> str:
        return "/" + "/".join(p.strip("/") for p in parts if p.strip("/"))


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class TestIdentity:
    def test_memory_uri_is_canonical(self, registry: Registry, memory: MemoryBackend):
        h = Handle("mem://test/a//b/./c/", registry=registry)
        assert h.uri == "mem://test/a/b/c"
        assert str(h) == "mem://test/a/b/c"

    def test_local_file_scheme_is_stripped(self, registry: Registry):
        assert Handle("file:///tmp/x", registry=registry).uri == "/tmp/x"

    def test_equality_on_canonical_form(self, registry: Registry, memory: MemoryBackend):
        a = Handle("mem://test/a/b", registry=registry)
        b = Handle("mem://test//a/b/", registry=registry)
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_registry_excluded_from_equality(self):
        assert Handle("/tmp/x", registry=Registry()) == Handle("/tmp/x", registry=Registry())

    def test_unresolvable_uri_kept_raw(self, registry: Registry):
        h = Handle("s3://bucket//key", registry=registry)
        assert h.uri == "s3://bucket//key"
        assert h.is_valid is False

    def test_frozen(self):
        h = Handle("/tmp")
        with pytest.raises(dataclasses.FrozenInstanceError):
            h.uri = "/etc"  # type: ignore[misc]

    def test_resolve(self, registry: Registry, memory: MemoryBackend):
        h = Handle("mem://test/a", registry=registry)
        assert h.resolve() == (memory, "/a")
        assert h.backend is memory
        assert h.path == "/a"


class TestNavigation:
    def test_join(self, registry: Registry, memory: MemoryBackend):
        root = Handle("mem://test/", registry=registry)
        assert root.join("a", "b").uri == "mem://test/a/b"

    def test_join_keeps_registry(self, registry: Registry, memory: MemoryBackend):
        child = Handle("mem://test/", registry=registry).join("a")
        assert child.registry is registry
        assert child.backend is memory

    def test_parent(self, registry: Registry, memory: MemoryBackend):
        assert Handle("mem://test/a/b", registry=registry).parent().uri == "mem://test/a"

    def test_parent_of_root_is_root(self, registry: Registry, memory: MemoryBackend):
        assert Handle("mem://test/", registry=registry).parent().uri == "mem://test/"

    def test_name(self, registry: Registry, memory: MemoryBackend):
        assert Handle("mem://test/a/file.txt", registry=registry).name == "file.txt"

    def test_local_join(self, registry: Registry, tmp_path: Path):
        h = Handle(str(tmp_path), registry=registry).join("x", "y.txt")
        assert h.uri == str(tmp_path / "x" / "y.txt")


# ---------------------------------------------------------------------------
# Invalid handle
# ---------------------------------------------------------------------------


class TestInvalidHandle:
    def test_is_empty(self):
        assert INVALID_HANDLE.uri == ""
        assert INVALID_HANDLE.is_valid is False
        assert INVALID_HANDLE.name == ""

    def test_equals_empty_handle(self):
        assert Handle("") == INVALID_HANDLE

    @pytest.mark.parametrize(
        "operation",
        [
            pytest.param(lambda h: h.stat(), id="stat"),
            pytest.param(lambda h: h.exists(), id="exists"),
            pytest.param(lambda h: h.join("x"), id="join"),
            pytest.param(lambda h: h.list_dir(), id="list_dir"),
            pytest.param(lambda h: h.read_bytes(), id="read_bytes"),
            pytest.param(lambda h: h.write_bytes(b"x"), id="write_bytes"),
            pytest.param(lambda h: h.make_dir(), id="make_dir"),
            pytest.param(lambda h: h.remove(), id="remove"),
        ],
    )
    def test_every_operation_fails(self, operation):
        with pytest.raises(InvalidBackendError):
            operation(INVALID_HANDLE)

    def test_error_is_backend_error(self):
        with pytest.raises(BackendError):
            INVALID_HANDLE.stat()


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


class TestOperations:
    def test_write_read(self, registry: Registry, memory: MemoryBackend):
        h = Handle("mem://test/f.txt", registry=registry)
        h.write_bytes(b"hello")
        assert h.read_bytes() == b"hello"
        assert h.exists() is True
        assert h.is_dir() is False

    def test_make_dir_and_list(self, registry: Registry, memory: MemoryBackend):
        root = Handle("mem://test/", registry=registry)
        root.join("d", "e").make_dir(parents=True)
        root.join("d", "f.py").write_bytes(b"")
        root.join("d", "g.md").write_bytes(b"")
        d = root.join("d")
        assert d.is_dir() is True
        assert [e.name for e in d.list_dir()] == ["e", "f.py", "g.md"]
        assert d.list_dir(["*.py"]) == [DirEntry("f.py", False)]

    def test_remove(self, registry: Registry, memory: MemoryBackend):
        h = Handle("mem://test/f", registry=registry)
        h.write_bytes(b"x")
        h.remove()
        assert h.exists() is False
        assert h.stat() is None

    def test_glob_and_walk(self, registry: Registry, memory: MemoryBackend):
        memory.add_files({"/d/a.txt": b"", "/d/b.txt": b"", "/d/sub/c.txt": b""})
        d = Handle("mem://test/d", registry=registry)
        assert [m.captures for m in d.glob("*.txt")] == [("a.txt",), ("b.txt",)]
        seen: list[str] = []
        d.walk(lambda h, _entry: seen.append(h.uri), ["*.txt"])
        assert seen == ["mem://test/d/a.txt", "mem://test/d/b.txt", "mem://test/d/sub/c.txt"]


    def test_walk_timeout(self, registry: Registry, memory: MemoryBackend):
        memory.add_files({"/d/a.txt": b""})
        d = Handle("mem://test/d", registry=registry)
        with pytest.raises(CancellationError, match="deadline exceeded"):
            d.walk(lambda _h, _entry: None, timeout=0)

    def test_children_share_registry_without_backend_calls(self, registry: Registry):
        class CountingJoins(MemoryBackend):
            joins = 0

            def join_clean(self, *parts):
                type(self).joins += 1
                return super().join_clean(*parts)

        registry.register(CountingJoins("joins"))
        child = Handle("mem://joins/", registry=registry).join("a", "b")
        assert child.uri == "mem://joins/a/b"
        assert child.registry is registry
        assert CountingJoins.joins == 3


class TestCapabilityProbing:
    @pytest.fixture
    def handle(self, registry: Registry) -> Handle:
        registry.register(ListOnlyBackend())
        return Handle("ro://x/file", registry=registry)

    @pytest.mark.parametrize(
        "operation",
        [
            pytest.param(lambda h: h.read_bytes(), id="read_bytes"),
            pytest.param(lambda h: h.write_bytes(b"x"), id="write_bytes"),
            pytest.param(lambda h: h.make_dir(), id="make_dir"),
            pytest.param(lambda h: h.remove(), id="remove"),
        ],
    )
    def test_missing_capability(self, handle: Handle, operation):
        with pytest.raises(CapabilityNotSupportedError):
            operation(handle)

    def test_core_operations_still_work(self, handle: Handle):
        assert handle.exists() is False
        assert handle.list_dir() == [DirEntry("only", False)]
