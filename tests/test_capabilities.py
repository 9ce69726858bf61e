"""Tests for capability protocols and the invalid backend."""

from __future__ import annotations

import pytest

from omnifs.fs.database import DatabaseBackend
from omnifs.fs.exceptions import BackendError, InvalidBackendError
from omnifs.fs.invalid import InvalidBackend
from omnifs.fs.local import LocalBackend
from omnifs.fs.memory import MemoryBackend
from omnifs.fs.protocol import (
    Backend,
    SupportsMakeDir,
    SupportsRead,
    SupportsRemove,
    SupportsWrite,
)

# =========================================================================
# MinimalBackend: implements only the core protocol, no capabilities
# =========================================================================


class MinimalBackend:
    """A backend that can only list, stat and join."""

    prefix = "min://x"
    name = "minimal file system"

    def list_dir(self, path, visit, patterns=None):
        return None

    def stat(self, path):
        return None

    def join_clean(self, *parts: str) -> str:
        return "/".join(parts)


class NotABackend:
    def stat(self, path):
        return None


class TestProtocolProbing:
    def test_minimal_is_backend(self):
        assert isinstance(MinimalBackend(), Backend)

    @pytest.mark.parametrize(
        "protocol",
        [
            pytest.param(SupportsRead, id="read"),
            pytest.param(SupportsWrite, id="write"),
            pytest.param(SupportsMakeDir, id="make_dir"),
            pytest.param(SupportsRemove, id="remove"),
        ],
    )
    def test_minimal_has_no_capabilities(self, protocol):
        assert not isinstance(MinimalBackend(), protocol)

    def test_incomplete_is_not_backend(self):
        assert not isinstance(NotABackend(), Backend)

    @pytest.mark.parametrize(
        "factory",
        [
            pytest.param(LocalBackend, id="local"),
            pytest.param(MemoryBackend, id="memory"),
            pytest.param(lambda: DatabaseBackend.from_url("sqlite://"), id="database"),
            pytest.param(InvalidBackend, id="invalid"),
        ],
    )
    def test_shipped_backends_support_everything(self, factory):
        backend = factory()
        for protocol in (Backend, SupportsRead, SupportsWrite, SupportsMakeDir, SupportsRemove):
            assert isinstance(backend, protocol)


class TestInvalidBackend:
    def test_identity(self):
        backend = InvalidBackend()
        assert backend.prefix == "invalid://"
        assert backend.name == "invalid file system"

    @pytest.mark.parametrize(
        "operation",
        [
            pytest.param(lambda b: b.list_dir("/", lambda e: True), id="list_dir"),
            pytest.param(lambda b: b.stat("/x"), id="stat"),
            pytest.param(lambda b: b.join_clean("/x", "y"), id="join_clean"),
            pytest.param(lambda b: b.read_bytes("/x"), id="read_bytes"),
            pytest.param(lambda b: b.write_bytes("/x", b""), id="write_bytes"),
            pytest.param(lambda b: b.make_dir("/x"), id="make_dir"),
            pytest.param(lambda b: b.remove("/x"), id="remove"),
        ],
    )
    def test_every_operation_fails(self, operation):
        backend = InvalidBackend()
        with pytest.raises(InvalidBackendError) as exc_info:
            operation(backend)
        assert exc_info.value.backend is backend
        assert isinstance(exc_info.value, BackendError)
