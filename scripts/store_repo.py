"""Store repo files in database backends and glob across them.

Demonstrates routing by URI prefix: source code goes to one SQLite-backed
``db://code`` backend, docs to a ``db://docs`` backend sharing the same
database file, and the same glob patterns run against both.

Usage:
    uv run python scripts/store_repo.py
"""

from __future__ import annotations

import sys
from pathlib import Path

from sqlmodel import create_engine

from omnifs import DatabaseBackend, Handle, glob, register, unregister
from omnifs.fs.exceptions import BackendError

REPO_ROOT = Path(__file__).resolve().parent.parent
SQLITE_PATH = REPO_ROOT / "omnifs_repo.db"

CODE_EXTENSIONS = {".py", ".js", ".ts", ".go", ".rs", ".c", ".h", ".java"}
DOC_EXTENSIONS = {".md", ".txt", ".rst", ".toml", ".yaml", ".yml", ".json", ".cfg", ".ini"}

SKIP_DIRS = {
    ".git", ".venv", "__pycache__", ".pytest_cache", ".mypy_cache",
    ".ruff_cache", "node_modules", ".idea",
}
MAX_FILE_SIZE = 512 * 1024  # 512 KB


def classify_file(path: Path) -> str | None:
    """Return 'code', 'docs', or None (skip)."""
    if any(part in SKIP_DIRS for part in path.parts) or path.name.startswith("."):
        return None
    ext = path.suffix.lower()
    if ext in CODE_EXTENSIONS:
        return "code"
    if ext in DOC_EXTENSIONS:
        return "docs"
    return None


def collect_files(root: Path) -> dict[str, list[Path]]:
    """Walk the repo and classify files into code vs docs."""
    buckets: dict[str, list[Path]] = {"code": [], "docs": []}
    for p in sorted(root.rglob("*")):
        try:
            if not p.is_file() or p.stat().st_size > MAX_FILE_SIZE:
                continue
        except OSError:
            continue
        kind = classify_file(p.relative_to(root))
        if kind:
            buckets[kind].append(p)
    return buckets


def main() -> None:
    print(f"Repo root:    {REPO_ROOT}")
    print(f"SQLite path:  {SQLITE_PATH}")
    print()

    buckets = collect_files(REPO_ROOT)
    print(f"Found {len(buckets['code'])} code files, {len(buckets['docs'])} doc files\n")

    engine = create_engine(f"sqlite:///{SQLITE_PATH}", echo=False)
    backends = {
        "code": DatabaseBackend(engine, name="code"),
        "docs": DatabaseBackend(engine, name="docs"),
    }
    for backend in backends.values():
        register(backend)

    try:
        print("=" * 60)
        print("PHASE 1: Copying files")
        print("=" * 60)
        failed = 0
        for kind, paths in buckets.items():
            root = Handle(backends[kind].prefix + "/")
            for path in paths:
                rel = path.relative_to(REPO_ROOT).as_posix()
                target = root.join(*rel.split("/"))
                try:
                    target.parent().make_dir(parents=True)
                    target.write_bytes(path.read_bytes())
                except (BackendError, OSError) as e:
                    print(f"  SKIP {target} ({e.__class__.__name__})")
                    failed += 1
            print(f"  {kind}: {len(paths)} files")
        print(f"  failed: {failed}\n")

        print("=" * 60)
        print("PHASE 2: Globbing")
        print("=" * 60)
        for pattern in ("db://code/src/*/*.py", "db://code/src/*/fs/*.py", "db://docs/*.md"):
            matches = list(glob(Handle(""), pattern))
            print(f"  {pattern}: {len(matches)} match(es)")
            for match in matches[:5]:
                print(f"    {match.handle}  captures={list(match.captures)}")
    finally:
        for backend in backends.values():
            unregister(backend)
        engine.dispose()

    if SQLITE_PATH.exists():
        SQLITE_PATH.unlink()
    sys.exit(0)


if __name__ == "__main__":
    main()
