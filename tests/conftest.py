from __future__ import annotations

import json
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection.
# This avoids ModuleNotFoundError for imports like `import persistence...` under pytest import modes
# that don't automatically prepend the cwd/rootdir to sys.path.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


SEED_DOCUMENT = {
    "books": [
        {"id": "1", "title": "A", "author": "Ann"},
        {"id": "2", "title": "B", "author": "Bob"},
    ],
    "users": [
        {"id": "u1", "name": "alice"},
    ],
    "profile": {"name": "typicode"},
}


def read_disk(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def db_file(tmp_path: Path) -> Path:
    """
    A fresh backing file per test so nothing touches a real db.json.
    """
    path = tmp_path / "db.json"
    path.write_text(json.dumps(SEED_DOCUMENT, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def store(db_file: Path):
    from persistence import DiskResourceStore

    return DiskResourceStore.open(db_file)


@pytest.fixture
def ops(store):
    from persistence import ResourceOperations

    return ResourceOperations(store)


@pytest.fixture
def client(store):
    from fastapi.testclient import TestClient

    import app as app_module

    return TestClient(app_module.create_app(store=store))
