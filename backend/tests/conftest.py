"""Pytest conftest — ensure backend/ is importable for flat module imports."""

import sys
from pathlib import Path

import pytest

# Add backend/ to sys.path so `import chunker`, `from storage import ...` etc. work
_backend_dir = str(Path(__file__).resolve().parent.parent)
if _backend_dir not in sys.path:
    sys.path.insert(0, _backend_dir)


@pytest.fixture
def store():
    """Fresh in-memory key-value store."""
    from storage import MemoryStore

    return MemoryStore()
