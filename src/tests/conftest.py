from __future__ import annotations

"""Shared pytest fixtures and test environment defaults."""

import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("RAG_CHUNK_SIZE", "500")
os.environ.setdefault("RAG_CHUNK_OVERLAP", "50")
os.environ.setdefault("RAG_RETRIEVAL_LIMIT", "5")
os.environ.setdefault("RAG_METRICS_ENABLED", "true")
os.environ.pop("RAG_ENV", None)

from src.rag.types import Chunk


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def fruit_chunks() -> list[Chunk]:
    return [
        Chunk(content="apples and oranges", chunk_index=0, page_number=1),
        Chunk(content="bananas and grapes", chunk_index=1, page_number=1),
    ]

