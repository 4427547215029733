from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class Settings:
    chunk_size: int = int(os.getenv("RAG_CHUNK_SIZE", "500"))
    chunk_overlap: int = int(os.getenv("RAG_CHUNK_OVERLAP", "50"))
    retrieval_limit: int = int(os.getenv("RAG_RETRIEVAL_LIMIT", "5"))
    max_retrieval_limit: int = int(os.getenv("RAG_MAX_RETRIEVAL_LIMIT", "50"))
    max_text_chars: int = int(os.getenv("RAG_MAX_TEXT_CHARS", "2000000"))
    highlight_window: int = int(os.getenv("RAG_HIGHLIGHT_WINDOW", "80"))
    log_level: str = os.getenv("RAG_LOG_LEVEL", "INFO")
    metrics_enabled: bool = _env_bool("RAG_METRICS_ENABLED", "true")

    @property
    def environment(self) -> str:
        return os.getenv("RAG_ENV", "development")

    @property
    def show_error_stack(self) -> bool:
        return self.environment.strip().lower() != "production"


settings = Settings()
