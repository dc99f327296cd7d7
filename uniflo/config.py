# uniflo/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ModelConfig:
    """Settings for the syllabus model client (OpenAI chat completions)."""

    api_key: Optional[str] = None
    model: str = "gpt-4-turbo-preview"
    max_tokens: int = 2000
    temperature: float = 0.0
    timeout_secs: float = 60.0
    max_prompt_chars: Optional[int] = None


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./uniflo.db"
    upload_dir: str = "./uploads"
    log_dir: str = "logs"
    prefer_ocr: bool = True
    create_tables: bool = True
    model: ModelConfig = field(default_factory=ModelConfig)

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()

        max_prompt = os.getenv("MAX_PROMPT_CHARS")
        model = ModelConfig(
            api_key=os.getenv("OPENAI_API_KEY"),
            model=os.getenv("OPENAI_MODEL", "gpt-4-turbo-preview"),
            max_tokens=int(os.getenv("OPENAI_MAX_TOKENS", "2000")),
            timeout_secs=float(os.getenv("OPENAI_TIMEOUT_SECS", "60")),
            max_prompt_chars=int(max_prompt) if max_prompt else None,
        )
        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./uniflo.db"),
            upload_dir=os.getenv("UPLOAD_DIR", "./uploads"),
            log_dir=os.getenv("WORKFLOW_LOG_DIR", "logs"),
            prefer_ocr=_env_bool("PREFER_OCR", True),
            model=model,
        )
