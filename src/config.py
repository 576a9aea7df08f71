"""Merkezi ayarlar. Proje kökündeki .env dosyası ortam değişkenlerine yüklenir."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

STORAGE_BACKENDS = ("memory", "dynamodb")
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

_env_path = Path(__file__).resolve().parent.parent / ".env"


@dataclass
class Settings:
    storage_backend: str = "memory"
    region_name: str = "us-west-2"
    table_prefix: str = ""
    log_level: str = "INFO"
    lock_timeout: float = 10.0

    def __post_init__(self) -> None:
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"Geçersiz depolama türü: {self.storage_backend} "
                f"(izin verilenler: {', '.join(STORAGE_BACKENDS)})"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            storage_backend=env.get("SCM_STORAGE_BACKEND", "memory").strip().lower(),
            region_name=env.get("AWS_DEFAULT_REGION", "us-west-2"),
            table_prefix=env.get("SCM_TABLE_PREFIX", ""),
            log_level=env.get("SCM_LOG_LEVEL", "INFO").upper(),
            lock_timeout=float(env.get("SCM_LOCK_TIMEOUT", "10.0")),
        )


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """.env dosyasını yükler (mevcut ortam değişkenlerini ezmez) ve ayarları döndürür."""
    load_dotenv(env_file or _env_path, override=False)
    return Settings.from_env()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    # boto loglarını biraz kısalım
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
