"""Configuration, object storage and HTTP session for the bill status
pipeline.
"""

from __future__ import annotations

import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import requests  # type: ignore
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from yaml import safe_load  # type: ignore

from components.models import BILL_TYPES

logger = logging.getLogger(__name__)

STORAGE_ROOT_ENV = "BILLSTATUS_STORAGE_ROOT"


class Config:
    """Provides an interface and safe defaults for config.yaml values."""

    def __init__(self, config_path: Optional[str] = None):
        self.config: dict[str, Any] = {}
        if config_path and Path(config_path).exists():
            with open(config_path, "r", encoding="utf-8") as f:
                self.config = safe_load(f) or {}
        elif config_path:
            logger.warning("Config file %s not found, using defaults", config_path)

    @property
    def base_url(self) -> str:
        """Base URL for govinfo, with a trailing slash."""
        url = str(self.config.get("base_url", "https://www.govinfo.gov/"))
        return url if url.endswith("/") else url + "/"

    @property
    def log_level(self) -> str:
        """Logging level name for the command-line tool."""
        return str(self.config.get("log_level", "INFO")).upper()

    class Storage:
        """Object storage configuration."""

        def __init__(self, config: dict[str, Any]) -> None:
            self.storage = config.get("storage", {}) or {}

        @property
        def root(self) -> str:
            """Directory holding stored objects; the environment wins."""
            return os.environ.get(STORAGE_ROOT_ENV) or str(self.storage.get("root", "data"))

        @property
        def prefix(self) -> str:
            """Top-level key prefix."""
            return str(self.storage.get("prefix", "congress"))

    @property
    def storage(self) -> Config.Storage:
        """Object storage configuration."""
        return Config.Storage(self.config)

    class Sync:
        """Sitemap sync configuration."""

        def __init__(self, config: dict[str, Any]) -> None:
            self.sync = config.get("sync", {}) or {}

        @property
        def congresses(self) -> list[int]:
            """Congresses to sync."""
            return [int(c) for c in self.sync.get("congresses", [])]

        @property
        def bill_types(self) -> list[str]:
            """Bill types to sync."""
            return list(self.sync.get("bill_types", BILL_TYPES))

        @property
        def timeout(self) -> int:
            """HTTP timeout in seconds."""
            return int(self.sync.get("timeout", 30))

        @property
        def retries(self) -> int:
            """HTTP retries per request."""
            return int(self.sync.get("retries", 3))

    @property
    def sync(self) -> Config.Sync:
        """Sitemap sync configuration."""
        return Config.Sync(self.config)


def raw_key(congress: int | str, bill_type: str, number: int | str, prefix: str = "congress") -> str:
    """Storage key of a raw BILLSTATUS document."""
    return f"{prefix}/{congress}/{bill_type.lower()}/{number}.xml"


def record_key(congress: int | str, bill_type: str, number: int | str, prefix: str = "congress") -> str:
    """Storage key of a derived bill record."""
    return f"{prefix}/{congress}/{bill_type.lower()}/{number}.json"


def sitemap_key(congress: int | str, bill_type: str, prefix: str = "congress") -> str:
    """Storage key of the last seen sitemap for one bill type."""
    return f"{prefix}/{congress}/{bill_type.lower()}/sitemap.xml"


class ObjectStore(ABC):
    """Key/value storage for raw documents, sitemaps and bill records."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the object body, or None if there is no such key."""

    @abstractmethod
    def put(self, key: str, body: bytes, content_type: str = "application/xml") -> None:
        """Create or replace an object."""


class LocalObjectStore(ObjectStore):
    """Object storage backed by a directory tree."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / key

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def put(self, key: str, body: bytes, content_type: str = "application/xml") -> None:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(body)
        logger.debug("Stored %s (%s, %d bytes)", key, content_type, len(body))

    def keys(self, prefix: str = "") -> list[str]:
        """All stored keys under a prefix, sorted."""
        base = self._path(prefix) if prefix else self.root
        if not base.exists():
            return []
        return sorted(
            path.relative_to(self.root).as_posix()
            for path in base.rglob("*")
            if path.is_file()
        )


class _SessionManager:
    """Manages HTTP session lifecycle without global keyword."""

    def __init__(self) -> None:
        self._session: Optional[requests.Session] = None
        self._lock = threading.Lock()

    def get_session(self, retries: int = 3) -> requests.Session:
        """Get or create the HTTP session with connection pooling."""
        if self._session is None:
            with self._lock:
                if self._session is None:
                    session = requests.Session()
                    retry_strategy = Retry(
                        total=retries,
                        backoff_factor=1,
                        status_forcelist=[429, 500, 502, 503, 504],
                        allowed_methods=["GET"]
                    )
                    adapter = HTTPAdapter(
                        pool_connections=10,
                        pool_maxsize=20,
                        max_retries=retry_strategy,
                        pool_block=False
                    )
                    session.mount("http://", adapter)
                    session.mount("https://", adapter)
                    session.headers.update({
                        "User-Agent": "billstatus-transformer/0.1"
                    })
                    self._session = session
                    logger.debug("Created global HTTP session")
        return self._session

    def cleanup(self) -> None:
        """Close the session."""
        with self._lock:
            if self._session:
                self._session.close()
                self._session = None
                logger.debug("Closed global HTTP session")


_SESSION_MANAGER = _SessionManager()


def get_session(retries: int = 3) -> requests.Session:
    """Shared retrying HTTP session."""
    return _SESSION_MANAGER.get_session(retries)


def cleanup_session() -> None:
    """Close the shared HTTP session."""
    _SESSION_MANAGER.cleanup()
