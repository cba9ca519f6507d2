"""Runtime settings, read from the environment or a ``.env`` file.

Fail fast: an unknown backend is rejected when settings are loaded, not
when the first request arrives.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from decouple import config

BACKENDS = ("memory", "json", "sql")


@dataclass(frozen=True)
class Settings:
    backend: str = "json"
    data_dir: Path = Path("data")
    database_url: str = ""
    log_level: str = "INFO"
    log_json: bool = False
    host: str = "127.0.0.1"
    port: int = 8080

    @property
    def products_file(self) -> Path:
        return self.data_dir / "products.json"

    @property
    def db_url(self) -> str:
        return self.database_url or f"sqlite:///{self.data_dir / 'catalog.db'}"


def load_settings() -> Settings:
    backend = config("CATALOG_BACKEND", default="json").strip().lower()
    if backend not in BACKENDS:
        raise ValueError(
            f"CATALOG_BACKEND must be one of {', '.join(BACKENDS)}, got {backend!r}"
        )

    return Settings(
        backend=backend,
        data_dir=Path(config("CATALOG_DATA_DIR", default="data")),
        database_url=config("CATALOG_DATABASE_URL", default=""),
        log_level=config("CATALOG_LOG_LEVEL", default="INFO").upper(),
        log_json=config("CATALOG_LOG_JSON", default=False, cast=bool),
        host=config("CATALOG_HOST", default="127.0.0.1"),
        port=config("CATALOG_PORT", default=8080, cast=int),
    )
