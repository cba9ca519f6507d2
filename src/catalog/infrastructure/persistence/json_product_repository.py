"""JSON-file-backed implementation of both product repository ports.

Every write is a read-modify-write of the whole file done while holding a
lock file next to it, so the version check and the write are one step for
every writer on that file, whether it is another thread, another
repository instance or another process.
"""

from __future__ import annotations

import json
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import structlog
from filelock import FileLock, Timeout
from structlog.typing import FilteringBoundLogger

from catalog.domain.exceptions import (
    EntityNotFoundError,
    StorageError,
    VersionConflictError,
)
from catalog.domain.model.product import Product, ProductStatus
from catalog.domain.model.read_model import (
    ProductFilter,
    ProductReadModel,
    sort_for_listing,
)
from catalog.domain.repository.product_read_repository import ProductReadRepository
from catalog.domain.repository.product_repository import ProductRepository
from catalog.infrastructure.persistence.records import (
    to_domain,
    to_read_model,
    to_record,
)

LOCK_TIMEOUT_SECONDS = 10.0


class JsonProductRepository(ProductRepository, ProductReadRepository):

    def __init__(
        self,
        file_path: Path,
        logger: FilteringBoundLogger | None = None,
        lock_timeout: float = LOCK_TIMEOUT_SECONDS,
    ) -> None:
        self._file_path = file_path
        self._log = logger or structlog.get_logger(__name__)
        self._thread_lock = threading.Lock()
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_lock = FileLock(
            str(file_path.with_name(file_path.name + ".lock")),
            timeout=lock_timeout,
        )
        self._ensure_file()

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        record = self._find_raw(product_id)
        return to_domain(record) if record is not None else None

    def save(self, product: Product) -> None:
        with self._write_lock():
            records = self._load_raw()
            if any(raw["id"] == product.id for raw in records):
                raise StorageError(f"Product '{product.id}' already exists")
            records.append(to_record(product))
            self._persist_raw(records)

    def update(self, product: Product) -> None:
        expected = product.version - 1
        with self._write_lock():
            records = self._load_raw()
            for i, raw in enumerate(records):
                if raw["id"] != product.id:
                    continue
                if raw["version"] != expected:
                    raise VersionConflictError(product.id, expected, raw["version"])
                records[i] = to_record(product)
                self._persist_raw(records)
                return
        raise EntityNotFoundError(f"Product '{product.id}' not found")

    def delete(self, product_id: str) -> None:
        with self._write_lock():
            records = self._load_raw()
            remaining = [raw for raw in records if raw["id"] != product_id]
            if len(remaining) == len(records):
                raise EntityNotFoundError(f"Product '{product_id}' not found")
            self._persist_raw(remaining)

    # --- ProductReadRepository interface --------------------------------------

    def find_by_id(self, product_id: str) -> ProductReadModel | None:
        record = self._find_raw(product_id)
        return to_read_model(record) if record is not None else None

    def find_all(self, product_filter: ProductFilter) -> list[ProductReadModel]:
        return product_filter.apply(self._read_models())

    def find_by_status(self, status: ProductStatus) -> list[ProductReadModel]:
        return sort_for_listing(m for m in self._read_models() if m.status == status)

    # --- File helpers ---------------------------------------------------------

    @contextmanager
    def _write_lock(self) -> Iterator[None]:
        """Hold both the in-process lock and the lock file."""
        with self._thread_lock:
            try:
                self._file_lock.acquire()
            except Timeout as exc:
                self._log.error("storage.lock_timeout", path=str(self._file_path))
                raise StorageError(f"Timed out locking {self._file_path}") from exc
            try:
                yield
            finally:
                self._file_lock.release()

    def _find_raw(self, product_id: str) -> dict[str, Any] | None:
        for raw in self._load_raw():
            if raw["id"] == product_id:
                return raw
        return None

    def _read_models(self) -> list[ProductReadModel]:
        return [to_read_model(raw) for raw in self._load_raw()]

    def _load_raw(self) -> list[dict[str, Any]]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            self._log.error("storage.read_failed", path=str(self._file_path))
            raise StorageError(f"Cannot read {self._file_path}: {exc}") from exc

    def _persist_raw(self, records: list[dict[str, Any]]) -> None:
        # Readers never lock; they only ever see a fully written file.
        tmp_path: Path | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._file_path.parent,
                prefix=self._file_path.name + ".",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(json.dumps(records, indent=2) + "\n")
            tmp_path.replace(self._file_path)
        except OSError as exc:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            self._log.error("storage.write_failed", path=str(self._file_path))
            raise StorageError(f"Cannot write {self._file_path}: {exc}") from exc

    def _ensure_file(self) -> None:
        with self._write_lock():
            if not self._file_path.exists():
                self._persist_raw([])
