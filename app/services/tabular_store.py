"""
Append-only spreadsheet store for exported records.

The xlsx format has no partial updates, so every append loads the whole sheet,
adds the row, and writes the whole workbook back. The write goes to a temp file
in the same directory which is then swapped over the target with ``os.replace``;
a failed write never leaves a half-written file behind.

All load-mutate-write cycles run under the store's ``ExportLock``.
"""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence
from zipfile import BadZipFile

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from app.core.errors import ExportNotFound, StorageCorrupt, StorageWriteFailed
from app.services.export_lock import ExportLock

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 15
WIDE_WIDTH = 30
MAX_WIDTH = 60


class TabularStore:
    def __init__(
        self,
        path: str | Path,
        columns: Sequence[str],
        wide_columns: Iterable[str] = (),
        sheet_name: str = "Orders",
        lock: ExportLock | None = None,
    ):
        self.path = Path(path)
        self.columns = tuple(columns)
        self.wide_columns = frozenset(wide_columns)
        self.sheet_name = sheet_name
        self.lock = lock or ExportLock(self.path.with_name(self.path.name + ".lock"))

    @property
    def exists(self) -> bool:
        return self.path.is_file()

    def ensure_initialized(self) -> None:
        """Create the file with just the header row. No-op when it already exists."""
        with self.lock.hold():
            self._ensure_initialized()

    def append_record(self, record: Mapping[str, Any]) -> None:
        row = tuple(record.get(c, "") for c in self.columns)
        with self.lock.hold():
            self._ensure_initialized()
            rows = self._load_rows()
            rows.append(row)
            self._write(rows)
        logger.info("Appended row %d to %s", len(rows), self.path)

    def read_records(self) -> list[dict[str, Any]]:
        if not self.exists:
            raise ExportNotFound(f"{self.path.name} has not been created yet")
        return [
            {c: ("" if v is None else v) for c, v in zip(self.columns, row)}
            for row in self._load_rows()
        ]

    def download(self) -> bytes:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            raise ExportNotFound(f"{self.path.name} has not been created yet")
        except OSError as e:
            raise StorageCorrupt(f"cannot read {self.path}: {e}") from e

    # -------------------------
    # internals (callers hold the lock)
    # -------------------------
    def _ensure_initialized(self) -> None:
        if self.exists:
            return
        logger.info("Creating export file %s", self.path)
        self._write([])

    def _load_rows(self) -> list[tuple]:
        try:
            wb = load_workbook(self.path)
        except (InvalidFileException, BadZipFile, KeyError, ValueError, OSError) as e:
            raise StorageCorrupt(f"cannot load {self.path}: {e}") from e
        try:
            if self.sheet_name not in wb.sheetnames:
                raise StorageCorrupt(f"{self.path.name} has no sheet {self.sheet_name!r}")
            ws = wb[self.sheet_name]
            rows = list(ws.iter_rows(values_only=True))
        finally:
            wb.close()

        header = tuple(rows[0][: len(self.columns)]) if rows else ()
        if header != self.columns:
            raise StorageCorrupt(f"{self.path.name} header {header!r} does not match {self.columns!r}")

        data = []
        for r in rows[1:]:
            r = tuple(r[: len(self.columns)]) + (None,) * (len(self.columns) - len(r))
            if all(v is None for v in r):
                continue
            data.append(r)
        return data

    def _column_widths(self, rows: list[tuple]) -> list[int]:
        widths = []
        for i, name in enumerate(self.columns):
            base = WIDE_WIDTH if name in self.wide_columns else DEFAULT_WIDTH
            longest = max((len(str(r[i])) for r in rows if r[i] is not None), default=0)
            widths.append(min(max(base, longest + 2), MAX_WIDTH))
        return widths

    def _build_workbook(self, rows: list[tuple]) -> Workbook:
        wb = Workbook()
        ws = wb.active
        ws.title = self.sheet_name
        ws.append(list(self.columns))
        bold = Font(bold=True)
        for cell in ws[1]:
            cell.font = bold
        for row_idx, r in enumerate(rows, start=2):
            for col_idx, value in enumerate(r, start=1):
                if isinstance(value, str):
                    # control characters are not valid in xlsx XML
                    value = ILLEGAL_CHARACTERS_RE.sub("", value)
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                if isinstance(value, str):
                    # customer text is data, never a formula
                    cell.data_type = "s"
        for i, width in enumerate(self._column_widths(rows), start=1):
            ws.column_dimensions[get_column_letter(i)].width = width
        return wb

    def _write(self, rows: list[tuple]) -> None:
        try:
            wb = self._build_workbook(rows)
        except Exception as e:
            logger.error("Failed building %s: %s", self.path, e)
            raise StorageWriteFailed(f"cannot build {self.path.name}: {e}") from e
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f".{self.path.stem}-", suffix=".xlsx", dir=self.path.parent)
            os.close(fd)
        except OSError as e:
            raise StorageWriteFailed(f"cannot stage {self.path}: {e}") from e
        try:
            wb.save(tmp_path)
            os.replace(tmp_path, self.path)
        except Exception as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            logger.error("Failed writing %s: %s", self.path, e)
            raise StorageWriteFailed(f"cannot write {self.path}: {e}") from e
