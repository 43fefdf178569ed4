"""File based exporter supporting JSON/JSONL/CSV."""

from __future__ import annotations

import csv
import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..records import TAG_COLUMNS
from .base import BaseExporter


class FileExporter(BaseExporter):
    """Write tag rows to a local file."""

    def __init__(self, output_dir: Path, name: str, fmt: str, run_tag: str | None = None) -> None:
        if fmt not in {"json", "jsonl", "csv"}:
            raise ValueError(f"Unsupported output format: {fmt}")
        self.output_dir = output_dir
        self.name = name
        self.format = fmt
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.run_tag = run_tag or datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
        slug = re.sub(r"[^0-9A-Za-z_-]+", "_", name.strip()) or "tags"
        self.path = self.output_dir / f"{slug}-{self.run_tag}.{fmt}"
        self._file = self.path.open("w", encoding="utf-8", newline="")
        self._csv_writer: Optional[csv.DictWriter] = None
        # JSON arrays are written on flush, so rows are held until then.
        self._buffer: list[dict] = []
        self._closed = False
        self.count = 0

    def export(self, record: dict) -> None:
        if self.format == "json":
            self._buffer.append(record)
        elif self.format == "jsonl":
            json.dump(record, self._file, ensure_ascii=False)
            self._file.write("\n")
        else:
            if not self._csv_writer:
                fieldnames = [column for column in TAG_COLUMNS if column in record]
                fieldnames += sorted(key for key in record if key not in fieldnames)
                self._csv_writer = csv.DictWriter(self._file, fieldnames=fieldnames)
                self._csv_writer.writeheader()
            self._csv_writer.writerow(record)
        self.count += 1

    def flush(self) -> None:
        if self.format == "json":
            self._file.seek(0)
            self._file.truncate()
            json.dump(self._buffer, self._file, ensure_ascii=False, indent=2)
            self._file.write("\n")
        self._file.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._file.close()
        self._closed = True


__all__ = ["FileExporter"]
