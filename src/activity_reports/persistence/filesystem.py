"""File-based persistence for produced report exports."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from ..config import settings


class FileStorage:
    """Thin wrapper around the data root for storing CSV and PDF exports."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.output_root = self.root / "outputs"
        self.output_root.mkdir(parents=True, exist_ok=True)

    def make_run_directory(self, prefix: str = "export") -> Path:
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        path = self.output_root / f"{prefix}_{timestamp}"
        path.mkdir(parents=True, exist_ok=False)
        return path

    def write_bytes(self, path: Path, payload: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as handle:
            handle.write(payload)

    def save_export(self, filename: str, payload: bytes, *, prefix: str = "export") -> Path:
        run_dir = self.make_run_directory(prefix)
        path = (run_dir / filename).resolve()
        if run_dir not in path.parents:
            run_dir.rmdir()
            raise ValueError(f"Export file name escapes the output directory: {filename}")
        self.write_bytes(path, payload)
        return path
