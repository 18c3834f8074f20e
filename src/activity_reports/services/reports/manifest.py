"""Listing and lookup of persisted report exports."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from ...config import settings

_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S%fZ"


def output_root() -> Path:
    return (settings.data_root / "outputs").resolve()


def list_export_files(
    *,
    file_type: Optional[str] = None,
    limit: Optional[int] = None,
    search: Optional[str] = None,
    root: Optional[Path] = None,
) -> List[dict]:
    base = (root or output_root()).resolve()
    if not base.exists():
        return []

    normalized_file_type = _normalize(file_type) if file_type else None
    normalized_search = _normalize(search) if search else None

    exports: List[dict] = []
    for run_dir in sorted((p for p in base.iterdir() if p.is_dir()), key=_sort_key, reverse=True):
        for file_path in sorted(run_dir.glob("*")):
            if not file_path.is_file():
                continue
            record = _build_file_record(file_path, run_dir)
            if normalized_file_type and _normalize(record["file_type"]) != normalized_file_type:
                continue
            if normalized_search and normalized_search not in file_path.name.lower():
                continue
            exports.append(record)
            if limit and len(exports) >= limit:
                return exports
    return exports


def resolve_export_file(run_id: str, filename: str, *, root: Optional[Path] = None) -> Path:
    base = (root or output_root()).resolve()
    candidate = (base / run_id / filename).resolve()
    if base not in candidate.parents or not candidate.is_file():
        raise FileNotFoundError(filename)
    return candidate


def _build_file_record(file_path: Path, run_dir: Path) -> dict:
    run_id = run_dir.name
    file_suffix = file_path.suffix[1:].upper() if file_path.suffix else ""
    return {
        "id": f"{run_id}:{file_path.name}",
        "run_id": run_id,
        "file_name": file_path.name,
        "file_type": file_suffix or "FILE",
        "size_bytes": file_path.stat().st_size,
        "created_at": _parse_timestamp(run_id.split("_")[-1]),
        "description": _describe_file(file_path.name),
        "download_path": f"{settings.api_prefix}/reports/exports/{run_id}/{file_path.name}",
    }


def _describe_file(filename: str) -> str:
    lower = filename.lower()
    if lower.startswith("daily_report_") and lower.endswith(".csv"):
        return "Daily activity report"
    if lower.startswith("customer_report_") and lower.endswith(".pdf"):
        return "Customer activity report"
    if lower.endswith(".csv"):
        return "CSV export"
    if lower.endswith(".pdf"):
        return "PDF export"
    return "Export file"


def _parse_timestamp(value: str) -> Optional[datetime]:
    try:
        return datetime.strptime(value, _TIMESTAMP_FORMAT)
    except ValueError:
        return None


def _sort_key(path: Path) -> float:
    timestamp = _parse_timestamp(path.name.split("_")[-1])
    if timestamp:
        return timestamp.timestamp()
    return path.stat().st_mtime


def _normalize(value: Optional[str]) -> str:
    return value.lower().strip() if isinstance(value, str) else ""
