from pathlib import Path

import pytest

from activity_reports.persistence.filesystem import FileStorage
from activity_reports.services.reports.manifest import list_export_files, resolve_export_file


def test_file_storage_creates_run_directory(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    run_dir = storage.make_run_directory(prefix="csv")

    assert run_dir.exists()
    assert run_dir.is_dir()
    assert run_dir.parent == tmp_path / "outputs"


def test_save_export_writes_bytes(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)

    path = storage.save_export("daily_report_2024-01-30_to_2024-01-30.csv", b"a,b\n1,2\n", prefix="csv")

    assert path.read_bytes() == b"a,b\n1,2\n"
    assert path.parent.name.startswith("csv_")


def test_manifest_lists_and_resolves_exports(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    csv_path = storage.save_export("daily_report_2024-01-30_to_2024-01-30.csv", b"x", prefix="csv")
    storage.save_export("Customer_Report_a@example.com_2024-01-30.pdf", b"%PDF", prefix="pdf")
    output_root = tmp_path / "outputs"

    exports = list_export_files(root=output_root)
    assert {item["file_type"] for item in exports} == {"CSV", "PDF"}

    csv_only = list_export_files(root=output_root, file_type="csv")
    assert len(csv_only) == 1
    record = csv_only[0]
    assert record["description"] == "Daily activity report"
    assert record["size_bytes"] == 1
    assert record["created_at"] is not None

    resolved = resolve_export_file(record["run_id"], record["file_name"], root=output_root)
    assert resolved == csv_path.resolve()

    with pytest.raises(FileNotFoundError):
        resolve_export_file(record["run_id"], "../../secret.txt", root=output_root)


def test_save_export_rejects_names_outside_run_directory(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path / "data")

    with pytest.raises(ValueError):
        storage.save_export("../../../escaped.pdf", b"%PDF", prefix="pdf")

    assert not (tmp_path / "escaped.pdf").exists()
    assert list((tmp_path / "data" / "outputs").iterdir()) == []
