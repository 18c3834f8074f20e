import csv
import io
import json
from datetime import date
from pathlib import Path

import pytest

from activity_reports.errors import EmptyBatch, RenderTargetMissing
from activity_reports.models.domain import Activity, CustomerReport
from activity_reports.persistence.filesystem import FileStorage
from activity_reports.services.export import (
    build_report_document,
    csv_filename,
    pdf_filename,
    read_csv,
    save_csv,
    save_pdf,
    to_csv,
    to_pdf,
)
from activity_reports.services.geocoding import GeocodeResolver

START = "starting working"


def _report(name: str, day: str, description: str = "Route visits") -> CustomerReport:
    return CustomerReport(
        customer_name=name,
        role="Sales",
        description=description,
        report_date=day,
        activities=(
            Activity(time="09:00:00", location="6.9271,79.8612", status=START),
            Activity(time="09:05:00", location="6.9300,79.8700", status="moving"),
            Activity(time="17:00:00", location="", status="ending"),
        ),
    )


def test_csv_round_trips_three_reports():
    batch = [
        _report("Nimal Perera", "2024-01-30"),
        _report("Kamala Silva", "2024-01-30", description="Visited 3 shops, 1 closed"),
        _report("Nimal Perera", "2024-01-31"),
    ]

    data = to_csv(batch)
    rows = list(csv.reader(io.StringIO(data.decode("utf-8"))))

    assert rows[0] == ["customerName", "role", "description", "reportDate", "activities"]
    assert len(rows) == 4
    assert rows[2][2] == "Visited 3 shops, 1 closed"
    assert json.loads(rows[1][4])[0] == {"time": "09:00:00", "location": "6.9271,79.8612", "status": START}
    assert read_csv(data) == batch


def test_csv_empty_batch_is_empty_document():
    data = to_csv([])

    assert data == b""
    assert read_csv(data) == []


def test_csv_without_quoting_joins_fields():
    report = CustomerReport(
        customer_name="Nimal",
        role="Sales",
        description="Daily",
        report_date="2024-01-30",
        activities=(),
    )

    assert to_csv([report], quoting=False) == (
        b"customerName,role,description,reportDate,activities\nNimal,Sales,Daily,2024-01-30,[]\n"
    )
    assert to_csv([report], quoting=True) == to_csv([report], quoting=False)


def test_export_filenames():
    assert csv_filename(date(2024, 1, 30), date(2024, 2, 2)) == "daily_report_2024-01-30_to_2024-02-02.csv"
    assert pdf_filename("a@example.com", date(2024, 1, 30)) == "Customer_Report_a@example.com_2024-01-30.pdf"


def test_save_csv_rejects_empty_batch(tmp_path: Path):
    with pytest.raises(EmptyBatch):
        save_csv([], "2024-01-30", "2024-01-31", storage=FileStorage(root=tmp_path))


def test_save_csv_writes_named_file(tmp_path: Path):
    path = save_csv([_report("Nimal", "2024-01-30")], "2024-01-30", "2024-01-31", storage=FileStorage(root=tmp_path))

    assert path.name == "daily_report_2024-01-30_to_2024-01-31.csv"
    assert path.parent.parent == tmp_path / "outputs"
    assert path.read_bytes().startswith(b"customerName,")


def test_build_report_document_summary_and_rows():
    document = build_report_document(_report("Nimal", "2024-01-30"), email="n@example.com", start_label=START)

    summary = dict(document.summary)
    assert summary["Working Duration"] == "5 minutes 0 seconds"
    assert summary["Customer"] == "Nimal"
    assert summary["Email"] == "n@example.com"
    assert summary["Role"] == "Sales"
    assert summary["Total Activities"] == "3"
    assert document.activity_rows[2] == ("17:00:00", "No location", "ending")


def test_build_report_document_resolves_locations():
    class Geocoder:
        def reverse(self, latitude, longitude):
            return {"address": {"road": "Galle Road", "city": "Colombo"}}

    document = build_report_document(
        _report("Nimal", "2024-01-30"), resolver=GeocodeResolver(Geocoder()), start_label=START
    )

    assert [row[1] for row in document.activity_rows] == ["Galle Road, Colombo", "Galle Road, Colombo", "No location"]


def test_build_report_document_fallbacks():
    report = CustomerReport(
        customer_name="",
        role=None,
        description=None,
        report_date="2024-01-30",
        activities=(Activity(time="", location="", status=""),),
    )

    document = build_report_document(report, start_label=START)

    summary = dict(document.summary)
    assert summary["Customer"] == "Unknown"
    assert summary["Role"] == "No role specified"
    assert summary["Working Duration"] == "Insufficient data"
    assert document.description is None
    assert document.activity_rows == [("N/A", "No location", "No status")]


def test_to_pdf_is_deterministic():
    document = build_report_document(_report("Nimal <&> Co", "2024-01-30"), start_label=START)

    first = to_pdf(document)
    second = to_pdf(document)

    assert first.startswith(b"%PDF")
    assert first == second


def test_to_pdf_without_document_raises():
    with pytest.raises(RenderTargetMissing):
        to_pdf(None)


def test_save_pdf_writes_named_file(tmp_path: Path):
    document = build_report_document(_report("Nimal", "2024-01-30"), start_label=START)

    path = save_pdf(document, "n@example.com", "2024-01-30", storage=FileStorage(root=tmp_path))

    assert path.name == "Customer_Report_n@example.com_2024-01-30.pdf"
    assert path.read_bytes().startswith(b"%PDF")


def test_pdf_filename_replaces_path_separators():
    assert pdf_filename("x/../..\\escaped", "2024-01-30") == "Customer_Report_x_.._.._escaped_2024-01-30.pdf"
    assert pdf_filename('a"b@example.com', "2024-01-30") == "Customer_Report_a_b@example.com_2024-01-30.pdf"


def test_save_pdf_stays_under_output_root(tmp_path: Path):
    document = build_report_document(_report("Nimal", "2024-01-30"), start_label=START)
    storage = FileStorage(root=tmp_path / "data")

    path = save_pdf(document, "x/../../../../escaped", "2024-01-30", storage=storage)

    assert storage.output_root in path.parents
    assert path.parent.parent == storage.output_root
    assert not list(tmp_path.glob("escaped*"))
