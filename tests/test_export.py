"""Mini README: Tests for the CSV export and receipt rendering.

Structure:
    * export_to_delimited_text - header, field order and quoting.
    * CsvExporter - dated file written to disk.
    * build_receipt / render_receipt_text - formatted receipt values.
"""

from __future__ import annotations

import csv
import io
from datetime import date, datetime

from millrecords.export import CsvExporter, EXPORT_HEADERS, export_filename, export_to_delimited_text
from millrecords.records import CropType, build_receipt, render_receipt_text


def test_export_writes_header_and_rows_in_fixed_order(make_transaction) -> None:
    text = export_to_delimited_text([make_transaction()])

    lines = text.split("\n")
    assert lines[0] == ",".join(EXPORT_HEADERS)
    assert lines[1] == "A,1,2024-01-01,Maize,10,400,4000,3000,1000"
    assert text.endswith("\n")


def test_export_quotes_fields_containing_the_delimiter(make_transaction) -> None:
    text = export_to_delimited_text([make_transaction(customer_name="Doe, Jane")])

    assert '"Doe, Jane"' in text
    rows = list(csv.reader(io.StringIO(text)))
    assert rows[1][0] == "Doe, Jane"
    assert len(rows[1]) == len(EXPORT_HEADERS)


def test_export_keeps_fractional_values(make_transaction) -> None:
    text = export_to_delimited_text([make_transaction(quantity=2.5, amount_paid=0)])
    assert text.split("\n")[1].endswith(",2.5,400,1000,0,1000")


def test_export_filename_pattern() -> None:
    assert export_filename(date(2024, 3, 9)) == "milling-records-2024-03-09.csv"


def test_csv_exporter_writes_dated_file(tmp_path, make_transaction) -> None:
    target = CsvExporter().export_to_directory(
        [make_transaction()], tmp_path / "exports", on=date(2024, 1, 2)
    )

    assert target.name == "milling-records-2024-01-02.csv"
    assert target.read_text(encoding="utf-8").startswith("Customer Name,Contact,Date")


def test_receipt_formats_amounts(make_transaction) -> None:
    receipt = build_receipt(
        make_transaction(crop_type=CropType.MAIZE),
        business_name="Nab Millers Factory",
        currency="UGX",
        generated_at=datetime(2024, 1, 1, 12, 30),
    )

    assert receipt.receipt_number == "txn_0001"
    assert receipt.quantity == "10 kg"
    assert receipt.rate_per_kg == "UGX 400.00"
    assert receipt.total_amount == "UGX 4,000.00"
    assert receipt.balance == "UGX 1,000.00"
    assert receipt.settled is False

    text = render_receipt_text(receipt)
    assert "Nab Millers Factory" in text
    assert "Generated on 2024-01-01 12:30:00" in text
    assert any(line.startswith("Balance:") and line.endswith("UGX 1,000.00") for line in text.splitlines())
