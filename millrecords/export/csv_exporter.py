"""Mini README: Export transaction records as comma-separated text.

Structure:
    * EXPORT_HEADERS - fixed header row of the records export.
    * export_to_delimited_text - render records as CSV text.
    * export_filename - ``milling-records-<ISO-date>.csv`` download name.
    * CsvExporter - writes the export to disk for the CLI.

Fields containing commas, quotes or line breaks are quoted so a customer
named ``Doe, Jane`` stays in a single column. Every row, including the
last, ends with a newline.
"""

from __future__ import annotations

import csv
import io
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional

from ..logging_utils import get_logger
from ..records.models import Transaction
from ..utils.formatting import format_number

LOGGER = get_logger(__name__)

EXPORT_HEADERS = [
    "Customer Name",
    "Contact",
    "Date",
    "Crop Type",
    "Quantity (kg)",
    "Charge per Kg",
    "Total Amount",
    "Amount Paid",
    "Balance",
]


def _row(transaction: Transaction) -> List[str]:
    return [
        transaction.customer_name,
        transaction.contact,
        transaction.date,
        transaction.crop_type.value,
        format_number(transaction.quantity),
        format_number(transaction.charge_per_kg),
        format_number(transaction.total_amount),
        format_number(transaction.amount_paid),
        format_number(transaction.balance),
    ]


def export_to_delimited_text(records: Iterable[Transaction]) -> str:
    """Return the header row plus one row per record as CSV text."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(EXPORT_HEADERS)
    for transaction in records:
        writer.writerow(_row(transaction))
    return buffer.getvalue()


def export_filename(on: Optional[date] = None) -> str:
    """Return the download filename for an export made on ``on``."""

    return f"milling-records-{(on or date.today()).isoformat()}.csv"


class CsvExporter:
    """Persist record exports to disk."""

    def export(self, records: Iterable[Transaction], destination: Path) -> Path:
        """Write the export to ``destination``, creating parent folders."""

        rows = list(records)
        LOGGER.info("Exporting %s transactions to %s", len(rows), destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        with destination.open("w", encoding="utf-8", newline="") as csv_file:
            csv_file.write(export_to_delimited_text(rows))
        return destination

    def export_to_directory(
        self, records: Iterable[Transaction], output_directory: Path, *, on: Optional[date] = None
    ) -> Path:
        """Write the export using the dated filename inside ``output_directory``."""

        return self.export(records, output_directory / export_filename(on))
