"""Mini README: Record export helpers.

Exposes the CSV renderer used by the web download endpoint and the file
exporter used by the command line.
"""

from .csv_exporter import CsvExporter, EXPORT_HEADERS, export_filename, export_to_delimited_text

__all__ = ["CsvExporter", "EXPORT_HEADERS", "export_filename", "export_to_delimited_text"]
