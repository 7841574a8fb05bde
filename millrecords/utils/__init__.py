"""Mini README: Utility helper functions for Mill Records.

Exports the dynamic plugin loader used to discover third-party storage
backends, and the fixed number formatting used by exports and receipts.
"""

from .formatting import format_amount, format_currency, format_number
from .plugin_loader import load_entry_point_plugins

__all__ = [
    "format_amount",
    "format_currency",
    "format_number",
    "load_entry_point_plugins",
]
