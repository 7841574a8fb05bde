"""Mini README: Interactive interfaces for Mill Records.

Exports the FastAPI application factory that powers the browser-based
records desk. The command-line entry point lives in ``main_records_desk``
at the repository root.
"""

from .web_app import create_application

__all__ = ["create_application"]
