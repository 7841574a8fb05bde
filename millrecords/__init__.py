"""Mini README: Core package initializer for the Mill Records application.

This module exposes convenience imports that allow other parts of the
application to access shared services without needing to know the exact
module structure. The record rules, analytics and storage layers live in
their own subpackages so they can be imported without pulling in the web
framework.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
