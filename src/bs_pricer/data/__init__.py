"""Market data ingestion and handling.

This subpackage provides tools for fetching and filtering option quotes
from external sources. Modules are NOT imported automatically to avoid
side effects or network calls at import time.
"""
