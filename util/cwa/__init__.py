"""CWA open data utilities."""

from util.cwa.client import CWAClient, CWAError, extract_records, taipei_now

__all__ = [
    "CWAClient",
    "CWAError",
    "extract_records",
    "taipei_now",
]
