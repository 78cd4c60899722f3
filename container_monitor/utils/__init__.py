"""
Utilities package for the container monitor.

Small helpers shared by the policy, volume and notification adapters.
"""

from .fallback import FallbackResult, first_success
from .powershell import parse_json_records, quote_ps_string, run_powershell, run_powershell_json

__all__ = [
    "FallbackResult",
    "first_success",
    "parse_json_records",
    "quote_ps_string",
    "run_powershell",
    "run_powershell_json",
]
