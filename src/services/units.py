# fil: src/services/units.py
"""
Small unit helpers shared by the BOM routes and the pricing engine.
"""

from __future__ import annotations

from datetime import datetime
import re
from typing import Any, Dict, Optional

METERS_TO_FEET = 3.28084

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_US_DATE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")


def to_feet(value: Any, unit: Optional[str]) -> Optional[float]:
    """
    Converts a length to feet.

      in -> /12
      mm -> /304.8
      m  -> * 3.28084
      ft (or unknown unit) -> as is
    """
    if value is None or value == "":
        return None
    try:
        v = float(value)
    except (TypeError, ValueError):
        return None

    u = (unit or "").strip().lower()
    if u == "in":
        return v / 12
    if u == "mm":
        return v / 304.8
    if u == "m":
        return v * METERS_TO_FEET
    return v


def _opt_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def normalize_tol(
    tol_plus: Any = None,
    tol_minus: Any = None,
    tol_unit: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "tol_plus": _opt_float(tol_plus),
        "tol_minus": _opt_float(tol_minus),
        "tol_unit": (tol_unit or "").strip().lower() or None,
    }


def to_iso_date(text: Optional[str]) -> Optional[str]:
    """
    Accepts YYYY-MM-DD, MM/DD/YYYY or an ISO datetime and returns YYYY-MM-DD.
    Returns None when nothing sensible can be parsed.
    """
    if not text:
        return None
    s = str(text).strip()
    if _ISO_DATE.match(s):
        return s

    m = _US_DATE.match(s)
    if m:
        return f"{m.group(3)}-{m.group(1)}-{m.group(2)}"

    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return None
