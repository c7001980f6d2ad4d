# fil: src/services/geometry.py
"""
Shape geometry for structural steel.

Everything here is pure: sizes come in as text ("2 x 2 x 1/4", "1-1/2\""),
weights go out as lb/ft (wpf) or lb/sq in (wpsqi).

Cross-section areas (inches):

  FlatBar   w x t        -> w * t
  RoundBar  d            -> pi * d^2 / 4
  Angle     a x b x t    -> t * (a + b - t)
  HSS       b x h x t    -> b*h - (b - 2t)*(h - 2t)
  Tube      od x wall    -> pi/4 * (od^2 - id^2),  id = max(od - 2*wall, 0)

and lb/ft = area * 12 * density.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Optional

from src.services.material_families import load_family_aliases, load_schedule_factors

DENSITY_STEEL = 0.283  # lb/in^3

# Steel sheet gauges, inches
SHEET_GAUGE_IN: Dict[int, float] = {
    24: 0.0239, 23: 0.0269, 22: 0.0299, 21: 0.0329, 20: 0.0359,
    19: 0.0418, 18: 0.0478, 17: 0.0538, 16: 0.0598, 15: 0.0673,
    14: 0.0747, 13: 0.0897, 12: 0.1046, 11: 0.1196, 10: 0.1345,
    9: 0.1495, 8: 0.1644,
}

DEFAULT_PIPE_SCHEDULE = "SCH 40"
DEFAULT_SCHEDULE_FACTOR = 1.5

_FRACTION = re.compile(r"^\d+\s*/\s*\d+$")


def normalize_family(text: Optional[str]) -> str:
    """
    Canonical family key via the alias table; unknown families are
    whitespace-collapsed and Title Cased ("expanded metal" -> "Expanded Metal").
    """
    if not text:
        return ""
    k = str(text).strip().lower()
    if not k:
        return ""

    aliases = load_family_aliases()
    if k in aliases:
        return aliases[k]

    cleaned = re.sub(r"\s+", " ", k).strip()
    return " ".join(w[:1].upper() + w[1:] for w in cleaned.split(" "))


def is_plate_family(family: Optional[str]) -> bool:
    return normalize_family(family) in ("Plate", "Sheet")


def is_pipe_family(family: Optional[str]) -> bool:
    return normalize_family(family) == "Pipe"


def parse_inches(token: Any) -> float:
    """
    "1/4" -> 0.25, "0.25" -> 0.25, '2"' -> 2.0, "2.5 in" -> 2.5.
    Returns NaN when the token is not a number.
    """
    if token is None or token == "":
        return math.nan
    t = re.sub(r'["in]+', "", str(token).lower()).strip()

    if _FRACTION.match(t):
        a, b = (float(x) for x in t.split("/"))
        return a / b if b else math.nan

    try:
        return float(t)
    except ValueError:
        return math.nan


def _sum_tokens(part: str) -> float:
    total = 0.0
    for tok in re.split(r"[\s-]+", part):
        if not tok:
            continue
        v = parse_inches(tok)
        if not math.isnan(v):
            total += v
    return total


def extract_dims(text: Optional[str]) -> List[float]:
    """
    Pulls up to 4 dimensions (inches) out of a size/description.

      "2 x 2 x 1/4"        -> [2.0, 2.0, 0.25]
      "1-1/2 x 3/16"       -> [1.5, 0.1875]
      "4 SCH 40"           -> [4.0]
    """
    if not text:
        return []

    s = str(text).lower()
    s = re.sub(r"ga\b.*$", "", s)
    s = re.sub(r"sch\s*\d+", "", s, count=1)
    s = re.sub(r"[^\dx×\s./-]+", " ", s)
    s = re.sub(r"\s+", " ", s).strip()

    dims: List[float] = []
    for part in re.split(r"x|×", s):
        part = part.strip()
        if not part:
            continue
        val = _sum_tokens(part)
        if val > 0:
            dims.append(val)

    return dims[:4]


def wpf_from_area(area_in2: float, density: float = DENSITY_STEEL) -> float:
    if not area_in2 or area_in2 <= 0:
        return 0.0
    return round(area_in2 * 12 * density, 4)


def cross_section_area(family: Optional[str], size_text: Optional[str]) -> float:
    """
    Area in square inches for the shapes we know; 0 for anything else.
    """
    fam = normalize_family(family)
    dims = extract_dims(size_text)
    if not dims:
        return 0.0

    if fam == "FlatBar" and len(dims) >= 2:
        w, t = dims[0], dims[1]
        return w * t

    if fam == "RoundBar":
        d = dims[0]
        return math.pi * d * d / 4

    if fam == "Angle" and len(dims) >= 3:
        a, b, t = dims[0], dims[1], dims[2]
        return t * (a + b - t)

    if fam == "HSS" and len(dims) >= 3:
        b, h, t = dims[0], dims[1], dims[2]
        area = (b * h) - ((b - 2 * t) * (h - 2 * t))
        return area if area > 0 else 0.0

    if fam == "Tube" and len(dims) >= 2:
        od, wall = dims[0], dims[1]
        inner = max(od - 2 * wall, 0.0)
        area = (math.pi / 4) * (od * od - inner * inner)
        return area if area > 0 else 0.0

    return 0.0


def infer_weight_per_ft(
    family: Optional[str],
    size_text: Optional[str],
    density: float = DENSITY_STEEL,
) -> float:
    return wpf_from_area(cross_section_area(family, size_text), density)


def weight_per_sqin(thickness_in: Any, density: Any = DENSITY_STEEL) -> float:
    try:
        t = float(thickness_in or 0)
        d = float(density or 0)
    except (TypeError, ValueError):
        return 0.0
    if t <= 0 or d <= 0:
        return 0.0
    return round(t * d, 6)


def normalize_schedule(schedule: Optional[str]) -> str:
    s = re.sub(r"\s+", " ", str(schedule or DEFAULT_PIPE_SCHEDULE)).strip().upper()
    # "SCH40" / "SCHEDULE 40" -> "SCH 40"
    return re.sub(r"^SCH(?:EDULE)?\s*(\d+)$", r"SCH \1", s)


def _parse_pipe_size(size: Any) -> float:
    if isinstance(size, (int, float)):
        return float(size)
    s = str(size or "").strip()
    if "/" in s:
        return _sum_tokens(re.sub(r'["in]+', "", s.lower()))
    digits = re.sub(r"[^\d.]", "", s)
    try:
        return float(digits)
    except ValueError:
        return math.nan


def estimate_pipe_weight(size: Any, schedule: Optional[str] = DEFAULT_PIPE_SCHEDULE) -> Optional[float]:
    """
    Rough lb/ft for a nominal pipe size: size^2 * schedule factor * 0.8.
    Good enough as a starting value; exact weights are stored as overrides.
    """
    size_num = _parse_pipe_size(size)
    if math.isnan(size_num) or size_num <= 0:
        return None

    factor = load_schedule_factors().get(normalize_schedule(schedule), DEFAULT_SCHEDULE_FACTOR)
    return round(size_num * size_num * factor * 0.8, 3)


def augment_material(material: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fills weight_per_ft / weight_per_sqin where they can be inferred.
    A "density" key (lb/in^3) replaces steel for both.
    Returns a new dict, the input is left alone.
    """
    out = dict(material or {})

    try:
        density = float(out.get("density") or 0)
    except (TypeError, ValueError):
        density = 0.0

    try:
        wpf = float(out.get("weight_per_ft") or 0)
    except (TypeError, ValueError):
        wpf = 0.0
    if wpf <= 0:
        family = out.get("family") or out.get("type") or out.get("category")
        guessed = infer_weight_per_ft(
            family,
            out.get("size") or out.get("description"),
            density if density > 0 else DENSITY_STEEL,
        )
        if guessed > 0:
            out["weight_per_ft"] = guessed

    try:
        wpsqi = float(out.get("weight_per_sqin") or 0)
    except (TypeError, ValueError):
        wpsqi = 0.0
    if wpsqi <= 0 and out.get("thickness_in") and out.get("density"):
        guessed_sq = weight_per_sqin(out.get("thickness_in"), out.get("density"))
        if guessed_sq > 0:
            out["weight_per_sqin"] = guessed_sq

    return out


# ---- Generated catalogs ------------------------------------------------------

def to_fraction(inches: float) -> str:
    """
    Nearest 1/16": 0.25 -> '1/4"', 1.5 -> '1-1/2"', 2 -> '2"'.
    """
    denom = 16
    sixteenths = int(math.floor(inches * denom + 0.5))
    whole, numr = divmod(sixteenths, denom)
    if numr == 0:
        return f'{whole}"'
    g = math.gcd(numr, denom)
    frac = f"{numr // g}/{denom // g}"
    return f'{whole}-{frac}"' if whole > 0 else f'{frac}"'


def plate_thicknesses() -> List[float]:
    """
    1/8" to 1" in 1/16" steps, then 1-1/4" to 8" in 1/4" steps.
    """
    out = [round(n / 16, 6) for n in range(2, 17)]
    out += [round(n / 4, 6) for n in range(5, 33)]
    return sorted(set(out))


def build_plate_options(density: float = DENSITY_STEEL) -> List[Dict[str, Any]]:
    options = []
    for t in plate_thicknesses():
        frac = to_fraction(t)
        options.append(
            {
                "family": "Plate",
                "size": frac,
                "description": f"Plate {frac}",
                "unit_type": "Sq In",
                "thickness_in": t,
                "density": density,
                "weight_per_sqin": weight_per_sqin(t, density),
            }
        )
    return options


def build_sheet_options(density: float = DENSITY_STEEL) -> List[Dict[str, Any]]:
    options = []
    for gauge in sorted(SHEET_GAUGE_IN, reverse=True):
        t = SHEET_GAUGE_IN[gauge]
        options.append(
            {
                "family": "Sheet",
                "size": f'{gauge} GA ({t:.4f}")',
                "description": f"Sheet {gauge} GA",
                "unit_type": "Sq In",
                "thickness_in": t,
                "density": density,
                "weight_per_sqin": weight_per_sqin(t, density),
            }
        )
    return options
