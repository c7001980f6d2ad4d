from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

import yaml

from src.server.settings.config import settings

# Here we expect material_families.yaml
MATERIAL_FAMILIES_PATH = Path(settings.catalog_dir) / "material_families.yaml"

DEFAULT_ALIASES: Dict[str, str] = {
    "plate": "Plate",
    "sheet": "Sheet",
    "pipe": "Pipe",
    "tube": "Tube",
    "hss": "HSS",
    "angle": "Angle",
    "flat bar": "FlatBar",
    "round bar": "RoundBar",
    "beam": "Beam",
    "channel": "Channel",
}

DEFAULT_SCHEDULE_FACTORS: Dict[str, float] = {
    "SCH 5": 0.5,
    "SCH 10": 0.7,
    "SCH 20": 1.0,
    "SCH 30": 1.2,
    "SCH 40": 1.5,
    "SCH 60": 2.0,
    "SCH 80": 2.5,
    "STD": 1.5,
    "XS": 2.5,
    "XH": 3.0,
    "XXS": 4.0,
}


@lru_cache(maxsize=1)
def _load_raw_catalog_yaml() -> Dict[str, Any]:
    """
    Reads the YAML file once and caches the raw structure.
    A missing or broken file behaves like an empty catalog.
    """
    if not MATERIAL_FAMILIES_PATH.exists():
        print(
            f"[material_families] Could not find {MATERIAL_FAMILIES_PATH}, using built-in defaults",
            file=sys.stderr,
        )
        return {}

    try:
        with MATERIAL_FAMILIES_PATH.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        print(f"[material_families] Could not read {MATERIAL_FAMILIES_PATH}: {e}", file=sys.stderr)
        return {}

    return data if isinstance(data, dict) else {}


def load_family_aliases() -> Dict[str, str]:
    """
    Alias table, keys lower-cased: {"angle iron": "Angle", ...}
    """
    raw = _load_raw_catalog_yaml().get("aliases")
    if not isinstance(raw, dict) or not raw:
        return dict(DEFAULT_ALIASES)

    out: Dict[str, str] = {}
    for alias, family in raw.items():
        if alias is None or family is None:
            continue
        out[str(alias).strip().lower()] = str(family).strip()
    return out


def load_grade_options() -> Dict[str, List[str]]:
    raw = _load_raw_catalog_yaml().get("grades")
    if not isinstance(raw, dict):
        return {}

    out: Dict[str, List[str]] = {}
    for family, grades in raw.items():
        if not isinstance(grades, list):
            continue
        out[str(family)] = [str(g) for g in grades if g is not None]
    return out


def load_schedule_factors() -> Dict[str, float]:
    raw = _load_raw_catalog_yaml().get("pipe_schedule_factors")
    if not isinstance(raw, dict) or not raw:
        return dict(DEFAULT_SCHEDULE_FACTORS)

    out: Dict[str, float] = {}
    for schedule, factor in raw.items():
        try:
            out[str(schedule).strip().upper()] = float(factor)
        except (TypeError, ValueError):
            continue
    return out


def grades_for_family(family: str) -> List[str]:
    return load_grade_options().get(family, [])
