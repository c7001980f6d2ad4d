# fil: src/services/pricing.py
"""
Quote pricing for the quote builder.

The idea (same as the spreadsheet the shop used before):

- Every BOM row is priced by its unit type:
    * "Per Foot": weight = length_ft * lb/ft, cost = length_ft * $/ft
                  (or weight * $/lb when no $/ft is given)
    * "Each":     no weight, cost = $/each
    * "Sq In":    weight = L * W * lb/sq in (or (L+1)*(W+1) when padded),
                  cost = weight * $/lb
- Processes (hours + minutes at a rate) and outsourcing are added per row.
- The quote roll-up applies markup per row, then receiving labor,
  commission, break-in fee, freight and sales tax.

The module is pure and works on lists of dicts, the same shape the
frontend posts. Numbers are lenient: "", None or garbage count as 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from src.services.geometry import (
    DENSITY_STEEL,
    DEFAULT_PIPE_SCHEDULE,
    estimate_pipe_weight,
    is_pipe_family,
    is_plate_family,
    weight_per_sqin,
)
from src.services.units import METERS_TO_FEET

UNIT_PER_FOOT = "Per Foot"
UNIT_EACH = "Each"
UNIT_SQ_IN = "Sq In"

WILL_CALL = "will call"

PipeWeightLookup = Callable[[str, str], Optional[float]]
DensityLookup = Callable[[str, Optional[str]], Optional[float]]  # (family, grade) -> lb/in^3

_UNIT_ALIASES = {
    "perfoot": UNIT_PER_FOOT,
    "perft": UNIT_PER_FOOT,
    "ft": UNIT_PER_FOOT,
    "foot": UNIT_PER_FOOT,
    "each": UNIT_EACH,
    "ea": UNIT_EACH,
    "sqin": UNIT_SQ_IN,
    "persqin": UNIT_SQ_IN,
}


def num(value: Any) -> float:
    """
    Lenient float: "", None, NaN and unparsable values -> 0.0
    """
    if value is None or value == "":
        return 0.0
    try:
        f = float(value)
    except (TypeError, ValueError):
        return 0.0
    if f != f or f in (float("inf"), float("-inf")):
        return 0.0
    return f


def _round2(value: float) -> float:
    return round(value + 0.0, 2)


def normalize_unit_type(unit_type: Optional[str], family: Optional[str] = None) -> str:
    """
    Maps free unit-type spellings to "Per Foot" / "Each" / "Sq In".
    Without a unit type, plate and sheet default to "Sq In", everything else "Per Foot".
    """
    if unit_type:
        key = "".join(ch for ch in str(unit_type).lower() if ch.isalnum())
        if key in _UNIT_ALIASES:
            return _UNIT_ALIASES[key]
        return str(unit_type)

    return UNIT_SQ_IN if is_plate_family(family) else UNIT_PER_FOOT


def length_in_feet(row: Dict[str, Any]) -> float:
    """
    Supports the legacy length_ft as well as length_value + length_unit.
    length_unit defaults to inches.
    """
    lf = num(row.get("length_ft"))
    if lf > 0:
        return lf

    lv = num(row.get("length_value"))
    if lv <= 0:
        return 0.0

    lu = str(row.get("length_unit") or "in").strip().lower()
    if lu in ("in", '"'):
        return lv / 12
    if lu in ("ft", "'"):
        return lv
    if lu in ("m", "meter", "metre"):
        return lv * METERS_TO_FEET
    return lv


def _material_family(material: Dict[str, Any]) -> str:
    return str(material.get("family") or material.get("type") or material.get("category") or "")


def _resolve_weight_per_ft(
    material: Dict[str, Any],
    row: Dict[str, Any],
    pipe_weight_lookup: Optional[PipeWeightLookup],
) -> float:
    wpf = num(material.get("weight_per_ft"))

    # Pipe weight follows the schedule on the row, not the catalog value
    if is_pipe_family(_material_family(material)):
        schedule = str(row.get("schedule") or DEFAULT_PIPE_SCHEDULE)
        size = str(material.get("size") or "")
        pipe_wpf: Optional[float] = None
        if pipe_weight_lookup is not None:
            pipe_wpf = pipe_weight_lookup(size, schedule)
        if pipe_wpf is None:
            pipe_wpf = estimate_pipe_weight(size, schedule)
        if pipe_wpf:
            wpf = float(pipe_wpf)

    return wpf


def _resolve_weight_per_sqin(material: Dict[str, Any]) -> float:
    wpsqi = num(material.get("weight_per_sqin"))
    if wpsqi > 0:
        return wpsqi
    thickness = num(material.get("thickness_in"))
    density = num(material.get("density")) or (DENSITY_STEEL if thickness > 0 else 0.0)
    return weight_per_sqin(thickness, density)


def _price_processes(processes: Any) -> tuple[List[Dict[str, Any]], float]:
    priced: List[Dict[str, Any]] = []
    total = 0.0
    for p in processes or []:
        if not isinstance(p, dict):
            continue
        hours = num(p.get("hours")) + num(p.get("minutes")) / 60
        cost = _round2(hours * num(p.get("rate")))
        total += cost
        priced.append({**p, "cost": cost})
    return priced, total


def _sum_outsourcing(outsourcing: Any) -> float:
    total = 0.0
    for o in outsourcing or []:
        if isinstance(o, dict):
            total += num(o.get("cost"))
    return total


def price_line(
    row: Dict[str, Any],
    pipe_weight_lookup: Optional[PipeWeightLookup] = None,
    density_lookup: Optional[DensityLookup] = None,
) -> Dict[str, Any]:
    """
    Prices one BOM row.

    Returns a new dict with the row plus:
      - length_ft, weight_per_ft, weight_per_sqin: the values actually used
      - total_weight (lb, 2 decimals)
      - cost_each / material_cost (2 decimals)
      - material_with_markup
      - processes (each with its cost), process_cost, outsource_cost
    """
    material = row.get("material") or {}
    if not isinstance(material, dict):
        material = {}
    if density_lookup is not None and not num(material.get("density")):
        density = density_lookup(_material_family(material), row.get("grade") or material.get("grade"))
        if density:
            material = {**material, "density": density}

    unit = normalize_unit_type(row.get("unit_type"), _material_family(material))
    qty = max(0.0, num(row.get("qty")))
    len_ft = length_in_feet(row)

    wpf = _resolve_weight_per_ft(material, row, pipe_weight_lookup)
    wpsqi = _resolve_weight_per_sqin(material)

    price_ft = num(row.get("price_per_ft"))
    price_lb = num(material.get("price_per_lb")) or num(row.get("price_per_lb"))
    price_ea = num(row.get("price_each"))

    total_weight = 0.0
    cost_each = 0.0
    area_used = None

    if unit == UNIT_PER_FOOT:
        wt_each = len_ft * wpf
        total_weight = wt_each * qty
        cost_each = len_ft * price_ft if price_ft > 0 else wt_each * price_lb
    elif unit == UNIT_EACH:
        cost_each = price_ea
    elif unit == UNIT_SQ_IN:
        length_in = num(row.get("length_in"))
        width_in = num(row.get("width_in"))
        if row.get("pad_conventional"):
            area_used = (length_in + 1) * (width_in + 1)
        else:
            area_used = length_in * width_in
        wt_each = area_used * wpsqi
        total_weight = wt_each * qty
        cost_each = wt_each * price_lb

    material_cost = _round2(cost_each * qty)
    markup_pct = num(row.get("markup_pct"))

    processes, process_cost = _price_processes(row.get("processes"))
    outsource_cost = _sum_outsourcing(row.get("outsourcing"))

    result = dict(row)
    result.update(
        {
            "unit_type": unit,
            "qty": qty,
            "length_ft": len_ft,
            "weight_per_ft": wpf,
            "weight_per_sqin": wpsqi,
            "area_sqin": area_used,
            "total_weight": _round2(total_weight),
            "cost_each": _round2(cost_each),
            "material_cost": material_cost,
            "markup_pct": markup_pct,
            "material_with_markup": material_cost * (1 + markup_pct / 100),
            "processes": processes,
            "process_cost": process_cost,
            "outsource_cost": outsource_cost,
        }
    )
    return result


@dataclass
class QuoteMeta:
    receiving_labor_hours: float = 0.0
    receiving_rate: float = 0.0
    break_in_fee: float = 0.0
    freight_method: str = ""
    freight_amount: float = 0.0
    commission_pct: float = 0.0
    sales_tax_pct: float = 0.0
    domestic_only: bool = False

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "QuoteMeta":
        d = data or {}
        return cls(
            receiving_labor_hours=num(d.get("receiving_labor_hours")),
            receiving_rate=num(d.get("receiving_rate")),
            break_in_fee=num(d.get("break_in_fee")),
            freight_method=str(d.get("freight_method") or ""),
            freight_amount=num(d.get("freight_amount")),
            commission_pct=num(d.get("commission_pct")),
            sales_tax_pct=num(d.get("sales_tax_pct")),
            domestic_only=bool(d.get("domestic_only")),
        )

    @property
    def freight(self) -> float:
        # Will Call means the customer picks up: no freight charged
        if self.freight_method.strip().lower() == WILL_CALL:
            return 0.0
        return self.freight_amount


def roll_up(priced_rows: List[Dict[str, Any]], meta: QuoteMeta) -> Dict[str, float]:
    """
    Totals for already priced rows.

    Strategy:
      1. material_with_markup + processes + outsourcing + receiving = subtotal_after_markup
      2. commission is a percentage of subtotal_after_markup
      3. + break-in fee + freight + commission = subtotal_before_tax
      4. sales tax on subtotal_before_tax
      5. price_per_lb = grand / total_weight (0 without weight)
    """
    material_base = sum(num(r.get("material_cost")) for r in priced_rows)
    material_with_markup = sum(
        num(r.get("material_cost")) * (1 + num(r.get("markup_pct")) / 100) for r in priced_rows
    )
    total_weight = sum(num(r.get("total_weight")) for r in priced_rows)
    processes = sum(num(r.get("process_cost")) for r in priced_rows)
    outsource = sum(num(r.get("outsource_cost")) for r in priced_rows)
    receiving = meta.receiving_labor_hours * meta.receiving_rate

    subtotal_after_markup = material_with_markup + processes + outsource + receiving

    break_in = meta.break_in_fee
    freight = meta.freight
    commission = subtotal_after_markup * (meta.commission_pct / 100)

    subtotal_before_tax = subtotal_after_markup + break_in + freight + commission
    sales_tax = subtotal_before_tax * (meta.sales_tax_pct / 100)

    grand = subtotal_before_tax + sales_tax
    price_per_lb = grand / total_weight if total_weight > 0 else 0.0

    return {
        "material_base": _round2(material_base),
        "material_with_markup": _round2(material_with_markup),
        "processes": _round2(processes),
        "outsource": _round2(outsource),
        "receiving": _round2(receiving),
        "subtotal_after_markup": _round2(subtotal_after_markup),
        "break_in": _round2(break_in),
        "freight": _round2(freight),
        "commission": _round2(commission),
        "subtotal_before_tax": _round2(subtotal_before_tax),
        "sales_tax": _round2(sales_tax),
        "grand": _round2(grand),
        "total_weight": _round2(total_weight),
        "price_per_lb": round(price_per_lb, 4),
    }


def price_quote(
    rows: List[Dict[str, Any]],
    meta: Optional[Dict[str, Any]] = None,
    pipe_weight_lookup: Optional[PipeWeightLookup] = None,
    density_lookup: Optional[DensityLookup] = None,
) -> Dict[str, Any]:
    """
    Prices every row and rolls the quote up.

    Returns {"rows": [...priced rows...], "totals": {...}}.
    """
    priced = [price_line(r, pipe_weight_lookup, density_lookup) for r in rows or [] if isinstance(r, dict)]
    totals = roll_up(priced, QuoteMeta.from_dict(meta))
    return {"rows": priced, "totals": totals}


# ---- Last-price memory ---------------------------------------------------------

def price_memory_key(
    family: Optional[str],
    description: Optional[str],
    unit_type: Optional[str],
    grade: Optional[str] = None,
    domestic: bool = False,
) -> str:
    """
    "PLATE|1/2\"|Sq In|A36|ANY"
    """
    return "|".join(
        [
            str(family or "").upper(),
            str(description or "").upper(),
            str(unit_type or ""),
            str(grade or "").upper(),
            "DOM" if domestic else "ANY",
        ]
    )


def price_payload(row: Dict[str, Any]) -> Dict[str, float]:
    """
    The prices worth remembering for a (priced) row; empty when there are none.
    $/lb is taken the way price_line takes it: the material's before the row's.
    """
    material = row.get("material")
    if not isinstance(material, dict):
        material = {}
    unit = normalize_unit_type(row.get("unit_type"), _material_family(material))
    payload: Dict[str, float] = {}

    price_ft = num(row.get("price_per_ft"))
    price_lb = num(material.get("price_per_lb")) or num(row.get("price_per_lb"))
    price_ea = num(row.get("price_each"))

    if unit == UNIT_PER_FOOT and price_ft:
        payload["price_per_ft"] = price_ft
    if price_lb:
        payload["price_per_lb"] = price_lb
    if unit == UNIT_EACH and price_ea:
        payload["price_each"] = price_ea
    return payload
