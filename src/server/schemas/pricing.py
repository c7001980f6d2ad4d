# fil: src/server/schemas/pricing.py
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class PricingIn(BaseModel):
    """
    rows: quote builder rows, e.g.

      {"unit_type": "Per Foot", "qty": 4, "length_ft": 20,
       "material": {"family": "Angle", "size": "2 x 2 x 1/4", "weight_per_ft": 3.19},
       "price_per_lb": 0.85, "markup_pct": 20,
       "processes": [{"name": "Saw", "hours": 0, "minutes": 30, "rate": 95}],
       "outsourcing": [{"name": "Galvanize", "cost": 120}]}

    meta: receiving_labor_hours, receiving_rate, break_in_fee, freight_method,
          freight_amount, commission_pct, sales_tax_pct, domestic_only
    """
    rows: List[Dict[str, Any]] = []
    meta: Optional[Dict[str, Any]] = None
    remember_prices: bool = False


class PipeWeightIn(BaseModel):
    size: str
    schedule: Optional[str] = None
    weight_per_ft: float
