from .quote import Quote, QuoteBOM
from .material import Material, MaterialAlias
from .sales_order import SalesOrder
from .app_settings import AppSettings
from .api_key import ApiKey
from .price_history import PriceHistory, PipeWeight
from .equipment import Equipment
from .system_material import MaterialFamily, MaterialSpec, MaterialSize

__all_models = [
    Quote,
    QuoteBOM,
    Material,
    MaterialAlias,
    SalesOrder,
    AppSettings,
    ApiKey,
    PriceHistory,
    PipeWeight,
    Equipment,
    MaterialFamily,
    MaterialSpec,
    MaterialSize,
]
