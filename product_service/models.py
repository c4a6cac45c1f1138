# product_service/models.py

import re
from datetime import date, datetime, time
from typing import Any, Dict, Optional

from .schemas import ProductBase

# Document keys as stored in the "produtos" collection
NAME_KEY = "nome"
CATEGORY_KEY = "categoria"
PRICE_KEY = "preco"
DISCOUNT_DATE_KEY = "dataDesconto"


def to_document(product: ProductBase, exclude_unset: bool = False) -> Dict[str, Any]:
    """
    Converts a validated product into a MongoDB document.
    With exclude_unset, only the attributes present in the request are kept.
    BSON has no date-only type, so the discount date is stored as midnight.
    """
    document = product.model_dump(by_alias=True, exclude_unset=exclude_unset)
    discount_date = document.get(DISCOUNT_DATE_KEY)
    if isinstance(discount_date, date) and not isinstance(discount_date, datetime):
        document[DISCOUNT_DATE_KEY] = datetime.combine(discount_date, time.min)
    return document


def build_filter(
    name: Optional[str] = None,
    category: Optional[str] = None,
    price_min: Optional[float] = None,
    price_max: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Builds a conjunctive listing filter. With no arguments the filter is empty
    and matches every product.
    """
    query: Dict[str, Any] = {}
    if name:
        query[NAME_KEY] = {"$regex": re.escape(name), "$options": "i"}
    if category:
        query[CATEGORY_KEY] = category

    price_range: Dict[str, float] = {}
    if price_min is not None:
        price_range["$gte"] = price_min
    if price_max is not None:
        price_range["$lte"] = price_max
    if price_range:
        query[PRICE_KEY] = price_range
    return query
