import math
from typing import Iterable

from salon.schemas.catalog import ChemicalProduct, Consumable
from salon.schemas.reports import LowStockItem


def low_stock(consumables: Iterable[Consumable], chemicals: Iterable[ChemicalProduct]) -> list[LowStockItem]:
    res = []
    for c in consumables:
        if c.stock_qty <= c.min_stock_alert:
            res.append(LowStockItem(id=c.id, name=c.name, current_stock=math.floor(c.stock_qty),
                                    min_stock=c.min_stock_alert, type="consumable"))
    for ch in chemicals:
        if ch.stock <= ch.min_stock:
            res.append(LowStockItem(id=ch.id, name=ch.name, current_stock=math.floor(ch.stock),
                                    min_stock=ch.min_stock, type="chemical"))
    return res
