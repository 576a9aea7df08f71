"""Önekli rastgele kimlik üretimi (SO-, PO-, SHP-)."""

from __future__ import annotations

import itertools
import uuid
from typing import Callable

IdGenerator = Callable[[str], str]

SALES_ORDER_PREFIX = "SO"
PURCHASE_ORDER_PREFIX = "PO"
SHIPMENT_PREFIX = "SHP"


def generate_id(prefix: str) -> str:
    """UUID4'ün ilk 8 hex karakterinden büyük harfli, önekli kimlik üretir.

    Mevcut kayıtlarla çakışma kontrolü yapılmaz; 8 hex karakterlik alan
    küçük ölçekli kullanım için yeterlidir.
    """
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


class SequentialIdGenerator:
    """Testler için deterministik kimlik üreteci: SO-00000001, SO-00000002, ..."""

    def __init__(self, start: int = 1) -> None:
        self._counters: dict[str, itertools.count] = {}
        self._start = start

    def __call__(self, prefix: str) -> str:
        counter = self._counters.setdefault(prefix, itertools.count(self._start))
        return f"{prefix}-{next(counter):08X}"
