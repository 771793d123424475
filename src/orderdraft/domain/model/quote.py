"""Quote request/result value objects and the per-item quote state variant.

A :class:`QuoteRequest` holds exactly the inputs the backend prices, so it
doubles as the fingerprint of an in-flight request: a result is only applied
to an item whose state is still ``Quoting`` for an equal request.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Union

from orderdraft.domain.model.offering import PricingStrategy
from orderdraft.domain.model.value_objects import Money


@dataclass(frozen=True)
class QuoteRequest:
    offering_id: str
    customer_id: str
    quantity: int
    length: Decimal | None = None
    width: Decimal | None = None


@dataclass(frozen=True)
class QuoteResult:
    unit_price: Money
    subtotal: Money
    applied_unit: str | None = None
    strategy_applied: PricingStrategy | None = None
    message: str | None = None


class QuoteStatus(Enum):
    IDLE = "idle"
    QUOTING = "quoting"
    QUOTED = "quoted"
    FAILED = "failed"


@dataclass(frozen=True)
class Idle:
    status: ClassVar[QuoteStatus] = QuoteStatus.IDLE


@dataclass(frozen=True)
class Quoting:
    status: ClassVar[QuoteStatus] = QuoteStatus.QUOTING

    request: QuoteRequest


@dataclass(frozen=True)
class Quoted:
    status: ClassVar[QuoteStatus] = QuoteStatus.QUOTED

    request: QuoteRequest | None
    result: QuoteResult


@dataclass(frozen=True)
class Failed:
    status: ClassVar[QuoteStatus] = QuoteStatus.FAILED

    request: QuoteRequest
    error: str


QuoteState = Union[Idle, Quoting, Quoted, Failed]

IDLE = Idle()
