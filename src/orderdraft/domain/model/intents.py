"""Discrete mutations of an OrderDraft.

Every change to a draft, whether typed by the user or produced by the engine,
is one of these intents and goes through :func:`orderdraft.domain.model.order_draft.reduce`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Union

from orderdraft.domain.model.line_item import LineItem
from orderdraft.domain.model.offering import Offering
from orderdraft.domain.model.quote import QuoteRequest, QuoteResult


# --- User intents -------------------------------------------------------------


@dataclass(frozen=True)
class AddItem:
    item: LineItem | None = None


@dataclass(frozen=True)
class RemoveItem:
    item_id: str


@dataclass(frozen=True)
class SetItemField:
    item_id: str
    field: str
    value: object


@dataclass(frozen=True)
class SetCustomer:
    customer_id: str | None


@dataclass(frozen=True)
class SetOrderField:
    field: str  # "notes" or "due_date"
    value: str | None


# --- Engine intents -----------------------------------------------------------


@dataclass(frozen=True)
class ResolveOffering:
    item_id: str
    offering: Offering | None
    error: str | None = None


@dataclass(frozen=True)
class BeginQuote:
    item_id: str
    request: QuoteRequest


@dataclass(frozen=True)
class ApplyQuoteResult:
    item_id: str
    request: QuoteRequest
    result: QuoteResult


@dataclass(frozen=True)
class ApplyQuoteFailure:
    item_id: str
    request: QuoteRequest
    error: str


@dataclass(frozen=True)
class ApplySubmissionErrors:
    item_errors: Mapping[str, Mapping[str, str]] = field(default_factory=dict)
    general_errors: tuple[str, ...] = ()


Intent = Union[
    AddItem,
    RemoveItem,
    SetItemField,
    SetCustomer,
    SetOrderField,
    ResolveOffering,
    BeginQuote,
    ApplyQuoteResult,
    ApplyQuoteFailure,
    ApplySubmissionErrors,
]
