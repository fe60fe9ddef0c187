"""
Recurring Calendar — Rule Schema.

JSON contract for persisting temporal expressions. Each node carries a
``kind`` discriminator; composite nodes nest their children.

JSON example ("weekdays except the 1st of the month"):
{
    "kind": "difference",
    "included": {"kind": "day_of_week",
                 "days": ["MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY"]},
    "excluded": {"kind": "day_of_month", "days": [1]}
}
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from recurring_calendar.core.errors import EventValidationError, RuleSchemaError
from recurring_calendar.core.expressions import (
    DailyExpression,
    DayOfMonthExpression,
    DayOfWeekExpression,
    DifferenceExpression,
    IntersectionExpression,
    IntervalExpression,
    TemporalExpression,
    UnionExpression,
    Weekday,
)

logger = logging.getLogger(__name__)


class DailyRule(BaseModel):
    kind: Literal["daily"] = "daily"

    def to_expression(self) -> TemporalExpression:
        return DailyExpression()


class DayOfWeekRule(BaseModel):
    kind: Literal["day_of_week"] = "day_of_week"
    days: list[str]     # weekday names, e.g. ["MONDAY", "FRIDAY"]

    def to_expression(self) -> TemporalExpression:
        return DayOfWeekExpression(self.days)


class DayOfMonthRule(BaseModel):
    kind: Literal["day_of_month"] = "day_of_month"
    days: list[int]

    def to_expression(self) -> TemporalExpression:
        return DayOfMonthExpression(self.days)


class IntervalRule(BaseModel):
    kind: Literal["interval"] = "interval"
    anchor: date        # ISO format YYYY-MM-DD
    period_days: int

    def to_expression(self) -> TemporalExpression:
        return IntervalExpression(self.anchor, self.period_days)


class UnionRule(BaseModel):
    kind: Literal["union"] = "union"
    expressions: list[RuleDocument]

    def to_expression(self) -> TemporalExpression:
        return UnionExpression(*(e.to_expression() for e in self.expressions))


class IntersectionRule(BaseModel):
    kind: Literal["intersection"] = "intersection"
    expressions: list[RuleDocument]

    def to_expression(self) -> TemporalExpression:
        return IntersectionExpression(*(e.to_expression() for e in self.expressions))


class DifferenceRule(BaseModel):
    kind: Literal["difference"] = "difference"
    included: RuleDocument
    excluded: RuleDocument

    def to_expression(self) -> TemporalExpression:
        return DifferenceExpression(
            self.included.to_expression(), self.excluded.to_expression(),
        )


RuleDocument = Annotated[
    Union[
        DailyRule,
        DayOfWeekRule,
        DayOfMonthRule,
        IntervalRule,
        UnionRule,
        IntersectionRule,
        DifferenceRule,
    ],
    Field(discriminator="kind"),
]

for _model in (UnionRule, IntersectionRule, DifferenceRule):
    _model.model_rebuild()

_rule_adapter: TypeAdapter = TypeAdapter(RuleDocument)


def _to_document(expr: TemporalExpression) -> BaseModel:
    if isinstance(expr, DailyExpression):
        return DailyRule()
    if isinstance(expr, DayOfWeekExpression):
        return DayOfWeekRule(days=[d.name for d in sorted(expr.days)])
    if isinstance(expr, DayOfMonthExpression):
        return DayOfMonthRule(days=sorted(expr.days))
    if isinstance(expr, IntervalExpression):
        return IntervalRule(anchor=expr.anchor, period_days=expr.period_days)
    if isinstance(expr, UnionExpression):
        return UnionRule(expressions=[_to_document(e) for e in expr.expressions])
    if isinstance(expr, IntersectionExpression):
        return IntersectionRule(
            expressions=[_to_document(e) for e in expr.expressions],
        )
    if isinstance(expr, DifferenceExpression):
        return DifferenceRule(
            included=_to_document(expr.included),
            excluded=_to_document(expr.excluded),
        )
    raise RuleSchemaError(f"Cannot serialize expression type {type(expr).__name__}")


def _build(document: RuleDocument, source: str) -> TemporalExpression:
    try:
        return document.to_expression()
    except RuleSchemaError:
        raise
    except EventValidationError as exc:
        logger.warning("Invalid rule %s: %s", source, exc)
        raise RuleSchemaError(f"Invalid rule {source}: {exc}") from exc


def dump_rule(expr: TemporalExpression) -> dict[str, Any]:
    """Convert an expression tree into a JSON-compatible dict."""
    return _to_document(expr).model_dump(mode="json")


def load_rule(data: dict[str, Any]) -> TemporalExpression:
    """Build an expression tree from a dict produced by dump_rule."""
    try:
        document = _rule_adapter.validate_python(data)
    except ValidationError as exc:
        logger.warning("Invalid rule document: %s", exc)
        raise RuleSchemaError(f"Invalid rule document: {exc}") from exc
    return _build(document, "document")


def rule_to_json(expr: TemporalExpression) -> str:
    """Serialize an expression tree to a JSON string."""
    return _to_document(expr).model_dump_json()


def rule_from_json(text: str) -> TemporalExpression:
    """Parse a JSON string produced by rule_to_json."""
    try:
        document = _rule_adapter.validate_json(text)
    except ValidationError as exc:
        logger.warning("Invalid rule JSON: %s", exc)
        raise RuleSchemaError(f"Invalid rule JSON: {exc}") from exc
    return _build(document, "JSON")
