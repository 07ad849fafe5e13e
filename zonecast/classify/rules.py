"""Ordered threshold rules: first matching rule decides the color."""

from collections.abc import Sequence

from zonecast.config.schema import ColorRule, RuleOperator
from zonecast.models.readings import Classification, ClassifyReason

DEFAULT_COLOR = "#6b7280"
EQUALITY_TOLERANCE = 0.1


def matches(value: float, rule: ColorRule) -> bool:
    threshold = rule.threshold
    if rule.operator == RuleOperator.LT:
        return value < threshold
    if rule.operator == RuleOperator.LE:
        return value <= threshold
    if rule.operator == RuleOperator.EQ:
        return abs(value - threshold) < EQUALITY_TOLERANCE
    if rule.operator == RuleOperator.GE:
        return value >= threshold
    if rule.operator == RuleOperator.GT:
        return value > threshold
    return False


def evaluate_rules(
    value: float, rules: Sequence[ColorRule], default_color: str = DEFAULT_COLOR
) -> Classification:
    """Walk ``rules`` in the caller's order and stop at the first match.

    Rules are never sorted or mutated. No rules and no match both resolve to
    ``default_color``; the reason code tells them apart.
    """
    if not rules:
        return Classification(color=default_color, reason=ClassifyReason.NO_RULES)
    for index, rule in enumerate(rules):
        if matches(value, rule):
            return Classification(
                color=rule.color, reason=ClassifyReason.MATCHED, rule_index=index, label=rule.label
            )
    return Classification(color=default_color, reason=ClassifyReason.NO_MATCH)


def classify(value: float, rules: Sequence[ColorRule], default_color: str = DEFAULT_COLOR) -> str:
    return evaluate_rules(value, rules, default_color).color
