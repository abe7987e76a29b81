"""
Rate Rules Service

Applies an ordered list of declarative rules to a RateSet, so the
shipping adjustments for a store can live in configuration:

    [
        {"action": "add", "service_id": 1, "price": 5, "method": "Local",
         "service_name": "Courier", "add_flat_rate": false},
        {"action": "update", "selector": "ups ground", "modifier": "-10%"},
        {"action": "hide", "selector": "fedex"}
    ]
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from custom_shipping.core.config import settings
from custom_shipping.core.exceptions import RateRuleError
from custom_shipping.modules.shipping.rate_set import RateSet
from custom_shipping.schemas.shipping import RateRule

logger = logging.getLogger(__name__)


def load_rules(raw_rules: Optional[Iterable[Union[RateRule, Dict[str, Any]]]] = None) -> List[RateRule]:
    """
    Validate rule definitions.

    Args:
        raw_rules: Rule dicts or RateRule objects (defaults to settings.SHIPPING_RATE_RULES)

    Raises:
        RateRuleError: if a rule definition is invalid
    """
    if raw_rules is None:
        raw_rules = settings.SHIPPING_RATE_RULES

    rules = []
    for index, raw in enumerate(raw_rules):
        if isinstance(raw, RateRule):
            rules.append(raw)
            continue
        try:
            rules.append(RateRule.model_validate(raw))
        except ValidationError as e:
            raise RateRuleError(
                f"Invalid rate rule at position {index}: {e.errors()[0]['msg']}",
                rule_index=index,
            )
    return rules


def apply_rule(rate_set: RateSet, rule: RateRule) -> None:
    """Apply a single rule to `rate_set`."""
    if rule.action == "add":
        rate_set.add(
            rule.service_id,
            rule.price,
            rule.method,
            rule.service_name,
            add_flat_rate=rule.add_flat_rate,
            add_handling=rule.add_handling,
        )
    elif rule.action == "update":
        rate_set.update(rule.selector, rule.modifier, rule.method, rule.service_name)
    elif rule.action == "hide":
        rate_set.hide(rule.selector)
    elif rule.action == "show":
        rate_set.show(rule.selector)
    elif rule.action == "remove":
        rate_set.remove(rule.selector)
    elif rule.action == "error":
        rate_set.error(rule.message)
    elif rule.action == "reset":
        rate_set.reset()


def apply_rules(rate_set: RateSet, rules: Iterable[RateRule]) -> int:
    """
    Apply rules in order.

    Errors raised by a rule (e.g. MalformedModifierError) stop the run and
    propagate; rules already applied stay applied.

    Returns:
        Number of rules applied
    """
    applied = 0
    for rule in rules:
        logger.debug(f"Applying rate rule: {rule.action} {rule.selector!r}")
        apply_rule(rate_set, rule)
        applied += 1

    logger.info(f"Applied {applied} rate rule(s); {len(rate_set.rates)} rate(s) in set")
    return applied
