"""
Stopping-Condition Evaluator

Decides whether the slide currently rendered is the last one of the deck,
either from a user supplied selector rule or from the built-in conventions
of the supported slide frameworks.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple, Union

from .selector_matcher import MarkupSnapshot, as_snapshot, is_valid_selector

logger = logging.getLogger('slide2pdf')


class Operator(Enum):
    AND = "and"
    OR = "or"

    @property
    def identity(self) -> bool:
        return self is Operator.AND


@dataclass(frozen=True)
class FrameworkPolicy:
    """End-of-deck convention of one slide framework.

    A framework marks "more slides ahead" with forward-looking CSS classes;
    the current slide is the last one when none of them is present.
    """

    name: str
    forward_markers: Tuple[str, ...]

    def is_end(self, snapshot: MarkupSnapshot) -> bool:
        return not any(snapshot.matches(marker) for marker in self.forward_markers)


LANDSLIDE_POLICY = FrameworkPolicy(
    name="landslide",
    forward_markers=(".slide.far-future", ".slide.future"),
)

REVEAL_POLICY = FrameworkPolicy(
    name="reveal",
    forward_markers=(".future", ".navigate-right.enabled", ".navigate-down.enabled"),
)

FRAMEWORK_POLICIES: Dict[str, Tuple[FrameworkPolicy, ...]] = {
    "landslide": (LANDSLIDE_POLICY,),
    "reveal": (REVEAL_POLICY,),
    "combined": (REVEAL_POLICY, LANDSLIDE_POLICY),
}

AUTO_DETECT = "auto"

# Markers that identify the framework driving a deck, checked in order.
FRAMEWORK_SIGNATURES: Tuple[Tuple[str, str], ...] = (
    (".reveal", "reveal"),
    (".presentation .slide", "landslide"),
)


def detect_framework(markup) -> str:
    """Guess which framework renders ``markup``; "combined" when unsure."""
    snapshot = as_snapshot(markup)
    for selector, framework in FRAMEWORK_SIGNATURES:
        if snapshot.matches(selector):
            return framework
    return "combined"


@dataclass(frozen=True)
class FrameworkDefault:
    """Built-in stopping rule: every selected framework policy must agree."""

    framework: str = AUTO_DETECT

    def resolve(self, markup) -> "FrameworkDefault":
        """Pin an auto-detecting rule to the framework found in ``markup``."""
        if self.framework != AUTO_DETECT:
            return self
        return FrameworkDefault(detect_framework(markup))

    @property
    def policies(self) -> Tuple[FrameworkPolicy, ...]:
        return FRAMEWORK_POLICIES.get(self.framework, FRAMEWORK_POLICIES["combined"])

    def is_end(self, snapshot: MarkupSnapshot) -> bool:
        rule = self.resolve(snapshot)
        return all(policy.is_end(snapshot) for policy in rule.policies)


@dataclass(frozen=True)
class CustomRule:
    """User supplied stopping rule (the ``endCase`` configuration entry)."""

    operator: Operator
    reverse: bool
    queries: Tuple[str, ...]

    def is_end(self, snapshot: MarkupSnapshot) -> bool:
        return fold_queries(snapshot, self.operator, self.reverse, self.queries)


StoppingRule = Union[FrameworkDefault, CustomRule]


def fold_queries(snapshot: MarkupSnapshot, operator: Operator, reverse: bool,
                 queries: Sequence[str]) -> bool:
    """
    Fold per-selector match results into a single boolean.

    Each query "holds" when its selector is present, or absent when
    ``reverse`` is set. AND stops at the first query that does not hold,
    OR stops at the first one that does.

    Args:
        snapshot: Markup to test
        operator: Operator.AND or Operator.OR
        reverse: Invert each selector match before folding
        queries: Selectors, in evaluation order

    Returns:
        bool: The folded result, starting from the operator's identity
    """
    result = operator.identity
    for query in queries:
        holds = snapshot.matches(query) != reverse
        if operator is Operator.AND:
            result = result and holds
            if not result:
                return False
        else:
            result = result or holds
            if result:
                return True
    return result


def is_end(markup, already_ended: bool, rule: Optional[StoppingRule]) -> bool:
    """
    Decide whether the current slide is the last one.

    Args:
        markup: Current rendered markup (str or MarkupSnapshot)
        already_ended: True once an earlier call returned True in this run
        rule: CustomRule, FrameworkDefault, or None for the auto-detected default

    Returns:
        bool: True when traversal must stop
    """
    if already_ended:
        return True
    if rule is None:
        rule = FrameworkDefault()
    return rule.is_end(as_snapshot(markup))


def parse_operator(raw: Any) -> Operator:
    """Map a configured operator name to an Operator; unknown names act as OR."""
    if isinstance(raw, str):
        try:
            return Operator(raw.strip().lower())
        except ValueError:
            pass
    logger.warning(f"Unknown stopping rule operator {raw!r}, using 'or'")
    return Operator.OR


def build_stopping_rule(raw: Optional[Dict[str, Any]], framework: str = AUTO_DETECT) -> StoppingRule:
    """
    Build the stopping rule for a run from the ``endCase`` configuration.

    Malformed rules are reported once and replaced by the framework default;
    they never abort the run.

    Args:
        raw: Mapping with "operator", "reverse" and "queries", or None
        framework: Framework default to fall back to ("auto", "reveal",
            "landslide" or "combined")

    Returns:
        CustomRule or FrameworkDefault
    """
    if framework != AUTO_DETECT and framework not in FRAMEWORK_POLICIES:
        logger.warning(f"Unknown framework {framework!r}, using auto detection")
        framework = AUTO_DETECT
    default = FrameworkDefault(framework)

    if raw is None:
        return default

    if not isinstance(raw, dict):
        logger.warning("Stopping rule (endCase) must be a mapping, using framework defaults")
        return default

    queries = raw.get("queries")
    if isinstance(queries, str):
        queries = [queries]
    if not isinstance(queries, (list, tuple)) or not queries:
        logger.warning("Stopping rule (endCase) has no queries, using framework defaults")
        return default

    invalid = [query for query in queries if not is_valid_selector(query)]
    if invalid:
        logger.warning(f"Stopping rule (endCase) has invalid selectors {invalid}, using framework defaults")
        return default

    reverse = raw.get("reverse", False)
    if not isinstance(reverse, bool):
        logger.warning(f"Stopping rule (endCase) reverse must be true or false, got {reverse!r}; using false")
        reverse = False

    return CustomRule(
        operator=parse_operator(raw.get("operator", "or")),
        reverse=reverse,
        queries=tuple(queries),
    )
