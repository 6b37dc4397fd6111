"""
Navigation Resolver

Chooses the key press that advances the deck to its next slide.
"""

import logging
from typing import Any, Optional, Sequence, Tuple

from .selector_matcher import as_snapshot, is_valid_selector

logger = logging.getLogger('slide2pdf')

MOVE_RIGHT = "ArrowRight"
MOVE_DOWN = "ArrowDown"

# reveal.js enables its down control while a vertical stack has slides left.
DOWN_ENABLED_SELECTOR = ".navigate-down.enabled"

NavigationTable = Tuple[Tuple[str, str], ...]


def validate_navigation_table(raw: Any) -> Optional[NavigationTable]:
    """
    Validate the ``navigate`` configuration entry once for a run.

    Args:
        raw: Sequence of [selector, action] pairs, or None

    Returns:
        tuple or None: The table as tuples, or None when absent or invalid
    """
    if raw is None:
        return None

    problem = None
    if not isinstance(raw, (list, tuple)) or len(raw) < 1:
        problem = "it must be a non-empty list"
    else:
        for i, entry in enumerate(raw):
            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                problem = f"entry {i} must be a [selector, action] pair"
                break
            selector, action = entry
            if not isinstance(action, str) or not action:
                problem = f"entry {i} has no action"
                break
            if not is_valid_selector(selector):
                problem = f"entry {i} has an invalid selector {selector!r}"
                break

    if problem:
        logger.warning(f"Navigation table (navigate) is not valid: {problem}. Using default navigation")
        return None

    return tuple((selector, action) for selector, action in raw)


def default_action(markup) -> str:
    """Move down inside a vertical stack, otherwise right."""
    if as_snapshot(markup).matches(DOWN_ENABLED_SELECTOR):
        return MOVE_DOWN
    return MOVE_RIGHT


def next_action(markup, table: Optional[Sequence[Tuple[str, str]]] = None) -> str:
    """
    Resolve the next navigation action.

    The first table entry whose selector matches wins; with no table the
    default rule applies, and with no matching entry the deck moves right.
    """
    snapshot = as_snapshot(markup)
    if not table:
        return default_action(snapshot)

    for selector, action in table:
        if snapshot.matches(selector):
            return action
    return MOVE_RIGHT
