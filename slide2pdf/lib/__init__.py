#!/usr/bin/env python3
"""
Slide Traversal Library

Decision engine that walks a slide deck: end-of-deck detection, navigation
resolution and the capture loop, plus the browser session it runs against.
"""

from .selector_matcher import MarkupSnapshot, is_valid_selector
from .stopping import (
    Operator,
    FrameworkPolicy,
    FrameworkDefault,
    CustomRule,
    LANDSLIDE_POLICY,
    REVEAL_POLICY,
    build_stopping_rule,
    detect_framework,
    is_end,
)
from .navigation import MOVE_DOWN, MOVE_RIGHT, next_action, validate_navigation_table
from .controller import Phase, TraversalController, TraversalResult, TraversalState

__all__ = [
    "MarkupSnapshot",
    "is_valid_selector",
    "Operator",
    "FrameworkPolicy",
    "FrameworkDefault",
    "CustomRule",
    "LANDSLIDE_POLICY",
    "REVEAL_POLICY",
    "build_stopping_rule",
    "detect_framework",
    "is_end",
    "MOVE_DOWN",
    "MOVE_RIGHT",
    "next_action",
    "validate_navigation_table",
    "Phase",
    "TraversalController",
    "TraversalResult",
    "TraversalState",
]
