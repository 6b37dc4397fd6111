"""
Selector Matcher

Answers "does this CSS selector match anything in the current markup" using
BeautifulSoup's CSS engine (soupsieve).
"""

import logging
from typing import Optional

import soupsieve
from bs4 import BeautifulSoup

logger = logging.getLogger('slide2pdf')


class MarkupSnapshot:
    """Rendered presentation state at one instant.

    The HTML is parsed lazily, once, and reused for every selector query made
    against the same snapshot.
    """

    __slots__ = ("_html", "_soup")

    def __init__(self, html: str):
        self._html = html or ""
        self._soup: Optional[BeautifulSoup] = None

    @property
    def html(self) -> str:
        return self._html

    def _parsed(self) -> BeautifulSoup:
        if self._soup is None:
            self._soup = BeautifulSoup(self._html, "html.parser")
        return self._soup

    def matches(self, selector: str) -> bool:
        """Return True if at least one element matches ``selector``."""
        return self._parsed().select_one(selector) is not None

    def __eq__(self, other):
        if not isinstance(other, MarkupSnapshot):
            return NotImplemented
        return self._html == other._html

    def __hash__(self):
        return hash(self._html)

    def __repr__(self):
        return f"MarkupSnapshot({len(self._html)} chars)"


def as_snapshot(markup) -> MarkupSnapshot:
    """Accept either raw HTML or an existing snapshot."""
    if isinstance(markup, MarkupSnapshot):
        return markup
    return MarkupSnapshot(markup)


def is_valid_selector(selector) -> bool:
    """Check that ``selector`` is a string soupsieve can compile."""
    if not isinstance(selector, str) or not selector.strip():
        return False
    try:
        soupsieve.compile(selector)
    except soupsieve.SelectorSyntaxError as e:
        logger.debug(f"Invalid selector {selector!r}: {e}")
        return False
    return True
