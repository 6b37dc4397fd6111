"""
Shared fixtures: an in-memory slide deck standing in for the browser.
"""

import logging

import pytest


def reveal_slide(index, total):
    """Markup of a reveal.js deck showing slide ``index`` (0-based) of ``total``."""
    sections = []
    for i in range(total):
        state = "past" if i < index else "present" if i == index else "future"
        sections.append(f'<section class="{state}">Slide {i + 1}</section>')
    right = " enabled" if index < total - 1 else ""
    return (
        '<html><body><div class="reveal"><div class="slides">'
        + "".join(sections)
        + f'</div><aside class="controls"><button class="navigate-right{right}"></button>'
        + '<button class="navigate-down"></button></aside></div></body></html>'
    )


def landslide_slide(index, total):
    """Markup of a Landslide deck showing slide ``index`` (0-based) of ``total``."""
    slides = []
    for i in range(total):
        if i < index:
            state = "past"
        elif i == index:
            state = "current"
        elif i == index + 1:
            state = "future"
        else:
            state = "far-future"
        slides.append(f'<div class="slide-wrapper"><div class="slide {state}">{i + 1}</div></div>')
    return '<html><body><div class="presentation"><div class="slides">' + "".join(slides) + "</div></div></body></html>"


class FakeDeck:
    """Rendering session over a list of markup snapshots.

    Every navigation moves one snapshot forward; ``fail_on`` makes the named
    operation raise at the given call number (1-based).
    """

    def __init__(self, slides, fail_on=None):
        self.slides = list(slides)
        self.position = 0
        self.actions = []
        self.waits = []
        self.fail_on = fail_on or {}
        self.calls = {"get_markup": 0, "issue_navigation": 0, "capture": 0}

    def _tick(self, name):
        self.calls[name] += 1
        if self.fail_on.get(name) == self.calls[name]:
            raise RuntimeError(f"{name} failed")

    def get_markup(self):
        self._tick("get_markup")
        return self.slides[self.position]

    def issue_navigation(self, action):
        self._tick("issue_navigation")
        self.actions.append(action)
        self.position = min(self.position + 1, len(self.slides) - 1)

    def wait(self, ms):
        self.waits.append(ms)


class CaptureRecorder:
    def __init__(self, deck=None):
        self.deck = deck
        self.indices = []

    def __call__(self, slide_index):
        if self.deck is not None:
            self.deck._tick("capture")
        self.indices.append(slide_index)


@pytest.fixture
def reveal_deck():
    def make(total, **kwargs):
        return FakeDeck([reveal_slide(i, total) for i in range(total)], **kwargs)
    return make


@pytest.fixture
def landslide_deck():
    def make(total, **kwargs):
        return FakeDeck([landslide_slide(i, total) for i in range(total)], **kwargs)
    return make


@pytest.fixture(autouse=True)
def reset_slide2pdf_logger():
    """Undo LoggerFactory changes so caplog sees every record."""
    logger = logging.getLogger("slide2pdf")
    yield
    logger.handlers = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
