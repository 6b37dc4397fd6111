"""
Traversal Controller

Walks a deck one slide at a time: capture, decide whether the deck is over,
navigate, wait for the transition, capture again.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from .exceptions import RenderingError, SlideContentUnreachable, TraversalInterrupted
from .navigation import next_action
from .selector_matcher import MarkupSnapshot
from .stopping import FrameworkDefault, StoppingRule, is_end

logger = logging.getLogger('slide2pdf')


class Phase(Enum):
    START = "start"
    CAPTURING = "capturing"
    DECIDING = "deciding"
    NAVIGATING = "navigating"
    ENDED = "ended"
    FAILED = "failed"


@dataclass
class TraversalState:
    """Mutable state of one run, owned by the controller."""

    slide_index: int = 1
    done: bool = False
    last_action: Optional[str] = None
    phase: Phase = Phase.START


@dataclass
class TraversalResult:
    phase: Phase
    captured: List[int] = field(default_factory=list)
    fault: Optional[RenderingError] = None
    truncated: bool = False
    last_action: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.phase is Phase.ENDED


class TraversalController:
    """
    Drive one conversion run against a rendering session.

    The session must provide ``get_markup()``, ``issue_navigation(action)``
    and ``wait(ms)``; ``capture(slide_index)`` persists the slide currently
    displayed. Any exception raised by them ends the run in the FAILED phase.
    """

    def __init__(
        self,
        session,
        capture: Callable[[int], None],
        stopping_rule: Optional[StoppingRule] = None,
        navigation_table: Optional[Sequence[Tuple[str, str]]] = None,
        animation_delay: int = 0,
        max_slides: Optional[int] = None,
        url: str = "",
    ):
        self.session = session
        self.capture = capture
        self.stopping_rule = stopping_rule if stopping_rule is not None else FrameworkDefault()
        self.navigation_table = navigation_table
        self.animation_delay = max(0, int(animation_delay or 0))
        self.max_slides = max_slides if max_slides and max_slides > 0 else None
        self.url = url

    def _snapshot(self) -> MarkupSnapshot:
        return MarkupSnapshot(self.session.get_markup())

    def _capture(self, state: TraversalState, captured: List[int]) -> None:
        state.phase = Phase.CAPTURING
        logger.debug(f"Capturing slide {state.slide_index}")
        self.capture(state.slide_index)
        captured.append(state.slide_index)

    def _finish(self, state: TraversalState, captured: List[int], phase: Phase,
                fault: Optional[RenderingError] = None, truncated: bool = False) -> TraversalResult:
        state.phase = phase
        if fault is not None:
            logger.debug(f"Traversal stopped in {phase.value} phase: {fault}")
        return TraversalResult(
            phase=phase,
            captured=captured,
            fault=fault,
            truncated=truncated,
            last_action=state.last_action,
        )

    def run(self) -> TraversalResult:
        """
        Capture every slide of the deck.

        Returns:
            TraversalResult: ENDED when the stopping rule fired (or the slide
            ceiling was reached), FAILED when the rendering surface faulted
        """
        state = TraversalState()
        captured: List[int] = []
        rule = self.stopping_rule

        # The first slide is captured whatever the stopping rule says.
        try:
            snapshot = self._snapshot()
            if isinstance(rule, FrameworkDefault):
                rule = rule.resolve(snapshot)
                logger.debug(f"Using {rule.framework} end-of-deck convention")
            state.done = is_end(snapshot, False, rule)
            self._capture(state, captured)
        except Exception as e:
            return self._finish(state, captured, Phase.FAILED, SlideContentUnreachable(self.url, e))

        while True:
            try:
                state.phase = Phase.DECIDING
                snapshot = self._snapshot()
                state.done = is_end(snapshot, state.done, rule)
                if state.done:
                    logger.debug(f"Slide {state.slide_index} is the last one")
                    return self._finish(state, captured, Phase.ENDED)

                if self.max_slides is not None and len(captured) >= self.max_slides:
                    logger.warning(f"Stopped after {self.max_slides} slides without reaching the end of the deck")
                    return self._finish(state, captured, Phase.ENDED, truncated=True)

                state.phase = Phase.NAVIGATING
                action = next_action(snapshot, self.navigation_table)
                logger.debug(f"Slide {state.slide_index}: pressing {action}")
                self.session.issue_navigation(action)
                state.last_action = action
                self.session.wait(self.animation_delay)

                state.slide_index += 1
                self._capture(state, captured)
            except Exception as e:
                return self._finish(state, captured, Phase.FAILED, TraversalInterrupted(state.slide_index, e))
