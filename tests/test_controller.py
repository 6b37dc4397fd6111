"""
Traversal controller: capture ordering, termination, fault handling.
"""

from conftest import CaptureRecorder, FakeDeck, landslide_slide
from slide2pdf.lib.controller import Phase, TraversalController
from slide2pdf.lib.exceptions import SlideContentUnreachable, TraversalInterrupted
from slide2pdf.lib.navigation import MOVE_DOWN, MOVE_RIGHT
from slide2pdf.lib.stopping import CustomRule, FrameworkDefault, Operator


def run(deck, recorder=None, **kwargs):
    recorder = recorder or CaptureRecorder(deck)
    result = TraversalController(deck, recorder, **kwargs).run()
    return result, recorder


class TestTraversal:

    def test_three_slide_deck_captures_each_slide_once(self, reveal_deck):
        deck = reveal_deck(3)
        result, recorder = run(deck)
        assert result.phase is Phase.ENDED
        assert result.succeeded
        assert recorder.indices == [1, 2, 3]
        assert result.captured == [1, 2, 3]
        assert deck.actions == [MOVE_RIGHT, MOVE_RIGHT]

    def test_landslide_deck(self, landslide_deck):
        result, recorder = run(landslide_deck(4))
        assert recorder.indices == [1, 2, 3, 4]

    def test_single_slide_deck_is_still_captured(self, reveal_deck):
        deck = reveal_deck(1)
        result, recorder = run(deck)
        assert recorder.indices == [1]
        assert deck.actions == []
        assert result.phase is Phase.ENDED

    def test_waits_for_animation_after_each_navigation(self, reveal_deck):
        deck = reveal_deck(3)
        run(deck, animation_delay=250)
        assert deck.waits == [250, 250]

    def test_negative_delay_is_clamped(self, reveal_deck):
        deck = reveal_deck(2)
        run(deck, animation_delay=-5)
        assert deck.waits == [0]

    def test_navigation_table_drives_actions(self):
        deck = FakeDeck([
            '<div class="vertical"></div>',
            '<div class="horizontal"></div>',
            '<div class="done"></div>',
        ])
        rule = CustomRule(Operator.AND, False, (".done",))
        table = ((".vertical", MOVE_DOWN), (".horizontal", "PageDown"))
        result, recorder = run(deck, stopping_rule=rule, navigation_table=table)
        assert deck.actions == [MOVE_DOWN, "PageDown"]
        assert recorder.indices == [1, 2, 3]
        assert result.last_action == "PageDown"

    def test_end_detected_on_initial_snapshot(self):
        deck = FakeDeck(['<div class="done"></div>', '<div></div>'])
        rule = CustomRule(Operator.OR, False, (".done",))
        result, recorder = run(deck, stopping_rule=rule)
        assert recorder.indices == [1]
        assert deck.actions == []

    def test_end_stays_detected_once_seen(self):
        # The end marker shows up on the first fetch only; the run must not resume.
        class FlickeringDeck(FakeDeck):
            def get_markup(self):
                self._tick("get_markup")
                return '<div class="done"></div>' if self.calls["get_markup"] == 1 else "<div></div>"

        deck = FlickeringDeck(["<div></div>"])
        rule = CustomRule(Operator.OR, False, (".done",))
        result, recorder = run(deck, stopping_rule=rule)
        assert recorder.indices == [1]
        assert deck.actions == []

    def test_auto_framework_is_pinned_from_first_slide(self, landslide_deck):
        deck = landslide_deck(3)
        result, recorder = run(deck, stopping_rule=FrameworkDefault("auto"))
        assert recorder.indices == [1, 2, 3]

    def test_explicit_landslide_policy_ignores_reveal_markers(self):
        stray = '<button class="navigate-right enabled"></button>'
        deck = FakeDeck([landslide_slide(i, 2) + stray for i in range(2)])
        result, recorder = run(deck, stopping_rule=FrameworkDefault("landslide"))
        assert recorder.indices == [1, 2]
        assert result.phase is Phase.ENDED


class TestSlideCeiling:

    def test_max_slides_truncates(self):
        deck = FakeDeck(["<div></div>"] * 10)
        rule = CustomRule(Operator.AND, False, (".never",))
        result, recorder = run(deck, stopping_rule=rule, max_slides=4)
        assert recorder.indices == [1, 2, 3, 4]
        assert result.phase is Phase.ENDED
        assert result.truncated is True

    def test_ceiling_not_reached(self, reveal_deck):
        result, recorder = run(reveal_deck(3), max_slides=10)
        assert result.truncated is False
        assert recorder.indices == [1, 2, 3]


class TestFaults:

    def test_initial_fetch_failure_is_unreachable_content(self, reveal_deck):
        deck = reveal_deck(3, fail_on={"get_markup": 1})
        result, recorder = run(deck, url="http://example.test/deck")
        assert result.phase is Phase.FAILED
        assert not result.succeeded
        assert isinstance(result.fault, SlideContentUnreachable)
        assert "Could not reach slide content" in str(result.fault)
        assert recorder.indices == []

    def test_first_capture_failure_is_unreachable_content(self, reveal_deck):
        deck = reveal_deck(3, fail_on={"capture": 1})
        result, recorder = run(deck)
        assert isinstance(result.fault, SlideContentUnreachable)

    def test_navigation_failure_mid_run(self, reveal_deck):
        deck = reveal_deck(4, fail_on={"issue_navigation": 2})
        result, recorder = run(deck)
        assert result.phase is Phase.FAILED
        assert isinstance(result.fault, TraversalInterrupted)
        assert "mid-run" in str(result.fault)
        assert result.fault.context == {"slide_index": 2}
        assert recorder.indices == [1, 2]

    def test_fetch_failure_mid_run_is_not_retried(self, reveal_deck):
        deck = reveal_deck(4, fail_on={"get_markup": 3})
        result, recorder = run(deck)
        assert isinstance(result.fault, TraversalInterrupted)
        assert deck.calls["get_markup"] == 3
        assert recorder.indices == [1, 2]

    def test_fault_keeps_original_exception(self, reveal_deck):
        deck = reveal_deck(3, fail_on={"capture": 2})
        result, recorder = run(deck)
        assert isinstance(result.fault.original, RuntimeError)
        assert recorder.indices == [1]
