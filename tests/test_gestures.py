"""
Test cases for gesture classification and scroll dispatch with synthetic landmark frames.
"""
import unittest
from typing import Dict, Tuple

from handscroll.gestures import (
    EXTENSION_MARGIN,
    FrameDriver,
    GestureProcessor,
    ScrollController,
    classify,
    dispatch,
    finger_states,
)
from handscroll.controller_mock import MockController
from handscroll.types import GestureSymbol, LandmarkFrame, LandmarkIndex, LandmarkPoint


PIP_Y = 0.5


def make_frame(tip_offsets: Dict[str, float], thumb: Tuple[float, float] = (0.3, 0.5)) -> LandmarkFrame:
    """
    Create a synthetic hand with every PIP joint at PIP_Y.

    Args:
        tip_offsets: finger -> tip.y - pip.y (negative means the tip is above the joint)
        thumb: (x, y) of the thumb tip

    Returns:
        LandmarkFrame with 21 points
    """
    points = [(0.5, 0.8)] * 21
    for finger in ("index", "middle", "ring", "pinky"):
        pip = LandmarkIndex[f"{finger.upper()}_PIP"]
        tip = LandmarkIndex[f"{finger.upper()}_TIP"]
        points[pip] = (0.5, PIP_Y)
        points[tip] = (0.5, PIP_Y + tip_offsets[finger])
    points[LandmarkIndex.THUMB_TIP] = thumb
    return LandmarkFrame.from_points(points)


FIST = {"index": 0.1, "middle": 0.1, "ring": 0.1, "pinky": 0.1}
INDEX_UP = {"index": -0.2, "middle": 0.1, "ring": 0.1, "pinky": 0.1}
OPEN_PALM = {"index": -0.2, "middle": -0.2, "ring": -0.2, "pinky": -0.2}


class TestClassifier(unittest.TestCase):
    """Test gesture classification."""

    def test_absent_frame_is_none(self):
        """No hand means no gesture."""
        self.assertIs(classify(None), GestureSymbol.NONE)

    def test_malformed_payload_is_none(self):
        """Payloads that are not a full hand never scroll."""
        self.assertIs(classify([(0.5, 0.5)] * 5), GestureSymbol.NONE)
        self.assertIs(classify("not a hand"), GestureSymbol.NONE)
        self.assertIs(classify([(10 ** 400, 0.5)] * 21), GestureSymbol.NONE)

    def test_closed_fist(self):
        """All four fingertips below their PIP joints is a fist."""
        self.assertIs(classify(make_frame(FIST)), GestureSymbol.CLOSED_FIST)

    def test_fist_with_tips_barely_below(self):
        """A fist only needs each tip to be lower than its joint."""
        frame = make_frame({"index": 0.001, "middle": 0.001, "ring": 0.001, "pinky": 0.001})
        self.assertIs(classify(frame), GestureSymbol.CLOSED_FIST)

    def test_index_raised(self):
        """Index above its joint by more than the margin, others curled."""
        self.assertIs(classify(make_frame(INDEX_UP)), GestureSymbol.OPEN_INDEX)

    def test_open_palm_is_none(self):
        """Other poses are ambiguous."""
        self.assertIs(classify(make_frame(OPEN_PALM)), GestureSymbol.NONE)

    def test_index_up_with_middle_up_is_none(self):
        """Middle finger must be curled for the index gesture."""
        offsets = dict(INDEX_UP, middle=-0.2)
        self.assertIs(classify(make_frame(offsets)), GestureSymbol.NONE)

    def test_index_within_margin_is_none(self):
        """Index slightly above its joint is neither fist nor raised."""
        offsets = dict(INDEX_UP, index=-0.03)
        self.assertIs(classify(make_frame(offsets)), GestureSymbol.NONE)

    def test_index_level_with_joint_is_none(self):
        """Tip exactly level with the joint is neither curled nor extended."""
        offsets = dict(FIST, index=0.0)
        self.assertIs(classify(make_frame(offsets)), GestureSymbol.NONE)

    def test_margin_boundary_is_not_extended(self):
        """Index tip exactly EXTENSION_MARGIN above the joint does not count as extended."""
        points = [(0.5, 0.8)] * 21
        for finger in ("MIDDLE", "RING", "PINKY"):
            points[LandmarkIndex[f"{finger}_PIP"]] = (0.5, PIP_Y)
            points[LandmarkIndex[f"{finger}_TIP"]] = (0.5, PIP_Y + 0.1)
        points[LandmarkIndex.INDEX_PIP] = (0.5, PIP_Y)
        points[LandmarkIndex.INDEX_TIP] = (0.5, PIP_Y - EXTENSION_MARGIN)
        frame = LandmarkFrame.from_points(points)

        self.assertFalse(finger_states(frame).index_extended)
        self.assertIs(classify(frame), GestureSymbol.NONE)

    def test_just_past_margin_is_extended(self):
        """Clearing the margin by a hair counts as extended."""
        offsets = dict(INDEX_UP, index=-(EXTENSION_MARGIN + 1e-6))
        self.assertIs(classify(make_frame(offsets)), GestureSymbol.OPEN_INDEX)

    def test_thumb_does_not_affect_result(self):
        """Thumb position is ignored."""
        for thumb in [(0.1, 0.1), (0.9, 0.9), (0.5, 0.0)]:
            self.assertIs(classify(make_frame(FIST, thumb=thumb)), GestureSymbol.CLOSED_FIST)
            self.assertIs(classify(make_frame(INDEX_UP, thumb=thumb)), GestureSymbol.OPEN_INDEX)

    def test_classification_is_deterministic(self):
        """Same frame, same symbol."""
        frame = make_frame(INDEX_UP)
        self.assertEqual(classify(frame), classify(frame))
        self.assertEqual(finger_states(frame), finger_states(frame))

    def test_translation_invariance(self):
        """Shifting the whole hand does not change the gesture."""
        frame = make_frame(INDEX_UP)
        shifted = LandmarkFrame(points=tuple(
            LandmarkPoint(x=p.x + 0.1, y=p.y - 0.2) for p in frame.points
        ))
        self.assertIs(classify(shifted), GestureSymbol.OPEN_INDEX)

    def test_finger_states_for_fist(self):
        """Fist sets every closed predicate."""
        states = finger_states(make_frame(FIST))
        self.assertTrue(states.all_fingers_closed)
        self.assertTrue(states.middle_closed)
        self.assertTrue(states.ring_closed)
        self.assertTrue(states.pinky_closed)
        self.assertFalse(states.index_extended)


class TestDispatch(unittest.TestCase):
    """Test symbol to scroll command mapping."""

    def test_open_index_scrolls_up(self):
        cmd = dispatch(GestureSymbol.OPEN_INDEX, 8)
        self.assertEqual(cmd.dy_px, -8)

    def test_closed_fist_scrolls_down(self):
        cmd = dispatch(GestureSymbol.CLOSED_FIST, 8)
        self.assertEqual(cmd.dy_px, 8)

    def test_none_never_scrolls(self):
        for intensity in (0, 1, 8, 20, 100, -5):
            self.assertIsNone(dispatch(GestureSymbol.NONE, intensity))

    def test_linear_scaling(self):
        """Delta magnitude equals intensity."""
        self.assertEqual(dispatch(GestureSymbol.OPEN_INDEX, 1).dy_px, -1)
        self.assertEqual(dispatch(GestureSymbol.OPEN_INDEX, 20).dy_px, -20)
        self.assertEqual(dispatch(GestureSymbol.CLOSED_FIST, 2.5).dy_px, 2.5)

    def test_zero_intensity_sends_nothing(self):
        self.assertIsNone(dispatch(GestureSymbol.CLOSED_FIST, 0))

    def test_out_of_range_intensity_is_not_clamped(self):
        self.assertEqual(dispatch(GestureSymbol.CLOSED_FIST, 50).dy_px, 50)


class TestScrollController(unittest.TestCase):
    """Test the intensity cell."""

    def test_default_intensity(self):
        self.assertEqual(ScrollController().intensity, 5)

    def test_intensity_change_applies_to_next_step(self):
        controller = ScrollController(intensity=8)
        self.assertEqual(controller.step(GestureSymbol.CLOSED_FIST).dy_px, 8)

        controller.intensity = 12
        self.assertEqual(controller.step(GestureSymbol.CLOSED_FIST).dy_px, 12)
        self.assertEqual(controller.step(GestureSymbol.OPEN_INDEX).dy_px, -12)

    def test_out_of_range_is_accepted_with_warning(self):
        controller = ScrollController()
        with self.assertLogs("handscroll.gestures", level="WARNING"):
            controller.intensity = 30
        self.assertEqual(controller.intensity, 30)

    def test_adjust_stays_in_range(self):
        """Stepping down from the minimum never reverses direction."""
        controller = ScrollController(intensity=1)
        controller.adjust(-1)
        controller.adjust(-1)

        self.assertEqual(controller.intensity, 1)
        self.assertEqual(controller.step(GestureSymbol.OPEN_INDEX).dy_px, -1)

        controller.intensity = 19
        self.assertEqual(controller.adjust(1), 20)
        self.assertEqual(controller.adjust(1), 20)
        self.assertEqual(controller.step(GestureSymbol.CLOSED_FIST).dy_px, 20)

    def test_adjust_pulls_out_of_range_value_back(self):
        controller = ScrollController()
        controller.intensity = 30
        self.assertEqual(controller.adjust(1), 20)


class TestGestureProcessor(unittest.TestCase):
    """Test per-frame processing."""

    def setUp(self):
        self.processor = GestureProcessor(ScrollController(intensity=8))

    def test_raw_landmarks_are_validated(self):
        """Raw tuples are accepted and classified."""
        frame = make_frame(FIST)
        raw = [(p.x, p.y) for p in frame.points]

        result = self.processor.process_frame(raw)

        self.assertIs(result.symbol, GestureSymbol.CLOSED_FIST)
        self.assertTrue(result.hand_present)
        self.assertEqual(result.command.dy_px, 8)

    def test_malformed_landmarks_are_absent(self):
        """Short payloads fail safe to no gesture and no scroll."""
        result = self.processor.process_frame([(0.5, 0.5)] * 20)

        self.assertIs(result.symbol, GestureSymbol.NONE)
        self.assertFalse(result.hand_present)
        self.assertIsNone(result.command)

    def test_hand_lost_resets_immediately(self):
        """No grace period after the hand disappears."""
        self.processor.process_frame(make_frame(INDEX_UP))
        result = self.processor.process_frame(None)

        self.assertIs(result.symbol, GestureSymbol.NONE)
        self.assertIsNone(result.command)
        self.assertIs(self.processor.last_result, result)
        self.assertEqual(self.processor.frame_count, 2)


class CountingController(MockController):
    """Mock sink that remembers the processor state seen at each scroll."""

    def __init__(self, processor: GestureProcessor):
        super().__init__()
        self.processor = processor
        self.frames_at_scroll = []

    async def scroll(self, dy_px: float) -> None:
        self.frames_at_scroll.append(self.processor.frame_count)
        await super().scroll(dy_px)


class TestFrameDriver(unittest.IsolatedAsyncioTestCase):
    """Test the frame-synchronous drive loop."""

    def setUp(self):
        self.processor = GestureProcessor(ScrollController(intensity=8))
        self.sink = CountingController(self.processor)
        self.driver = FrameDriver(self.processor, self.sink)

    async def test_index_then_absent_sequence(self):
        """Five raised-index frames then five absent frames."""
        frames = [make_frame(INDEX_UP)] * 5 + [None] * 5

        results = [await self.driver.handle(f) for f in frames]

        self.assertEqual(self.sink.scrolls, [-8] * 5)
        self.assertEqual([r.symbol for r in results[:5]], [GestureSymbol.OPEN_INDEX] * 5)
        self.assertEqual([r.symbol for r in results[5:]], [GestureSymbol.NONE] * 5)
        self.assertTrue(all(r.command is None for r in results[5:]))

    async def test_one_scroll_per_frame_before_next(self):
        """Each frame's scroll happens before the next frame is processed."""
        frames = [make_frame(FIST), make_frame(INDEX_UP), None, make_frame(FIST)]

        count = await self.driver.run(frames)

        self.assertEqual(count, 4)
        self.assertEqual(self.sink.scrolls, [8, -8, 8])
        self.assertEqual(self.sink.frames_at_scroll, [1, 2, 4])

    async def test_async_source(self):
        """Async generators are consumed one frame at a time."""
        async def source():
            for _ in range(3):
                yield make_frame(FIST)
            yield None

        count = await self.driver.run(source())

        self.assertEqual(count, 4)
        self.assertEqual(self.sink.scrolls, [8, 8, 8])

    async def test_intensity_change_mid_stream(self):
        """A new intensity is used from the next frame on."""
        await self.driver.handle(make_frame(FIST))
        self.processor.controller.intensity = 3
        await self.driver.handle(make_frame(FIST))

        self.assertEqual(self.sink.scrolls, [8, 3])


if __name__ == '__main__':
    unittest.main()
