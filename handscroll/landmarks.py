"""
Hand landmark detection using MediaPipe.
"""
import logging
import cv2
import mediapipe as mp
import numpy as np
from typing import Optional

from .types import LandmarkFrame

logger = logging.getLogger(__name__)


class HandsTracker:
    """Hand landmark tracker using MediaPipe Hands."""

    def __init__(self, max_num_hands: int = 1, model_complexity: int = 1,
                 min_detection_conf: float = 0.7, min_tracking_conf: float = 0.7):
        """
        Initialize the hands tracker.

        Args:
            max_num_hands: Maximum number of hands to detect
            model_complexity: MediaPipe model complexity (0 or 1)
            min_detection_conf: Minimum confidence for hand detection
            min_tracking_conf: Minimum confidence for hand tracking
        """
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=max_num_hands,
            model_complexity=model_complexity,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )
        logger.info("MediaPipe Hands ready (max_num_hands=%d, complexity=%d)",
                    max_num_hands, model_complexity)

    def process(self, frame_bgr: np.ndarray) -> Optional[LandmarkFrame]:
        """
        Process a frame and return hand landmarks.

        Args:
            frame_bgr: Input frame in BGR format

        Returns:
            LandmarkFrame of the first detected hand, or None if no valid hand
        """
        # Convert BGR to RGB for MediaPipe
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)

        results = self.hands.process(frame_rgb)

        if not results.multi_hand_landmarks:
            return None

        # Only the first hand is used
        hand_landmarks = results.multi_hand_landmarks[0]
        return LandmarkFrame.from_points(hand_landmarks.landmark)

    def close(self) -> None:
        """Release the MediaPipe graph."""
        self.hands.close()


def draw_landmarks(frame: np.ndarray, landmarks: LandmarkFrame) -> np.ndarray:
    """
    Draw hand landmarks and skeleton on the frame.

    Args:
        frame: Input BGR frame
        landmarks: Landmarks in [0..1] range

    Returns:
        Frame with landmarks drawn
    """
    height, width = frame.shape[:2]
    pixels = [(int(p.x * width), int(p.y * height)) for p in landmarks.points]

    for start, end in mp.solutions.hands.HAND_CONNECTIONS:
        cv2.line(frame, pixels[start], pixels[end], (0, 255, 0), 2)

    for px, py in pixels:
        cv2.circle(frame, (px, py), 3, (0, 0, 255), -1)

    return frame
