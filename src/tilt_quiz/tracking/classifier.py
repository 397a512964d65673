import math
from typing import Optional

from ..models import Direction, LandmarkSet, TiltSample

DEFAULT_THRESHOLD_DEG = 12.0
LEFT_EYE_INDEX = 33
RIGHT_EYE_INDEX = 263


def tilt_angle(landmarks: LandmarkSet, left_eye_index: int = LEFT_EYE_INDEX,
               right_eye_index: int = RIGHT_EYE_INDEX) -> float:
    """Signed angle (degrees) of the eye-to-eye line relative to horizontal."""
    left_eye = landmarks[left_eye_index]
    right_eye = landmarks[right_eye_index]
    eye_delta_x = right_eye.x - left_eye.x
    eye_delta_y = right_eye.y - left_eye.y
    return math.atan2(eye_delta_y, eye_delta_x) * (180 / math.pi)


def classify_angle(angle_deg: float, threshold_deg: float = DEFAULT_THRESHOLD_DEG) -> Optional[Direction]:
    """
    Maps a tilt angle to a direction. Both boundaries map to None.

    The feed is a mirrored selfie view, so a negative angle is the player
    tilting to *their* right and a positive angle to their left.
    """
    if angle_deg < -threshold_deg:
        return Direction.RIGHT
    if angle_deg > threshold_deg:
        return Direction.LEFT
    return None


class TiltClassifier:
    """Stateless landmark-to-direction classifier."""

    def __init__(
        self,
        threshold_deg: float = DEFAULT_THRESHOLD_DEG,
        left_eye_index: int = LEFT_EYE_INDEX,
        right_eye_index: int = RIGHT_EYE_INDEX,
    ):
        self.threshold_deg = threshold_deg
        self.left_eye_index = left_eye_index
        self.right_eye_index = right_eye_index

    def classify(self, landmarks: Optional[LandmarkSet]) -> TiltSample:
        if landmarks is None:
            return TiltSample(angle_deg=None, direction=None)

        angle = tilt_angle(landmarks, self.left_eye_index, self.right_eye_index)
        return TiltSample(angle_deg=angle, direction=classify_angle(angle, self.threshold_deg))
