# Camera and MediaPipe backends live in `opencv` and `face_mesh`; they need
# the optional `camera` extra and are imported on demand by the factories.
from .base import Frame, FrameCallback, FrameSource, LandmarkDetector
from .dummy import DummyFrameSource, ScriptedDetector, landmarks_for_angle

__all__ = [
    "DummyFrameSource",
    "Frame",
    "FrameCallback",
    "FrameSource",
    "LandmarkDetector",
    "ScriptedDetector",
    "landmarks_for_angle",
]
