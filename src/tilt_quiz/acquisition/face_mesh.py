import logging
from typing import Any, Optional

import cv2
import mediapipe as mp
import numpy as np

from ..configs import DetectorSettings
from ..errors import AcquisitionError
from ..models import LandmarkSet
from .base import Frame, LandmarkDetector

logger = logging.getLogger(__name__)

# Face Landmarker runs in VIDEO mode and needs increasing timestamps.
_FRAME_STEP_MS = 33


class FaceMeshDetector(LandmarkDetector):
    """
    MediaPipe face landmark detector.

    Uses the legacy `solutions.face_mesh` API when the installed MediaPipe
    ships it, and the `tasks` FaceLandmarker otherwise (which requires a
    `.task` model file).
    """

    def __init__(self, settings: DetectorSettings):
        self._settings = settings
        self._face_mesh: Any = None
        self._landmarker: Any = None
        self._timestamp_ms = 0

        try:
            if hasattr(mp, "solutions"):
                self._init_solutions()
            elif hasattr(mp, "tasks"):
                self._init_tasks()
            else:
                raise AcquisitionError("MediaPipe has neither 'solutions' nor 'tasks'.")
        except AcquisitionError:
            raise
        except Exception as e:
            raise AcquisitionError(f"Failed to create face landmark detector: {e}") from e

    def _init_solutions(self) -> None:
        self._face_mesh = mp.solutions.face_mesh.FaceMesh(
            static_image_mode=False,
            max_num_faces=self._settings.max_num_faces,
            refine_landmarks=self._settings.refine_landmarks,
            min_detection_confidence=self._settings.min_detection_confidence,
            min_tracking_confidence=self._settings.min_tracking_confidence,
        )
        logger.info("FaceMesh detector ready (solutions backend).")

    def _init_tasks(self) -> None:
        from mediapipe.tasks.python.core.base_options import BaseOptions
        from mediapipe.tasks.python.vision import face_landmarker
        from mediapipe.tasks.python.vision.core.vision_task_running_mode import VisionTaskRunningMode

        model_path = self._settings.task_model_path
        if model_path is None or not model_path.exists():
            raise AcquisitionError(
                "This MediaPipe build needs a face_landmarker.task model. "
                "Set TILTQUIZ__DETECTOR__TASK_MODEL_PATH."
            )

        options = face_landmarker.FaceLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(model_path)),
            running_mode=VisionTaskRunningMode.VIDEO,
            num_faces=self._settings.max_num_faces,
            min_face_detection_confidence=self._settings.min_detection_confidence,
            min_tracking_confidence=self._settings.min_tracking_confidence,
        )
        self._landmarker = face_landmarker.FaceLandmarker.create_from_options(options)
        logger.info("FaceLandmarker detector ready (tasks backend).")

    def detect(self, frame: Frame) -> Optional[LandmarkSet]:
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

        if self._face_mesh is not None:
            results = self._face_mesh.process(rgb)
            faces = results.multi_face_landmarks
            # Only the first face is ever considered.
            return _to_landmark_set(faces[0].landmark) if faces else None

        if self._landmarker is not None:
            self._timestamp_ms += _FRAME_STEP_MS
            image = mp.Image(image_format=mp.ImageFormat.SRGB, data=np.ascontiguousarray(rgb))
            results = self._landmarker.detect_for_video(image, self._timestamp_ms)
            faces = results.face_landmarks
            return _to_landmark_set(faces[0]) if faces else None

        raise RuntimeError("Detector already closed.")

    def close(self) -> None:
        if self._face_mesh is not None:
            self._face_mesh.close()
            self._face_mesh = None
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
        logger.info("Face landmark detector closed.")


def _to_landmark_set(landmarks) -> LandmarkSet:
    return LandmarkSet.from_xy((lm.x, lm.y) for lm in landmarks)
