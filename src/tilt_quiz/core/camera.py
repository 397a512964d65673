import asyncio
import logging
from functools import partial
from typing import Callable, Optional

from ..acquisition import Frame, FrameSource, LandmarkDetector
from ..errors import AcquisitionError
from ..models import TiltSample
from ..tracking import GestureDebouncer, TiltClassifier
from ..utils.logging import ThrottledLogger

logger = logging.getLogger(__name__)

SampleSink = Callable[[TiltSample], None]


class CameraSession:
    """
    Owns the one active {frame source, landmark detector} pair.

    Every frame goes detector -> classifier -> (optional sample sink) ->
    debouncer. A generation counter is bumped on every start and stop, and
    a detector result is only routed if its generation is still current, so
    results that were in flight when `stop` was called are discarded.
    """

    def __init__(
        self,
        source_factory: Callable[[], FrameSource],
        detector_factory: Callable[[], LandmarkDetector],
        classifier: TiltClassifier,
        debouncer: GestureDebouncer,
        start_timeout_s: float = 10.0,
        stop_timeout_s: float = 5.0,
    ):
        self._source_factory = source_factory
        self._detector_factory = detector_factory
        self.classifier = classifier
        self.debouncer = debouncer
        self._start_timeout_s = start_timeout_s
        self._stop_timeout_s = stop_timeout_s

        self._source: Optional[FrameSource] = None
        self._detector: Optional[LandmarkDetector] = None
        self._frame_task: Optional[asyncio.Task] = None
        self._inflight_detect: Optional[asyncio.Future] = None
        self._sample_sink: Optional[SampleSink] = None
        self._tracking = False
        self._generation = 0
        self._lock = asyncio.Lock()

        self._no_face_log = ThrottledLogger(logger)
        self._detect_error_log = ThrottledLogger(logger)

    @property
    def is_active(self) -> bool:
        return self._source is not None

    @property
    def is_tracking(self) -> bool:
        return self._tracking

    @property
    def generation(self) -> int:
        return self._generation

    async def start(self, sample_sink: Optional[SampleSink] = None) -> None:
        """
        Acquires a fresh source/detector pair and begins tracking.

        A session that is already running is torn down first. Raises
        AcquisitionError if either resource cannot be created or the device
        is not ready within the start timeout; anything partially acquired
        is released before the error propagates.
        """
        async with self._lock:
            if self.is_active:
                logger.info("Restarting camera session; tearing down the previous one.")
                await self._teardown()

            self._generation += 1
            source: Optional[FrameSource] = None
            detector: Optional[LandmarkDetector] = None

            try:
                detector = self._detector_factory()
                source = self._source_factory()
                await asyncio.wait_for(source.open(), timeout=self._start_timeout_s)

            except asyncio.TimeoutError as e:
                self._release(source, detector)
                raise AcquisitionError(
                    f"Camera was not ready within {self._start_timeout_s:.1f}s."
                ) from e
            except AcquisitionError:
                self._release(source, detector)
                raise
            except Exception as e:
                self._release(source, detector)
                raise AcquisitionError(f"Failed to start camera session: {e}") from e

            self._source = source
            self._detector = detector
            self._sample_sink = sample_sink
            self._tracking = True
            generation = self._generation
            self._frame_task = asyncio.create_task(
                source.run(lambda frame: self._on_frame(generation, frame))
            )
            self._frame_task.add_done_callback(partial(self._on_frame_task_done, generation))
            logger.info("Camera session %d started, tracking enabled.", generation)

    async def stop(self) -> None:
        """
        Stops tracking and releases the source and detector. No-op when already stopped.

        A detector call still running in a worker thread is given up to the
        stop timeout to return. If it has not, the detector is closed as soon
        as that call returns instead of underneath it.
        """
        async with self._lock:
            await self._teardown()

    async def _teardown(self) -> None:
        if not self.is_active:
            return

        # Invalidate before awaiting anything so in-flight results are dropped.
        self._tracking = False
        self._generation += 1
        self._sample_sink = None

        source, detector, task = self._source, self._detector, self._frame_task
        self._source = None
        self._detector = None
        self._frame_task = None

        await source.stop()
        if task is not None:
            try:
                await asyncio.wait_for(task, timeout=self._stop_timeout_s)
            except asyncio.TimeoutError:
                logger.warning("Frame loop did not stop in time; it was cancelled.")
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
            except Exception:
                logger.exception("Frame loop ended with an error.")

        inflight, self._inflight_detect = self._inflight_detect, None
        if inflight is not None and not inflight.done():
            await asyncio.wait({inflight}, timeout=self._stop_timeout_s)
            if not inflight.done():
                logger.warning("Landmark detection is still running; the detector will close when it returns.")
                inflight.add_done_callback(partial(self._close_abandoned, detector))
                detector = None

        self._release(source, detector)
        logger.info("Camera session stopped.")

    @staticmethod
    def _release(source: Optional[FrameSource], detector: Optional[LandmarkDetector]) -> None:
        if source is not None:
            try:
                source.release()
            except Exception:
                logger.exception("Error releasing frame source.")
        if detector is not None:
            try:
                detector.close()
            except Exception:
                logger.exception("Error closing landmark detector.")

    @classmethod
    def _close_abandoned(cls, detector: LandmarkDetector, _future: asyncio.Future) -> None:
        cls._release(None, detector)
        logger.info("Detector closed after its last detection returned.")

    def _on_frame_task_done(self, generation: int, task: asyncio.Task) -> None:
        if task.cancelled() or task.exception() is None:
            return
        if generation == self._generation and self._tracking:
            self._tracking = False
            logger.error(
                "Frame loop failed, tracking stopped until the camera is restarted: %r", task.exception()
            )

    async def _on_frame(self, generation: int, frame: Frame) -> None:
        detector = self._detector
        if not self._tracking or generation != self._generation or detector is None:
            return

        # `stop` waits on this future even after the frame loop is cancelled.
        inflight = asyncio.get_running_loop().run_in_executor(None, detector.detect, frame)
        self._inflight_detect = inflight
        try:
            landmarks = await asyncio.shield(inflight)
        except Exception as e:
            self._detect_error_log.error("Landmark detection failed: %s", e)
            return
        finally:
            if self._inflight_detect is inflight and inflight.done():
                self._inflight_detect = None

        # `stop` may have run while the detector was busy.
        if not self._tracking or generation != self._generation:
            logger.debug("Discarded detector result from a stopped session.")
            return

        sample = self.classifier.classify(landmarks)
        if sample.angle_deg is None:
            self._no_face_log.info("No face detected.")

        if self._sample_sink is not None:
            self._sample_sink(sample)
        self.debouncer.feed(sample)
