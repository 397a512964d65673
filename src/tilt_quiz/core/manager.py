import asyncio
import logging
import random
from typing import Iterable, Optional

from ..configs import AppSettings
from ..errors import EmptySessionError
from ..models import SessionResult
from ..questions import QuestionBank
from ..tracking import GestureDebouncer
from .camera import CameraSession, SampleSink
from .protocols import FeedbackPresenter, QuizView
from .quiz import QuizSession, prepare_question

logger = logging.getLogger(__name__)


class GameManager:
    """
    The headless core of the tilt quiz.

    Wires the question bank, the camera session and the gesture debouncer
    to one QuizSession at a time, so the UI (terminal, window or web) can
    stay a thin layer.
    """
    def __init__(
        self,
        settings: AppSettings,
        bank: QuestionBank,
        camera: CameraSession,
        feedback: FeedbackPresenter,
        view: Optional[QuizView] = None,
        sample_sink: Optional[SampleSink] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings
        self.bank = bank
        self.camera = camera
        self.feedback = feedback
        self.view = view
        self.sample_sink = sample_sink
        self._rng = rng or random.Random()

        self.session: Optional[QuizSession] = None
        self._finished: Optional[asyncio.Future] = None
        self._camera_stop: Optional[asyncio.Task] = None

    @property
    def debouncer(self) -> GestureDebouncer:
        return self.camera.debouncer

    @property
    def is_playing(self) -> bool:
        return self.session is not None and not self.session.is_finished

    # --- Actions ---

    async def start_camera(self) -> None:
        """Starts (or restarts) tracking. AcquisitionError propagates to the caller."""
        await self._await_camera_stop()
        await self.camera.start(self.sample_sink)

    async def start_game(
        self,
        shuffle: Optional[bool] = None,
        limit: Optional[int] = None,
        unit_ids: Optional[Iterable[str]] = None,
    ) -> QuizSession:
        """
        Selects and prepares questions, makes sure the camera is tracking,
        then starts a new game and subscribes it to gestures.

        Raises EmptySessionError before touching any state when no enabled
        question matches.
        """
        game = self.settings.game
        shuffle = game.shuffle if shuffle is None else shuffle
        limit = game.question_limit if limit is None else limit
        unit_ids = game.unit_ids if unit_ids is None else list(unit_ids)

        questions = self.bank.get_game_questions(shuffle=shuffle, limit=limit, unit_ids=unit_ids, rng=self._rng)
        if not questions:
            raise EmptySessionError("These units have no active questions.")
        prepared = [prepare_question(q, self._rng) for q in questions]

        if self.is_playing:
            logger.warning("A game is already running; ending it first.")
            await self.end_game()

        await self._await_camera_stop()
        if not self.camera.is_tracking:
            await self.camera.start(self.sample_sink)

        loop = asyncio.get_running_loop()
        self._finished = loop.create_future()
        self.session = QuizSession(prepared, self.feedback, view=self.view, on_finished=self._on_finished)
        self.session.attach(self.debouncer)
        logger.info("Game started with %d questions, waiting for head tilts...", len(prepared))
        return self.session

    async def end_game(self) -> Optional[SessionResult]:
        """Ends the current game early (if any) and stops the camera."""
        result = None
        if self.session is not None:
            result = self.session.end()
        await self._await_camera_stop()
        await self.camera.stop()
        return result

    async def wait_finished(self) -> SessionResult:
        """Waits until the current game finishes, naturally or via `end_game`."""
        if self._finished is None:
            raise RuntimeError("No game has been started.")
        result = await self._finished
        await self._await_camera_stop()
        return result

    async def shutdown(self) -> None:
        """Graceful cleanup before exit. Safe to call more than once."""
        if self.is_playing:
            self.session.end()
        self.debouncer.clear()
        self.feedback.cancel()
        await self._await_camera_stop()
        await self.camera.stop()
        logger.info("Game manager shut down.")

    def _on_finished(self, result: SessionResult) -> None:
        if self._finished is not None and not self._finished.done():
            self._finished.set_result(result)
        # The game ended from a feedback callback; release the camera in the background.
        if self.camera.is_active and self._camera_stop is None:
            self._camera_stop = asyncio.get_running_loop().create_task(self.camera.stop())

    async def _await_camera_stop(self) -> None:
        task, self._camera_stop = self._camera_stop, None
        if task is not None:
            await task
