import logging
import random
from functools import partial
from typing import Callable, Optional, Sequence

from ..errors import EmptySessionError
from ..models import Direction, GestureEvent, PreparedQuestion, Question, SessionResult
from ..tracking import GestureDebouncer, Subscription
from .protocols import FeedbackPresenter, QuizView
from .state import QuizState

logger = logging.getLogger(__name__)


def prepare_question(question: Question, rng: Optional[random.Random] = None) -> PreparedQuestion:
    """Places the correct answer on a uniformly random side."""
    rng = rng or random
    is_correct_on_left = rng.random() < 0.5
    return PreparedQuestion(
        text=question.text,
        left_answer=question.correct if is_correct_on_left else question.wrong,
        right_answer=question.wrong if is_correct_on_left else question.correct,
        correct_side=Direction.LEFT if is_correct_on_left else Direction.RIGHT,
    )


class QuizSession:
    """
    State machine for one game: AWAITING_ANSWER -> ADVANCING -> ... -> FINISHED.

    Exactly one gesture is scored per question. The `accepting_input` guard
    is checked and cleared in one synchronous step before any scoring or
    feedback runs, so a duplicate or stale gesture can never count twice.
    The session only moves to the next question when the feedback presenter
    reports completion, and completions that belong to an ended session are
    ignored.
    """

    def __init__(
        self,
        questions: Sequence[PreparedQuestion],
        feedback: FeedbackPresenter,
        view: Optional[QuizView] = None,
        on_finished: Optional[Callable[[SessionResult], None]] = None,
    ):
        if not questions:
            raise EmptySessionError("Cannot start a game without questions.")

        self._questions: tuple[PreparedQuestion, ...] = tuple(questions)
        self._feedback = feedback
        self._view = view
        self._on_finished = on_finished

        self.state = QuizState.AWAITING_ANSWER
        self.current_index = 0
        self.score = 0
        self.accepting_input = True
        self.result: Optional[SessionResult] = None

        self._generation = 0
        self._subscription: Optional[Subscription] = None

        logger.info("Quiz session created with %d questions.", len(self._questions))
        self._show_current()

    @property
    def questions(self) -> tuple[PreparedQuestion, ...]:
        return self._questions

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def current_question(self) -> Optional[PreparedQuestion]:
        if self.state is QuizState.FINISHED:
            return None
        return self._questions[self.current_index]

    @property
    def is_finished(self) -> bool:
        return self.state is QuizState.FINISHED

    def attach(self, debouncer: GestureDebouncer) -> Subscription:
        """Subscribes this session to gestures, replacing any other subscriber."""
        if self.is_finished:
            raise RuntimeError("Cannot attach a finished session.")
        self._subscription = debouncer.subscribe(self.handle_gesture)
        return self._subscription

    def handle_gesture(self, event: GestureEvent) -> bool:
        return self.answer(event.direction)

    def answer(self, direction: Direction) -> bool:
        """
        Scores `direction` for the current question.

        Returns False, changing nothing, if the session is not accepting input.
        """
        if self.state is not QuizState.AWAITING_ANSWER or not self.accepting_input:
            logger.debug("Ignored %s gesture: not accepting input.", direction.value)
            return False

        self.accepting_input = False
        self.state = QuizState.ADVANCING

        question = self._questions[self.current_index]
        is_correct = direction is question.correct_side
        if is_correct:
            self.score += 1

        logger.info(
            "Question %d/%d answered %s (%s): %s. Score: %d",
            self.current_index + 1, self.total_questions,
            direction.value, question.answer_for(direction),
            "correct" if is_correct else "wrong", self.score,
        )

        on_complete = partial(self._on_feedback_complete, self._generation, self.current_index)
        if is_correct:
            self._feedback.present_correct(on_complete)
        else:
            self._feedback.present_incorrect(on_complete)
        return True

    def _on_feedback_complete(self, generation: int, index: int) -> None:
        if (
            generation != self._generation
            or self.state is not QuizState.ADVANCING
            or index != self.current_index
        ):
            logger.debug("Discarded stale feedback completion for question %d.", index + 1)
            return

        self.current_index += 1
        if self.current_index < self.total_questions:
            self.accepting_input = True
            self.state = QuizState.AWAITING_ANSWER
            self._show_current()
        else:
            self._finish()

    def end(self) -> SessionResult:
        """
        Ends the game now, from any state.

        The result counts `current_index` questions as answered. An answer
        whose feedback is still playing is already in the score but not yet
        in `total_answered`.
        """
        if self.result is not None:
            return self.result

        logger.info("Ending quiz session at question %d/%d.", self.current_index + 1, self.total_questions)
        self._feedback.cancel()
        return self._finish()

    def _finish(self) -> SessionResult:
        self._generation += 1
        self.accepting_input = False
        self.state = QuizState.FINISHED
        if self._subscription is not None:
            self._subscription.revoke()
            self._subscription = None

        self.result = SessionResult.compute(self.score, self.current_index)
        logger.info(
            "Quiz finished: %d/%d (%s).", self.result.score, self.result.total_answered, self.result.title
        )

        self._feedback.celebrate(self.result)
        if self._view is not None:
            self._view.show_result(self.result)
        if self._on_finished is not None:
            self._on_finished(self.result)
        return self.result

    def _show_current(self) -> None:
        if self._view is not None:
            self._view.show_question(self._questions[self.current_index], self.current_index + 1, self.total_questions)
