from typing import Callable, Protocol, runtime_checkable

from ..models import PreparedQuestion, SessionResult

FeedbackDone = Callable[[], None]


@runtime_checkable
class FeedbackPresenter(Protocol):
    """
    Presents the outcome of an answer (visual, audio, ...).

    Each `present_*` call must eventually invoke `on_complete` exactly once.
    `cancel` drops any pending completion so nothing fires after a game ends.
    """
    def present_correct(self, on_complete: FeedbackDone) -> None: ...

    def present_incorrect(self, on_complete: FeedbackDone) -> None: ...

    def celebrate(self, result: SessionResult) -> None: ...

    def cancel(self) -> None: ...


@runtime_checkable
class QuizView(Protocol):
    """
    Displays questions and the final result. Whether it's a terminal,
    a window or a web page, it must support these calls.
    """
    def show_question(self, question: PreparedQuestion, number: int, total: int) -> None: ...

    def show_result(self, result: SessionResult) -> None: ...
