import sys
from typing import Optional, TextIO

from ..models import Direction, PreparedQuestion, SessionResult, TiltSample


class ConsoleView:
    """Prints questions and the final result to a terminal."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream or sys.stdout

    def show_question(self, question: PreparedQuestion, number: int, total: int) -> None:
        print(f"\nQuestion {number}/{total}: {question.text}", file=self._stream)
        print(f"  <- tilt left:  {question.left_answer}", file=self._stream)
        print(f"  -> tilt right: {question.right_answer}", file=self._stream)
        self._stream.flush()

    def show_result(self, result: SessionResult) -> None:
        print(f"\n{result.title}", file=self._stream)
        print(f"Score: {result.score} / {result.total_answered}", file=self._stream)
        print(result.message, file=self._stream)
        self._stream.flush()


class TiltIndicator:
    """Prints the live tilt state whenever it changes."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream or sys.stdout
        self._last: Optional[str] = None

    def __call__(self, sample: TiltSample) -> None:
        if sample.angle_deg is None:
            state, text = "none", "No face detected"
        elif sample.direction is Direction.LEFT:
            state, text = "left", f"<- Tilting LEFT ({abs(sample.angle_deg):.0f}°)"
        elif sample.direction is Direction.RIGHT:
            state, text = "right", f"-> Tilting RIGHT ({abs(sample.angle_deg):.0f}°)"
        else:
            state, text = "straight", "Keep your head straight"

        # Angles jitter every frame; only print state changes.
        if state != self._last:
            self._last = state
            print(f"  [{text}]", file=self._stream)
            self._stream.flush()
