from dataclasses import dataclass

from .gesture import Direction


@dataclass(slots=True, frozen=True)
class Unit:
    id: str
    name: str


@dataclass(slots=True, frozen=True)
class Question:
    """A question as stored in the question bank. Immutable during a game."""
    id: str
    unit_id: str
    text: str
    correct: str
    wrong: str
    disabled: bool = False


@dataclass(slots=True, frozen=True)
class PreparedQuestion:
    """
    A question with its two answers assigned to left/right slots for one game.

    `correct_side` is drawn at random per question and is unrelated to the
    question content.
    """
    text: str
    left_answer: str
    right_answer: str
    correct_side: Direction

    def answer_for(self, side: Direction) -> str:
        return self.left_answer if side is Direction.LEFT else self.right_answer
