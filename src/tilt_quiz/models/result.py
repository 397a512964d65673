from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ResultTier(Enum):
    """
    Result bands for a finished game, each with a fixed title/message pair.
    """
    NO_ANSWERS = ("Game Over", "You didn't answer any questions!")
    SUPERSTAR = ("Amazing!", "You are a vocabulary superstar!")
    GREAT = ("Great Job!", "You did really well!")
    GOOD = ("Good Try!", "Keep practicing and you'll do even better!")
    KEEP_GOING = ("Keep Going!", "Practice makes perfect!")

    @property
    def title(self) -> str:
        return self.value[0]

    @property
    def message(self) -> str:
        return self.value[1]

    @classmethod
    def for_percentage(cls, percentage: float) -> "ResultTier":
        # Lower bounds are inclusive.
        if percentage >= 90:
            return cls.SUPERSTAR
        if percentage >= 70:
            return cls.GREAT
        if percentage >= 50:
            return cls.GOOD
        return cls.KEEP_GOING


@dataclass(slots=True, frozen=True)
class SessionResult:
    score: int
    total_answered: int
    percentage: Optional[float]
    tier: ResultTier

    @classmethod
    def compute(cls, score: int, total_answered: int) -> "SessionResult":
        """
        Scores against the questions actually answered, not the planned count,
        so a game ended early is judged on what was attempted.
        """
        if total_answered == 0:
            return cls(score, 0, None, ResultTier.NO_ANSWERS)
        percentage = score / total_answered * 100
        return cls(score, total_answered, percentage, ResultTier.for_percentage(percentage))

    @property
    def title(self) -> str:
        return self.tier.title

    @property
    def message(self) -> str:
        return self.tier.message
