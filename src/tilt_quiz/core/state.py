from enum import Enum, auto


class QuizState(Enum):
    """
    States of a single quiz game.
    """
    AWAITING_ANSWER = auto()  # A question is shown and one gesture may be scored.
    ADVANCING = auto() # Answer scored, waiting for the feedback to finish.
    FINISHED = auto() # Terminal. The result has been computed.
