class TiltQuizError(Exception):
    """Base class for all tilt-quiz errors."""


class AcquisitionError(TiltQuizError):
    """The camera or the landmark detector could not be started."""


class EmptySessionError(TiltQuizError):
    """A game was requested with no eligible questions."""


class QuestionBankError(TiltQuizError):
    """The question bank file is missing or malformed."""
