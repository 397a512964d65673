from .bank import DEFAULT_UNIT_NAME, QuestionBank

__all__ = ["DEFAULT_UNIT_NAME", "QuestionBank"]
