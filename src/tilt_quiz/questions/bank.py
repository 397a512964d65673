import json
import logging
import random
import re
from importlib import resources
from pathlib import Path
from typing import Any, Iterable, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..errors import QuestionBankError
from ..models import Question, Unit

logger = logging.getLogger(__name__)

DEFAULT_UNIT_NAME = "Supper Kid"


class _RawQuestion(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    unit: Optional[str] = None
    question: str = ""
    correct: str = ""
    wrong: str = ""
    disabled: bool = False

    @property
    def is_complete(self) -> bool:
        return bool(self.question.strip() and self.correct.strip() and self.wrong.strip())


class _RawUnitGroup(BaseModel):
    """`{"unit": "...", "questions": [...]}`. The key `question` is accepted too."""
    unit: str
    questions: list[_RawQuestion] = Field(
        default_factory=list, validation_alias=AliasChoices("questions", "question")
    )


class _RawUnit(BaseModel):
    id: Optional[str] = None
    name: str = DEFAULT_UNIT_NAME


class _RawBank(BaseModel):
    units: list[_RawUnit]
    questions: list[_RawQuestion]


_GROUPS = TypeAdapter(list[_RawUnitGroup])
_FLAT = TypeAdapter(list[_RawQuestion])


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-") or "unit"


class QuestionBank:
    """
    Read-only question bank backed by a JSON file.

    Three layouts are accepted: a list of unit groups, a
    `{"units": [...], "questions": [...]}` object, or a flat list of
    questions (all placed in a default unit). Incomplete questions are
    dropped and questions pointing at an unknown unit fall back to the
    first unit.
    """

    def __init__(self, units: Iterable[Unit], questions: Iterable[Question]):
        self._units: list[Unit] = list(units)
        self._questions: list[Question] = list(questions)

    @classmethod
    def from_file(cls, path: Path) -> "QuestionBank":
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise QuestionBankError(f"Cannot read question bank '{path}': {e}") from e
        bank = cls.from_data(data)
        logger.info("Loaded %d questions in %d units from %s.", len(bank._questions), len(bank._units), path)
        return bank

    @classmethod
    def default(cls) -> "QuestionBank":
        """The question bank bundled with the package."""
        text = resources.files(__package__).joinpath("data/default_questions.json").read_text(encoding="utf-8")
        return cls.from_data(json.loads(text))

    @classmethod
    def from_data(cls, data: Any) -> "QuestionBank":
        try:
            if isinstance(data, dict):
                raw = _RawBank.model_validate(data)
                unit_names = [(u.id, u.name.strip()) for u in raw.units]
                entries = raw.questions
            elif isinstance(data, list) and data and all(
                isinstance(item, dict) and isinstance(item.get("unit"), str)
                and isinstance(item.get("questions", item.get("question")), list)
                for item in data
            ):
                groups = _GROUPS.validate_python(data)
                unit_names = [(None, g.unit.strip()) for g in groups]
                entries = [
                    q.model_copy(update={"unit": g.unit.strip()})
                    for g in groups for q in g.questions
                ]
            elif isinstance(data, list):
                unit_names = [(None, DEFAULT_UNIT_NAME)]
                entries = _FLAT.validate_python(data)
            else:
                raise QuestionBankError(f"Unsupported question bank layout: {type(data).__name__}")
        except ValidationError as e:
            raise QuestionBankError(f"Invalid question bank: {e}") from e

        units: list[Unit] = []
        unit_id_by_name: dict[str, str] = {}
        for unit_id, name in unit_names:
            if not name or name in unit_id_by_name:
                continue
            unit = Unit(id=unit_id or f"unit-{_slug(name)}", name=name)
            units.append(unit)
            unit_id_by_name[name] = unit.id

        if not units:
            units.append(Unit(id=f"unit-{_slug(DEFAULT_UNIT_NAME)}", name=DEFAULT_UNIT_NAME))
        fallback_unit_id = units[0].id

        questions: list[Question] = []
        for n, entry in enumerate(entries, start=1):
            if not entry.is_complete:
                logger.warning("Skipping incomplete question #%d.", n)
                continue
            questions.append(Question(
                id=entry.id or f"q-{n}",
                unit_id=unit_id_by_name.get((entry.unit or "").strip(), fallback_unit_id),
                text=entry.question.strip(),
                correct=entry.correct.strip(),
                wrong=entry.wrong.strip(),
                disabled=entry.disabled,
            ))

        return cls(units, questions)

    def get_units(self) -> list[Unit]:
        return list(self._units)

    def find_unit(self, key: str) -> Optional[Unit]:
        """Looks a unit up by id, or by case-insensitive name."""
        for unit in self._units:
            if unit.id == key or unit.name.casefold() == key.casefold():
                return unit
        return None

    def get_questions(self, unit_ids: Optional[Iterable[str]] = None) -> list[Question]:
        if unit_ids is None:
            return list(self._questions)
        wanted = set(unit_ids)
        return [q for q in self._questions if q.unit_id in wanted]

    def get_game_questions(
        self,
        shuffle: bool = True,
        limit: Optional[int] = None,
        unit_ids: Optional[Iterable[str]] = None,
        rng: Optional[random.Random] = None,
    ) -> list[Question]:
        """
        Enabled questions of the given units (all units if None), optionally
        shuffled, truncated to `limit` when it is positive.
        """
        questions = [q for q in self.get_questions(unit_ids) if not q.disabled]
        if shuffle:
            (rng or random).shuffle(questions)
        if limit and limit > 0:
            questions = questions[:limit]
        return questions
