from dataclasses import dataclass
from typing import Iterable, Sequence


@dataclass(slots=True, frozen=True)
class Landmark:
    """A single face landmark in normalized image coordinates (0-1 per axis)."""
    x: float
    y: float


@dataclass(slots=True, frozen=True)
class LandmarkSet:
    """
    One face's landmarks for one frame, indexed positionally.

    Produced fresh by the detector on every frame and never retained.
    """
    points: tuple[Landmark, ...]

    def __len__(self) -> int:
        return len(self.points)

    def __getitem__(self, index: int) -> Landmark:
        return self.points[index]

    @classmethod
    def from_xy(cls, coords: Iterable[Sequence[float]]) -> "LandmarkSet":
        return cls(tuple(Landmark(float(c[0]), float(c[1])) for c in coords))
