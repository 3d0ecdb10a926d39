"""Content metadata used for similarity."""
from dataclasses import dataclass, field
from typing import FrozenSet


@dataclass(frozen=True)
class ContentFeatures:
    """Genres, directors and cast of one item.

    Any iterable of strings is accepted and stored as a frozenset.
    """

    genres: FrozenSet[str] = field(default_factory=frozenset)
    directors: FrozenSet[str] = field(default_factory=frozenset)
    cast: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        for name in ("genres", "directors", "cast"):
            object.__setattr__(self, name, frozenset(getattr(self, name) or ()))

    @property
    def is_empty(self) -> bool:
        return not (self.genres or self.directors or self.cast)
