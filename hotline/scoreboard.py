from typing import Dict, Iterator

from .models import Participant


class Scoreboard:
    """Per-session win tally.

    Scores only ever go up; a participant stays on the board once registered.
    """

    def __init__(self):
        self._scores: Dict[str, int] = {}

    def register(self, name: str) -> None:
        self._scores.setdefault(name, 0)

    def award(self, name: str) -> int:
        self._scores[name] = self._scores.get(name, 0) + 1
        return self._scores[name]

    def snapshot(self) -> list[Participant]:
        return [Participant(name=name, score=score) for name, score in self._scores.items()]

    def as_dict(self) -> Dict[str, int]:
        return dict(self._scores)

    def __getitem__(self, name: str) -> int:
        return self._scores[name]

    def __contains__(self, name: object) -> bool:
        return name in self._scores

    def __iter__(self) -> Iterator[str]:
        return iter(self._scores)

    def __len__(self) -> int:
        return len(self._scores)
