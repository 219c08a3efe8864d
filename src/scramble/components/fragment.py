from dataclasses import dataclass
from typing import NamedTuple


@dataclass(frozen=True, slots=True)
class Fragment:
    """Literal content of one text leaf at a fixed document-order index."""
    index: int
    content: str


class RevealCoordinate(NamedTuple):
    """One non-whitespace character slot: (fragment index, character index)."""
    fragment: int
    char: int


@dataclass(frozen=True, slots=True)
class RevealFrame:
    """Working arrays plus the reveal cursor after a given frame.

    Positions ``order[:cursor]`` are locked to their final character.
    """
    arrays: tuple[list[str], ...]
    cursor: int = 0

    def strings(self) -> list[str]:
        return ["".join(chars) for chars in self.arrays]
