from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import InvalidIndex

Coord = Tuple[int, int]


class Direction(Enum):
    """The four orthogonal unit steps, valued as (dr, dc)."""
    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def dr(self) -> int:
        return self.value[0]

    @property
    def dc(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> 'Direction':
        return _OPPOSITES[self]

    @classmethod
    def parse(cls, text: str) -> 'Direction':
        """Parses a direction name ('up', 'LEFT') or a WASD key."""
        key = (text or '').strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        raise ValueError(f"unknown direction: {text!r}")


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

_ALIASES = {
    'up': Direction.UP, 'w': Direction.UP,
    'down': Direction.DOWN, 's': Direction.DOWN,
    'left': Direction.LEFT, 'a': Direction.LEFT,
    'right': Direction.RIGHT, 'd': Direction.RIGHT,
}


@dataclass(frozen=True)
class Board:
    """Static board topology: per-row widths plus a per-cell existence mask over the flat index space."""
    row_widths: Tuple[int, ...]
    cells: Tuple[bool, ...]  # flat, row-major; False marks a hole
    row_offsets: Tuple[int, ...] = field(init=False, repr=False)
    total_cells: int = field(init=False)

    def __post_init__(self) -> None:
        if not self.row_widths or any(w <= 0 for w in self.row_widths):
            raise ValueError('board needs at least one row and positive row widths')
        offsets: List[int] = [0]
        for w in self.row_widths[:-1]:
            offsets.append(offsets[-1] + w)
        total = offsets[-1] + self.row_widths[-1]
        if len(self.cells) != total:
            raise ValueError(f"cell mask has {len(self.cells)} entries, expected {total}")
        object.__setattr__(self, 'row_offsets', tuple(offsets))
        object.__setattr__(self, 'total_cells', total)

    @classmethod
    def full(cls, rows: int, cols: int) -> 'Board':
        """A rectangular board with every cell present."""
        return cls(row_widths=(cols,) * rows, cells=(True,) * (rows * cols))

    @classmethod
    def from_mask(cls, mask: Sequence[Sequence[bool]]) -> 'Board':
        """Builds a board from nested per-row existence flags (rows may differ in width)."""
        widths = tuple(len(row) for row in mask)
        flat = tuple(bool(v) for row in mask for v in row)
        return cls(row_widths=widths, cells=flat)

    @classmethod
    def random(cls, seed: Optional[int] = None) -> 'Board':
        """Builds a randomized irregular, connected board."""
        from .shape import generate_random
        return generate_random(seed=seed)

    @property
    def rows(self) -> int:
        return len(self.row_widths)

    @property
    def cols(self) -> int:
        return max(self.row_widths)

    @property
    def default_grid_w(self) -> int:
        """Presentation hint: character width of a boxed grid rendering."""
        return 4 * self.cols + 1

    @property
    def default_grid_h(self) -> int:
        return 2 * self.rows + 1

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.rows and 0 <= c < self.row_widths[r]

    def to_flat(self, r: int, c: int) -> int:
        """Calculates the flat index for a given row and column."""
        if not self.in_bounds(r, c):
            raise InvalidIndex(f"coordinate {(r, c)} is outside the board")
        return self.row_offsets[r] + c

    def from_flat(self, idx: int) -> Coord:
        """Maps a flat index back to (row, column)."""
        if idx < 0 or idx >= self.total_cells:
            raise InvalidIndex(f"invalid flat index {idx} (board has {self.total_cells} cells)")
        r = bisect_right(self.row_offsets, idx) - 1
        return (r, idx - self.row_offsets[r])

    def flatten(self, coords: Iterable[Coord]) -> List[int]:
        return [self.to_flat(r, c) for r, c in coords]

    def unflatten(self, indices: Iterable[int]) -> List[Coord]:
        return [self.from_flat(i) for i in indices]

    def is_cell_present(self, r: int, c: int) -> bool:
        return self.in_bounds(r, c) and self.cells[self.row_offsets[r] + c]

    def step(self, coord: Coord, direction: Direction) -> Optional[Coord]:
        """Returns the present neighbour of coord in the given direction, or None."""
        r = coord[0] + direction.dr
        c = coord[1] + direction.dc
        if self.is_cell_present(r, c):
            return (r, c)
        return None

    def coords(self) -> Iterable[Coord]:
        """Iterates over all in-bounds coordinates, present or not."""
        for r, w in enumerate(self.row_widths):
            for c in range(w):
                yield (r, c)

    def present_coords(self) -> List[Coord]:
        return [rc for rc in self.coords() if self.cells[self.row_offsets[rc[0]] + rc[1]]]

    def pretty(
        self,
        circles: Sequence[Coord] = (),
        crosses: Sequence[Coord] = (),
        player_index: Optional[int] = None,
    ) -> str:
        """Generates a human-readable rendering: '@' player, 'o' circle, 'x' cross, '.' empty, ' ' hole."""
        player = circles[player_index] if player_index is not None and circles else None
        circle_set = set(circles)
        cross_set = set(crosses)
        lines: List[str] = []
        for r in range(self.rows):
            row: List[str] = []
            for c in range(self.cols):
                if not self.is_cell_present(r, c):
                    row.append(' ')
                elif (r, c) == player:
                    row.append('@')
                elif (r, c) in circle_set:
                    row.append('o')
                elif (r, c) in cross_set:
                    row.append('x')
                else:
                    row.append('.')
            lines.append(' '.join(row).rstrip())
        return "\n".join(lines)
