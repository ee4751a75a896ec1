from __future__ import annotations

from typing import List, Sequence

from .board import Board, Coord, Direction


def _index_of(markers: Sequence[Coord], coord: Coord) -> int:
    for i, m in enumerate(markers):
        if m == coord:
            return i
    return -1


def occupied(circles: Sequence[Coord], crosses: Sequence[Coord], coord: Coord) -> bool:
    """True when any marker, circle or cross, sits on coord."""
    return coord in circles or coord in crosses


def apply_forward(
    circles: List[Coord],
    crosses: List[Coord],
    player_index: int,
    direction: Direction,
    board: Board,
) -> bool:
    """
    Moves the player circle one step, pushing at most one marker.

    The destination must be a present cell. An occupied destination is pushed one
    further cell in the same direction, which must itself be present and empty.
    Mutates the marker lists in place; returns False (and leaves them untouched)
    when the move is rejected.
    """
    player = circles[player_index]
    dest = board.step(player, direction)
    if dest is None:
        return False
    ci = _index_of(circles, dest)
    xi = _index_of(crosses, dest) if ci < 0 else -1
    if ci < 0 and xi < 0:
        circles[player_index] = dest
        return True
    target = board.step(dest, direction)
    if target is None or occupied(circles, crosses, target):
        return False
    if ci >= 0:
        circles[ci] = target
    else:
        crosses[xi] = target
    circles[player_index] = dest
    return True


def apply_reverse(
    circles: List[Coord],
    crosses: List[Coord],
    player_index: int,
    direction: Direction,
    board: Board,
) -> bool:
    """
    Inverse of a push: the player steps forward and drags the marker behind it
    into the cell it just left. With nothing behind, this is a plain step.
    Used only to scramble a solved position during generation.
    """
    player = circles[player_index]
    forward = board.step(player, direction)
    if forward is None or occupied(circles, crosses, forward):
        return False
    source = board.step(player, direction.opposite)
    if source is not None:
        ci = _index_of(circles, source)
        if ci >= 0:
            circles[ci] = player
        else:
            xi = _index_of(crosses, source)
            if xi >= 0:
                crosses[xi] = player
    circles[player_index] = forward
    return True


def legal_directions(
    circles: Sequence[Coord],
    crosses: Sequence[Coord],
    player_index: int,
    board: Board,
) -> List[Direction]:
    """Directions whose forward move changes the position."""
    out: List[Direction] = []
    for d in Direction:
        if apply_forward(list(circles), list(crosses), player_index, d, board):
            out.append(d)
    return out
