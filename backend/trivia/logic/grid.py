"""
Immutable rectangular grid helpers for clue boards.

Grids are tuples of row tuples, addressed as (row, col) where row is the
clue index within a category and col is the category index. Updates never
mutate the input grid; they return a new grid so successive game states
never share a mutable matrix.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from trivia.logic.models import Board

T = TypeVar("T")

Grid = tuple[tuple[T, ...], ...]


class GridIndexError(IndexError):
    """Raised when a (row, col) address falls outside the grid."""


def board_shape(board: Board | None) -> tuple[int, int]:
    """
    Return (rows, cols) for a board.

    rows is the clue count of the first category (boards are assumed
    rectangular), cols is the category count. A missing or empty board
    has shape (0, 0), as does one whose categories hold no clues.
    """
    if board is None or not board.categories or not board.categories[0].clues:
        return 0, 0
    return len(board.categories[0].clues), len(board.categories)


def create_grid(rows: int, cols: int, fill: T) -> Grid[T]:
    """Return a rows x cols grid with every cell set to fill."""
    if rows < 0 or cols < 0:
        raise ValueError(f"Grid dimensions must be non-negative, got {rows}x{cols}")
    row = (fill,) * cols
    return (row,) * rows


def grid_shape(grid: Grid[T]) -> tuple[int, int]:
    """Return (rows, cols) of a grid."""
    if not grid:
        return 0, 0
    return len(grid), len(grid[0])


def in_bounds(grid: Grid[T], row: int, col: int) -> bool:
    rows, cols = grid_shape(grid)
    return 0 <= row < rows and 0 <= col < cols


def grid_get(grid: Grid[T], row: int, col: int) -> T:
    """
    Return the value at (row, col).

    Raises:
        GridIndexError: If the address is outside the grid. Negative
            indices are rejected rather than wrapped.

    """
    if not in_bounds(grid, row, col):
        rows, cols = grid_shape(grid)
        raise GridIndexError(f"Cell ({row}, {col}) outside {rows}x{cols} grid")
    return grid[row][col]


def grid_set(grid: Grid[T], row: int, col: int, value: T) -> Grid[T]:
    """Return a new grid with (row, col) set to value."""
    if not in_bounds(grid, row, col):
        rows, cols = grid_shape(grid)
        raise GridIndexError(f"Cell ({row}, {col}) outside {rows}x{cols} grid")
    target = grid[row]
    new_row = (*target[:col], value, *target[col + 1 :])
    return (*grid[:row], new_row, *grid[row + 1 :])


def transpose_grid(grid: Grid[T]) -> Grid[T]:
    """Return the column-major view of a grid (one tuple per category)."""
    return tuple(zip(*grid, strict=True))
