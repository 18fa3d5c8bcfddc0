"""Board topology."""

from .board import (
    AXIAL_DIRECTIONS,
    NO_NEIGHBOR,
    BoardState,
    Cell,
    build_board,
    build_standard_board,
)

__all__ = [
    "AXIAL_DIRECTIONS",
    "NO_NEIGHBOR",
    "BoardState",
    "Cell",
    "build_board",
    "build_standard_board",
]
