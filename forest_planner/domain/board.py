from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

AxialCoord = Tuple[int, int]

BOARD_RADIUS = 3
DIRECTION_COUNT = 6
NO_NEIGHBOR = -1

# Axial (q, r) offsets in the referee's angular order: 0 is east, then
# counter-clockwise. Opposite directions are three steps apart.
AXIAL_DIRECTIONS: Tuple[AxialCoord, ...] = (
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, 0),
    (-1, 1),
    (0, 1),
)

RICHNESS_BY_RING: Dict[int, int] = {
    0: 3,
    1: 3,
    2: 2,
    3: 1,
}


@dataclass(frozen=True)
class Cell:
    index: int
    richness: int
    neighbors: Tuple[int, ...]

    @property
    def is_usable(self) -> bool:
        return self.richness > 0


@dataclass
class BoardState:
    cells: List[Cell]
    _cell_lookup: Dict[int, Cell] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._cell_lookup = {cell.index: cell for cell in self.cells}
        for cell in self.cells:
            if len(cell.neighbors) != DIRECTION_COUNT:
                raise ValueError(
                    f"Cell {cell.index} must list {DIRECTION_COUNT} neighbors, got {len(cell.neighbors)}."
                )
            for neighbor_id in cell.neighbors:
                if neighbor_id != NO_NEIGHBOR and neighbor_id not in self._cell_lookup:
                    raise ValueError(f"Cell {cell.index} references unknown neighbor {neighbor_id}.")

    def __len__(self) -> int:
        return len(self.cells)

    def get_cell(self, cell_id: int) -> Cell:
        return self._cell_lookup[cell_id]

    def richness(self, cell_id: int) -> int:
        return self._cell_lookup[cell_id].richness

    def neighbor(self, cell_id: int, direction: int) -> Optional[int]:
        neighbor_id = self._cell_lookup[cell_id].neighbors[direction % DIRECTION_COUNT]
        if neighbor_id == NO_NEIGHBOR:
            return None
        return neighbor_id

    def neighbor_ids(self, cell_id: int) -> List[int]:
        return [
            neighbor_id
            for neighbor_id in self._cell_lookup[cell_id].neighbors
            if neighbor_id != NO_NEIGHBOR
        ]

    def usable_cells(self) -> List[int]:
        return [cell.index for cell in self.cells if cell.is_usable]

    def signature(self) -> str:
        return ";".join(
            f"{cell.index}:{cell.richness}:{','.join(str(n) for n in cell.neighbors)}"
            for cell in sorted(self.cells, key=lambda item: item.index)
        )


def build_board(rows: Iterable[Sequence[int]]) -> BoardState:
    """Build a board from `index richness n0..n5` rows as sent by the referee."""
    cells: List[Cell] = []
    for row in rows:
        if len(row) != 2 + DIRECTION_COUNT:
            raise ValueError(f"Expected {2 + DIRECTION_COUNT} values per cell row, received {len(row)}.")
        index, richness, *neighbors = (int(value) for value in row)
        cells.append(Cell(index=index, richness=richness, neighbors=tuple(neighbors)))
    cells.sort(key=lambda cell: cell.index)
    return BoardState(cells=cells)


def build_standard_board(unusable_cells: Iterable[int] = ()) -> BoardState:
    coords = generate_spiral_coords(BOARD_RADIUS)
    index_by_coord = {coord: index for index, coord in enumerate(coords)}
    dead = set(unusable_cells)

    cells: List[Cell] = []
    for index, (q, r) in enumerate(coords):
        neighbors = tuple(
            index_by_coord.get((q + dq, r + dr), NO_NEIGHBOR)
            for dq, dr in AXIAL_DIRECTIONS
        )
        richness = 0 if index in dead else RICHNESS_BY_RING[axial_distance((q, r))]
        cells.append(Cell(index=index, richness=richness, neighbors=neighbors))

    return BoardState(cells=cells)


def generate_spiral_coords(radius: int) -> List[AxialCoord]:
    """Centre first, then each ring counter-clockwise starting from the east cell."""
    coords: List[AxialCoord] = [(0, 0)]
    q, r = AXIAL_DIRECTIONS[0]
    for distance in range(1, radius + 1):
        for orientation in range(DIRECTION_COUNT):
            for _ in range(distance):
                coords.append((q, r))
                dq, dr = AXIAL_DIRECTIONS[(orientation + 2) % DIRECTION_COUNT]
                q, r = q + dq, r + dr
        dq, dr = AXIAL_DIRECTIONS[0]
        q, r = q + dq, r + dr
    return coords


def axial_distance(coord: AxialCoord) -> int:
    q, r = coord
    return max(abs(q), abs(r), abs(q + r))
