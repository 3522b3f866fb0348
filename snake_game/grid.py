"""Board geometry: bounds testing and free-cell enumeration."""
from dataclasses import dataclass

from .config import GRID_SIZE


@dataclass(frozen=True)
class Grid:
    size: int = GRID_SIZE

    def in_bounds(self, cell):
        x, y = cell
        return 0 <= x < self.size and 0 <= y < self.size

    def cells(self):
        """Every cell, column by column (x outer, y inner)."""
        for x in range(self.size):
            for y in range(self.size):
                yield (x, y)

    def free_cells(self, occupied):
        """Cells not in 'occupied', in the same fixed scan order as cells()."""
        return [cell for cell in self.cells() if cell not in occupied]

    def __len__(self):
        return self.size * self.size
