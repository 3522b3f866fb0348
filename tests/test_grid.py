from snake_game.grid import Grid


class TestGrid:
    def test_default_size_is_twenty(self):
        """The default board is 20x20."""
        grid = Grid()
        assert grid.size == 20
        assert len(grid) == 400

    def test_in_bounds_edges(self):
        """Cells on the edge are inside, one past the edge is outside."""
        grid = Grid(size=20)
        assert grid.in_bounds((0, 0))
        assert grid.in_bounds((19, 19))
        assert not grid.in_bounds((-1, 5))
        assert not grid.in_bounds((5, -1))
        assert not grid.in_bounds((20, 0))
        assert not grid.in_bounds((0, 20))

    def test_cells_scan_order_is_column_major(self):
        """cells() walks x outer, y inner."""
        grid = Grid(size=2)
        assert list(grid.cells()) == [(0, 0), (0, 1), (1, 0), (1, 1)]

    def test_free_cells_excludes_occupied(self):
        """free_cells() skips occupied cells and keeps scan order."""
        grid = Grid(size=3)
        free = grid.free_cells({(0, 0), (1, 1), (2, 2)})
        assert free == [(0, 1), (0, 2), (1, 0), (1, 2), (2, 0), (2, 1)]

    def test_free_cells_full_board(self):
        """A fully occupied board has no free cells."""
        grid = Grid(size=2)
        assert grid.free_cells(set(grid.cells())) == []
