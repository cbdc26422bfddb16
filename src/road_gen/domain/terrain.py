# road_gen/domain/terrain.py
import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

import numpy as np

from road_gen.domain.geometry import Point


class DistrictType(str, Enum):
    BUSINESS = "business"
    OLD_TOWN = "old_town"
    RESIDENTIAL = "residential"
    INDUSTRIAL = "industrial"
    PARK = "park"
    COASTAL = "coastal"


@dataclass(frozen=True)
class TerrainNode:
    slope: float  # 0 flat .. 1 at 45 degrees or steeper
    urbanization: float  # buildability, 1 is most suitable
    district: DistrictType | None = None


class TerrainMap:
    """
    Regular grid of terrain samples.
    Row index grows with y, column index with x; cell (r, c) covers
    [x0 + c*cell, x0 + (c+1)*cell) x [y0 + r*cell, y0 + (r+1)*cell).
    """

    def __init__(
        self,
        slope: np.ndarray,
        urbanization: np.ndarray,
        districts: Sequence[Sequence[DistrictType | None]] | None = None,
        *,
        origin: tuple[float, float] = (0.0, 0.0),
        cell_size: float = 1.0,
    ):
        self.slope = np.asarray(slope, dtype=float)
        self.urbanization = np.asarray(urbanization, dtype=float)
        if self.slope.ndim != 2 or self.slope.shape != self.urbanization.shape:
            raise ValueError(
                f"slope {self.slope.shape} and urbanization {self.urbanization.shape} "
                "must be 2-D grids of the same shape"
            )
        if cell_size <= 0:
            raise ValueError("cell_size must be > 0")
        nrows, ncols = self.slope.shape
        if districts is None:
            self._districts = np.full((nrows, ncols), None, dtype=object)
        else:
            if len(districts) != nrows or any(len(row) != ncols for row in districts):
                raise ValueError(f"districts must match grid shape {self.slope.shape}")
            self._districts = np.empty((nrows, ncols), dtype=object)
            for r, row in enumerate(districts):
                for c, d in enumerate(row):
                    self._districts[r, c] = DistrictType(d) if d is not None else None
        self.origin = origin
        self.cell_size = float(cell_size)

    @classmethod
    def uniform(
        cls,
        nrows: int,
        ncols: int,
        *,
        slope: float = 0.1,
        urbanization: float = 0.8,
        district: DistrictType | None = DistrictType.RESIDENTIAL,
        origin: tuple[float, float] = (0.0, 0.0),
        cell_size: float = 1.0,
    ) -> "TerrainMap":
        return cls(
            np.full((nrows, ncols), slope),
            np.full((nrows, ncols), urbanization),
            [[district] * ncols for _ in range(nrows)],
            origin=origin,
            cell_size=cell_size,
        )

    @property
    def shape(self) -> tuple[int, int]:
        return self.slope.shape

    def cell_of(self, p: Point) -> tuple[int, int]:
        col = math.floor((p.x - self.origin[0]) / self.cell_size)
        row = math.floor((p.y - self.origin[1]) / self.cell_size)
        return row, col

    def node(self, row: int, col: int) -> TerrainNode | None:
        nrows, ncols = self.shape
        if not (0 <= row < nrows and 0 <= col < ncols):
            return None
        return TerrainNode(
            slope=float(self.slope[row, col]),
            urbanization=float(self.urbanization[row, col]),
            district=self._districts[row, col],
        )

    def lookup(self, p: Point) -> TerrainNode | None:
        if not (math.isfinite(p.x) and math.isfinite(p.y)):
            return None
        return self.node(*self.cell_of(p))

    def paint(self, rows: slice, cols: slice, district: DistrictType | None) -> None:
        """Assign one district to a rectangular block of cells."""
        self._districts[rows, cols] = district
