"""Row/column hitbox grid and its point queries.

A point first resolves to a row band (one per staff line of music on
the page) and then to a column cell inside that row. Markers are
scanned linearly: one page holds few rows and columns.
"""

# Standard Library
import dataclasses

from hitboxlib.group_assembler import Cell
from hitboxlib.util import contains_strict


#============================================
@dataclasses.dataclass(frozen=True)
class FloatingRect:
	"""Hit region of an element drawn across the grid (tie, hairpin, dynamic)."""
	x: int
	y: int
	width: int
	height: int
	min_row: int
	max_row: int
	description: str

	@property
	def box(self) -> tuple[int, int, int, int]:
		return (self.x, self.y, self.width, self.height)


#============================================
def row_index(row_markers, y: int) -> int:
	"""Return the row band for y: first marker >= y, minus one; -1 if none."""
	for index, marker in enumerate(row_markers):
		if marker >= y:
			return index - 1
	return -1


#============================================
def col_index(column_markers, row: int, x: int) -> int:
	"""Return the column cell for x inside one row; -1 when unresolved."""
	if row < 0 or row >= len(column_markers):
		return -1
	for index, marker in enumerate(column_markers[row]):
		if marker >= x:
			return index - 1
	return -1


#============================================
@dataclasses.dataclass(frozen=True)
class SpatialIndex:
	page_width: int
	page_height: int
	row_markers: tuple[int, ...]
	column_markers: tuple[tuple[int, ...], ...]
	cells: tuple[tuple[Cell, ...], ...]
	floating_rects: tuple[FloatingRect, ...]
	id_table: tuple[str, ...]

	@property
	def row_count(self) -> int:
		return len(self.cells)

	def row_index(self, y: int) -> int:
		"""Return the row band for y, -1 when outside the grid."""
		return row_index(self.row_markers, y)

	def col_index(self, row: int, x: int) -> int:
		"""Return the column cell for x inside one row, -1 when unresolved."""
		return col_index(self.column_markers, row, x)

	def resolve(self, x: int, y: int) -> tuple[int, int]:
		"""Return (row, column) of the grid cell under one point, -1 if outside."""
		row = self.row_index(y)
		if row >= self.row_count:
			return (-1, -1)
		return (row, self.col_index(row, x))

	def cell_at(self, x: int, y: int) -> Cell | None:
		"""Return the cell under a point, None outside the grid."""
		row, column = self.resolve(x, y)
		if row < 0 or column < 0:
			return None
		return self.cells[row][column]

	def group_bounds(self, x: int, y: int) -> tuple[int, int, int, int] | None:
		"""Return (left, top, width, height) of the cell under a point."""
		row, column = self.resolve(x, y)
		if row < 0 or column < 0:
			return None
		left = self.column_markers[row][column]
		top = self.row_markers[row]
		return (
			left,
			top,
			self.column_markers[row][column + 1] - left,
			self.row_markers[row + 1] - top,
		)

	def element_at(self, x: int, y: int) -> str:
		"""Return the id of the element under a point, or an empty string.

		Floating overlays win over grid hitboxes. Floating ids carry a
		'<kind>:' prefix.
		"""
		row, column = self.resolve(x, y)
		if row < 0 or column < 0:
			return ""
		for rect in self.floating_rects:
			if rect.min_row <= row <= rect.max_row and contains_strict(rect.box, x, y):
				return rect.description
		cell = self.cells[row][column]
		for hitbox, element_id in zip(cell.hitboxes, cell.element_ids):
			if contains_strict(hitbox.box, x, y):
				return element_id
		return ""

	def group_id_at(self, x: int, y: int) -> str:
		"""Return the cluster label of the cell under a point."""
		cell = self.cell_at(x, y)
		if cell is None:
			return ""
		return cell.label

	def children_at(self, x: int, y: int) -> list[str]:
		"""Return the ids of every hitbox in the cell under a point."""
		cell = self.cell_at(x, y)
		if cell is None:
			return []
		return list(cell.element_ids)
