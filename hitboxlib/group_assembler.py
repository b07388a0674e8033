"""Column clustering of one staff's leaf hitboxes."""

# Standard Library
import dataclasses
import logging

from hitboxlib.document_walker import ElementHitbox
from hitboxlib.util import IdTable, midpoint_floor

logger = logging.getLogger(__name__)


#============================================
@dataclasses.dataclass(frozen=True)
class Cell:
	"""One interactive column region of a row."""
	label: str
	hitboxes: tuple[ElementHitbox, ...] = ()
	# external id of each hitbox, same order as hitboxes
	element_ids: tuple[str, ...] = ()


EMPTY_CELL = Cell(label="")


#============================================
def cluster_label(element_ids) -> str:
	"""Return slash-joined ids, duplicates dropped, first-seen order kept."""
	seen = []
	for element_id in element_ids:
		if element_id not in seen:
			seen.append(element_id)
	return "/".join(seen)


#============================================
def make_cell(members: list[ElementHitbox], id_table: IdTable) -> Cell:
	"""Build one cell from its member hitboxes."""
	element_ids = tuple(id_table.lookup(hitbox.element_id) for hitbox in members)
	return Cell(label=cluster_label(element_ids), hitboxes=tuple(members), element_ids=element_ids)


#============================================
def next_marker(markers: list[int], value: int) -> int:
	"""Return value, raised if needed to stay above the previous marker."""
	if value > markers[-1]:
		return value
	logger.debug("column boundary %d clamped above %d", value, markers[-1])
	return markers[-1] + 1


#============================================
def assemble_clusters(
		hitboxes: list[ElementHitbox],
		id_table: IdTable,
		left_edge: int,
		right_edge: int) -> tuple[list[int], list[Cell]]:
	"""Split one staff segment into horizontally distinct clusters.

	Boxes are swept left to right by x. A box starting before the running
	right edge of the current cluster joins it; otherwise a new cluster
	starts and the boundary sits at the floored midpoint between the new
	box and the previous cluster's right edge.

	Returns:
		(markers, cells) where markers starts at left_edge, ends at
		right_edge and has exactly one more entry than cells. An empty
		segment still yields one unlabelled cell.
	"""
	ordered = sorted(hitboxes, key=lambda hitbox: hitbox.x)
	markers = [left_edge]
	cells: list[Cell] = []
	if not ordered:
		cells.append(EMPTY_CELL)
		markers.append(next_marker(markers, right_edge))
		return markers, cells
	members = [ordered[0]]
	cluster_max_x = ordered[0].right
	for hitbox in ordered[1:]:
		if hitbox.x >= cluster_max_x:
			cells.append(make_cell(members, id_table))
			markers.append(next_marker(markers, midpoint_floor(hitbox.x, cluster_max_x)))
			members = []
			cluster_max_x = hitbox.right
		members.append(hitbox)
		cluster_max_x = max(cluster_max_x, hitbox.right)
	cells.append(make_cell(members, id_table))
	markers.append(next_marker(markers, right_edge))
	return markers, cells
