"""Build a SpatialIndex from one Verovio SVG page.

The page is read top-down: symbol definitions, page viewport, page
margin translation, then every system. Each system adds one row per
staff; each measure appends its clustered columns to those rows. Local
problems are logged and skipped. Broken page structure raises
StructureError, which build_spatial_index turns into a failed
BuildResult so a half-built index is never handed out.
"""

# Standard Library
import dataclasses
import logging

# Third Party
import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from hitboxlib import constants
from hitboxlib.config import DEFAULT_CONFIG, HitboxConfig
from hitboxlib.document_walker import ElementHitbox, WalkContext, walk_staff
from hitboxlib.floating import index_floating_elements
from hitboxlib.group_assembler import EMPTY_CELL, Cell, assemble_clusters
from hitboxlib.spatial_index import SpatialIndex
from hitboxlib.svg_parse import (
	child_elements,
	first_child,
	local_tag_name,
	node_class,
	parse_int_token,
	path_coordinate,
)
from hitboxlib.symbol_table import parse_symbol_table
from hitboxlib.util import IdTable, midpoint_floor

logger = logging.getLogger(__name__)


#============================================
class StructureError(ValueError):
	"""The page does not have the layout the index is built from."""


#============================================
@dataclasses.dataclass(frozen=True)
class BuildResult:
	index: SpatialIndex | None = None
	error: str | None = None

	@property
	def ok(self) -> bool:
		return self.index is not None and self.error is None


#============================================
@dataclasses.dataclass
class _RowGrid:
	markers: list[int]
	cells: list[Cell] = dataclasses.field(default_factory=list)


#============================================
def parse_document(svg_text):
	"""Parse SVG text into an element tree root."""
	try:
		root = ET.fromstring(svg_text)
	except (ET.ParseError, DefusedXmlException) as error:
		raise StructureError(f"document is not readable SVG: {error}") from error
	if local_tag_name(str(root.tag)) != constants.TAG_SVG:
		raise StructureError(f"document root is <{local_tag_name(str(root.tag))}>, not <svg>")
	return root


#============================================
def page_container(root):
	"""Return the element holding the page viewBox and page-margin group.

	Verovio may wrap the page in an inner <svg class="definition-scale">;
	without it the outer <svg> holds everything.
	"""
	inner = first_child(root, constants.TAG_SVG)
	if inner is not None:
		return inner
	return root


#============================================
def page_dimensions(container) -> tuple[int, int]:
	"""Return (width, height) from the 'minX minY width height' viewBox."""
	raw = container.get("viewBox")
	if raw is None:
		raise StructureError("page has no viewBox")
	tokens = raw.replace(",", " ").split()
	if len(tokens) != 4:
		raise StructureError(f"viewBox {raw!r} does not have four values")
	try:
		return parse_int_token(tokens[2]), parse_int_token(tokens[3])
	except ValueError as error:
		raise StructureError(f"viewBox {raw!r} is not numeric") from error


#============================================
def margin_wrapper(container):
	"""Return the page-margin group, which must be the first <g> child."""
	wrapper = first_child(container, constants.TAG_G)
	if wrapper is None or node_class(wrapper) != constants.CLASS_PAGE_MARGIN:
		found = None if wrapper is None else node_class(wrapper)
		raise StructureError(f"first group is not the page margin (found {found!r})")
	return wrapper


#============================================
def page_offset(wrapper) -> tuple[int, int]:
	"""Return the (dx, dy) translation of the page-margin group."""
	transform = wrapper.get("transform") or "translate(0, 0)"
	match = constants.TRANSLATE_PATTERN.match(transform)
	if match is None:
		raise StructureError(f"page margin transform {transform!r} is not a translate")
	return parse_int_token(match.group(1)), parse_int_token(match.group(2))


#============================================
def classed_children(node, class_name: str) -> list:
	"""Return direct <g> children with one class."""
	return [child for child in child_elements(node, constants.TAG_G) if node_class(child) == class_name]


#============================================
def system_staves(system) -> list:
	"""Return the staff groups of the first measure of one system."""
	measures = classed_children(system, constants.CLASS_MEASURE)
	if not measures:
		raise StructureError(f"system {system.get('id')} has no measure")
	return classed_children(measures[0], constants.CLASS_STAFF)


#============================================
def staff_line_extent(staff, offset_y: int) -> tuple[int, int]:
	"""Return page Y of the top and bottom staff lines of one staff."""
	lines = child_elements(staff, constants.TAG_PATH)
	if not lines:
		raise StructureError(f"staff {staff.get('id')} has no staff lines")
	try:
		top = path_coordinate(lines[0].get("d"), 1)
		bottom = path_coordinate(lines[-1].get("d"), 1)
	except ValueError as error:
		raise StructureError(f"staff {staff.get('id')} has unreadable staff lines: {error}") from error
	return top + offset_y, bottom + offset_y


#============================================
def system_margin(system, offset_x: int) -> int:
	"""Return page X of the system's leading bar line (the row's left margin)."""
	children = child_elements(system)
	if not children or children[0].get("d") is None:
		raise StructureError(f"system {system.get('id')} does not start with its bar line path")
	try:
		return path_coordinate(children[0].get("d"), 0) + offset_x
	except ValueError as error:
		raise StructureError(f"system {system.get('id')} bar line is unreadable: {error}") from error


#============================================
def measure_end(measure, offset_x: int, fallback: int) -> int:
	"""Return page X where one measure's staff lines end."""
	staves = classed_children(measure, constants.CLASS_STAFF)
	first_line = first_child(staves[0]) if staves else None
	path_data = None if first_line is None else first_line.get("d")
	if path_data is None:
		logger.warning("measure %s has no staff line; using page edge", measure.get("id"))
		return fallback
	try:
		return path_coordinate(path_data, 2) + offset_x
	except ValueError as error:
		logger.warning("measure %s staff line unreadable (%s); using page edge", measure.get("id"), error)
		return fallback


#============================================
def append_row_marker(row_markers: list[int], value: int) -> None:
	"""Append one row boundary, kept strictly above the previous one."""
	if row_markers and value <= row_markers[-1]:
		logger.debug("row boundary %d clamped above %d", value, row_markers[-1])
		value = row_markers[-1] + 1
	row_markers.append(value)


#============================================
def placed_hitboxes(hitboxes: list[ElementHitbox]) -> list[ElementHitbox]:
	"""Drop boxes without area, such as those left by glyphs without symbol bounds."""
	placed = [hitbox for hitbox in hitboxes if hitbox.width > 0 and hitbox.height > 0]
	if len(placed) != len(hitboxes):
		logger.debug("dropped %d hitboxes without area", len(hitboxes) - len(placed))
	return placed


#============================================
def _build(svg_text, config: HitboxConfig) -> SpatialIndex:
	root = parse_document(svg_text)
	container = page_container(root)
	defs = first_child(root, constants.TAG_DEFS)
	if defs is None:
		defs = first_child(container, constants.TAG_DEFS)
	if defs is None:
		logger.warning("document has no symbol definitions")
	symbols = parse_symbol_table(defs, config)
	page_width, page_height = page_dimensions(container)
	wrapper = margin_wrapper(container)
	offset_x, offset_y = page_offset(wrapper)
	context = WalkContext(symbols=symbols, offset=(offset_x, offset_y), config=config, id_table=IdTable())

	systems = classed_children(wrapper, constants.CLASS_SYSTEM)
	if not systems:
		raise StructureError("page has no system")
	staff_count = len(system_staves(systems[0]))
	if staff_count == 0:
		raise StructureError("first measure has no staff")

	row_markers: list[int] = []
	rows: list[_RowGrid] = []
	floating_nodes = []
	row_max: list[int] = []
	for system in systems:
		# boundary above the first staff sits halfway to the previous system
		previous_bottom = row_max[-1] if row_max else 0
		staves = system_staves(system)
		if len(staves) < staff_count:
			raise StructureError(f"system {system.get('id')} has {len(staves)} staves, expected {staff_count}")
		row_min = []
		row_max = []
		for staff in staves[:staff_count]:
			top, bottom = staff_line_extent(staff, offset_y)
			row_min.append(top)
			row_max.append(bottom)
		margin = system_margin(system, offset_x)
		system_rows = [_RowGrid(markers=[margin]) for _ in range(staff_count)]

		for measure in classed_children(system, constants.CLASS_MEASURE):
			end_x = measure_end(measure, offset_x, page_width)
			slot = 0
			for child in child_elements(measure, constants.TAG_G):
				child_class = node_class(child)
				if child_class != constants.CLASS_STAFF:
					if child_class in constants.FLOATING_CLASSES:
						floating_nodes.append(child)
					continue
				if slot >= staff_count:
					logger.warning("measure %s has more staves than the page layout", measure.get("id"))
					break
				hitboxes = placed_hitboxes(walk_staff(child, context))
				for hitbox in hitboxes:
					row_min[slot] = min(row_min[slot], hitbox.y)
					row_max[slot] = max(row_max[slot], hitbox.bottom)
				if not hitboxes:
					logger.debug("staff %s in measure %s has no hitboxes", child.get("id"), measure.get("id"))
				grid = system_rows[slot]
				markers, cells = assemble_clusters(hitboxes, context.id_table, grid.markers[-1], end_x)
				grid.markers.extend(markers[1:])
				grid.cells.extend(cells)
				slot += 1

		for grid in system_rows:
			if page_width > grid.markers[-1]:
				grid.markers.append(page_width)
				grid.cells.append(EMPTY_CELL)
		rows.extend(system_rows)
		append_row_marker(row_markers, midpoint_floor(row_min[0], previous_bottom))
		for index in range(1, staff_count):
			append_row_marker(row_markers, midpoint_floor(row_min[index], row_max[index - 1]))

	append_row_marker(row_markers, row_max[-1] + config.lowest_staff_margin)
	floating_rects = index_floating_elements(floating_nodes, context, row_markers)
	return SpatialIndex(
		page_width=page_width,
		page_height=page_height,
		row_markers=tuple(row_markers),
		column_markers=tuple(tuple(grid.markers) for grid in rows),
		cells=tuple(tuple(grid.cells) for grid in rows),
		floating_rects=tuple(floating_rects),
		id_table=context.id_table.snapshot(),
	)


#============================================
def build_spatial_index(svg_text, config: HitboxConfig | None = None) -> BuildResult:
	"""Build the hitbox index of one rendered page.

	Returns:
		BuildResult with the index on success, or with `error` set (and no
		index) when the page structure could not be read.
	"""
	config = config or DEFAULT_CONFIG
	config.validate()
	try:
		index = _build(svg_text, config)
	except StructureError as error:
		logger.error("hitbox build aborted: %s", error)
		return BuildResult(error=str(error))
	logger.debug(
		"hitbox index built: %d rows, %d floating rects, %d ids",
		index.row_count, len(index.floating_rects), len(index.id_table),
	)
	return BuildResult(index=index)
