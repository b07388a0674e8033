"""Hit regions for elements that float over the staff grid."""

# Standard Library
import logging

from hitboxlib import constants
from hitboxlib.document_walker import WalkContext, bound_glyph
from hitboxlib.path_bounds import path_bounds, polyline_bounds
from hitboxlib.spatial_index import FloatingRect, row_index
from hitboxlib.svg_parse import first_child, first_use, node_class

logger = logging.getLogger(__name__)


#============================================
def row_span(row_markers, top: int, bottom: int) -> tuple[int, int] | None:
	"""Return the first and last row a vertical extent overlaps, None if it misses the grid.

	An extent reaching past the top or bottom marker is clamped to the
	first or last row.
	"""
	if len(row_markers) < 2 or bottom <= row_markers[0] or top > row_markers[-1]:
		return None
	first = 0 if top <= row_markers[0] else row_index(row_markers, top)
	last = len(row_markers) - 2 if bottom > row_markers[-1] else row_index(row_markers, bottom)
	return first, last


#============================================
def _rect(box: tuple[int, int, int, int], kind: str, element_id: str, row_markers) -> FloatingRect | None:
	x, y, width, height = box
	span = row_span(row_markers, y, y + height)
	if span is None:
		logger.debug("%s %s lies outside the row grid", kind, element_id)
		return None
	return FloatingRect(
		x=x,
		y=y,
		width=width,
		height=height,
		min_row=span[0],
		max_row=span[1],
		description=f"{kind}:{element_id}",
	)


#============================================
def tie_box(node, context: WalkContext) -> tuple[int, int, int, int] | None:
	"""Return the page box of a tie's connector path."""
	path = first_child(node, constants.TAG_PATH)
	if path is None or path.get("d") is None:
		logger.warning("tie %s has no path", node.get("id"))
		return None
	dx, dy = context.offset
	bounds = path_bounds(path.get("d")).shifted(dx, dy)
	return (bounds.min_x, bounds.min_y, bounds.width, bounds.height)


#============================================
def hairpin_box(node, context: WalkContext) -> tuple[int, int, int, int] | None:
	"""Return the page box of a hairpin's polyline vertices."""
	polyline = first_child(node, constants.TAG_POLYLINE)
	if polyline is None or polyline.get("points") is None:
		logger.warning("hairpin %s has no polyline points", node.get("id"))
		return None
	dx, dy = context.offset
	bounds = polyline_bounds(polyline.get("points")).shifted(dx, dy)
	return (bounds.min_x, bounds.min_y, bounds.width, bounds.height)


#============================================
def dynam_box(node, context: WalkContext) -> tuple[int, int, int, int] | None:
	"""Return the page box of a dynamic marking glyph."""
	use_node = first_use(node)
	if use_node is None:
		logger.warning("dynam %s has no glyph", node.get("id"))
		return None
	return bound_glyph(use_node, context)


#============================================
def unmeasured_box(node, context: WalkContext) -> None:
	"""Slurs and text directives have no hit region yet."""
	logger.debug("%s %s left without a hit region", node_class(node), node.get("id"))
	return None


FLOATING_MEASURERS = {
	constants.CLASS_TIE: tie_box,
	constants.CLASS_HAIRPIN: hairpin_box,
	constants.CLASS_DYNAM: dynam_box,
	constants.CLASS_SLUR: unmeasured_box,
	constants.CLASS_DIR: unmeasured_box,
}


#============================================
def index_floating_elements(nodes: list, context: WalkContext, row_markers) -> list[FloatingRect]:
	"""Return one FloatingRect per measurable floating node.

	Args:
		nodes: measure children whose class is a floating class.
		context: shared walk inputs (symbols, page offset, config).
		row_markers: finished row markers, used for each rect's row span.
	"""
	rects: list[FloatingRect] = []
	for node in nodes:
		kind = node_class(node)
		measurer = FLOATING_MEASURERS.get(kind)
		if measurer is None:
			logger.warning("unknown floating element class %r", kind)
			continue
		element_id = node.get("id")
		if not element_id:
			logger.warning("%s element without id skipped", kind)
			continue
		box = measurer(node, context)
		if box is None:
			continue
		rect = _rect(box, kind, element_id, row_markers)
		if rect is not None:
			rects.append(rect)
	return rects
