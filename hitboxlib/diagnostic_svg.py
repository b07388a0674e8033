"""Debug overlay fragment that draws the hitbox grid over a page."""

# Standard Library
import xml.etree.ElementTree as StdET

from hitboxlib import constants
from hitboxlib.spatial_index import SpatialIndex


#============================================
def _path(d: str, color: str, stroke_width: int, data_id: str | None = None) -> StdET.Element:
	attrib = {"d": d, "stroke": color, "stroke-width": str(stroke_width)}
	if data_id is not None:
		attrib["data-id"] = data_id
	return StdET.Element("path", attrib=attrib)


#============================================
def cross_paths(box: tuple[int, int, int, int], data_id: str) -> list[StdET.Element]:
	"""Return the two diagonal strokes marking one hitbox."""
	x, y, width, height = box
	end_x = x + width
	end_y = y + height
	return [
		_path(f"M{x} {y} L{end_x} {end_y}", constants.OVERLAY_HITBOX_COLOR, constants.OVERLAY_HITBOX_STROKE, data_id),
		_path(f"M{end_x} {y} L{x} {end_y}", constants.OVERLAY_HITBOX_COLOR, constants.OVERLAY_HITBOX_STROKE, data_id),
	]


#============================================
def build_hitbox_overlay(index: SpatialIndex) -> StdET.Element:
	"""Return a <g class='hitbox-elements'> element for one index.

	Row markers are red lines across the page, column markers blue lines
	inside their row band, and every hitbox and floating rect a green X
	tagged with its id.
	"""
	group = StdET.Element("g", attrib={"class": "hitbox-elements"})
	for marker in index.row_markers:
		group.append(_path(
			f"M0 {marker} L{index.page_width} {marker}",
			constants.OVERLAY_ROW_COLOR, constants.OVERLAY_ROW_STROKE,
		))
	for row, markers in enumerate(index.column_markers):
		top = index.row_markers[row]
		bottom = index.row_markers[row + 1]
		for marker in markers:
			group.append(_path(
				f"M{marker} {top} L{marker} {bottom}",
				constants.OVERLAY_COLUMN_COLOR, constants.OVERLAY_COLUMN_STROKE,
			))
	for row_cells in index.cells:
		for cell in row_cells:
			for hitbox, element_id in zip(cell.hitboxes, cell.element_ids):
				group.extend(cross_paths(hitbox.box, element_id))
	for rect in index.floating_rects:
		group.extend(cross_paths(rect.box, rect.description))
	return group


#============================================
def build_hitbox_svg(index: SpatialIndex) -> str:
	"""Return the overlay fragment serialized as SVG markup."""
	return StdET.tostring(build_hitbox_overlay(index), encoding="unicode")
