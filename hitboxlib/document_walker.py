"""Leaf hitbox extraction from the staff subtree of a Verovio page.

Every element class maps to one ElementRole. Containers are unpacked and
pass a shared group id down to their leaves; leaves turn their glyph
references into page-space hitboxes.
"""

# Standard Library
import dataclasses
import enum
import logging

from hitboxlib import constants
from hitboxlib.config import HitboxConfig
from hitboxlib.svg_parse import (
	child_elements,
	first_child,
	first_use,
	glyph_reference,
	local_tag_name,
	node_class,
	parse_placement,
)
from hitboxlib.symbol_table import ZERO_BOX, SymbolBox, scale_to_page
from hitboxlib.util import IdTable

logger = logging.getLogger(__name__)


#============================================
class ElementRole(enum.Enum):
	IGNORE = "ignore"
	UNPACK = "unpack"
	NOTE = "note"
	SINGLE = "single"
	KEY_ACCIDENTAL = "key_accidental"
	METER_SIGNATURE = "meter_signature"


ELEMENT_ROLES = {
	constants.CLASS_STEM: ElementRole.IGNORE,
	constants.CLASS_SPACE: ElementRole.IGNORE,
	constants.CLASS_BEAM: ElementRole.UNPACK,
	constants.CLASS_CHORD: ElementRole.UNPACK,
	constants.CLASS_LAYER: ElementRole.UNPACK,
	constants.CLASS_KEYSIG: ElementRole.UNPACK,
	constants.CLASS_NOTE: ElementRole.NOTE,
	constants.CLASS_REST: ElementRole.SINGLE,
	constants.CLASS_MREST: ElementRole.SINGLE,
	constants.CLASS_CLEF: ElementRole.SINGLE,
	constants.CLASS_KEYACCID: ElementRole.KEY_ACCIDENTAL,
	constants.CLASS_METERSIG: ElementRole.METER_SIGNATURE,
}

# containers Verovio writes without a usable id
ID_LESS_CLASSES = frozenset({constants.CLASS_BEAM, constants.CLASS_LAYER})


#============================================
@dataclasses.dataclass(frozen=True)
class ElementHitbox:
	x: int
	y: int
	width: int
	height: int
	layer: int
	element_id: int
	group_id: int

	@property
	def box(self) -> tuple[int, int, int, int]:
		return (self.x, self.y, self.width, self.height)

	@property
	def right(self) -> int:
		return self.x + self.width

	@property
	def bottom(self) -> int:
		return self.y + self.height


#============================================
@dataclasses.dataclass(frozen=True)
class WalkContext:
	"""Per-document inputs shared by every extraction call."""
	symbols: dict[str, SymbolBox]
	offset: tuple[int, int]
	config: HitboxConfig
	id_table: IdTable


#============================================
def role_for_class(element_class: str) -> ElementRole | None:
	"""Return the extraction role for one element class, None if unknown."""
	return ELEMENT_ROLES.get(element_class)


#============================================
def bound_glyph(use_node, context: WalkContext) -> tuple[int, int, int, int] | None:
	"""Return the page box of one <use> node; None when its placement is unusable."""
	placement = parse_placement(use_node, context.config)
	if placement is None:
		return None
	glyph_ref = glyph_reference(use_node)
	if glyph_ref is None:
		logger.warning("glyph reference without href at (%s, %s)", placement.x, placement.y)
		glyph_ref = ""
	return scale_to_page(placement, glyph_ref, context.symbols, context.offset, context.config)


#============================================
def _append(hitboxes: list, box: tuple[int, int, int, int], layer: int, element_id: int, group_id: int) -> ElementHitbox:
	"""Append one ElementHitbox built from a page box and return it."""
	hitbox = ElementHitbox(box[0], box[1], box[2], box[3], layer, element_id, group_id)
	hitboxes.append(hitbox)
	return hitbox


#============================================
def extract_note(node, context: WalkContext, hitboxes: list, element_id: int, group_id: int, layer: int) -> None:
	"""Bound a notehead and each accidental attached to it.

	Accidental boxes are stretched so they reach exactly
	`accid_note_overlap` units into the notehead, which keeps both in one
	cluster while leaving them separately hittable.
	"""
	notehead = first_child(node)
	use_node = first_use(notehead) if notehead is not None else None
	if use_node is None:
		logger.warning("note %s has no notehead glyph", context.id_table.lookup(element_id))
		return
	note_box = bound_glyph(use_node, context)
	if note_box is None:
		return
	_append(hitboxes, note_box, layer, element_id, group_id)
	for child in child_elements(node, constants.TAG_G):
		# empty accid groups show up in some scores and draw nothing
		if node_class(child) != constants.CLASS_ACCID or len(child) == 0:
			continue
		accid_id = child.get("id")
		if not accid_id:
			logger.warning("accidental without id on note %s", context.id_table.lookup(element_id))
			continue
		accid_use = first_use(child)
		if accid_use is None:
			logger.warning("accidental %s has no glyph", accid_id)
			continue
		accid_box = bound_glyph(accid_use, context)
		if accid_box is None or accid_box == ZERO_BOX:
			continue
		accid_handle = context.id_table.register(accid_id)
		if note_box == ZERO_BOX:
			# notehead glyph unknown: keep the accidental at its own size
			_append(hitboxes, accid_box, layer, accid_handle, group_id)
			continue
		width = note_box[0] - accid_box[0] + context.config.accid_note_overlap
		_append(hitboxes, (accid_box[0], accid_box[1], width, accid_box[3]), layer, accid_handle, group_id)


#============================================
def extract_single(node, context: WalkContext, hitboxes: list, element_id: int, group_id: int, layer: int) -> None:
	"""Bound an element drawn with one glyph (rest, measure rest, clef)."""
	use_node = first_use(node)
	if use_node is None:
		logger.warning("%s %s has no glyph", node_class(node), context.id_table.lookup(element_id))
		return
	box = bound_glyph(use_node, context)
	if box is None:
		return
	_append(hitboxes, box, layer, element_id, group_id)


#============================================
def extract_key_accidental(node, context: WalkContext, hitboxes: list, element_id: int, group_id: int, layer: int) -> None:
	"""Bound a key signature accidental with a widened tap target."""
	use_node = first_use(node)
	if use_node is None:
		logger.warning("key accidental %s has no glyph", context.id_table.lookup(element_id))
		return
	box = bound_glyph(use_node, context)
	if box is None or box == ZERO_BOX:
		return
	extra = context.config.key_accid_extra_width
	x, y, width, height = box
	_append(hitboxes, (x - extra // 2, y, width + extra, height), layer, element_id, group_id)


#============================================
def extract_meter_signature(node, context: WalkContext, hitboxes: list, element_id: int, group_id: int, layer: int) -> None:
	"""Bound both stacked glyphs of a meter signature under one id."""
	use_nodes = child_elements(node, constants.TAG_USE)
	if len(use_nodes) != 2:
		logger.warning(
			"meter signature %s has %d glyphs, expected 2",
			context.id_table.lookup(element_id), len(use_nodes),
		)
	for use_node in use_nodes:
		box = bound_glyph(use_node, context)
		if box is None:
			continue
		_append(hitboxes, box, layer, element_id, group_id)


EXTRACTORS = {
	ElementRole.NOTE: extract_note,
	ElementRole.SINGLE: extract_single,
	ElementRole.KEY_ACCIDENTAL: extract_key_accidental,
	ElementRole.METER_SIGNATURE: extract_meter_signature,
}


#============================================
def walk_element(node, context: WalkContext, hitboxes: list, parent_group: int | None, layer: int) -> None:
	"""Append the leaf hitboxes found under one node to `hitboxes`.

	Args:
		node: element to classify; non-<g> nodes are ignored.
		context: symbols, offset, config and the document id table.
		hitboxes: accumulator receiving ElementHitbox values.
		parent_group: group id handed down by an enclosing container.
		layer: layer index of the enclosing staff child.
	"""
	if local_tag_name(str(node.tag)) != constants.TAG_G:
		return
	element_class = node_class(node)
	role = role_for_class(element_class)
	if role is None:
		logger.warning("unexpected element class %r (id %s)", element_class, node.get("id"))
		return
	if role is ElementRole.IGNORE:
		return
	element_id = None
	if element_class not in ID_LESS_CLASSES:
		raw_id = node.get("id")
		if not raw_id:
			logger.warning("%s element without id skipped", element_class)
			return
		element_id = context.id_table.register(raw_id)
	group_id = parent_group if parent_group is not None else element_id
	if role is ElementRole.UNPACK:
		for child in list(node):
			walk_element(child, context, hitboxes, group_id, layer)
		return
	EXTRACTORS[role](node, context, hitboxes, element_id, group_id, layer)


#============================================
def walk_staff(staff_node, context: WalkContext) -> list[ElementHitbox]:
	"""Return every leaf hitbox of one staff in document order."""
	hitboxes: list[ElementHitbox] = []
	layer_index = 0
	for child in child_elements(staff_node, constants.TAG_G):
		child_class = node_class(child)
		if child_class not in constants.STAFF_CHILD_CLASSES:
			continue
		walk_element(child, context, hitboxes, None, layer_index)
		if child_class == constants.CLASS_LAYER:
			layer_index += 1
	return hitboxes
