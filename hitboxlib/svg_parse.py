"""SVG node and attribute helpers for Verovio page documents."""

# Standard Library
import dataclasses
import logging

from hitboxlib.config import HitboxConfig
from hitboxlib.constants import SVG_FLOAT_PATTERN, TAG_USE, XLINK_HREF
from hitboxlib.util import round_half_away

logger = logging.getLogger(__name__)


#============================================
@dataclasses.dataclass(frozen=True)
class Placement:
	"""Page-space origin and footprint written on one <use> glyph reference."""
	x: int
	y: int
	width: int
	height: int


#============================================
def local_tag_name(tag: str) -> str:
	"""Return local XML tag name without namespace prefix."""
	if "}" in tag:
		return tag.rsplit("}", 1)[-1]
	return tag


#============================================
def node_class(node) -> str:
	"""Return the class attribute of one node, or an empty string."""
	return str(node.get("class") or "")


#============================================
def child_elements(node, local_name: str | None = None) -> list:
	"""Return direct children, optionally filtered by local tag name."""
	children = list(node)
	if local_name is None:
		return children
	return [child for child in children if local_tag_name(str(child.tag)) == local_name]


#============================================
def first_child(node, local_name: str | None = None):
	"""Return the first direct child (optionally by tag name) or None."""
	children = child_elements(node, local_name)
	if not children:
		return None
	return children[0]


#============================================
def glyph_reference(use_node) -> str | None:
	"""Return the symbol reference of one <use> node (xlink:href or href)."""
	value = use_node.get(XLINK_HREF)
	if value is None:
		value = use_node.get("href")
	if value is None:
		return None
	return str(value).strip()


#============================================
def parse_int_token(raw_value: str) -> int:
	"""Parse one integer-valued SVG number; raises ValueError when not numeric."""
	text = str(raw_value).strip()
	if not SVG_FLOAT_PATTERN.fullmatch(text):
		raise ValueError(f"not a number: {raw_value!r}")
	return round_half_away(float(text))


#============================================
def strip_unit(raw_value: str, suffix_length: int) -> str:
	"""Drop a trailing unit suffix such as 'px' from one length attribute."""
	text = str(raw_value).strip()
	if suffix_length > 0 and len(text) > suffix_length and text[-suffix_length:].isalpha():
		return text[:-suffix_length]
	return text


#============================================
def parse_placement(use_node, config: HitboxConfig) -> Placement | None:
	"""Read x, y, width and height from one <use> node.

	Returns None (after logging) when any of the four attributes is missing
	or does not parse as a number.
	"""
	raw_values = {}
	for name in ("x", "y", "width", "height"):
		raw = use_node.get(name)
		if raw is None:
			logger.warning(
				"glyph reference %s has no %s attribute",
				use_node.get("id") or local_tag_name(str(use_node.tag)), name,
			)
			return None
		raw_values[name] = raw
	try:
		return Placement(
			x=parse_int_token(raw_values["x"]),
			y=parse_int_token(raw_values["y"]),
			width=parse_int_token(strip_unit(raw_values["width"], config.unit_suffix_length)),
			height=parse_int_token(strip_unit(raw_values["height"], config.unit_suffix_length)),
		)
	except ValueError as error:
		logger.warning("glyph reference has unreadable placement: %s", error)
		return None


#============================================
def first_use(node):
	"""Return the first <use> child of one node, or None."""
	return first_child(node, TAG_USE)


#============================================
def path_coordinate(path_data: str, token_index: int) -> int:
	"""Return one whitespace-separated coordinate of a Verovio line path.

	Staff lines and bar lines are written as 'M<x1> <y1> L<x2> <y2>'; the
	command letter glued to a token is dropped before parsing.
	"""
	tokens = str(path_data or "").replace(",", " ").split()
	if token_index >= len(tokens):
		raise ValueError(f"path {path_data!r} has no token {token_index}")
	return parse_int_token(tokens[token_index].lstrip("MmLl"))
