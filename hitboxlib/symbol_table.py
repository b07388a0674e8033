"""Glyph symbol bounds and their mapping into page space."""

# Standard Library
import logging

from hitboxlib.config import HitboxConfig
from hitboxlib.constants import TAG_PATH, TAG_SYMBOL
from hitboxlib.path_bounds import PathBounds, path_bounds
from hitboxlib.svg_parse import Placement, first_child, local_tag_name
from hitboxlib.util import round_half_away

logger = logging.getLogger(__name__)

ZERO_BOX = (0, 0, 0, 0)

# outline bounds of one glyph inside its symbol viewport
SymbolBox = PathBounds


#============================================
def parse_symbol_table(defs_node, config: HitboxConfig) -> dict[str, SymbolBox]:
	"""Return outline bounds for every <symbol> in one <defs> block.

	Keys are the reference form used by <use> tags ('#' + symbol id).
	Symbols without an id or without an outline path are logged and left
	out; a transform other than the expected vertical flip is only logged.
	"""
	symbols: dict[str, SymbolBox] = {}
	if defs_node is None:
		return symbols
	for symbol in list(defs_node):
		if local_tag_name(str(symbol.tag)) != TAG_SYMBOL:
			continue
		symbol_id = symbol.get("id")
		if not symbol_id:
			logger.warning("symbol without id skipped")
			continue
		path = first_child(symbol, TAG_PATH)
		if path is None or path.get("d") is None:
			logger.warning("symbol %s has no outline path", symbol_id)
			continue
		transform = path.get("transform")
		if transform != config.expected_symbol_transform:
			logger.warning(
				"symbol %s path transform is %r, expected %r",
				symbol_id, transform, config.expected_symbol_transform,
			)
		symbols[f"#{symbol_id}"] = path_bounds(path.get("d"))
	return symbols


#============================================
def scale_to_page(
		placement: Placement,
		glyph_ref: str,
		symbols: dict[str, SymbolBox],
		offset: tuple[int, int],
		config: HitboxConfig) -> tuple[int, int, int, int]:
	"""Return the page-space (x, y, width, height) of one placed glyph.

	The glyph outline is scaled by placement width over the symbol
	viewport size. Glyph Y grows upward, page Y downward, so the top edge
	comes from the outline's max Y. Unknown glyphs yield a zero box.
	"""
	symbol = symbols.get(glyph_ref)
	if symbol is None:
		logger.warning("no symbol bounds for glyph reference %r", glyph_ref)
		return ZERO_BOX
	scalar = placement.width / config.symbol_viewport_size
	offset_x, offset_y = offset
	return (
		offset_x + placement.x + round_half_away(symbol.min_x * scalar),
		offset_y + placement.y + round_half_away(-symbol.max_y * scalar),
		round_half_away(symbol.width * scalar),
		round_half_away(symbol.height * scalar),
	)
