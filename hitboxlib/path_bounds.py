"""Bounding boxes for SVG path data and polyline point lists.

Line commands are bounded exactly. Curves are bounded with a cheap
dominant-axis heuristic instead of true Bezier extrema: when a curve
travels mostly along X its bulge is assumed to be along Y (and the other
way round), and the bound on the bulge axis is pushed halfway from the
current point toward the most extreme control point. Column boundaries
produced later by the grouping pass depend on these exact numbers.
"""

# Standard Library
import dataclasses
import logging

from hitboxlib.constants import PATH_TOKEN_PATTERN, SVG_FLOAT_PATTERN
from hitboxlib.util import midpoint_floor, round_half_away

logger = logging.getLogger(__name__)

# number of arguments consumed by one repetition of each command
COMMAND_ARITY = {
	"M": 2,
	"L": 2,
	"H": 1,
	"V": 1,
	"C": 6,
	"S": 4,
	"Q": 4,
	"Z": 0,
}


#============================================
@dataclasses.dataclass(frozen=True)
class PathBounds:
	min_x: int
	min_y: int
	width: int
	height: int
	max_x: int
	max_y: int

	@classmethod
	def from_extents(cls, min_x: int, min_y: int, max_x: int, max_y: int) -> "PathBounds":
		"""Build bounds from corner extents."""
		return cls(min_x, min_y, max_x - min_x, max_y - min_y, max_x, max_y)

	def shifted(self, dx: int, dy: int) -> "PathBounds":
		"""Return the same bounds translated by (dx, dy)."""
		return PathBounds.from_extents(self.min_x + dx, self.min_y + dy, self.max_x + dx, self.max_y + dy)


EMPTY_BOUNDS = PathBounds(0, 0, 0, 0, 0, 0)


#============================================
class _Extents:
	"""Running min/max accumulator."""

	def __init__(self):
		self.min_x = None
		self.min_y = None
		self.max_x = None
		self.max_y = None

	def include_x(self, x: int) -> None:
		self.min_x = x if self.min_x is None else min(self.min_x, x)
		self.max_x = x if self.max_x is None else max(self.max_x, x)

	def include_y(self, y: int) -> None:
		self.min_y = y if self.min_y is None else min(self.min_y, y)
		self.max_y = y if self.max_y is None else max(self.max_y, y)

	def include(self, x: int, y: int) -> None:
		self.include_x(x)
		self.include_y(y)

	def is_empty(self) -> bool:
		return self.min_x is None or self.min_y is None

	def to_bounds(self) -> PathBounds:
		return PathBounds.from_extents(self.min_x, self.min_y, self.max_x, self.max_y)


#============================================
def tokenize_path(path_data: str) -> list[str]:
	"""Split path data into command letters and number tokens."""
	return PATH_TOKEN_PATTERN.findall(str(path_data or ""))


#============================================
def _bulge_range(start: int, control_values: list[int], low: int, high: int) -> tuple[int, int]:
	"""Widen (low, high) halfway toward the controls on the bulge side."""
	top = max(control_values)
	if top > start:
		return low, max(high, midpoint_floor(top, start))
	bottom = min(control_values)
	return min(low, midpoint_floor(bottom, start)), high


#============================================
def curve_extents(
		start: tuple[int, int],
		controls: list[tuple[int, int]],
		end: tuple[int, int]) -> tuple[int, int, int, int]:
	"""Return approximate (min_x, min_y, max_x, max_y) for one curve segment.

	Args:
		start: current pen position.
		controls: one (quadratic/smooth) or two (cubic) control points.
		end: curve end point.
	"""
	start_x, start_y = start
	end_x, end_y = end
	min_x, max_x = min(start_x, end_x), max(start_x, end_x)
	min_y, max_y = min(start_y, end_y), max(start_y, end_y)
	if abs(end_x - start_x) > abs(end_y - start_y):
		min_y, max_y = _bulge_range(start_y, [point[1] for point in controls], min_y, max_y)
	else:
		min_x, max_x = _bulge_range(start_x, [point[0] for point in controls], min_x, max_x)
	return (min_x, min_y, max_x, max_y)


#============================================
def _read_arguments(tokens: list[str], index: int, count: int) -> list[int] | None:
	"""Return `count` integer arguments starting at index, or None if short."""
	values = []
	for token in tokens[index:index + count]:
		if token.isalpha():
			return None
		values.append(round_half_away(float(token)))
	if len(values) < count:
		return None
	return values


#============================================
def _skip_numbers(tokens: list[str], index: int) -> int:
	"""Return the index of the next command letter at or after index."""
	while index < len(tokens) and not tokens[index].isalpha():
		index += 1
	return index


#============================================
def path_bounds(path_data: str) -> PathBounds:
	"""Return bounds of one SVG path 'd' string.

	Supports M L H V C S Q Z in absolute and relative form, with implicit
	command repetition. Other commands are logged and skipped together with
	their arguments; the pen position may drift after such a skip.
	"""
	tokens = tokenize_path(path_data)
	extents = _Extents()
	pen_x, pen_y = 0, 0
	start_x, start_y = 0, 0
	command = None
	index = 0
	while index < len(tokens):
		token = tokens[index]
		if token.isalpha():
			if token.upper() not in COMMAND_ARITY:
				logger.warning("unsupported path command %r skipped", token)
				command = None
				index = _skip_numbers(tokens, index + 1)
				continue
			command = token
			index += 1
			if command in ("Z", "z"):
				pen_x, pen_y = start_x, start_y
			continue
		if command is None or command in ("Z", "z"):
			logger.warning("path number %r has no command, skipped", token)
			index += 1
			continue
		upper = command.upper()
		args = _read_arguments(tokens, index, COMMAND_ARITY[upper])
		if args is None:
			logger.warning("path command %r is missing arguments", command)
			index = _skip_numbers(tokens, index)
			continue
		index += COMMAND_ARITY[upper]
		base_x, base_y = (pen_x, pen_y) if command.islower() else (0, 0)
		if upper in ("M", "L"):
			pen_x, pen_y = base_x + args[0], base_y + args[1]
			extents.include(pen_x, pen_y)
			if upper == "M":
				start_x, start_y = pen_x, pen_y
				# extra pairs after a moveto are lineto commands
				command = "l" if command.islower() else "L"
		elif upper == "H":
			pen_x = base_x + args[0]
			extents.include(pen_x, pen_y)
		elif upper == "V":
			pen_y = base_y + args[0]
			extents.include(pen_x, pen_y)
		else:
			points = [(base_x + args[i], base_y + args[i + 1]) for i in range(0, len(args), 2)]
			controls, end = points[:-1], points[-1]
			min_x, min_y, max_x, max_y = curve_extents((pen_x, pen_y), controls, end)
			extents.include(min_x, min_y)
			extents.include(max_x, max_y)
			pen_x, pen_y = end
	if extents.is_empty():
		logger.warning("path data %r produced no points", str(path_data or "")[:40])
		return EMPTY_BOUNDS
	return extents.to_bounds()


#============================================
def polyline_bounds(points_text: str) -> PathBounds:
	"""Return bounds of one SVG polyline/polygon 'points' string."""
	values = [round_half_away(float(token)) for token in SVG_FLOAT_PATTERN.findall(str(points_text or ""))]
	if len(values) % 2:
		logger.warning("polyline points have a dangling coordinate %s", values[-1])
	extents = _Extents()
	for index in range(0, len(values) - 1, 2):
		extents.include(values[index], values[index + 1])
	if extents.is_empty():
		logger.warning("polyline has no points")
		return EMPTY_BOUNDS
	return extents.to_bounds()
