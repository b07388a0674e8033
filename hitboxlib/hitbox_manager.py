"""Stateful front end: build once per page, then answer point queries."""

# Standard Library
import logging

from hitboxlib.builder import BuildResult, build_spatial_index
from hitboxlib.config import DEFAULT_CONFIG, HitboxConfig
from hitboxlib.diagnostic_svg import build_hitbox_svg
from hitboxlib.spatial_index import SpatialIndex

logger = logging.getLogger(__name__)


#============================================
class HitboxManager:
	"""Holds the index of the page currently on screen.

	`init_hitboxes` builds into fresh structures and only installs the
	result when the build succeeds; a failed build leaves the manager not
	ready. Queries on a manager that is not ready return empty results.
	"""

	def __init__(self, config: HitboxConfig | None = None):
		self.config = config or DEFAULT_CONFIG
		self._index: SpatialIndex | None = None
		self._hitbox_svg = ""

	@property
	def ready(self) -> bool:
		"""True once a page has been indexed successfully."""
		return self._index is not None

	@property
	def index(self) -> SpatialIndex | None:
		"""The installed index, or None when not ready."""
		return self._index

	def init_hitboxes(self, svg_text) -> BuildResult:
		"""Replace the current index with one built from a new page."""
		result = build_spatial_index(svg_text, self.config)
		if not result.ok:
			logger.warning("hitbox index not ready: %s", result.error)
			self._index = None
			self._hitbox_svg = ""
			return result
		overlay = build_hitbox_svg(result.index)
		self._index = result.index
		self._hitbox_svg = overlay
		return result

	def hitbox_svg(self) -> str:
		"""Return the debug overlay of the current index ('' when not ready)."""
		return self._hitbox_svg

	def group_bounds(self, x: int, y: int) -> tuple[int, int, int, int] | None:
		"""Return the cell rectangle under a point, None when not ready."""
		if self._index is None:
			return None
		return self._index.group_bounds(x, y)

	def element_at(self, x: int, y: int) -> str:
		"""Return the element id under a point, '' when not ready."""
		if self._index is None:
			return ""
		return self._index.element_at(x, y)

	def group_id_at(self, x: int, y: int) -> str:
		"""Return the cluster label under a point, '' when not ready."""
		if self._index is None:
			return ""
		return self._index.group_id_at(x, y)

	def children_at(self, x: int, y: int) -> list[str]:
		"""Return the hitbox ids of the cell under a point, [] when not ready."""
		if self._index is None:
			return []
		return self._index.children_at(x, y)
