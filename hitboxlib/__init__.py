"""Point-to-element hitbox index for Verovio-rendered score pages."""

from hitboxlib.builder import BuildResult, StructureError, build_spatial_index
from hitboxlib.config import DEFAULT_CONFIG, HitboxConfig
from hitboxlib.hitbox_manager import HitboxManager
from hitboxlib.spatial_index import SpatialIndex

__all__ = [
	"BuildResult",
	"DEFAULT_CONFIG",
	"HitboxConfig",
	"HitboxManager",
	"SpatialIndex",
	"StructureError",
	"build_spatial_index",
]
