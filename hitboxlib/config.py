"""Tuning values threaded through one hitbox build."""

# Standard Library
import dataclasses


#============================================
@dataclasses.dataclass(frozen=True)
class HitboxConfig:
	"""Immutable build settings; all lengths are in 1/10 px units."""
	# Verovio draws every glyph symbol inside a 1000x1000 viewport
	symbol_viewport_size: int = 1000
	# padding below the bottom staff that closes the last row
	lowest_staff_margin: int = 40
	# extra tap width for narrow key signature accidentals
	key_accid_extra_width: int = 80
	# accidental right edge reaches this far into its notehead
	accid_note_overlap: int = 1
	# "px" suffix on use-tag width/height
	unit_suffix_length: int = 2
	expected_symbol_transform: str = "scale(1,-1)"

	def validate(self) -> None:
		"""Raise ValueError when one setting cannot produce a usable index."""
		if self.symbol_viewport_size <= 0:
			raise ValueError(f"symbol_viewport_size must be positive, got {self.symbol_viewport_size}")
		for name in ("lowest_staff_margin", "key_accid_extra_width", "accid_note_overlap", "unit_suffix_length"):
			value = getattr(self, name)
			if value < 0:
				raise ValueError(f"{name} must be non-negative, got {value}")


DEFAULT_CONFIG = HitboxConfig()
