"""Small shared helpers for integer geometry and id bookkeeping."""

# Standard Library
import math


#============================================
def round_half_away(value: float) -> int:
	"""Round to the nearest integer, halves away from zero."""
	magnitude = math.floor(abs(value) + 0.5)
	return int(-magnitude if value < 0 else magnitude)


#============================================
def midpoint_floor(value_a: int, value_b: int) -> int:
	"""Return floor of the midpoint between two integers."""
	return (value_a + value_b) // 2


#============================================
def strictly_increasing(values) -> bool:
	"""Return True when every value is larger than the one before it."""
	return all(later > earlier for earlier, later in zip(values, values[1:]))


#============================================
def contains_strict(box: tuple[int, int, int, int], x: int, y: int) -> bool:
	"""Return True when (x, y) lies strictly inside one (x, y, width, height) box."""
	left, top, width, height = box
	return left < x < left + width and top < y < top + height


#============================================
class IdTable:
	"""Dense integer surrogates for the string ids found in one document."""

	def __init__(self):
		self._ids: list[str] = []

	def register(self, external_id: str) -> int:
		"""Store one external id and return its fresh integer handle."""
		self._ids.append(str(external_id))
		return len(self._ids) - 1

	def lookup(self, handle: int) -> str:
		"""Return the external id for one integer handle."""
		return self._ids[handle]

	def snapshot(self) -> tuple[str, ...]:
		"""Return the current ids as an immutable tuple."""
		return tuple(self._ids)

	def __len__(self) -> int:
		return len(self._ids)
