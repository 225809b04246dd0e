"""Tempo distance between two tracks.

Besides the direct difference, two tracks can be beat-matched by playing two
beats of the slower one against one beat of the faster one.  The *doubled
distance* measures how far apart they are after doubling the slower tempo.
"""

import dataclasses


@dataclasses.dataclass (frozen=True)
class BpmDistance:

	"""Direct and half/double-time distance between two tempos."""

	direct: float
	doubled: float

	@property
	def effective (self) -> float:

		"""The smaller of the two distances."""

		return min(self.direct, self.doubled)

	@property
	def prefers_doubled (self) -> bool:

		"""True when matching half/double time is closer than matching directly."""

		return self.doubled < self.direct


def distance (bpm_a: float, bpm_b: float) -> BpmDistance:

	"""Compute the direct and doubled distance between two tempos.

	The result is symmetric in its arguments.
	"""

	slow, fast = sorted((bpm_a, bpm_b))

	return BpmDistance(
		direct = fast - slow,
		doubled = abs(2 * slow - fast)
	)


def align (reference: float, other: float) -> float:

	"""Return ``other`` scaled into the tempo range of ``reference``.

	When half/double time is the closer match, ``other`` is doubled if it is
	the slower tempo and halved otherwise.  When the direct match is closer,
	``other`` is returned unchanged.

	Example:
		```python
		align(120, 65)    # 130.0 - a 65 BPM track sits on every other beat
		align(65, 120)    # 60.0
		align(128, 140)   # 140
		```
	"""

	if not distance(reference, other).prefers_doubled:
		return other

	if other < reference:
		return other * 2

	return other / 2
