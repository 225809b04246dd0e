import dataclasses

import segue.config


@dataclasses.dataclass
class TransitionState:

	"""
	Mutable state carried from one controller tick to the next.

	Attributes:
		bpm_tolerance: Largest tempo distance currently accepted.  Never above
			the configured ``max_bpm_adjustment``.
		syncing: Tempo sync is engaged for the current transition.
		skip_count: Skips since the tolerance was last widened or the queue
			shuffled.
		refine_wait: Selection ticks waited since the last selection pass.
		fading: The previous tick handled a fade in progress.
	"""

	bpm_tolerance: float
	syncing: bool = False
	skip_count: int = 0
	refine_wait: int = 0
	fading: bool = False


	@classmethod
	def initial (cls, config: segue.config.TransitionConfig) -> "TransitionState":

		"""Return idle state for a freshly started controller."""

		return cls(bpm_tolerance=config.initial_bpm_tolerance)
