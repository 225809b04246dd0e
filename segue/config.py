"""Transition tunables.

A ``TransitionConfig`` is built once at startup, either directly or from a
YAML file, and never changes while the controller runs.

Example ``segue.yaml``:

	```yaml
	transition:
	  max_bpm_adjustment: 8
	  care_about_key: true
	  fade_range: 0.25
	```
"""

import dataclasses
import logging
import os
import typing

import yaml


logger = logging.getLogger(__name__)


@dataclasses.dataclass (frozen=True)
class TransitionConfig:

	"""Static options for tempo sync, track selection and knob fades.

	Attributes:
		max_bpm_adjustment: Largest tempo difference (BPM) a candidate track may
			have.  Half/double-time matches are measured after doubling the
			slower track, so the raw difference can be far larger.
		bpm_sync: Sync tempo and beat phase of the two decks during a fade.
		bpm_sync_fade: Sync gradually over the first three quarters of the fade
			(True) or snap at the first beat (False).  Requires ``bpm_sync``.
		adaptive_bpm_search: Start each search at a quarter of
			``max_bpm_adjustment`` and widen by another quarter every
			``skips_till_surrender`` skips.
		shuffle_after_skip: Shuffle the queue every ``skips_till_surrender``
			skips, so tracks stuck behind unsuitable ones become reachable.
		skips_till_surrender: Skips before widening the tolerance or shuffling.
		care_about_key: Skip tracks whose key clashes with the playing track.
		adjust_key: Transplant the incoming key onto the outgoing deck late in
			the fade.
		fade_quick_effect: Fade the coloration (quick effect) knobs with the
			crossfader.
		reverse_quick_effect: Fade out to the right and in from the left
			instead.
		fade_range: How far the coloration knobs turn, 0.0 to 1.0.
		low_change_rate: How far the outgoing low knob turns down each tick
			while fading, 0.0 (never) to 1.0 (at once).
		refine_duration_ms: Minimum time between two track selection passes.
		tick_interval_ms: Interval between controller ticks.
	"""

	max_bpm_adjustment: float = 12.0
	bpm_sync: bool = True
	bpm_sync_fade: bool = True
	adaptive_bpm_search: bool = False
	shuffle_after_skip: bool = False
	skips_till_surrender: int = 24
	care_about_key: bool = False
	adjust_key: bool = False
	fade_quick_effect: bool = True
	reverse_quick_effect: bool = False
	fade_range: float = 0.5
	low_change_rate: float = 0.1
	refine_duration_ms: int = 500
	tick_interval_ms: int = 200


	def __post_init__ (self) -> None:

		if self.max_bpm_adjustment < 0:
			raise ValueError(f"max_bpm_adjustment must be >= 0, got {self.max_bpm_adjustment}")

		if self.skips_till_surrender < 1:
			raise ValueError(f"skips_till_surrender must be >= 1, got {self.skips_till_surrender}")

		if not 0.0 <= self.fade_range <= 1.0:
			raise ValueError(f"fade_range must be between 0.0 and 1.0, got {self.fade_range}")

		if not 0.0 <= self.low_change_rate <= 1.0:
			raise ValueError(f"low_change_rate must be between 0.0 and 1.0, got {self.low_change_rate}")

		if self.tick_interval_ms <= 0:
			raise ValueError(f"tick_interval_ms must be > 0, got {self.tick_interval_ms}")

		if self.refine_duration_ms < self.tick_interval_ms:
			raise ValueError(
				f"refine_duration_ms ({self.refine_duration_ms}) must not be smaller "
				f"than tick_interval_ms ({self.tick_interval_ms})"
			)


	@property
	def gradual_sync (self) -> bool:

		"""True when tempo is matched gradually over the fade."""

		return self.bpm_sync and self.bpm_sync_fade


	@property
	def initial_bpm_tolerance (self) -> float:

		"""Tolerance the first track search starts with."""

		if self.adaptive_bpm_search:
			return self.adaptive_bpm_step

		return self.max_bpm_adjustment


	@property
	def adaptive_bpm_step (self) -> float:

		"""Amount the adaptive tolerance grows by, and the value it restarts from."""

		return self.max_bpm_adjustment / 4


def from_dict (values: typing.Dict[str, typing.Any]) -> TransitionConfig:

	"""Build a config from a plain mapping, rejecting unknown option names."""

	known = {field.name for field in dataclasses.fields(TransitionConfig)}
	unknown = sorted(set(values) - known)

	if unknown:
		raise ValueError(f"Unknown transition options: {', '.join(unknown)}")

	return TransitionConfig(**values)


def load_config (config_path: str = 'segue.yaml') -> TransitionConfig:

	"""
	Load transition options from the ``transition`` section of a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return TransitionConfig()

	with open(config_path, 'r') as f:
		document = yaml.safe_load(f) or {}

	if not isinstance(document, dict):
		raise ValueError(f"Config file {config_path} must contain a mapping")

	section = document.get('transition') or {}

	if not isinstance(section, dict):
		raise ValueError(f"'transition' in {config_path} must be a mapping")

	config = from_dict(section)
	logger.info(f"Loaded transition options from {config_path}")

	return config
