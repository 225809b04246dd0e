"""Snapshots of deck state and the leading/incoming role assignment."""

import dataclasses
import typing

import segue.bus
import segue.constants.controls


@dataclasses.dataclass (frozen=True)
class DeckState:

	"""
	Values read from one deck during a single tick.
	"""

	group: str
	bpm: float = 0.0
	live_bpm: float = 0.0
	key: int = 0
	position: float = 0.0
	playing: bool = False
	beat_active: bool = False


def read_deck (bus: segue.bus.ParamBus, group: str) -> DeckState:

	"""Read every control the transition logic needs from one deck."""

	return DeckState(
		group = group,
		bpm = bus.get_param(group, segue.constants.controls.BPM),
		live_bpm = bus.get_param(group, segue.constants.controls.LIVE_BPM),
		key = int(bus.get_param(group, segue.constants.controls.KEY)),
		position = bus.get_param(group, segue.constants.controls.PLAY_POSITION),
		playing = bool(bus.get_param(group, segue.constants.controls.PLAYING)),
		beat_active = bool(bus.get_param(group, segue.constants.controls.BEAT_ACTIVE))
	)


def assign_roles (position_1: float, position_2: float) -> typing.Tuple[str, str]:

	"""Return ``(leading, incoming)`` deck groups from the two play positions.

	The deck further into its track is leading.  On a tie deck 1 leads.
	"""

	if position_1 < position_2:
		return segue.constants.controls.DECK_2, segue.constants.controls.DECK_1

	return segue.constants.controls.DECK_1, segue.constants.controls.DECK_2
