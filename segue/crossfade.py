"""Map the crossfader to transition progress and derived knob values.

The raw crossfader runs from -1.0 (fully deck 1) to 1.0 (fully deck 2).
*Progress* re-expresses that as 0.0 (fully on the leading deck) to 1.0 (fully
on the incoming deck), whichever side the incoming deck is on.
"""

import typing

import segue.constants


def progress (raw: float, incoming_on_left: bool) -> float:

	"""Normalise a raw crossfader position to transition progress.

	Parameters:
		raw: Crossfader position in [-1, 1].
		incoming_on_left: True when the incoming deck is deck 1, which sits on
			the low side of the crossfader.
	"""

	value = (raw + 1.0) / 2.0

	if incoming_on_left:
		value = 1.0 - value

	return min(1.0, max(0.0, value))


def coloration (progress: float, fade_range: float) -> typing.Tuple[float, float]:

	"""Return the ``(fade_out, fade_in)`` coloration knob values at ``progress``.

	``fade_out`` moves from 0.5 down to ``0.5 - fade_range / 2`` and
	``fade_in`` moves from ``0.5 + fade_range / 2`` down to 0.5.  A range of
	0.0 leaves both knobs neutral; 1.0 sweeps the whole knob.
	"""

	swept = progress * fade_range
	fade_out = segue.constants.KNOB_NEUTRAL - swept / 2.0
	fade_in = fade_out + fade_range / 2.0

	return fade_out, fade_in


def coloration_for_roles (progress: float, fade_range: float, reverse: bool = False) -> typing.Tuple[float, float]:

	"""Return the ``(leading, incoming)`` coloration knob values.

	Normally the leading deck fades out to the left and the incoming deck fades
	in from the right; ``reverse`` swaps the two curves.
	"""

	fade_out, fade_in = coloration(progress, fade_range)

	if reverse:
		return fade_in, fade_out

	return fade_out, fade_in


def taper_low (current: float, rate: float) -> float:

	"""Turn a low-frequency filter knob down by one step, stopping at zero."""

	return max(0.0, current - rate)
