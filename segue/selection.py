"""Accept or skip the track queued on the incoming deck.

Selection works by trial and error: the queue manager loads its next track,
and if the tempo or key does not fit the playing track, the controller asks
for the next one.  This keeps the queue's own ordering and source settings
untouched.

After ``skips_till_surrender`` skips in a row the search gives a little:
with adaptive search the BPM tolerance widens by a quarter of the maximum,
and with ``shuffle_after_skip`` the queue is reshuffled so tracks stuck
behind unsuitable ones come up.

Tracks that have not been analysed yet are handled as follows:

- incoming BPM of zero or less: skipped;
- leading BPM of zero or less (nothing to match against): the BPM test passes;
- incoming key unset with key matching on: skipped;
- leading key unset: the key test passes.
"""

import dataclasses
import logging
import typing

import segue.bpm
import segue.bus
import segue.config
import segue.constants
import segue.constants.controls
import segue.decks
import segue.event_emitter
import segue.harmony
import segue.state


logger = logging.getLogger(__name__)


# Margin for float drift when comparing the adaptive tolerance to the maximum.
TOLERANCE_EPSILON = 0.1


@dataclasses.dataclass (frozen=True)
class Verdict:

	"""
	The outcome of evaluating one candidate track.

	Attributes:
		accepted: True if the track may play.
		reason: Why the track was rejected (``"bpm"``, ``"key"``,
			``"unanalysed"``), empty when accepted.
		distance: Tempo distance to the leading track, when both were known.
	"""

	accepted: bool
	reason: str = ""
	distance: typing.Optional[segue.bpm.BpmDistance] = None


def evaluate (
	config: segue.config.TransitionConfig,
	bpm_tolerance: float,
	leading: segue.decks.DeckState,
	incoming: segue.decks.DeckState
) -> Verdict:

	"""Decide whether the incoming track fits the leading one.

	A track is rejected when its effective tempo distance is strictly greater
	than ``bpm_tolerance``; a distance equal to the tolerance is accepted.
	"""

	if incoming.bpm <= 0:
		return Verdict(accepted=False, reason="unanalysed")

	distance: typing.Optional[segue.bpm.BpmDistance] = None

	if leading.bpm > 0:
		distance = segue.bpm.distance(leading.bpm, incoming.bpm)

		if distance.effective > bpm_tolerance:
			return Verdict(accepted=False, reason="bpm", distance=distance)

	if config.care_about_key and segue.harmony.is_valid_key(leading.key):
		if not segue.harmony.is_compatible(leading.key, incoming.key):
			return Verdict(accepted=False, reason="key", distance=distance)

	return Verdict(accepted=True, distance=distance)


def preload_bpm (config: segue.config.TransitionConfig, leading: segue.decks.DeckState, incoming: segue.decks.DeckState) -> float:

	"""Return the tempo the incoming deck should be loaded at.

	With gradual sync the incoming track starts at the leading track's tempo
	(halved or doubled for a half/double-time match) and the leading deck is
	eased toward it during the fade.  Otherwise it plays at its own tempo.
	"""

	if config.gradual_sync and leading.bpm > 0:
		return segue.bpm.align(incoming.bpm, leading.bpm)

	return incoming.bpm


class TrackSelector:

	"""
	Applies accept/skip verdicts to the decks and the queue.
	"""

	def __init__ (
		self,
		config: segue.config.TransitionConfig,
		bus: segue.bus.ParamBus,
		events: typing.Optional[segue.event_emitter.EventEmitter] = None
	) -> None:

		self.config = config
		self.bus = bus
		self.events = events or segue.event_emitter.EventEmitter()


	def refine (
		self,
		state: segue.state.TransitionState,
		leading: segue.decks.DeckState,
		incoming: segue.decks.DeckState
	) -> Verdict:

		"""Run one selection pass and return its verdict."""

		if self.config.gradual_sync and leading.bpm > 0:
			# Drop any residual time-stretch left over from the last fade.
			self.bus.set_param(leading.group, segue.constants.controls.LIVE_BPM, leading.bpm)

		verdict = evaluate(self.config, state.bpm_tolerance, leading, incoming)

		if verdict.accepted:
			self._accept(state, leading, incoming)
		else:
			self._skip(state, incoming, verdict)

		return verdict


	def _skip (self, state: segue.state.TransitionState, incoming: segue.decks.DeckState, verdict: Verdict) -> None:

		self.bus.trigger(segue.constants.controls.AUTODJ, segue.constants.controls.SKIP_NEXT)
		state.skip_count += 1

		logger.info(
			f"Skipped track on {incoming.group} ({verdict.reason}): "
			f"{incoming.bpm:.1f} BPM, key {segue.harmony.key_name(incoming.key)}; "
			f"skip {state.skip_count}/{self.config.skips_till_surrender}"
		)
		self.events.emit("skip", incoming.group, verdict.reason)

		if state.skip_count < self.config.skips_till_surrender:
			return

		state.skip_count = 0

		if self.config.adaptive_bpm_search and state.bpm_tolerance < self.config.max_bpm_adjustment - TOLERANCE_EPSILON:
			state.bpm_tolerance = min(
				self.config.max_bpm_adjustment,
				state.bpm_tolerance + self.config.adaptive_bpm_step
			)
			logger.info(f"BPM tolerance widened to {state.bpm_tolerance:.2f}")
			self.events.emit("tolerance", state.bpm_tolerance)

		if self.config.shuffle_after_skip:
			self.bus.trigger(segue.constants.controls.AUTODJ, segue.constants.controls.SHUFFLE_PLAYLIST)
			logger.info("Queue shuffled")
			self.events.emit("shuffle")


	def _accept (self, state: segue.state.TransitionState, leading: segue.decks.DeckState, incoming: segue.decks.DeckState) -> None:

		state.skip_count = 0

		if self.config.low_change_rate > 0:
			for group in (leading.group, incoming.group):
				self.bus.set_param(group, segue.constants.controls.LOW_FILTER, segue.constants.KNOB_MAX)

		if self.config.adaptive_bpm_search and state.bpm_tolerance != self.config.adaptive_bpm_step:
			state.bpm_tolerance = self.config.adaptive_bpm_step
			logger.debug(f"BPM tolerance restarted at {state.bpm_tolerance:.2f}")
			self.events.emit("tolerance", state.bpm_tolerance)

		# Written on every pass, not only the first, to correct drift.
		self.bus.set_param(incoming.group, segue.constants.controls.LIVE_BPM, preload_bpm(self.config, leading, incoming))

		logger.debug(f"Accepted track on {incoming.group}: {incoming.bpm:.1f} BPM, key {segue.harmony.key_name(incoming.key)}")
		self.events.emit("accept", leading.group, incoming.group)
