"""Tempo synchronisation during a fade.

The machine has two states, idle and syncing, stored in
``TransitionState.syncing``.  Sync engages while the fade is in its first
three quarters and is released once progress passes 0.75, which leaves at
least one tick for the release before the incoming track takes over.

In gradual mode the incoming deck follows and the leading deck is master, and
the leading deck's tempo is eased toward the incoming track a little every
tick.  Follower sync mode is always written before master: writing master
first makes the host snap tempo immediately.

In snap mode sync engages on the first beat of the leading deck, with the
roles swapped, as a single momentary sync press.
"""

import logging
import typing

import segue.bpm
import segue.bus
import segue.config
import segue.constants
import segue.constants.controls
import segue.decks
import segue.event_emitter
import segue.state


logger = logging.getLogger(__name__)


# Fraction of the remaining distance covered per tick, scaled by progress.
NUDGE_FACTOR = 0.25


def nudge_target (live_bpm: float, desired_bpm: float, progress: float) -> float:

	"""Return the next live tempo on the way from ``live_bpm`` to ``desired_bpm``.

	Steps are small at the start of the fade and shrink again as the gap
	closes, so the approach starts and ends slowly.
	"""

	return live_bpm + NUDGE_FACTOR * progress * (desired_bpm - live_bpm)


class SyncStateMachine:

	"""
	Engages, drives and releases tempo sync between the two decks.
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


	def update (
		self,
		state: segue.state.TransitionState,
		progress: float,
		leading: segue.decks.DeckState,
		incoming: segue.decks.DeckState
	) -> None:

		"""Advance the machine by one fade tick."""

		if progress > segue.constants.SYNC_RELEASE_PROGRESS and state.syncing:
			self._release(state, leading, incoming)

		elif progress < segue.constants.SYNC_RELEASE_PROGRESS and not state.syncing:
			self._engage(state, leading, incoming)

		if self.config.gradual_sync and state.syncing:
			self._nudge(progress, leading, incoming)


	def reset (self, state: segue.state.TransitionState) -> None:

		"""Force the machine idle and clear sync mode on both decks.

		Used when a fade ends before sync was released, so the next track
		loads into a deck that is not still following the other one.
		"""

		state.syncing = False

		for group in segue.constants.controls.DECKS:
			self.bus.set_param(group, segue.constants.controls.SYNC_MODE, segue.constants.controls.SYNC_MODE_NONE)

		logger.info("Transition aborted while syncing; sync cleared on both decks")
		self.events.emit("sync_reset")


	def _engage (self, state: segue.state.TransitionState, leading: segue.decks.DeckState, incoming: segue.decks.DeckState) -> None:

		if self.config.bpm_sync_fade:
			follower, master = incoming.group, leading.group

			self.bus.set_param(follower, segue.constants.controls.SYNC_MODE, segue.constants.controls.SYNC_MODE_FOLLOWER)
			self.bus.set_param(master, segue.constants.controls.SYNC_MODE, segue.constants.controls.SYNC_MODE_MASTER)
			self.bus.set_param(follower, segue.constants.controls.SYNC_ENABLED, 1.0)

		elif leading.beat_active:
			follower, master = leading.group, incoming.group

			self.bus.set_param(follower, segue.constants.controls.SYNC_MODE, segue.constants.controls.SYNC_MODE_FOLLOWER)
			self.bus.set_param(master, segue.constants.controls.SYNC_MODE, segue.constants.controls.SYNC_MODE_MASTER)
			self.bus.trigger(follower, segue.constants.controls.SYNC_ENABLED)

		else:
			return

		state.syncing = True
		logger.info(f"Sync engaged: {follower} follows {master}")
		self.events.emit("sync_engaged", follower, master)


	def _release (self, state: segue.state.TransitionState, leading: segue.decks.DeckState, incoming: segue.decks.DeckState) -> None:

		follower = incoming.group if self.config.bpm_sync_fade else leading.group

		state.syncing = False
		self.bus.trigger(follower, segue.constants.controls.SYNC_ENABLED)

		logger.info(f"Sync released on {follower}")
		self.events.emit("sync_released", follower)


	def _nudge (self, progress: float, leading: segue.decks.DeckState, incoming: segue.decks.DeckState) -> None:

		if leading.bpm <= 0 or incoming.bpm <= 0 or leading.live_bpm <= 0:
			logger.debug("Tempo nudge skipped: a deck has no tempo")
			return

		desired = segue.bpm.align(leading.bpm, incoming.bpm)
		target = nudge_target(leading.live_bpm, desired, progress)

		logger.debug(f"Nudging {leading.group} from {leading.live_bpm:.2f} toward {desired:.2f}: {target:.2f}")
		self.bus.set_param(leading.group, segue.constants.controls.LIVE_BPM, target)
