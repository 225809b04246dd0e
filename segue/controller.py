"""The periodic transition controller.

The host offers no events for "a fade started" or "a track was queued", so
the controller polls deck state on a fixed interval and works out the phase
each tick:

- **Fading** - the incoming deck is playing and has moved past its start:
  taper the outgoing bass, drive tempo sync, transplant the key late in the
  fade and sweep the coloration knobs with the crossfader.
- **Selecting** - the incoming deck is stopped: at most once per
  ``refine_duration_ms``, accept the queued track or skip it.
- Otherwise the incoming deck claims to play but has not moved yet (the host
  reports this while a track is still being analysed), and nothing is done.

The tick timer runs only while the host's auto-DJ is enabled.

Example:
	```python
	controller = segue.controller.TransitionController(config, bus, timer)
	controller.start()
	...
	controller.stop()
	```
"""

import logging
import typing

import segue.bus
import segue.config
import segue.constants
import segue.constants.controls
import segue.crossfade
import segue.decks
import segue.event_emitter
import segue.harmony
import segue.selection
import segue.state
import segue.sync


logger = logging.getLogger(__name__)


class TransitionController:

	"""
	Owns the transition state and dispatches each tick to the engines.
	"""

	def __init__ (
		self,
		config: segue.config.TransitionConfig,
		bus: segue.bus.ParamBus,
		timer: segue.bus.Timer,
		signals: typing.Optional[segue.bus.SignalSource] = None,
		events: typing.Optional[segue.event_emitter.EventEmitter] = None
	) -> None:

		"""Create an idle controller.

		Parameters:
			config: Transition options.
			bus: Host parameter access.
			timer: Runs ``tick()`` repeatedly while enabled.
			signals: Source of the auto-DJ enable signal.  Defaults to ``bus``
				when it also implements ``SignalSource``.
			events: Emitter for decision notifications.  A private one is
				created when omitted.
		"""

		if signals is None and isinstance(bus, segue.bus.SignalSource):
			signals = bus

		self.config = config
		self.bus = bus
		self.timer = timer
		self.signals = signals
		self.events = events or segue.event_emitter.EventEmitter()

		self.state = segue.state.TransitionState.initial(config)
		self.sync = segue.sync.SyncStateMachine(config, bus, self.events)
		self.selector = segue.selection.TrackSelector(config, bus, self.events)

		self._timer_handle: typing.Optional[typing.Any] = None
		self._subscription: typing.Optional[typing.Any] = None


	@property
	def running (self) -> bool:

		"""True while the tick timer is active."""

		return self._timer_handle is not None


	def start (self) -> None:

		"""Prepare the decks and follow the host's auto-DJ enable signal.

		If the signal cannot be subscribed to, the control loop runs
		continuously instead.
		"""

		self._prepare_decks()

		if self.signals is not None:
			self._subscription = self.signals.subscribe(
				segue.constants.controls.AUTODJ,
				segue.constants.controls.ENABLED,
				self._on_enabled
			)

		if self._subscription is None:
			logger.warning("Could not subscribe to the auto-DJ enable signal; running continuously")
			self._start_timer()
			return

		self._on_enabled(self.bus.get_param(segue.constants.controls.AUTODJ, segue.constants.controls.ENABLED))


	def stop (self) -> None:

		"""Unsubscribe from the enable signal and stop the tick timer."""

		if self._subscription is not None and self.signals is not None:

			if not self.signals.unsubscribe(self._subscription):
				logger.warning("Failed to unsubscribe from the auto-DJ enable signal")

			self._subscription = None

		self._stop_timer()


	def tick (self) -> None:

		"""Read both decks and run the engines for the current phase."""

		deck_1 = segue.decks.read_deck(self.bus, segue.constants.controls.DECK_1)
		deck_2 = segue.decks.read_deck(self.bus, segue.constants.controls.DECK_2)

		leading_group, _ = segue.decks.assign_roles(deck_1.position, deck_2.position)

		if leading_group == deck_1.group:
			leading, incoming = deck_1, deck_2
		else:
			leading, incoming = deck_2, deck_1

		if incoming.playing and incoming.position > 0.0:
			self._fade(leading, incoming)

		elif not incoming.playing:
			self._select(leading, incoming)

		else:
			logger.debug(f"Waiting for {incoming.group} to start moving")


	def _on_enabled (self, value: float) -> None:

		if value:
			self._start_timer()
		else:
			self._stop_timer()


	def _start_timer (self) -> None:

		if self._timer_handle is not None:
			return

		self._timer_handle = self.timer.schedule_repeating(self.config.tick_interval_ms, self.tick)

		logger.info(f"Transition control started ({self.config.tick_interval_ms} ms ticks)")
		self.events.emit("enabled", True)


	def _stop_timer (self) -> None:

		if self._timer_handle is None:
			return

		self.timer.cancel(self._timer_handle)
		self._timer_handle = None

		logger.info("Transition control stopped")
		self.events.emit("enabled", False)


	def _prepare_decks (self) -> None:

		for group in segue.constants.controls.DECKS:
			self.bus.set_param(group, segue.constants.controls.QUANTIZE, 1.0)
			self.bus.set_param(group, segue.constants.controls.KEYLOCK, 1.0)
			self.bus.set_param(group, segue.constants.controls.KEYLOCK_MODE, 0.0)

		# Both decks are assumed empty; the first track fades in on deck 1.
		self.bus.set_param(segue.constants.controls.MASTER, segue.constants.controls.CROSSFADER, -1.0)


	def _fade (self, leading: segue.decks.DeckState, incoming: segue.decks.DeckState) -> None:

		self.state.fading = True

		if self.config.low_change_rate > 0:
			low = self.bus.get_param(leading.group, segue.constants.controls.LOW_FILTER)
			self.bus.set_param(leading.group, segue.constants.controls.LOW_FILTER, segue.crossfade.taper_low(low, self.config.low_change_rate))
			self.bus.set_param(incoming.group, segue.constants.controls.LOW_FILTER, segue.constants.KNOB_MAX)

		raw = self.bus.get_param(segue.constants.controls.MASTER, segue.constants.controls.CROSSFADER)
		progress = segue.crossfade.progress(raw, incoming_on_left=incoming.group == segue.constants.controls.DECK_1)

		logger.debug(f"Fading {leading.group} -> {incoming.group}: progress {progress:.3f}")

		if self.config.bpm_sync:
			self.sync.update(self.state, progress, leading, incoming)

		# Delayed until sync is released, so the key does not jump audibly earlier.
		# An unanalysed incoming key is never copied.
		if self.config.adjust_key and progress > segue.constants.SYNC_RELEASE_PROGRESS and leading.beat_active and segue.harmony.is_valid_key(incoming.key):
			self.bus.set_param(leading.group, segue.constants.controls.KEY, float(incoming.key))

		if self.config.fade_quick_effect:
			leading_tone, incoming_tone = segue.crossfade.coloration_for_roles(
				progress,
				self.config.fade_range,
				self.config.reverse_quick_effect
			)
			self.bus.set_param(leading.group, segue.constants.controls.TONE, leading_tone)
			self.bus.set_param(incoming.group, segue.constants.controls.TONE, incoming_tone)


	def _select (self, leading: segue.decks.DeckState, incoming: segue.decks.DeckState) -> None:

		if self.state.fading:
			self.state.fading = False

			if self.state.syncing:
				self.sync.reset(self.state)

		if self.state.refine_wait * self.config.tick_interval_ms < self.config.refine_duration_ms:
			self.state.refine_wait += 1
			return

		self.state.refine_wait = 0

		if self.config.fade_quick_effect:
			# Ready for the next fade, and neutral again if the last one ended early.
			_, incoming_tone = segue.crossfade.coloration_for_roles(0.0, self.config.fade_range, self.config.reverse_quick_effect)
			self.bus.set_param(incoming.group, segue.constants.controls.TONE, incoming_tone)
			self.bus.set_param(leading.group, segue.constants.controls.TONE, segue.constants.KNOB_NEUTRAL)

		self.selector.refine(self.state, leading, incoming)
