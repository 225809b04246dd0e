"""Notifications about transition decisions.

The controller announces what it did through an ``EventEmitter``, so a runner
can log, display or forward decisions without the engines knowing about it.

Events and their arguments:

- ``accept`` (leading, incoming): the queued track was accepted
- ``skip`` (incoming, reason): the queued track was skipped
- ``shuffle`` (): the queue was shuffled after too many skips
- ``tolerance`` (bpm_tolerance): the adaptive BPM tolerance changed
- ``sync_engaged`` (follower, master): tempo sync started
- ``sync_released`` (follower): tempo sync ended at the release point
- ``sync_reset`` (): sync was cleared after an aborted transition
- ``enabled`` (bool): the control loop was started or stopped
"""

import inspect
import logging
import typing


logger = logging.getLogger(__name__)


CallbackType = typing.Callable[..., typing.Any]


class EventEmitter:

	"""
	Named events with synchronous listeners.
	"""

	def __init__ (self) -> None:

		self._listeners: typing.Dict[str, typing.List[CallbackType]] = {}


	def on (self, event_name: str, callback: CallbackType) -> None:

		"""
		Register a callback for an event name.

		Coroutine functions are rejected, because events fire from inside a
		synchronous controller tick.
		"""

		if inspect.iscoroutinefunction(callback):
			raise ValueError(f"Async callbacks are not supported for event {event_name!r}")

		self._listeners.setdefault(event_name, []).append(callback)


	def off (self, event_name: str, callback: CallbackType) -> None:

		"""
		Unregister a previously registered callback.

		Raises ``ValueError`` if the callback is not registered for the event.
		"""

		if callback not in self._listeners.get(event_name, []):
			raise ValueError(f"Callback not registered for event {event_name!r}")

		self._listeners[event_name].remove(callback)


	def emit (self, event_name: str, *args: typing.Any) -> None:

		"""
		Call every listener for an event.

		A failing listener is logged and does not stop the others, or the tick
		that emitted the event.
		"""

		for callback in list(self._listeners.get(event_name, [])):

			try:
				callback(*args)
			except Exception:
				logger.exception(f"Listener for {event_name!r} failed")
