"""Capabilities the controller needs from the host.

The controller never talks to a mixing engine directly.  It depends on three
narrow protocols, so a host bridge (``segue.osc.OscBus``), the asyncio timer
(``segue.timer.AsyncioTimer``) or a test double can stand behind them.
"""

import typing


Handler = typing.Callable[[float], typing.Any]
TickCallback = typing.Callable[[], typing.Any]


@typing.runtime_checkable
class ParamBus (typing.Protocol):

	"""
	Synchronous read/write access to host parameters.
	"""

	def get_param (self, group: str, control: str) -> float:

		"""
		Return the current value of a control.
		"""

		...


	def set_param (self, group: str, control: str, value: float) -> None:

		"""
		Write a value to a control.
		"""

		...


	def trigger (self, group: str, control: str) -> None:

		"""
		Press a momentary control: write 1.0 and then 0.0.
		"""

		...


@typing.runtime_checkable
class SignalSource (typing.Protocol):

	"""
	Change notifications for a single control.
	"""

	def subscribe (self, group: str, control: str, handler: Handler) -> typing.Optional[typing.Any]:

		"""
		Call ``handler(value)`` whenever the control changes.

		Returns a subscription handle, or None if the subscription failed.
		"""

		...


	def unsubscribe (self, handle: typing.Any) -> bool:

		"""
		Cancel a subscription. Returns False if the handle was not active.
		"""

		...


@typing.runtime_checkable
class Timer (typing.Protocol):

	"""
	Repeating callbacks on a fixed interval, never overlapping.
	"""

	def schedule_repeating (self, interval_ms: int, callback: TickCallback) -> typing.Any:

		"""
		Start calling ``callback`` every ``interval_ms`` milliseconds.
		"""

		...


	def cancel (self, handle: typing.Any) -> None:

		"""
		Stop a repeating callback.
		"""

		...
