import typing

import pytest

import segue.config


class FakeBus:

	"""In-memory parameter bus and signal source for tests."""

	def __init__ (self, subscribable: bool = True) -> None:

		"""Start with every control at 0.0."""

		self.values: typing.Dict[typing.Tuple[str, str], float] = {}
		self.writes: typing.List[typing.Tuple[str, str, float]] = []
		self.triggers: typing.List[typing.Tuple[str, str]] = []
		self.handlers: typing.Dict[typing.Tuple[str, str], typing.Callable[[float], typing.Any]] = {}
		self.subscribable = subscribable
		self.unsubscribe_result = True


	def get_param (self, group: str, control: str) -> float:

		"""Return the stored value, 0.0 if never set."""

		return self.values.get((group, control), 0.0)


	def set_param (self, group: str, control: str, value: float) -> None:

		"""Store and record a write."""

		self.values[(group, control)] = value
		self.writes.append((group, control, value))


	def trigger (self, group: str, control: str) -> None:

		"""Record a momentary press, leaving the control at 0.0."""

		self.set_param(group, control, 1.0)
		self.set_param(group, control, 0.0)
		self.triggers.append((group, control))


	def subscribe (self, group: str, control: str, handler: typing.Callable[[float], typing.Any]) -> typing.Optional[typing.Tuple[str, str]]:

		"""Register a handler, or fail when not subscribable."""

		if not self.subscribable:
			return None

		self.handlers[(group, control)] = handler
		return (group, control)


	def unsubscribe (self, handle: typing.Tuple[str, str]) -> bool:

		"""Drop a handler and report the configured result."""

		self.handlers.pop(handle, None)
		return self.unsubscribe_result


	def emit (self, group: str, control: str, value: float) -> None:

		"""Simulate the host changing a control."""

		self.values[(group, control)] = value
		handler = self.handlers.get((group, control))

		if handler is not None:
			handler(value)


	def set_deck (self, group: str, **values: float) -> None:

		"""Set several controls on one deck without recording writes."""

		for control, value in values.items():
			self.values[(group, control)] = float(value)


	def last (self, group: str, control: str) -> typing.Optional[float]:

		"""Return the most recent value written to a control, or None."""

		for write_group, write_control, value in reversed(self.writes):
			if (write_group, write_control) == (group, control):
				return value

		return None


	def written (self, group: str, control: str) -> typing.List[float]:

		"""Return every value written to a control, in order."""

		return [value for g, c, value in self.writes if (g, c) == (group, control)]


	def clear_writes (self) -> None:

		"""Forget recorded writes and triggers."""

		self.writes = []
		self.triggers = []


class FakeTimer:

	"""Timer that only fires when the test says so."""

	def __init__ (self) -> None:

		"""Start with no scheduled callbacks."""

		self.scheduled: typing.Dict[int, typing.Tuple[int, typing.Callable[[], typing.Any]]] = {}
		self.cancelled: typing.List[int] = []
		self._next_handle = 1


	def schedule_repeating (self, interval_ms: int, callback: typing.Callable[[], typing.Any]) -> int:

		"""Remember the callback and return an integer handle."""

		handle = self._next_handle
		self._next_handle += 1
		self.scheduled[handle] = (interval_ms, callback)
		return handle


	def cancel (self, handle: int) -> None:

		"""Forget a callback."""

		self.scheduled.pop(handle, None)
		self.cancelled.append(handle)


	def fire (self, times: int = 1) -> None:

		"""Run every scheduled callback ``times`` times."""

		for _ in range(times):
			for _, callback in list(self.scheduled.values()):
				callback()


@pytest.fixture
def bus () -> FakeBus:

	"""A fresh fake bus with two empty decks."""

	return FakeBus()


@pytest.fixture
def timer () -> FakeTimer:

	"""A fresh manually fired timer."""

	return FakeTimer()


def _make_config (**overrides: typing.Any) -> segue.config.TransitionConfig:

	"""Build a config with selection running on every tick unless overridden."""

	values: typing.Dict[str, typing.Any] = {
		"refine_duration_ms": 200,
		"tick_interval_ms": 200,
	}
	values.update(overrides)

	return segue.config.TransitionConfig(**values)


@pytest.fixture
def make_config () -> typing.Callable[..., segue.config.TransitionConfig]:

	"""Factory for configs that run selection on every tick unless overridden."""

	return _make_config
