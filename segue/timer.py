"""Repeating timer on the asyncio event loop.

Each repeating callback gets its own task.  The task calls the callback,
then sleeps until the next deadline, so one callback never overlaps itself.
Deadlines advance from the loop's start time rather than from the end of the
previous call, so a slow tick does not make the schedule drift.
"""

import asyncio
import logging
import time
import typing

import segue.bus


logger = logging.getLogger(__name__)


class AsyncioTimer:

	"""
	``segue.bus.Timer`` backed by asyncio tasks.

	Must be used from inside a running event loop.
	"""

	def __init__ (self) -> None:

		self._tasks: typing.Set[asyncio.Task] = set()


	def schedule_repeating (self, interval_ms: int, callback: segue.bus.TickCallback) -> asyncio.Task:

		"""Call ``callback`` every ``interval_ms`` milliseconds, starting now."""

		if interval_ms <= 0:
			raise ValueError(f"interval_ms must be > 0, got {interval_ms}")

		task = asyncio.get_running_loop().create_task(self._run(interval_ms / 1000.0, callback))
		self._tasks.add(task)
		task.add_done_callback(self._tasks.discard)

		return task


	def cancel (self, handle: asyncio.Task) -> None:

		"""Stop a repeating callback. Cancelling twice is harmless."""

		handle.cancel()


	def cancel_all (self) -> None:

		"""Stop every repeating callback started by this timer."""

		for task in list(self._tasks):
			task.cancel()


	@property
	def active (self) -> int:

		"""Number of repeating callbacks still running."""

		return sum(1 for task in self._tasks if not task.done())


	async def _run (self, interval: float, callback: segue.bus.TickCallback) -> None:

		next_time = time.perf_counter()

		while True:

			try:
				callback()
			except Exception:
				logger.exception("Timer callback failed")

			next_time += interval
			sleep_time = next_time - time.perf_counter()

			if sleep_time < 0:
				# Fell behind; skip the missed deadlines instead of bursting.
				missed = int(-sleep_time // interval) + 1
				next_time += missed * interval
				sleep_time = next_time - time.perf_counter()

			await asyncio.sleep(max(0.0, sleep_time))
