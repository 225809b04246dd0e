"""OSC bridge to the host mixing engine.

Start the bus with ``await bus.start()`` before starting the controller.  The
bus listens on a UDP port (default 9000) for parameter updates pushed by the
host and sends parameter writes to a target host/port (default
127.0.0.1:9001).

Address scheme
──────────────
Every parameter is addressed as ``/<group>/<control> <float>``, using the
names in ``segue.constants.controls``, for example:

- ``/deck1/play_position 0.42``
- ``/deck2/bpm 128.0``
- ``/master/crossfader -0.3``
- ``/autodj/enabled 1.0``

The host is expected to push every control the controller reads whenever it
changes.  ``get_param`` answers from the most recent value received or
written; a control never seen reads as 0.0.
"""

import asyncio
import dataclasses
import logging
import typing

import pythonosc.dispatcher
import pythonosc.osc_server
import pythonosc.udp_client

import segue.bus


logger = logging.getLogger(__name__)


@dataclasses.dataclass (eq=False)
class Subscription:

	"""Handle returned by ``OscBus.subscribe``."""

	group: str
	control: str
	handler: segue.bus.Handler


def address (group: str, control: str) -> str:

	"""Return the OSC address for a parameter."""

	return f"/{group}/{control}"


def parse_address (osc_address: str) -> typing.Optional[typing.Tuple[str, str]]:

	"""Split ``/<group>/<control>`` into its parts, or return None."""

	parts = osc_address.strip("/").split("/")

	if len(parts) != 2 or not all(parts):
		return None

	return parts[0], parts[1]


class OscBus:

	"""Parameter bus and signal source over OSC."""

	def __init__ (
		self,
		receive_port: int = 9000,
		send_port: int = 9001,
		send_host: str = "127.0.0.1",
		receive_host: str = "0.0.0.0"
	) -> None:

		self._receive_host = receive_host
		self._receive_port = receive_port
		self._send_port = send_port
		self._send_host = send_host

		self._values: typing.Dict[typing.Tuple[str, str], float] = {}
		self._subscriptions: typing.List[Subscription] = []

		self._server: typing.Optional[typing.Any] = None
		self._transport: typing.Optional[asyncio.BaseTransport] = None
		self._client: typing.Optional[pythonosc.udp_client.SimpleUDPClient] = None
		self._dispatcher = pythonosc.dispatcher.Dispatcher()
		self._dispatcher.set_default_handler(self._handle_message)


	@property
	def started (self) -> bool:

		"""True while the server is listening."""

		return self._transport is not None


	@property
	def receive_port (self) -> int:

		"""The UDP port actually listened on (useful when bound to port 0)."""

		if self._transport is not None:
			return int(self._transport.get_extra_info("sockname")[1])

		return self._receive_port


	async def start (self) -> None:

		"""Start the OSC server and client."""

		# client for sending
		self._client = pythonosc.udp_client.SimpleUDPClient(self._send_host, self._send_port)

		# server for receiving
		self._server = pythonosc.osc_server.AsyncIOOSCUDPServer(
			(self._receive_host, self._receive_port),
			self._dispatcher,
			asyncio.get_running_loop()  # type: ignore[arg-type]
		)

		transport, _ = await self._server.create_serve_endpoint()
		self._transport = transport

		logger.info(f"OSC bus listening on :{self.receive_port}, sending to {self._send_host}:{self._send_port}")


	async def stop (self) -> None:

		"""Stop the OSC server."""

		if self._transport:
			self._transport.close()
			self._transport = None
			logger.info("OSC bus stopped")

		self._client = None


	def get_param (self, group: str, control: str) -> float:

		"""Return the last known value of a control."""

		return self._values.get((group, control), 0.0)


	def set_param (self, group: str, control: str, value: float) -> None:

		"""Record a value and send it to the host."""

		self._values[(group, control)] = float(value)
		self._send(address(group, control), float(value))


	def trigger (self, group: str, control: str) -> None:

		"""Press a momentary control."""

		self.set_param(group, control, 1.0)
		self.set_param(group, control, 0.0)


	def subscribe (self, group: str, control: str, handler: segue.bus.Handler) -> typing.Optional[Subscription]:

		"""Call ``handler(value)`` for every update of a control pushed by the host.

		Returns None when the bus has not been started, since no update could
		ever arrive.
		"""

		if not self.started:
			return None

		subscription = Subscription(group, control, handler)
		self._subscriptions.append(subscription)

		return subscription


	def unsubscribe (self, handle: Subscription) -> bool:

		"""Remove a subscription. Returns False if it was not active."""

		if handle not in self._subscriptions:
			return False

		self._subscriptions.remove(handle)

		return True


	def _send (self, osc_address: str, value: float) -> None:

		if self._client:
			try:
				self._client.send_message(osc_address, value)
			except Exception as e:
				logger.warning(f"OSC send error: {e}")


	def _handle_message (self, osc_address: str, *args: typing.Any) -> None:

		parsed = parse_address(osc_address)

		if parsed is None:
			logger.warning(f"Ignoring OSC message with unexpected address: {osc_address}")
			return

		if not args:
			logger.warning(f"Ignoring OSC message without a value: {osc_address}")
			return

		try:
			value = float(args[0])
		except (ValueError, TypeError):
			logger.warning(f"Invalid OSC value for {osc_address}: {args[0]!r}")
			return

		self._values[parsed] = value

		for subscription in list(self._subscriptions):
			if (subscription.group, subscription.control) == parsed:
				try:
					subscription.handler(value)
				except Exception:
					logger.exception(f"Subscriber for {osc_address} failed")
