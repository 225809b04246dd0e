import argparse
import asyncio
import logging
import signal
import typing

import segue.config
import segue.controller
import segue.osc
import segue.timer


logger = logging.getLogger(__name__)


def parse_args (argv: typing.Optional[typing.List[str]] = None) -> argparse.Namespace:

	"""
	Parse command-line options.
	"""

	parser = argparse.ArgumentParser(prog="segue", description="Automatic crossfade transitions for a two-deck auto-DJ")
	parser.add_argument("--config", default="segue.yaml", help="YAML options file (default: segue.yaml)")
	parser.add_argument("--receive-port", type=int, default=9000, help="OSC port to listen on (default: 9000)")
	parser.add_argument("--send-port", type=int, default=9001, help="OSC port of the host (default: 9001)")
	parser.add_argument("--send-host", default="127.0.0.1", help="Address of the host (default: 127.0.0.1)")
	parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level (default: INFO)")

	return parser.parse_args(argv)


async def run (config: segue.config.TransitionConfig, args: argparse.Namespace) -> None:

	"""
	Run the controller against an OSC host until SIGINT or SIGTERM.
	"""

	bus = segue.osc.OscBus(
		receive_port = args.receive_port,
		send_port = args.send_port,
		send_host = args.send_host
	)
	await bus.start()

	timer = segue.timer.AsyncioTimer()
	controller = segue.controller.TransitionController(config, bus, timer)

	stop_event = asyncio.Event()
	loop = asyncio.get_running_loop()

	def _request_stop () -> None:

		"""
		Signal handler to request a clean shutdown.
		"""

		stop_event.set()

	for sig in (signal.SIGINT, signal.SIGTERM):
		loop.add_signal_handler(sig, _request_stop)

	controller.start()
	logger.info("segue running. Press Ctrl+C to stop.")

	try:
		await stop_event.wait()
	finally:
		controller.stop()
		timer.cancel_all()
		await bus.stop()


def main (argv: typing.Optional[typing.List[str]] = None) -> None:

	"""
	Main entry point for the segue runner.
	"""

	args = parse_args(argv)

	logging.basicConfig(level=getattr(logging, args.log_level))

	config = segue.config.load_config(args.config)

	try:
		asyncio.run(run(config, args))
	except KeyboardInterrupt:
		pass


if __name__ == "__main__":
	main()
