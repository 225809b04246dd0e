"""
segue - automatic crossfade transitions for a two-deck auto-DJ.

segue watches a host mixing engine's two decks and makes its automatic
crossfades sound mixed rather than merely faded:

- **Track selection.** Before the next queued track becomes audible, its
  tempo and key are compared with the playing track.  Tracks that are too
  far apart are skipped; half/double-time matches count as close.  After
  repeated skips the BPM tolerance can widen and the queue can be shuffled.
- **Tempo sync.** During the fade the two decks are synced, either eased
  gradually over the first three quarters of the crossfade or snapped on the
  first beat.
- **Key adjustment.** Optionally, the outgoing deck takes on the incoming
  key late in the fade.
- **Knob fades.** The coloration (quick effect) knobs sweep with the
  crossfader and the outgoing bass is tapered away.

The host is reached through a narrow parameter bus (``segue.bus``).
``segue.osc.OscBus`` bridges to a host over OSC; anything with the same
methods can stand in for it.

Minimal example:

    ```python
    import asyncio

    import segue

    async def main () -> None:
        bus = segue.OscBus(receive_port=9000, send_port=9001)
        await bus.start()

        controller = segue.TransitionController(segue.TransitionConfig(care_about_key=True), bus, segue.AsyncioTimer())
        controller.start()

        try:
            await asyncio.Event().wait()
        finally:
            controller.stop()
            await bus.stop()

    asyncio.run(main())
    ```

Package-level exports: ``TransitionConfig``, ``TransitionController``,
``OscBus``, ``AsyncioTimer``, ``load_config``.
"""

import segue.config
import segue.controller
import segue.osc
import segue.timer


TransitionConfig = segue.config.TransitionConfig
TransitionController = segue.controller.TransitionController
OscBus = segue.osc.OscBus
AsyncioTimer = segue.timer.AsyncioTimer
load_config = segue.config.load_config
