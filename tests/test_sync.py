import typing

import pytest

import segue.constants.controls
import segue.decks
import segue.event_emitter
import segue.state
import segue.sync


DECK_1 = segue.constants.controls.DECK_1
DECK_2 = segue.constants.controls.DECK_2
SYNC_MODE = segue.constants.controls.SYNC_MODE
SYNC_ENABLED = segue.constants.controls.SYNC_ENABLED
LIVE_BPM = segue.constants.controls.LIVE_BPM


def _decks (beat_active: bool = False, leading_bpm: float = 120.0, incoming_bpm: float = 126.0) -> typing.Tuple[segue.decks.DeckState, segue.decks.DeckState]:

	leading = segue.decks.DeckState(group=DECK_1, bpm=leading_bpm, live_bpm=leading_bpm, position=0.9, playing=True, beat_active=beat_active)
	incoming = segue.decks.DeckState(group=DECK_2, bpm=incoming_bpm, live_bpm=leading_bpm, position=0.01, playing=True)

	return leading, incoming


def test_nudge_target () -> None:

	"""The target moves a quarter of the gap, scaled by progress."""

	assert segue.sync.nudge_target(120, 128, 0.0) == 120
	assert segue.sync.nudge_target(120, 128, 0.5) == pytest.approx(121)
	assert segue.sync.nudge_target(120, 128, 1.0) == pytest.approx(122)


def test_gradual_engage_sets_follower_before_master (bus, make_config) -> None:

	"""In gradual mode the incoming deck follows, written before the master."""

	machine = segue.sync.SyncStateMachine(make_config(), bus)
	state = segue.state.TransitionState(bpm_tolerance=12)
	leading, incoming = _decks()

	machine.update(state, 0.1, leading, incoming)

	assert state.syncing is True
	assert bus.writes[:3] == [
		(DECK_2, SYNC_MODE, segue.constants.controls.SYNC_MODE_FOLLOWER),
		(DECK_1, SYNC_MODE, segue.constants.controls.SYNC_MODE_MASTER),
		(DECK_2, SYNC_ENABLED, 1.0),
	]


def test_gradual_nudges_leading_tempo (bus, make_config) -> None:

	"""While syncing, the leading live tempo is eased toward the incoming tempo."""

	machine = segue.sync.SyncStateMachine(make_config(), bus)
	state = segue.state.TransitionState(bpm_tolerance=12)
	leading, incoming = _decks()

	machine.update(state, 0.4, leading, incoming)

	assert bus.last(DECK_1, LIVE_BPM) == pytest.approx(120 + 0.25 * 0.4 * 6)


def test_gradual_nudge_uses_doubled_tempo (bus, make_config) -> None:

	"""A half-time incoming track pulls the leading deck toward double its tempo."""

	machine = segue.sync.SyncStateMachine(make_config(), bus)
	state = segue.state.TransitionState(bpm_tolerance=12)
	leading, incoming = _decks(leading_bpm=120, incoming_bpm=65)

	machine.update(state, 0.4, leading, incoming)

	assert bus.last(DECK_1, LIVE_BPM) == pytest.approx(120 + 0.25 * 0.4 * (130 - 120))


def test_nudge_skipped_without_tempo (bus, make_config) -> None:

	"""An unanalysed incoming track leaves the live tempo alone."""

	machine = segue.sync.SyncStateMachine(make_config(), bus)
	state = segue.state.TransitionState(bpm_tolerance=12)
	leading, incoming = _decks(incoming_bpm=0)

	machine.update(state, 0.4, leading, incoming)

	assert state.syncing is True
	assert bus.last(DECK_1, LIVE_BPM) is None


def test_gradual_release_triggers_incoming (bus, make_config) -> None:

	"""Past 0.75 sync is released with a momentary press on the follower."""

	events = segue.event_emitter.EventEmitter()
	released: typing.List[str] = []
	events.on("sync_released", released.append)

	machine = segue.sync.SyncStateMachine(make_config(), bus, events)
	state = segue.state.TransitionState(bpm_tolerance=12, syncing=True)
	leading, incoming = _decks()

	machine.update(state, 0.8, leading, incoming)

	assert state.syncing is False
	assert bus.triggers == [(DECK_2, SYNC_ENABLED)]
	assert released == [DECK_2]
	assert bus.last(DECK_1, LIVE_BPM) is None


def test_no_double_release (bus, make_config) -> None:

	"""Once released, further ticks past 0.75 do nothing."""

	machine = segue.sync.SyncStateMachine(make_config(), bus)
	state = segue.state.TransitionState(bpm_tolerance=12)
	leading, incoming = _decks()

	for progress in (0.1, 0.5, 0.74, 0.76, 0.8, 0.9, 1.0):
		machine.update(state, progress, leading, incoming)

	assert bus.triggers == [(DECK_2, SYNC_ENABLED)]
	assert bus.written(DECK_2, SYNC_MODE) == [segue.constants.controls.SYNC_MODE_FOLLOWER]


def test_release_point_itself_is_neutral (bus, make_config) -> None:

	"""Exactly 0.75 neither engages nor releases."""

	machine = segue.sync.SyncStateMachine(make_config(), bus)
	idle = segue.state.TransitionState(bpm_tolerance=12)
	syncing = segue.state.TransitionState(bpm_tolerance=12, syncing=True)
	leading, incoming = _decks()

	machine.update(idle, 0.75, leading, incoming)
	machine.update(syncing, 0.75, leading, incoming)

	assert idle.syncing is False
	assert syncing.syncing is True
	assert bus.triggers == []


def test_no_engage_after_release_point (bus, make_config) -> None:

	"""A fade first seen past 0.75 never engages sync."""

	machine = segue.sync.SyncStateMachine(make_config(), bus)
	state = segue.state.TransitionState(bpm_tolerance=12)
	leading, incoming = _decks()

	machine.update(state, 0.9, leading, incoming)

	assert state.syncing is False
	assert bus.writes == []


def test_snap_waits_for_beat (bus, make_config) -> None:

	"""Snap mode engages only on a beat of the leading deck."""

	machine = segue.sync.SyncStateMachine(make_config(bpm_sync_fade=False), bus)
	state = segue.state.TransitionState(bpm_tolerance=12)

	leading, incoming = _decks(beat_active=False)
	machine.update(state, 0.2, leading, incoming)

	assert state.syncing is False
	assert bus.writes == []

	leading, incoming = _decks(beat_active=True)
	machine.update(state, 0.25, leading, incoming)

	assert state.syncing is True
	assert (DECK_1, SYNC_MODE, segue.constants.controls.SYNC_MODE_FOLLOWER) in bus.writes
	assert (DECK_2, SYNC_MODE, segue.constants.controls.SYNC_MODE_MASTER) in bus.writes
	assert bus.triggers == [(DECK_1, SYNC_ENABLED)]
	assert bus.last(DECK_1, LIVE_BPM) is None


def test_snap_release_triggers_leading (bus, make_config) -> None:

	"""In snap mode the leading deck was the follower and is released."""

	machine = segue.sync.SyncStateMachine(make_config(bpm_sync_fade=False), bus)
	state = segue.state.TransitionState(bpm_tolerance=12, syncing=True)
	leading, incoming = _decks()

	machine.update(state, 0.8, leading, incoming)

	assert state.syncing is False
	assert bus.triggers == [(DECK_1, SYNC_ENABLED)]


def test_reset_clears_both_decks (bus, make_config) -> None:

	"""A forced reset leaves both decks with no sync mode."""

	events = segue.event_emitter.EventEmitter()
	resets: typing.List[bool] = []
	events.on("sync_reset", lambda: resets.append(True))

	machine = segue.sync.SyncStateMachine(make_config(), bus, events)
	state = segue.state.TransitionState(bpm_tolerance=12, syncing=True)

	machine.reset(state)

	assert state.syncing is False
	assert bus.last(DECK_1, SYNC_MODE) == segue.constants.controls.SYNC_MODE_NONE
	assert bus.last(DECK_2, SYNC_MODE) == segue.constants.controls.SYNC_MODE_NONE
	assert resets == [True]
