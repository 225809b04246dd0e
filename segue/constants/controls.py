"""Parameter-bus addressing.

Every value is addressed by a ``(group, control)`` pair.  The two deck groups
carry per-deck state, ``master`` holds the crossfader and ``autodj`` is the
queue manager.
"""

DECK_1 = "deck1"
DECK_2 = "deck2"
MASTER = "master"
AUTODJ = "autodj"

DECKS = (DECK_1, DECK_2)

# Per-deck controls
BPM = "bpm"                      # declared (analysed) tempo of the loaded track
LIVE_BPM = "live_bpm"            # tempo currently applied by the engine
PLAY_POSITION = "play_position"  # 0.0 .. 1.0
PLAYING = "playing"
KEY = "key"
SYNC_MODE = "sync_mode"
SYNC_ENABLED = "sync_enabled"
BEAT_ACTIVE = "beat_active"
LOW_FILTER = "low_filter"
TONE = "tone"                    # quick-effect coloration knob
QUANTIZE = "quantize"
KEYLOCK = "keylock"
KEYLOCK_MODE = "keylock_mode"

# Master controls
CROSSFADER = "crossfader"        # -1.0 (deck 1) .. 1.0 (deck 2)

# Queue controls
SKIP_NEXT = "skip_next"
SHUFFLE_PLAYLIST = "shuffle_playlist"
ENABLED = "enabled"

# Sync modes
SYNC_MODE_NONE = 0.0
SYNC_MODE_FOLLOWER = 1.0
SYNC_MODE_MASTER = 2.0
