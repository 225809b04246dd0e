"""Constants for segue.

This package contains:

- ``segue.constants.controls`` - Parameter-bus groups, control names and sync-mode codes
- ``segue.constants.keys`` - Key codes and names in the host's traditional numbering

The transition thresholds are defined here because every engine reads them.
"""

# Crossfade progress at which tempo sync is released and key adjustment may fire.
SYNC_RELEASE_PROGRESS = 0.75

# Neutral and maximum positions for the per-deck knobs.
KNOB_NEUTRAL = 0.5
KNOB_MAX = 1.0
