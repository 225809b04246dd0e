"""Key codes in the host's traditional numbering.

Major keys run chromatically from C = 1 to B = 12, minor keys from Cm = 13 to
Bm = 24.  Code 0 means the track has no detected key.
"""

KEY_UNSET = 0

MAJOR_KEYS = ("C", "Db", "D", "Eb", "E", "F", "F#", "G", "Ab", "A", "Bb", "B")
MINOR_KEYS = ("Cm", "C#m", "Dm", "Ebm", "Em", "Fm", "F#m", "Gm", "G#m", "Am", "Bbm", "Bm")

KEY_NAMES = (None,) + MAJOR_KEYS + MINOR_KEYS

FIRST_MINOR = 13
LAST_KEY = 24
