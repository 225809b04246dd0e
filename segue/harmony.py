"""Harmonic compatibility between two track keys.

Keys use the host's traditional numbering (see ``segue.constants.keys``):
majors C..B are 1..12 and minors Cm..Bm are 13..24.  Two keys mix well when
any of the following holds:

- they are the same key;
- one is the relative minor/major of the other (same position on the circle
  of fifths, opposite tonality);
- both share a tonality and sit next to each other on the circle of fifths,
  two steps clockwise, or five steps counter-clockwise ("energy" mixes).

Example:
	```python
	import segue.harmony

	segue.harmony.is_compatible(1, 22)   # C and Am -> True
	segue.harmony.is_compatible(1, 8)    # C and G -> True
	segue.harmony.is_compatible(1, 13)   # C and Cm -> False
	```
"""

import typing

import segue.constants.keys


# Same-tonality code differences that are harmonic neighbours.
# 5/7: adjacent on the circle of fifths
# 2/10: two steps clockwise
# 1/11: five steps counter-clockwise
SAME_TONALITY_STEPS = frozenset((1, 2, 5, 7, 10, 11))

# Relative major/minor pairs differ by 9, except where the minor numbering
# wraps past Bm (C/Am, Db/Bbm, D/Bm), where they differ by 21.
RELATIVE_STEP = 9
RELATIVE_STEP_WRAPPED = 21
RELATIVE_WRAP_LAST_MAJOR = 3


def is_valid_key (code: int) -> bool:

	"""Return True if ``code`` is a detected key (1-24)."""

	return 1 <= code <= segue.constants.keys.LAST_KEY


def is_major (code: int) -> bool:

	"""Return True for a major key code."""

	return is_valid_key(code) and code < segue.constants.keys.FIRST_MINOR


def key_name (code: int) -> str:

	"""Return a readable name (``"Am"``) for a key code, or ``"unset"``."""

	if not is_valid_key(code):
		return "unset"

	return typing.cast(str, segue.constants.keys.KEY_NAMES[code])


def is_compatible (key_a: int, key_b: int) -> bool:

	"""Return True if two keys can be mixed without a harmonic clash.

	Unset or out-of-range codes are never compatible with anything.

	Parameters:
		key_a: Key code of the first track.
		key_b: Key code of the second track.
	"""

	if not is_valid_key(key_a) or not is_valid_key(key_b):
		return False

	small, large = sorted((key_a, key_b))
	diff = large - small

	if diff == 0:
		return True

	if is_major(small) and not is_major(large):
		if small <= RELATIVE_WRAP_LAST_MAJOR:
			return diff == RELATIVE_STEP_WRAPPED
		return diff == RELATIVE_STEP

	return diff in SAME_TONALITY_STEPS


def compatible_keys (code: int) -> typing.List[int]:

	"""List every key code that mixes with ``code``, in ascending order."""

	return [other for other in range(1, segue.constants.keys.LAST_KEY + 1) if is_compatible(code, other)]
