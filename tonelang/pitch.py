"""Conversion between MIDI pitch numbers and ToneLang note names.

ToneLang uses the C3 = 60 octave convention, so ``C-2`` is MIDI 0 and ``G8``
is MIDI 127. Names are read with either sharps or flats and always written
with flats.

Example:
	```python
	pitch_name(60)        # "C3"
	pitch_name(61)        # "Db3"
	name_to_pitch("F#3")  # 66
	```
"""

import re
import typing

import tonelang.constants.pitch
import tonelang.errors


NOTE_NAME_PATTERN = re.compile(r"^([A-G](?:#|b)?)(-?\d+)$")


def is_valid_midi (value: typing.Any) -> bool:

	"""Return True if ``value`` is an integer MIDI pitch in 0-127."""

	if isinstance(value, bool) or not isinstance(value, int):
		return False

	return tonelang.constants.pitch.MIN_PITCH <= value <= tonelang.constants.pitch.MAX_PITCH


def pitch_from_parts (pitch_class: str, octave: int) -> int:

	"""Resolve a pitch class and octave to a MIDI number.

	Raises:
		ToneLangSyntaxError: If the pitch class is not one of the seventeen names.
		ToneLangRangeError: If the result falls outside 0-127.
	"""

	if pitch_class not in tonelang.constants.pitch.PITCH_CLASS_VALUES:
		raise tonelang.errors.ToneLangSyntaxError(f"Unknown pitch class {pitch_class!r}", text=pitch_class)

	midi = (octave + tonelang.constants.pitch.OCTAVE_OFFSET) * 12 + tonelang.constants.pitch.PITCH_CLASS_VALUES[pitch_class]

	if not is_valid_midi(midi):
		raise tonelang.errors.ToneLangRangeError(
			f"Pitch {pitch_class}{octave} (MIDI {midi}) is outside valid range "
			f"{tonelang.constants.pitch.MIN_PITCH}-{tonelang.constants.pitch.MAX_PITCH}",
			field="pitch",
			value=midi,
			text=f"{pitch_class}{octave}"
		)

	return midi


def name_to_pitch (name: str) -> int:

	"""Convert a note name such as ``"C3"`` or ``"Bb-1"`` to a MIDI number.

	Names are case-sensitive, matching the notation grammar.

	Raises:
		ToneLangSyntaxError: If ``name`` is not a note name.
		ToneLangRangeError: If the note lies outside the MIDI range.
	"""

	match = NOTE_NAME_PATTERN.match(name)

	if match is None:
		raise tonelang.errors.ToneLangSyntaxError(f"Invalid note name {name!r}", text=name)

	return pitch_from_parts(match.group(1), int(match.group(2)))


def is_valid_note_name (name: typing.Any) -> bool:

	"""Return True if ``name`` is a note name inside the MIDI range."""

	if not isinstance(name, str):
		return False

	try:
		name_to_pitch(name)
	except tonelang.errors.ToneLangError:
		return False

	return True


def pitch_name (midi: int) -> str:

	"""Return the canonical (flat-spelled) ToneLang name of a MIDI pitch.

	Raises:
		ToneLangRangeError: If ``midi`` is not an integer in 0-127.
	"""

	if not is_valid_midi(midi):
		raise tonelang.errors.ToneLangRangeError(
			f"Pitch {midi!r} is outside valid range "
			f"{tonelang.constants.pitch.MIN_PITCH}-{tonelang.constants.pitch.MAX_PITCH}",
			field="pitch",
			value=midi
		)

	octave, pitch_class = divmod(midi, 12)

	return f"{tonelang.constants.pitch.PITCH_CLASS_NAMES[pitch_class]}{octave - tonelang.constants.pitch.OCTAVE_OFFSET}"
