"""MIDI pitch constants.

ToneLang names pitches ``<PitchClass><Octave>`` with **C3 = 60** (Middle C),
the convention used by Ableton Live. The formula is::

    midi = (octave + 2) * 12 + PITCH_CLASS_VALUES[pitch_class]

so the full MIDI range runs from ``C-2`` (0) to ``G8`` (127).

Input accepts sharps and flats (``C#3`` == ``Db3`` == 61). Output always uses
flats, following ``PITCH_CLASS_NAMES``.
"""

import typing


MIN_PITCH = 0
MAX_PITCH = 127

# Octave number of MIDI pitch 0.
OCTAVE_OFFSET = 2

PITCH_CLASS_VALUES: typing.Dict[str, int] = {
	"C": 0,
	"C#": 1,
	"Db": 1,
	"D": 2,
	"D#": 3,
	"Eb": 3,
	"E": 4,
	"F": 5,
	"F#": 6,
	"Gb": 6,
	"G": 7,
	"G#": 8,
	"Ab": 8,
	"A": 9,
	"A#": 10,
	"Bb": 10,
	"B": 11,
}

PITCH_CLASS_NAMES: typing.List[str] = [
	"C",
	"Db",
	"D",
	"Eb",
	"E",
	"F",
	"Gb",
	"G",
	"Ab",
	"A",
	"Bb",
	"B",
]
