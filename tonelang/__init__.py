"""
ToneLang - a compact text notation for MIDI notes.

ToneLang lets a controller (a person, a script, or an AI assistant) write and
read note data as short strings instead of lists of records::

    C3 E3 G3*2          three notes, the last one twice as long
    [C3 E3 G3]v90 R     a chord at velocity 90, then a rest
    (C3 D3 E3 D3)*4     a repeated phrase
    C3*4; G2 A2 B2 C3   two independent voices

It works in both directions:

- ``tonelang.parse(text)`` turns notation into a list of ``NoteEvent``
  objects (pitch, velocity, start_time, duration), with times in beats.
- ``tonelang.format(events)`` turns events back into canonical notation,
  grouping simultaneous notes into chords and splitting overlapping notes
  into separate voices. ``variant="drum"`` writes one voice per drum pad.

Both are pure functions with no shared state, safe to call from any thread.

Conventions: MIDI 60 is ``C3`` (octaves -2 to 8), the default velocity is 70,
and the default duration is one quarter note (1 beat).

Package-level exports: ``parse``, ``format``, ``NoteEvent`` and the
``ToneLangError`` family.
"""

import typing

import tonelang.constants
import tonelang.errors
import tonelang.events
import tonelang.formatter
import tonelang.parser
import tonelang.timeline


NoteEvent = tonelang.events.NoteEvent
ToneLangError = tonelang.errors.ToneLangError
ToneLangSyntaxError = tonelang.errors.ToneLangSyntaxError
ToneLangRangeError = tonelang.errors.ToneLangRangeError
ToneLangConfigError = tonelang.errors.ToneLangConfigError


def parse (
	text: typing.Optional[str],
	default_velocity: int = tonelang.constants.DEFAULT_VELOCITY,
	default_duration: float = tonelang.constants.DEFAULT_DURATION
) -> typing.List[NoteEvent]:

	"""
	Parse ToneLang text into note events.

	Parameters:
		text: The notation. ``None`` or blank text yields no events.
		default_velocity: Velocity for notes that do not set one.
		default_duration: Duration (beats) for notes, chords and rests that do not set one.

	Returns:
		Events in the order they were written, voice by voice.

	Raises:
		ToneLangSyntaxError: For malformed notation.
		ToneLangRangeError: For out-of-range pitches, velocities or durations.

	Example:
		```python
		tonelang.parse("C3 R D3")
		# [NoteEvent(pitch=60, velocity=70, start_time=0.0, duration=1.0),
		#  NoteEvent(pitch=62, velocity=70, start_time=2.0, duration=1.0)]
		```
	"""

	if text is None or not text.strip():
		return []

	expression = tonelang.parser.parse_expression(text)

	return tonelang.timeline.compile_timeline(expression, default_velocity=default_velocity, default_duration=default_duration)


def format (
	events: typing.Optional[typing.Iterable[tonelang.events.EventLike]],
	variant: str = tonelang.formatter.MELODIC,
	default_velocity: int = tonelang.constants.DEFAULT_VELOCITY,
	default_duration: float = tonelang.constants.DEFAULT_DURATION
) -> str:

	"""
	Format note events as canonical ToneLang text.

	See ``tonelang.formatter.format_events`` for the details.
	"""

	return tonelang.formatter.format_events(events, variant=variant, default_velocity=default_velocity, default_duration=default_duration)

