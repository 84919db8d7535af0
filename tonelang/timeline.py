"""Compile a ToneLang syntax tree into a flat list of timed note events.

Each voice is walked with its own time cursor starting at beat 0. Notes and
chords emit events at the cursor, then move it on by their time gap (``t``) if
they have one, or by their duration if not. Rests only move the cursor.

Velocity and duration fall through three levels: a note's own value, then the
enclosing chord's (or group's, for velocity), then the global default.
"""

import dataclasses
import logging
import typing

import tonelang.constants
import tonelang.events
import tonelang.syntax_tree


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class _Defaults:

	"""Values inherited by elements that do not set their own."""

	velocity: int
	duration: float

	def with_velocity (self, velocity: typing.Optional[int]) -> "_Defaults":

		if velocity is None:
			return self

		return dataclasses.replace(self, velocity=velocity)


@dataclasses.dataclass
class _Cursor:

	"""Current position (in beats) within one voice."""

	time: float = 0.0


_T = typing.TypeVar("_T")


def _resolve (value: typing.Optional[_T], fallback: _T) -> _T:

	"""Return ``value`` if it was set explicitly, otherwise ``fallback``."""

	return fallback if value is None else value


def compile_timeline (
	expression: tonelang.syntax_tree.Expression,
	default_velocity: int = tonelang.constants.DEFAULT_VELOCITY,
	default_duration: float = tonelang.constants.DEFAULT_DURATION
) -> typing.List[tonelang.events.NoteEvent]:

	"""
	Flatten a syntax tree into note events.

	Voices of a ``MultiVoice`` are compiled independently from beat 0 and their
	events concatenated in voice order. Within a voice, events are in the order
	they were written.

	Parameters:
		expression: A tree from ``tonelang.parser.parse_expression``.
		default_velocity: Velocity for notes with no velocity at any level.
		default_duration: Duration (beats) for notes, chords and rests without one.

	Returns:
		The note events. Range checks were already done by the parser.
	"""

	if isinstance(expression, tonelang.syntax_tree.MultiVoice):
		voices = expression.voices
	elif isinstance(expression, tonelang.syntax_tree.Sequence):
		voices = (expression,)
	else:
		raise TypeError(f"Cannot compile {type(expression).__name__}")

	defaults = _Defaults(velocity=default_velocity, duration=default_duration)
	events: typing.List[tonelang.events.NoteEvent] = []

	for voice in voices:
		_compile_sequence(voice, _Cursor(), defaults, events)

	logger.debug(f"Compiled {len(voices)} voice(s) into {len(events)} events")

	return events


def _compile_sequence (
	sequence: tonelang.syntax_tree.Sequence,
	cursor: _Cursor,
	defaults: _Defaults,
	events: typing.List[tonelang.events.NoteEvent]
) -> None:

	for element in sequence.elements:
		_compile_element(element, cursor, defaults, events)


def _compile_element (
	element: tonelang.syntax_tree.Element,
	cursor: _Cursor,
	defaults: _Defaults,
	events: typing.List[tonelang.events.NoteEvent]
) -> None:

	if isinstance(element, tonelang.syntax_tree.Note):

		duration = _resolve(element.duration, defaults.duration)
		events.append(_emit(element, cursor, defaults.velocity, duration))
		cursor.time += _resolve(element.time_gap, duration)

	elif isinstance(element, tonelang.syntax_tree.Chord):

		velocity = _resolve(element.velocity, defaults.velocity)
		duration = _resolve(element.duration, defaults.duration)

		for note in element.notes:
			events.append(_emit(note, cursor, velocity, _resolve(note.duration, duration)))

		# Member durations never move the cursor; only the chord's own values do.
		cursor.time += _resolve(element.time_gap, duration)

	elif isinstance(element, tonelang.syntax_tree.Rest):

		cursor.time += _resolve(element.duration, defaults.duration)

	elif isinstance(element, tonelang.syntax_tree.Repetition):

		inner = defaults.with_velocity(element.velocity)

		for _ in range(element.count):
			_compile_sequence(element.body, cursor, inner, events)

	else:
		raise TypeError(f"Cannot compile {type(element).__name__}")


def _emit (note: tonelang.syntax_tree.Note, cursor: _Cursor, velocity: int, duration: float) -> tonelang.events.NoteEvent:

	return tonelang.events.NoteEvent(
		pitch=note.pitch,
		velocity=_resolve(note.velocity, velocity),
		start_time=cursor.time,
		duration=duration,
	)
