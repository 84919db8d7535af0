"""The note event record exchanged with note-reading and note-writing code.

A ``NoteEvent`` is the flat result of parsing and the input to formatting. Its
dict form, ``{"pitch", "velocity", "start_time", "duration"}``, is the
interchange record used by the surrounding tool layer.
"""

import collections.abc
import dataclasses
import typing

import tonelang.constants
import tonelang.errors
import tonelang.pitch


@dataclasses.dataclass(frozen=True)
class NoteEvent:

	"""
	A single sounding note.

	Times and durations are in beats (1.0 = one quarter note).
	"""

	pitch: int
	velocity: int
	start_time: float
	duration: float

	@property
	def end_time (self) -> float:

		"""Beat at which the note stops sounding."""

		return self.start_time + self.duration

	def to_dict (self) -> typing.Dict[str, typing.Any]:

		"""Return the interchange record for this event."""

		return {
			"pitch": self.pitch,
			"velocity": self.velocity,
			"start_time": self.start_time,
			"duration": self.duration,
		}

	@classmethod
	def from_dict (cls, record: typing.Mapping[str, typing.Any]) -> "NoteEvent":

		"""Build an event from an interchange record.

		Velocity falls back to the default when absent. Missing pitch,
		start_time or duration raise ``ToneLangRangeError``.
		"""

		for key in ("pitch", "start_time", "duration"):
			if key not in record:
				raise tonelang.errors.ToneLangRangeError(f"Note record is missing {key!r}: {dict(record)}", field=key, value=None)

		return cls(
			pitch=int(record["pitch"]),
			velocity=int(record.get("velocity", tonelang.constants.DEFAULT_VELOCITY)),
			start_time=float(record["start_time"]),
			duration=float(record["duration"]),
		)

	def validate (self) -> None:

		"""Raise ``ToneLangRangeError`` if any field is outside its domain."""

		if not tonelang.pitch.is_valid_midi(self.pitch):
			raise tonelang.errors.ToneLangRangeError(
				f"Pitch {self.pitch} is outside valid range {tonelang.constants.MIN_PITCH}-{tonelang.constants.MAX_PITCH}",
				field="pitch",
				value=self.pitch
			)

		if not tonelang.constants.MIN_VELOCITY <= self.velocity <= tonelang.constants.MAX_VELOCITY:
			raise tonelang.errors.ToneLangRangeError(
				f"Velocity {self.velocity} is outside valid range {tonelang.constants.MIN_VELOCITY}-{tonelang.constants.MAX_VELOCITY}",
				field="velocity",
				value=self.velocity
			)

		if self.start_time < 0:
			raise tonelang.errors.ToneLangRangeError(f"Start time {self.start_time} must not be negative", field="start_time", value=self.start_time)

		if self.duration <= 0:
			raise tonelang.errors.ToneLangRangeError(f"Duration {self.duration} must be positive", field="duration", value=self.duration)


EventLike = typing.Union[NoteEvent, typing.Mapping[str, typing.Any]]


def coerce_events (events: typing.Optional[typing.Iterable[EventLike]]) -> typing.List[NoteEvent]:

	"""Convert records to validated ``NoteEvent`` objects, preserving order.

	``None`` is treated as an empty list.
	"""

	if events is None:
		return []

	result: typing.List[NoteEvent] = []

	for event in events:

		if isinstance(event, collections.abc.Mapping):
			event = NoteEvent.from_dict(event)
		elif not isinstance(event, NoteEvent):
			raise tonelang.errors.ToneLangRangeError(f"Expected a note record, got {event!r}", field="event", value=event)

		event.validate()
		result.append(event)

	return result
