"""Render voices of note events as canonical ToneLang text.

Within a voice, notes that start together are grouped into chords. Each
group is written as a note or chord token followed, where needed, by the
modifiers that reproduce it exactly when parsed again:

- ``v`` when the velocity differs from the default (70),
- ``*N`` / ``/N`` when the duration differs from the default (one beat),
- ``t`` when the next group starts sooner or later than the duration implies.

A voice that does not start at beat 0 opens with a rest.

Example:
	```python
	encoder = VoiceEncoder()
	encoder.encode(voice)  # "[C3 E3 G3] G3*2t1 B3"
	```
"""

import collections
import dataclasses
import typing

import tonelang.constants
import tonelang.events
import tonelang.pitch


@dataclasses.dataclass
class OnsetGroup:

	"""Events of one voice that start at the same time, sorted by pitch."""

	start_time: float
	events: typing.List[tonelang.events.NoteEvent] = dataclasses.field(default_factory=list)

	@property
	def is_chord (self) -> bool:

		return len(self.events) > 1


def group_onsets (
	voice: typing.Sequence[tonelang.events.NoteEvent],
	tolerance: float = tonelang.constants.TIME_TOLERANCE
) -> typing.List[OnsetGroup]:

	"""Group consecutive events of a time-ordered voice by start time."""

	groups: typing.List[OnsetGroup] = []

	for event in voice:

		if groups and abs(event.start_time - groups[-1].start_time) <= tolerance:
			groups[-1].events.append(event)
		else:
			groups.append(OnsetGroup(start_time=event.start_time, events=[event]))

	for group in groups:
		group.events.sort(key=lambda event: event.pitch)

	return groups


def format_number (value: float) -> str:

	"""Print a beat value with at most three decimals and no trailing zeros."""

	text = f"{value:.3f}".rstrip("0").rstrip(".")

	return text if text not in ("", "-0") else "0"


def format_duration (duration: float, tolerance: float = tonelang.constants.TIME_TOLERANCE) -> str:

	"""Write a duration modifier, always explicit.

	Durations of a beat or more are multiples (``*2``, ``*1.5``). Shorter ones
	are fractions (``/4``) when they divide a beat evenly, otherwise decimals
	(``*0.75``).
	"""

	if duration >= tonelang.constants.DEFAULT_DURATION - tolerance:
		return f"*{format_number(duration)}"

	divisor = round(tonelang.constants.DEFAULT_DURATION / duration)

	if divisor > 0 and abs(duration * divisor - tonelang.constants.DEFAULT_DURATION) <= tolerance:
		return f"/{divisor}"

	return f"*{format_number(duration)}"


def duration_value (modifier: str) -> float:

	"""Beats a ``*N`` or ``/N`` modifier stands for when parsed."""

	if modifier.startswith("/"):
		return tonelang.constants.DEFAULT_DURATION / float(modifier[1:])

	return tonelang.constants.DEFAULT_DURATION * float(modifier[1:])


def _cluster (values: typing.Iterable[float], tolerance: float) -> typing.List[typing.Tuple[float, int]]:

	"""Count values, treating values within ``tolerance`` as equal.

	Returns ``(representative, count)`` pairs, most frequent first; ties keep
	the order in which values were first seen.
	"""

	representatives: typing.List[float] = []
	counts: typing.Counter[int] = collections.Counter()

	for value in values:

		for index, representative in enumerate(representatives):
			if abs(value - representative) <= tolerance:
				counts[index] += 1
				break

		else:
			representatives.append(value)
			counts[len(representatives) - 1] += 1

	return [(representatives[index], count) for index, count in counts.most_common()]


class VoiceEncoder:

	"""
	Encode voices as ToneLang, omitting values equal to the defaults.

	The defaults must match those the text will be parsed with, or the text
	will not reproduce the events.

	Printed numbers are rounded, so the encoder keeps a cursor at the position
	the parser will rebuild from the text written so far and measures every
	time gap from there. Rounding errors therefore never add up along a voice:
	each onset lands within half the tolerance of its true start time.
	"""

	def __init__ (
		self,
		default_velocity: int = tonelang.constants.DEFAULT_VELOCITY,
		default_duration: float = tonelang.constants.DEFAULT_DURATION,
		tolerance: float = tonelang.constants.TIME_TOLERANCE
	) -> None:

		self.default_velocity = default_velocity
		self.default_duration = default_duration
		self.tolerance = tolerance

	def encode (self, voice: typing.Sequence[tonelang.events.NoteEvent]) -> str:

		"""Encode one time-ordered, overlap-free voice as space-separated tokens."""

		groups = group_onsets(voice, self.tolerance)
		tokens: typing.List[str] = []
		cursor = 0.0

		if groups and groups[0].start_time > self.tolerance:
			rest, cursor = self._rest(groups[0].start_time)
			tokens.append(rest)

		for index, group in enumerate(groups):

			next_start: typing.Optional[float] = None

			if index + 1 < len(groups):
				next_start = groups[index + 1].start_time

			group_tokens, cursor = self._group(group, cursor, next_start)
			tokens.extend(group_tokens)

		return " ".join(tokens)

	def encode_voices (self, voices: typing.Iterable[typing.Sequence[tonelang.events.NoteEvent]], separator: str = ";") -> str:

		"""Encode several voices and join them with ``separator``."""

		return separator.join(self.encode(voice) for voice in voices)

	def _same (self, a: float, b: float) -> bool:

		return abs(a - b) <= self.tolerance

	def _duration (self, duration: float) -> typing.Tuple[str, float]:

		"""The duration modifier (empty for the default) and the beats it parses to."""

		if self._same(duration, self.default_duration):
			return "", self.default_duration

		modifier = format_duration(duration, self.tolerance)

		return modifier, duration_value(modifier)

	def _rest (self, duration: float) -> typing.Tuple[str, float]:

		modifier, value = self._duration(duration)

		return "R" + modifier, value

	def _group (self, group: OnsetGroup, cursor: float, next_start: typing.Optional[float]) -> typing.Tuple[typing.List[str], float]:

		"""Tokens for one onset group and the cursor after it.

		``cursor`` is where the parser will place the group; ``next_start`` is
		the true start of the next group, if any.
		"""

		if not group.is_chord:
			token, cursor = self._note(group.events[0], cursor, next_start)
			return [token], cursor

		velocities = [event.velocity for event in group.events]
		durations = [event.duration for event in group.events]

		if len(_cluster(velocities, 0)) == len(velocities) and len(_cluster(durations, self.tolerance)) == len(durations):
			return self._unbracketed_chord(group, cursor, next_start)

		token, cursor = self._chord(group, cursor, next_start)

		return [token], cursor

	def _note (self, event: tonelang.events.NoteEvent, cursor: float, next_start: typing.Optional[float]) -> typing.Tuple[str, float]:

		token = tonelang.pitch.pitch_name(event.pitch)

		if event.velocity != self.default_velocity:
			token += f"v{event.velocity}"

		modifier, advance = self._duration(event.duration)
		gap, cursor = self._time_gap(cursor, advance, next_start)

		return token + modifier + gap, cursor

	def _chord (self, group: OnsetGroup, cursor: float, next_start: typing.Optional[float]) -> typing.Tuple[str, float]:

		velocity = int(_cluster((event.velocity for event in group.events), 0)[0][0])
		duration = _cluster((event.duration for event in group.events), self.tolerance)[0][0]

		members: typing.List[str] = []

		for event in group.events:

			member = tonelang.pitch.pitch_name(event.pitch)

			if event.velocity != velocity:
				member += f"v{event.velocity}"

			if not self._same(event.duration, duration):
				member += format_duration(event.duration, self.tolerance)

			members.append(member)

		token = "[" + " ".join(members) + "]"

		if velocity != self.default_velocity:
			token += f"v{velocity}"

		modifier, advance = self._duration(duration)
		gap, cursor = self._time_gap(cursor, advance, next_start)

		return token + modifier + gap, cursor

	def _unbracketed_chord (self, group: OnsetGroup, cursor: float, next_start: typing.Optional[float]) -> typing.Tuple[typing.List[str], float]:

		"""Notes with nothing in common: write each with ``t0`` except the last."""

		tokens: typing.List[str] = []

		for event in group.events[:-1]:
			token, cursor = self._note(event, cursor, cursor)
			tokens.append(token)

		token, cursor = self._note(group.events[-1], cursor, next_start)
		tokens.append(token)

		return tokens, cursor

	def _time_gap (self, cursor: float, advance: float, next_start: typing.Optional[float]) -> typing.Tuple[str, float]:

		"""The ``t`` modifier needed to reach ``next_start``, and the resulting cursor.

		It is left out when moving on by ``advance`` lands close enough.
		"""

		if next_start is None:
			return "", cursor + advance

		gap = next_start - cursor

		if abs(gap - advance) <= self.tolerance / 2:
			return "", cursor + advance

		text = format_number(gap)

		return f"t{text}", cursor + float(text)
