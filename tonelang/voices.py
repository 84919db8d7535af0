"""Split an unordered collection of note events into voices.

A voice is a time-ordered stream in which each onset starts no earlier than
the previous onset has finished. Notes that start together may share a voice;
they become a chord when the voice is encoded.

Two strategies are provided:

- ``partition_voices`` for melodic instruments: a greedy first-fit over the
  events in start order. It keeps a melodic line in the first voice whenever
  possible and opens a new voice only for notes that overlap every existing
  one. This is a heuristic and does not guarantee the fewest voices; it is
  kept as is because its output is what callers see.
- ``partition_drum_voices`` for drum racks: one voice per pitch (one per pad),
  in ascending pitch order, regardless of timing.

Example:
	```python
	voices = partition_voices(events)
	voices = PARTITIONERS["drum"](events)
	```
"""

import logging
import typing

import tonelang.constants
import tonelang.events


logger = logging.getLogger(__name__)

Voice = typing.List[tonelang.events.NoteEvent]


class _OpenVoice:

	"""A voice being filled, remembering when its latest onset ends."""

	def __init__ (self, event: tonelang.events.NoteEvent) -> None:

		self.events: Voice = [event]
		self.onset = event.start_time
		self.onset_end = event.end_time

	def accepts (self, event: tonelang.events.NoteEvent, tolerance: float) -> bool:

		"""True if ``event`` joins the latest onset or starts after it ends."""

		if abs(event.start_time - self.onset) <= tolerance:
			return True

		return event.start_time >= self.onset_end - tolerance

	def append (self, event: tonelang.events.NoteEvent, tolerance: float) -> None:

		if abs(event.start_time - self.onset) <= tolerance:
			self.onset_end = max(self.onset_end, event.end_time)
		else:
			self.onset = event.start_time
			self.onset_end = event.end_time

		self.events.append(event)


def partition_voices (
	events: typing.Iterable[tonelang.events.NoteEvent],
	tolerance: float = tonelang.constants.TIME_TOLERANCE
) -> typing.List[Voice]:

	"""
	Assign each event to the first voice it fits in, opening voices as needed.

	Events are taken in ``start_time`` order; events with equal start times keep
	their input order. Each event goes to the first voice (in creation order)
	whose latest onset it either shares or starts after. When none fits, a new
	voice is appended.

	Parameters:
		events: Note events in any order.
		tolerance: Beats within which two times count as equal.

	Returns:
		Voices in creation order, each time-ordered.
	"""

	ordered = sorted(events, key=lambda event: event.start_time)
	voices: typing.List[_OpenVoice] = []

	for event in ordered:

		for voice in voices:
			if voice.accepts(event, tolerance):
				voice.append(event, tolerance)
				break

		else:
			voices.append(_OpenVoice(event))

	logger.debug(f"Partitioned {len(ordered)} events into {len(voices)} voice(s)")

	return [voice.events for voice in voices]


def partition_drum_voices (
	events: typing.Iterable[tonelang.events.NoteEvent],
	tolerance: float = tonelang.constants.TIME_TOLERANCE
) -> typing.List[Voice]:

	"""
	Group events by pitch, one voice per drum pad.

	Voices are ordered by ascending pitch; each voice is time-ordered.
	``tolerance`` is accepted so both partitioners share a signature.
	"""

	by_pitch: typing.Dict[int, Voice] = {}

	for event in sorted(events, key=lambda event: event.start_time):
		by_pitch.setdefault(event.pitch, []).append(event)

	logger.debug(f"Partitioned drum events into {len(by_pitch)} pad voice(s)")

	return [by_pitch[pitch] for pitch in sorted(by_pitch)]


PARTITIONERS: typing.Dict[str, typing.Callable[..., typing.List[Voice]]] = {
	"melodic": partition_voices,
	"drum": partition_drum_voices,
}
