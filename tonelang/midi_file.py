"""Standard MIDI File import and export for note events.

Lets ToneLang text be auditioned in any DAW and lets existing MIDI clips be
read back as notation::

    events = tonelang.parse("[C3 E3 G3]*2 (C3 D3)*2")
    tonelang.midi_file.write_midi_file(events, "sketch.mid", bpm=100)

    text = tonelang.format(tonelang.midi_file.read_midi_file("sketch.mid"))

Times are converted between beats and ticks using the file's ticks-per-beat
resolution; tempo does not affect beat positions.
"""

import collections
import logging
import typing

import mido

import tonelang.events


logger = logging.getLogger(__name__)


def events_to_midi (
	events: typing.Iterable[tonelang.events.EventLike],
	bpm: float = 120.0,
	ticks_per_beat: int = 480,
	channel: int = 0
) -> mido.MidiFile:

	"""
	Build a single-track MIDI file from note events.

	Parameters:
		events: Note events in any order.
		bpm: Tempo written at the start of the track.
		ticks_per_beat: File resolution.
		channel: MIDI channel (0-15) for every note.

	Returns:
		An in-memory ``mido.MidiFile`` (type 0).
	"""

	notes = tonelang.events.coerce_events(events)

	mid = mido.MidiFile(type=0, ticks_per_beat=ticks_per_beat)
	track = mido.MidiTrack()
	mid.tracks.append(track)

	track.append(mido.MetaMessage('set_tempo', tempo=mido.bpm2tempo(bpm), time=0))

	# (tick, order, message): note_off sorts before note_on at the same tick
	# so a repeated pitch is released before it is struck again.
	timed: typing.List[typing.Tuple[int, int, mido.Message]] = []

	for note in notes:
		start = round(note.start_time * ticks_per_beat)
		end = max(start + 1, round(note.end_time * ticks_per_beat))
		timed.append((start, 1, mido.Message('note_on', channel=channel, note=note.pitch, velocity=note.velocity)))
		timed.append((end, 0, mido.Message('note_off', channel=channel, note=note.pitch, velocity=0)))

	timed.sort(key=lambda item: (item[0], item[1]))

	last_tick = 0

	for tick, _, message in timed:
		track.append(message.copy(time=tick - last_tick))
		last_tick = tick

	track.append(mido.MetaMessage('end_of_track', time=0))

	return mid


def midi_to_events (mid: mido.MidiFile) -> typing.List[tonelang.events.NoteEvent]:

	"""
	Extract note events from every track of a MIDI file.

	A ``note_on`` with velocity 0 counts as a ``note_off``. Overlapping notes of
	the same pitch and channel are paired first-in, first-out. Notes still
	sounding at the end of their track end there; zero-length notes are dropped.

	Returns:
		Events sorted by start time.
	"""

	events: typing.List[tonelang.events.NoteEvent] = []

	for track in mid.tracks:

		tick = 0
		sounding: typing.Dict[typing.Tuple[int, int], typing.Deque[typing.Tuple[int, int]]] = collections.defaultdict(collections.deque)

		for message in track:

			tick += message.time

			if message.type == 'note_on' and message.velocity > 0:
				sounding[(message.channel, message.note)].append((tick, message.velocity))

			elif message.type in ('note_off', 'note_on'):

				pending = sounding.get((message.channel, message.note))

				if not pending:
					logger.debug(f"Ignoring note_off without note_on for note {message.note} at tick {tick}")
					continue

				start, velocity = pending.popleft()
				_append_note(events, message.note, velocity, start, tick, mid.ticks_per_beat)

		for (_, note), pending in sounding.items():
			for start, velocity in pending:
				logger.warning(f"Note {note} at tick {start} has no note_off; ending it at tick {tick}")
				_append_note(events, note, velocity, start, tick, mid.ticks_per_beat)

	events.sort(key=lambda event: event.start_time)

	return events


def _append_note (
	events: typing.List[tonelang.events.NoteEvent],
	pitch: int,
	velocity: int,
	start: int,
	end: int,
	ticks_per_beat: int
) -> None:

	if end <= start:
		logger.debug(f"Dropping zero-length note {pitch} at tick {start}")
		return

	events.append(tonelang.events.NoteEvent(
		pitch=pitch,
		velocity=velocity,
		start_time=start / ticks_per_beat,
		duration=(end - start) / ticks_per_beat,
	))


def write_midi_file (
	events: typing.Iterable[tonelang.events.EventLike],
	filename: str,
	bpm: float = 120.0,
	ticks_per_beat: int = 480
) -> None:

	"""Save note events as a Standard MIDI File."""

	mid = events_to_midi(events, bpm=bpm, ticks_per_beat=ticks_per_beat)

	logger.info(f"Saving {sum(1 for m in mid.tracks[0] if m.type == 'note_on')} notes to {filename}...")

	mid.save(filename)


def read_midi_file (filename: str) -> typing.List[tonelang.events.NoteEvent]:

	"""Load note events from a Standard MIDI File."""

	mid = mido.MidiFile(filename)
	events = midi_to_events(mid)

	logger.info(f"Read {len(events)} notes from {filename}")

	return events
