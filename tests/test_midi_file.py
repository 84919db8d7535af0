import logging
import typing

import mido
import pytest

import tonelang
import tonelang.midi_file


def test_events_to_midi_messages (note) -> None:

	"""Notes become note_on / note_off pairs after a tempo message."""

	mid = tonelang.midi_file.events_to_midi([note(60, 0, velocity=90), note(62, 1, duration=0.5)], bpm=100, ticks_per_beat=480)

	track = mid.tracks[0]

	assert mid.type == 0
	assert track[0].type == "set_tempo"
	assert track[0].tempo == mido.bpm2tempo(100)
	assert [(m.type, m.note, m.time) for m in track if m.type.startswith("note")] == [
		("note_on", 60, 0),
		("note_off", 60, 480),
		("note_on", 62, 0),
		("note_off", 62, 240),
	]
	assert track[-1].type == "end_of_track"


def test_repeated_pitch_is_released_first (note) -> None:

	"""A note_off sorts before a note_on of the same pitch at the same tick."""

	mid = tonelang.midi_file.events_to_midi([note(60, 0), note(60, 1)])
	types = [m.type for m in mid.tracks[0] if m.type.startswith("note")]

	assert types == ["note_on", "note_off", "note_on", "note_off"]


def test_round_trip_in_memory (note, same_events) -> None:

	"""Events survive conversion to MIDI messages and back."""

	events = [note(60, 0), note(64, 0, duration=2, velocity=90), note(60, 1, velocity=100)]

	same_events(tonelang.midi_file.midi_to_events(tonelang.midi_file.events_to_midi(events)), events)


def test_round_trip_through_file (tmp_path, same_events) -> None:

	"""Parsed notation can be saved and read back."""

	events = tonelang.parse("[C3 E3 G3]*2 (C3 D3/2)*2")
	path = str(tmp_path / "sketch.mid")

	tonelang.midi_file.write_midi_file(events, path, bpm=90)

	same_events(tonelang.midi_file.read_midi_file(path), events)


def _midi_with (*messages: mido.Message) -> mido.MidiFile:

	mid = mido.MidiFile(ticks_per_beat=480)
	mid.tracks.append(mido.MidiTrack(messages))

	return mid


def test_note_on_with_zero_velocity_ends_note (note) -> None:

	"""Running-status style note_on velocity 0 is a note_off."""

	mid = _midi_with(
		mido.Message("note_on", note=60, velocity=80, time=0),
		mido.Message("note_on", note=60, velocity=0, time=960),
	)

	assert tonelang.midi_file.midi_to_events(mid) == [note(60, 0, duration=2, velocity=80)]


def test_unterminated_note_ends_with_track (note, caplog) -> None:

	"""A note with no note_off lasts until the end of its track."""

	mid = _midi_with(
		mido.Message("note_on", note=60, velocity=80, time=0),
		mido.Message("note_on", note=64, velocity=80, time=480),
		mido.Message("note_off", note=64, velocity=0, time=480),
	)

	with caplog.at_level(logging.WARNING):
		events = tonelang.midi_file.midi_to_events(mid)

	assert events == [note(60, 0, duration=2, velocity=80), note(64, 1, velocity=80)]
	assert "no note_off" in caplog.text


def test_zero_length_notes_are_dropped () -> None:

	"""Notes that end where they start carry no duration."""

	mid = _midi_with(
		mido.Message("note_on", note=60, velocity=80, time=0),
		mido.Message("note_off", note=60, velocity=0, time=0),
	)

	assert tonelang.midi_file.midi_to_events(mid) == []


def test_invalid_events_are_rejected () -> None:

	"""Events are validated before writing."""

	with pytest.raises(tonelang.ToneLangRangeError):
		tonelang.midi_file.events_to_midi([{"pitch": 130, "start_time": 0, "duration": 1}])


def test_triplet_clip_formats_without_drift (same_events) -> None:

	"""Triplet ticks (160 at 480 per beat) read back and survive formatting."""

	messages: typing.List[mido.Message] = []

	for k in range(24):
		messages.append(mido.Message("note_on", note=42, velocity=100, time=0 if k == 0 else 40))
		messages.append(mido.Message("note_off", note=42, velocity=0, time=120))

	events = tonelang.midi_file.midi_to_events(_midi_with(*messages))

	assert len(events) == 24
	assert events[-1].start_time == pytest.approx(23 / 3)

	same_events(tonelang.parse(tonelang.format(events, variant="drum")), events)
