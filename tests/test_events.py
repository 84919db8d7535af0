import dataclasses

import pytest

import tonelang.errors
import tonelang.events


def test_end_time (note) -> None:

	"""A note ends after its duration."""

	assert note(60, 1.5, duration=2).end_time == 3.5


def test_dict_round_trip (note) -> None:

	"""The interchange record carries all four fields."""

	event = note(64, 2, duration=0.5, velocity=90)
	record = event.to_dict()

	assert record == {"pitch": 64, "velocity": 90, "start_time": 2, "duration": 0.5}
	assert tonelang.events.NoteEvent.from_dict(record) == event


def test_from_dict_converts_types () -> None:

	"""Numbers from JSON are normalised."""

	event = tonelang.events.NoteEvent.from_dict({"pitch": 60.0, "velocity": 80, "start_time": 1, "duration": "2"})

	assert event.pitch == 60
	assert isinstance(event.pitch, int)
	assert event.start_time == 1.0
	assert event.duration == 2.0


def test_from_dict_missing_field () -> None:

	"""Records without a pitch are rejected."""

	with pytest.raises(tonelang.errors.ToneLangRangeError) as info:
		tonelang.events.NoteEvent.from_dict({"start_time": 0, "duration": 1})

	assert info.value.field == "pitch"


def test_events_are_immutable (note) -> None:

	"""Events are frozen values."""

	with pytest.raises(dataclasses.FrozenInstanceError):
		note(60, 0).pitch = 61


def test_coerce_events_mixed (note) -> None:

	"""Events and records can be mixed and keep their order."""

	events = tonelang.events.coerce_events([note(62, 1), {"pitch": 60, "start_time": 0, "duration": 1}])

	assert events == [note(62, 1), note(60, 0)]


def test_coerce_events_none () -> None:

	"""``None`` means no events."""

	assert tonelang.events.coerce_events(None) == []


def test_validate (note) -> None:

	"""Out-of-range fields raise with the field name."""

	note(127, 0, velocity=127).validate()
	note(0, 0, velocity=0).validate()

	with pytest.raises(tonelang.errors.ToneLangRangeError) as info:
		note(60, 0, velocity=200).validate()

	assert info.value.field == "velocity"
	assert info.value.value == 200
