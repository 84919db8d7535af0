import typing

import pytest

import tonelang.events


def _note (pitch: int, start_time: float, duration: float = 1.0, velocity: int = 70) -> tonelang.events.NoteEvent:

	"""Build a note event with ToneLang's default velocity and duration."""

	return tonelang.events.NoteEvent(pitch=pitch, velocity=velocity, start_time=start_time, duration=duration)


@pytest.fixture
def note () -> typing.Callable[..., tonelang.events.NoteEvent]:

	"""Factory for note events: ``note(pitch, start_time, duration=1, velocity=70)``."""

	return _note


def sort_events (events: typing.Iterable[tonelang.events.NoteEvent]) -> typing.List[tonelang.events.NoteEvent]:

	"""Order events by start time, then pitch, for order-insensitive comparison."""

	return sorted(events, key=lambda event: (round(event.start_time, 6), event.pitch))


def assert_same_events (actual: typing.Iterable[tonelang.events.NoteEvent], expected: typing.Iterable[tonelang.events.NoteEvent]) -> None:

	"""Compare two event collections, ignoring order, with times within 1e-3."""

	actual_sorted = sort_events(actual)
	expected_sorted = sort_events(expected)

	assert len(actual_sorted) == len(expected_sorted)

	for a, e in zip(actual_sorted, expected_sorted):
		assert a.pitch == e.pitch
		assert a.velocity == e.velocity
		assert a.start_time == pytest.approx(e.start_time, abs=1e-3)
		assert a.duration == pytest.approx(e.duration, abs=1e-3)


@pytest.fixture
def same_events () -> typing.Callable[..., None]:

	"""Order-insensitive event comparison helper."""

	return assert_same_events
