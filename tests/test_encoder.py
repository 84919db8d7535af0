import pytest

import tonelang.encoder


@pytest.mark.parametrize("value, text", [
	(2.0, "2"),
	(0.25, "0.25"),
	(1 / 3, "0.333"),
	(2.5, "2.5"),
	(0.0, "0"),
	(1.0004, "1"),
])
def test_format_number (value: float, text: str) -> None:

	"""Numbers print with at most three decimals and no trailing zeros."""

	assert tonelang.encoder.format_number(value) == text


@pytest.mark.parametrize("duration, text", [
	(1.0, "*1"),
	(2.0, "*2"),
	(1.5, "*1.5"),
	(0.5, "/2"),
	(0.25, "/4"),
	(1 / 3, "/3"),
	(0.75, "*0.75"),
	(0.4, "*0.4"),
])
def test_format_duration (duration: float, text: str) -> None:

	"""Short durations that divide a beat are written as fractions."""

	assert tonelang.encoder.format_duration(duration) == text


def test_group_onsets (note) -> None:

	"""Simultaneous notes are grouped and sorted by pitch."""

	groups = tonelang.encoder.group_onsets([note(67, 0), note(60, 0), note(64, 0.0004), note(62, 1)])

	assert len(groups) == 2
	assert groups[0].is_chord
	assert [e.pitch for e in groups[0].events] == [60, 64, 67]
	assert not groups[1].is_chord


def test_defaults_are_omitted (note) -> None:

	"""Velocity 70 and one-beat durations are implied."""

	encoder = tonelang.encoder.VoiceEncoder()

	assert encoder.encode([note(60, 0), note(62, 1)]) == "C3 D3"


def test_explicit_values (note) -> None:

	"""Other velocities and durations are written out."""

	encoder = tonelang.encoder.VoiceEncoder()

	assert encoder.encode([note(60, 0, duration=0.5, velocity=100), note(62, 0.5, duration=2)]) == "C3v100/2 D3*2"


def test_time_gap_when_next_onset_differs (note) -> None:

	"""A gap longer or shorter than the duration is written with ``t``."""

	encoder = tonelang.encoder.VoiceEncoder()

	assert encoder.encode([note(60, 0), note(62, 2), note(64, 2.5)]) == "C3t2 D3t0.5 E3"


def test_last_group_has_no_time_gap (note) -> None:

	"""The final group's duration alone describes it."""

	encoder = tonelang.encoder.VoiceEncoder()

	assert encoder.encode([note(60, 0, duration=3)]) == "C3*3"


def test_leading_rest (note) -> None:

	"""A voice starting after beat 0 begins with a rest."""

	encoder = tonelang.encoder.VoiceEncoder()

	assert encoder.encode([note(64, 1)]) == "R E3"
	assert encoder.encode([note(64, 0.5)]) == "R/2 E3"
	assert encoder.encode([note(64, 2.5)]) == "R*2.5 E3"


def test_chord (note) -> None:

	"""Notes sharing an onset are bracketed."""

	encoder = tonelang.encoder.VoiceEncoder()

	assert encoder.encode([note(64, 0), note(60, 0), note(67, 0), note(67, 1)]) == "[C3 E3 G3] G3"


def test_chord_with_shared_values (note) -> None:

	"""Shared values move to the chord; odd ones out are member overrides."""

	encoder = tonelang.encoder.VoiceEncoder()
	voice = [note(60, 0, velocity=90), note(64, 0, velocity=90), note(67, 0, duration=2)]

	assert encoder.encode(voice) == "[C3 E3 G3v70*2]v90"


def test_chord_time_gap_uses_chord_duration (note) -> None:

	"""The chord's duration, not a member override, is compared to the gap."""

	encoder = tonelang.encoder.VoiceEncoder()
	voice = [note(60, 0, duration=2), note(64, 0, duration=2), note(67, 0, duration=4), note(72, 2)]

	assert encoder.encode(voice) == "[C3 E3 G3*4]*2 C4"


def test_chord_without_common_values (note) -> None:

	"""Members that share nothing are written as separate notes joined by ``t0``."""

	encoder = tonelang.encoder.VoiceEncoder()
	voice = [note(60, 0, velocity=80), note(64, 0, duration=2, velocity=90), note(67, 1)]

	assert encoder.encode(voice) == "C3v80t0 E3v90*2t1 G3"


def test_custom_defaults (note) -> None:

	"""Omission follows the encoder's defaults."""

	encoder = tonelang.encoder.VoiceEncoder(default_velocity=100, default_duration=0.5)
	voice = [note(60, 0, duration=0.5, velocity=100), note(62, 0.5, duration=1, velocity=70)]

	assert encoder.encode(voice) == "C3 D3v70*1"


def test_encode_voices (note) -> None:

	"""Voices are joined with the separator."""

	encoder = tonelang.encoder.VoiceEncoder()

	assert encoder.encode_voices([[note(60, 0)], [note(55, 0)]]) == "C3;G2"
	assert encoder.encode_voices([[note(60, 0)], [note(55, 0)]], separator="; ") == "C3; G2"


def test_duration_value () -> None:

	"""Modifiers read back as the beats the parser gives them."""

	assert tonelang.encoder.duration_value("*2") == 2.0
	assert tonelang.encoder.duration_value("*1.234") == 1.234
	assert tonelang.encoder.duration_value("/4") == 0.25
	assert tonelang.encoder.duration_value("/3") == pytest.approx(1 / 3)


def test_triplet_gaps_do_not_drift (note) -> None:

	"""Rounded gaps are measured from where the text has placed the previous note."""

	encoder = tonelang.encoder.VoiceEncoder()
	voice = [note(42, k / 3, 0.25) for k in range(4)]

	assert encoder.encode(voice) == "Gb1/4t0.333 Gb1/4t0.334 Gb1/4t0.333 Gb1/4"


def test_rounded_durations_do_not_drift (note) -> None:

	"""Implicit advances by a rounded duration get corrected before they add up."""

	encoder = tonelang.encoder.VoiceEncoder()
	voice = [note(60, k * 1.2344, 1.2344) for k in range(6)]

	assert encoder.encode(voice) == "C3*1.234 C3*1.234t1.235 C3*1.234 C3*1.234t1.235 C3*1.234 C3*1.234"


def test_leading_rest_is_rounded_once (note) -> None:

	"""Gaps after a rounded rest start from the rest's written length."""

	encoder = tonelang.encoder.VoiceEncoder()
	voice = [note(60, 2 / 3, 1 / 3), note(62, 1, 1 / 3)]

	assert encoder.encode(voice) == "R*0.667 C3/3 D3/3"
