"""Turn note events back into ToneLang text.

This is the reverse of ``tonelang.parse``: events are split into voices
(``tonelang.voices``), each voice is encoded (``tonelang.encoder``), and the
voices are joined with ``;``.
"""

import logging
import typing

import tonelang.constants
import tonelang.encoder
import tonelang.events
import tonelang.voices


logger = logging.getLogger(__name__)

MELODIC = "melodic"
DRUM = "drum"

VARIANTS = (MELODIC, DRUM)


def format_events (
	events: typing.Optional[typing.Iterable[tonelang.events.EventLike]],
	variant: str = MELODIC,
	default_velocity: int = tonelang.constants.DEFAULT_VELOCITY,
	default_duration: float = tonelang.constants.DEFAULT_DURATION,
	separator: str = ";"
) -> str:

	"""
	Format note events as canonical ToneLang.

	Parameters:
		events: ``NoteEvent`` objects or interchange dicts, in any order.
		variant: ``"melodic"`` splits overlapping notes into voices;
			``"drum"`` writes one voice per pitch (drum pad).
		default_velocity: Velocity left implicit in the output.
		default_duration: Duration left implicit in the output.
		separator: Text placed between voices.

	Returns:
		The notation, or ``""`` when there are no events.

	Raises:
		ValueError: For an unknown ``variant``.
		ToneLangRangeError: For events with out-of-range fields.

	Example:
		```python
		format_events([
			{"pitch": 60, "velocity": 70, "start_time": 0, "duration": 1},
			{"pitch": 64, "velocity": 70, "start_time": 0, "duration": 1},
			{"pitch": 67, "velocity": 90, "start_time": 1, "duration": 2},
		])
		# "[C3 E3] G3v90*2"
		```
	"""

	if variant not in tonelang.voices.PARTITIONERS:
		raise ValueError(f"Unknown variant {variant!r}. Expected one of {list(VARIANTS)}")

	notes = tonelang.events.coerce_events(events)

	if not notes:
		return ""

	voices = tonelang.voices.PARTITIONERS[variant](notes)
	encoder = tonelang.encoder.VoiceEncoder(default_velocity=default_velocity, default_duration=default_duration)

	logger.debug(f"Formatting {len(notes)} events as {len(voices)} {variant} voice(s)")

	return encoder.encode_voices(voices, separator)
