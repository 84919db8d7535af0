"""Configuration for the ToneLang command line tool.

Settings are read from a YAML file. Every key is optional; anything missing
keeps its default. Example ``tonelang.yaml``::

    default_velocity: 100
    default_duration: 0.5
    variant: drum
    voice_separator: "; "
    midi:
      bpm: 90
      ticks_per_beat: 960
"""

import dataclasses
import logging
import os
import typing

import yaml

import tonelang.constants
import tonelang.errors
import tonelang.formatter


logger = logging.getLogger(__name__)


@dataclasses.dataclass
class ToneLangConfig:

	"""Defaults applied when parsing, formatting and writing MIDI files."""

	default_velocity: int = tonelang.constants.DEFAULT_VELOCITY
	default_duration: float = tonelang.constants.DEFAULT_DURATION
	variant: str = tonelang.formatter.MELODIC
	voice_separator: str = ";"
	bpm: float = 120.0
	ticks_per_beat: int = 480

	def validate (self) -> None:

		"""Raise ``ToneLangConfigError`` if any setting is unusable."""

		if not tonelang.constants.MIN_VELOCITY <= self.default_velocity <= tonelang.constants.MAX_VELOCITY:
			raise tonelang.errors.ToneLangConfigError(f"default_velocity must be 0-127, got {self.default_velocity}")

		if self.default_duration <= 0:
			raise tonelang.errors.ToneLangConfigError(f"default_duration must be positive, got {self.default_duration}")

		if self.variant not in tonelang.formatter.VARIANTS:
			raise tonelang.errors.ToneLangConfigError(f"variant must be one of {list(tonelang.formatter.VARIANTS)}, got {self.variant!r}")

		if self.voice_separator.strip() != ";":
			raise tonelang.errors.ToneLangConfigError(f"voice_separator must be ';' with optional spaces, got {self.voice_separator!r}")

		if self.bpm <= 0:
			raise tonelang.errors.ToneLangConfigError(f"midi.bpm must be positive, got {self.bpm}")

		if self.ticks_per_beat <= 0:
			raise tonelang.errors.ToneLangConfigError(f"midi.ticks_per_beat must be positive, got {self.ticks_per_beat}")


_TOP_LEVEL_KEYS = {"default_velocity", "default_duration", "variant", "voice_separator", "midi"}
_MIDI_KEYS = {"bpm", "ticks_per_beat"}


def config_from_dict (data: typing.Optional[typing.Mapping[str, typing.Any]]) -> ToneLangConfig:

	"""Build a validated config from parsed YAML. Unknown keys are logged and ignored."""

	if not data:
		return ToneLangConfig()

	if not isinstance(data, dict):
		raise tonelang.errors.ToneLangConfigError(f"Config must be a mapping, got {type(data).__name__}")

	for key in data:
		if key not in _TOP_LEVEL_KEYS:
			logger.warning(f"Ignoring unknown config key {key!r}")

	midi = data.get("midi") or {}

	if not isinstance(midi, dict):
		raise tonelang.errors.ToneLangConfigError(f"Config 'midi' must be a mapping, got {type(midi).__name__}")

	for key in midi:
		if key not in _MIDI_KEYS:
			logger.warning(f"Ignoring unknown config key 'midi.{key}'")

	defaults = ToneLangConfig()

	try:
		config = ToneLangConfig(
			default_velocity=int(data.get("default_velocity", defaults.default_velocity)),
			default_duration=float(data.get("default_duration", defaults.default_duration)),
			variant=str(data.get("variant", defaults.variant)),
			voice_separator=str(data.get("voice_separator", defaults.voice_separator)),
			bpm=float(midi.get("bpm", defaults.bpm)),
			ticks_per_beat=int(midi.get("ticks_per_beat", defaults.ticks_per_beat)),
		)
	except (TypeError, ValueError) as exc:
		raise tonelang.errors.ToneLangConfigError(f"Invalid config value: {exc}") from exc

	config.validate()

	return config


def load_config (config_path: str = "tonelang.yaml") -> ToneLangConfig:

	"""
	Load configuration from a YAML file.

	A missing file is not an error: a warning is logged and defaults are used.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return ToneLangConfig()

	with open(config_path, "r") as f:
		try:
			data = yaml.safe_load(f)
		except yaml.YAMLError as exc:
			raise tonelang.errors.ToneLangConfigError(f"Could not read config file {config_path}: {exc}") from exc

	logger.info(f"Loaded config from {config_path}")

	return config_from_dict(data)
