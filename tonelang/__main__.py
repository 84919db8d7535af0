"""Command line interface for ToneLang.

Usage::

    python -m tonelang parse "C3 [E3 G3]v90 R D3*2"
    python -m tonelang format notes.json
    cat notes.json | python -m tonelang format - --drum
    python -m tonelang to-midi "(C3 E3 G3)*4" arpeggio.mid
    python -m tonelang from-midi clip.mid

``notes.json`` holds a list of ``{"pitch", "velocity", "start_time", "duration"}``
records. Defaults can be changed with ``--config tonelang.yaml`` (see
``tonelang.config``).
"""

import argparse
import json
import logging
import sys
import typing

import tonelang
import tonelang.config
import tonelang.errors
import tonelang.events
import tonelang.formatter
import tonelang.midi_file


logger = logging.getLogger(__name__)


def _build_parser () -> argparse.ArgumentParser:

	parser = argparse.ArgumentParser(prog="tonelang", description="Convert between ToneLang notation and note events")
	parser.add_argument("--config", default=None, help="YAML config file (default: built-in defaults)")
	parser.add_argument("--verbose", action="store_true", help="Log debug output")

	commands = parser.add_subparsers(dest="command", required=True)

	parse_command = commands.add_parser("parse", help="Print the note events of a ToneLang string as JSON")
	parse_command.add_argument("text", help="ToneLang notation")

	format_command = commands.add_parser("format", help="Print ToneLang for a JSON list of note events")
	format_command.add_argument("file", help="JSON file, or - for stdin")
	format_command.add_argument("--drum", action="store_true", help="One voice per pitch (drum rack)")

	to_midi_command = commands.add_parser("to-midi", help="Write a ToneLang string to a MIDI file")
	to_midi_command.add_argument("text", help="ToneLang notation")
	to_midi_command.add_argument("output", help="MIDI file to write")

	from_midi_command = commands.add_parser("from-midi", help="Print ToneLang for the notes of a MIDI file")
	from_midi_command.add_argument("input", help="MIDI file to read")
	from_midi_command.add_argument("--drum", action="store_true", help="One voice per pitch (drum rack)")

	return parser


def _format (events: typing.Sequence[tonelang.events.EventLike], config: tonelang.config.ToneLangConfig, drum: bool) -> str:

	return tonelang.formatter.format_events(
		events,
		variant=tonelang.formatter.DRUM if drum else config.variant,
		default_velocity=config.default_velocity,
		default_duration=config.default_duration,
		separator=config.voice_separator
	)


def _read_records (path: str) -> typing.List[typing.Dict[str, typing.Any]]:

	if path == "-":
		records = json.load(sys.stdin)
	else:
		with open(path, "r") as f:
			records = json.load(f)

	if not isinstance(records, list):
		raise tonelang.errors.ToneLangRangeError(f"Expected a JSON list of note records in {path}", field="events", value=type(records).__name__)

	return records


def run (args: argparse.Namespace) -> None:

	"""Execute one parsed command, printing its result to stdout."""

	config = tonelang.config.load_config(args.config) if args.config else tonelang.config.ToneLangConfig()

	if args.command == "parse":
		events = tonelang.parse(args.text, default_velocity=config.default_velocity, default_duration=config.default_duration)
		print(json.dumps([event.to_dict() for event in events], indent=2))

	elif args.command == "format":
		print(_format(_read_records(args.file), config, args.drum))

	elif args.command == "to-midi":
		events = tonelang.parse(args.text, default_velocity=config.default_velocity, default_duration=config.default_duration)
		tonelang.midi_file.write_midi_file(events, args.output, bpm=config.bpm, ticks_per_beat=config.ticks_per_beat)

	elif args.command == "from-midi":
		print(_format(tonelang.midi_file.read_midi_file(args.input), config, args.drum))


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Main entry point for the tonelang command.
	"""

	args = _build_parser().parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	try:
		run(args)
	except tonelang.errors.ToneLangError as exc:
		logger.error(str(exc))
		return 1
	except (OSError, json.JSONDecodeError) as exc:
		logger.error(f"Could not read input: {exc}")
		return 1

	return 0


if __name__ == "__main__":
	sys.exit(main())
