"""Tokenizer for ToneLang text.

Splits notation into a flat list of ``Token`` objects, each remembering where
it started so the parser can point at the offending text when something is
wrong. Whitespace is kept as ``SPACE`` tokens because it is significant: it
separates elements, while modifiers must sit directly against the note, chord
or group they modify.

Example:
	```python
	[t.kind for t in tokenize("[C3 E3]v90")]
	# ["LBRACKET", "PITCH", "SPACE", "PITCH", "RBRACKET", "VELOCITY", "END"]
	```
"""

import dataclasses
import re
import typing

import tonelang.errors


SPACE = "SPACE"
PITCH = "PITCH"
REST = "REST"
VELOCITY = "VELOCITY"
MULTIPLY = "MULTIPLY"
DIVIDE = "DIVIDE"
TIME_GAP = "TIME_GAP"
LBRACKET = "LBRACKET"
RBRACKET = "RBRACKET"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
SEMICOLON = "SEMICOLON"
END = "END"

MODIFIER_KINDS = frozenset({VELOCITY, MULTIPLY, DIVIDE, TIME_GAP})

_DECIMAL = r"(?:\d+(?:\.\d+)?|\.\d+)"

# Order matters: the first alternative that matches wins.
_TOKEN_SPEC: typing.List[typing.Tuple[str, str]] = [
	(SPACE, r"\s+"),
	(PITCH, r"[A-G](?:#|b)?-?\d+"),
	(REST, r"R"),
	(VELOCITY, r"v\d+"),
	(MULTIPLY, r"\*" + _DECIMAL),
	(DIVIDE, r"/" + _DECIMAL),
	(TIME_GAP, r"t" + _DECIMAL),
	(LBRACKET, r"\["),
	(RBRACKET, r"\]"),
	(LPAREN, r"\("),
	(RPAREN, r"\)"),
	(SEMICOLON, r";"),
]

_TOKEN_PATTERN = re.compile("|".join(f"(?P<{kind}>{pattern})" for kind, pattern in _TOKEN_SPEC))

_PITCH_PARTS = re.compile(r"([A-G](?:#|b)?)(-?\d+)")


@dataclasses.dataclass(frozen=True)
class Token:

	"""
	A lexical unit of ToneLang text.

	``value`` holds the decoded payload: a ``(pitch_class, octave)`` pair for
	pitches, an ``int`` for velocities, a ``float`` for durations and time gaps,
	and ``None`` for punctuation.
	"""

	kind: str
	text: str
	position: int
	value: typing.Any = None


def tokenize (text: str) -> typing.List[Token]:

	"""Convert ToneLang text into tokens, ending with a single ``END`` token.

	Raises:
		ToneLangSyntaxError: At the first character that cannot start a token.
	"""

	tokens: typing.List[Token] = []
	position = 0

	while position < len(text):

		match = _TOKEN_PATTERN.match(text, position)

		if match is None:
			raise _unexpected_character(text, position)

		kind = typing.cast(str, match.lastgroup)
		raw = match.group()
		tokens.append(Token(kind, raw, position, _decode(kind, raw)))
		position = match.end()

	tokens.append(Token(END, "", len(text)))

	return tokens


def _decode (kind: str, raw: str) -> typing.Any:

	"""Extract the payload of a token from its raw text."""

	if kind == PITCH:
		parts = _PITCH_PARTS.fullmatch(raw)
		assert parts is not None
		return parts.group(1), int(parts.group(2))

	if kind == VELOCITY:
		return int(raw[1:])

	if kind in (MULTIPLY, DIVIDE, TIME_GAP):
		return float(raw[1:])

	return None


def _unexpected_character (text: str, position: int) -> tonelang.errors.ToneLangSyntaxError:

	"""Build the error for text that no token pattern accepts."""

	char = text[position]

	# A modifier prefix with a bad value: point at the value, not the prefix.
	if char in "v*/t" and position + 1 < len(text):
		following = text[position + 1]
		return tonelang.errors.ToneLangSyntaxError(
			f"syntax error: Unexpected {following!r} after {char!r} at position {position + 1}",
			text=following,
			position=position + 1
		)

	if char in "v*/t":
		return tonelang.errors.ToneLangSyntaxError(
			f"syntax error: Expected a number after {char!r} at position {position}",
			text=char,
			position=position
		)

	if char in "ABCDEFG":
		return tonelang.errors.ToneLangSyntaxError(
			f"syntax error: Expected an octave number after {text[position:position + 2].rstrip()!r} at position {position}",
			text=char,
			position=position
		)

	return tonelang.errors.ToneLangSyntaxError(
		f"syntax error: Unexpected {char!r} at position {position}",
		text=char,
		position=position
	)
