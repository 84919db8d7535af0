"""Recursive-descent parser for ToneLang.

Turns text into a syntax tree (``tonelang.syntax_tree``), validating pitch and
velocity ranges on the way. Parsing is all-or-nothing: the first problem
raises and nothing is returned.

**Syntax:**
- `C3 Db3 F#3`: Notes separated by whitespace play one after another.
- `C3v90`: Velocity 0-127 (default 70).
- `C3*2`, `C3/4`, `C3*1.5`: Duration as a multiple or fraction of a quarter note.
- `C3*2t1`: Sound for 2 beats, but start the next element after 1 beat.
- `[C3 E3 G3]v80`: Chord. Chord modifiers are defaults for its notes.
- `R`, `R*2`: Rest.
- `(C3 D3)*4`, `(C3 D3)v90`: Group, optionally repeated, optionally with a velocity.
- `C3 D3; G2 A2`: Independent voices, each starting at beat 0.

Modifiers may be written in any order but each kind only once.

The parser keeps its position in a ``_TokenStream`` created per call, so it is
safe to use from several threads at once.
"""

import logging
import typing

import tonelang.constants
import tonelang.errors
import tonelang.lexer
import tonelang.pitch
import tonelang.syntax_tree


logger = logging.getLogger(__name__)

# MULTIPLY and DIVIDE are two spellings of one modifier.
_MODIFIER_FAMILY: typing.Dict[str, str] = {
	tonelang.lexer.VELOCITY: "velocity",
	tonelang.lexer.MULTIPLY: "duration",
	tonelang.lexer.DIVIDE: "duration",
	tonelang.lexer.TIME_GAP: "time gap",
}

_NOTE_MODIFIERS = frozenset({tonelang.lexer.VELOCITY, tonelang.lexer.MULTIPLY, tonelang.lexer.DIVIDE, tonelang.lexer.TIME_GAP})
_CHORD_NOTE_MODIFIERS = frozenset({tonelang.lexer.VELOCITY, tonelang.lexer.MULTIPLY, tonelang.lexer.DIVIDE})
_REST_MODIFIERS = frozenset({tonelang.lexer.MULTIPLY, tonelang.lexer.DIVIDE})
_GROUP_MODIFIERS = frozenset({tonelang.lexer.VELOCITY, tonelang.lexer.MULTIPLY})

# Most notes and rests a single group may unfold into, nested repeats included.
MAX_GROUP_EXPANSION = 100000


class _TokenStream:

	"""Cursor over the tokens of one parse call."""

	def __init__ (self, tokens: typing.List[tonelang.lexer.Token]) -> None:

		self.tokens = tokens
		self.index = 0

	def peek (self) -> tonelang.lexer.Token:

		return self.tokens[self.index]

	def advance (self) -> tonelang.lexer.Token:

		token = self.tokens[self.index]

		# END is never consumed, so peek() stays valid.
		if token.kind != tonelang.lexer.END:
			self.index += 1

		return token

	def skip_space (self) -> None:

		while self.peek().kind == tonelang.lexer.SPACE:
			self.advance()


def parse_expression (text: str) -> tonelang.syntax_tree.Expression:

	"""
	Parse ToneLang text into a syntax tree.

	Parameters:
		text: The notation to parse.

	Returns:
		A ``Sequence`` for single-voice text, or a ``MultiVoice`` when the
		text contains ``;``.

	Raises:
		ToneLangSyntaxError: For malformed or misplaced tokens.
		ToneLangRangeError: For out-of-range pitches, velocities, durations or counts.

	Example:
		```python
		parse_expression("C3 [E3 G3]v90")
		# Sequence(elements=(Note(...), Chord(...)))
		```
	"""

	stream = _TokenStream(tonelang.lexer.tokenize(text))

	voices = [_parse_sequence(stream, closing=None)]

	while stream.peek().kind == tonelang.lexer.SEMICOLON:
		stream.advance()
		voices.append(_parse_sequence(stream, closing=None))

	token = stream.peek()

	if token.kind != tonelang.lexer.END:
		raise _unexpected(token, "unbalanced closing bracket")

	logger.debug(f"Parsed {len(voices)} voice(s) from {len(stream.tokens)} tokens")

	if len(voices) == 1:
		return voices[0]

	return tonelang.syntax_tree.MultiVoice(tuple(voices))


def _parse_sequence (stream: _TokenStream, closing: typing.Optional[str]) -> tonelang.syntax_tree.Sequence:

	"""Parse whitespace-separated elements up to ``;``, the end, or ``closing``."""

	elements: typing.List[tonelang.syntax_tree.Element] = []

	stream.skip_space()

	while not _ends_sequence(stream.peek(), closing):

		elements.append(_parse_element(stream))

		token = stream.peek()

		if token.kind == tonelang.lexer.SPACE:
			stream.skip_space()
			continue

		if _ends_sequence(token, closing):
			break

		if token.kind in (tonelang.lexer.RBRACKET, tonelang.lexer.RPAREN):
			raise _unexpected(token, "unbalanced closing bracket")

		raise _unexpected(token, "expected whitespace between elements")

	return tonelang.syntax_tree.Sequence(tuple(elements))


def _ends_sequence (token: tonelang.lexer.Token, closing: typing.Optional[str]) -> bool:

	return token.kind in (tonelang.lexer.END, tonelang.lexer.SEMICOLON) or token.kind == closing


def _parse_element (stream: _TokenStream) -> tonelang.syntax_tree.Element:

	"""Parse one note, chord, rest or group."""

	token = stream.peek()

	if token.kind == tonelang.lexer.PITCH:
		return _parse_note(stream, _NOTE_MODIFIERS, "a note")

	if token.kind == tonelang.lexer.LBRACKET:
		return _parse_chord(stream)

	if token.kind == tonelang.lexer.REST:
		return _parse_rest(stream)

	if token.kind == tonelang.lexer.LPAREN:
		return _parse_group(stream)

	if token.kind in tonelang.lexer.MODIFIER_KINDS:
		raise _unexpected(token, "modifiers must directly follow a note, chord, rest or group")

	raise _unexpected(token, "unbalanced closing bracket")


def _parse_note (stream: _TokenStream, allowed: typing.FrozenSet[str], context: str) -> tonelang.syntax_tree.Note:

	token = stream.advance()
	pitch_class, octave = token.value

	try:
		pitch = tonelang.pitch.pitch_from_parts(pitch_class, octave)
	except tonelang.errors.ToneLangError as exc:
		raise type(exc)(f"{exc} in {_where(token)}", **_error_details(exc, token)) from exc

	modifiers = _parse_modifiers(stream, allowed, context)

	return tonelang.syntax_tree.Note(
		pitch_class=pitch_class,
		octave=octave,
		pitch=pitch,
		velocity=_velocity(modifiers),
		duration=_duration(modifiers),
		time_gap=_time_gap(modifiers),
	)


def _parse_chord (stream: _TokenStream) -> tonelang.syntax_tree.Chord:

	opening = stream.advance()
	notes: typing.List[tonelang.syntax_tree.Note] = []

	stream.skip_space()

	while stream.peek().kind != tonelang.lexer.RBRACKET:

		token = stream.peek()

		if token.kind == tonelang.lexer.END or token.kind == tonelang.lexer.SEMICOLON:
			raise _unclosed(opening, "]")

		if token.kind != tonelang.lexer.PITCH:
			raise _unexpected(token, "only notes are allowed inside a chord")

		notes.append(_parse_note(stream, _CHORD_NOTE_MODIFIERS, "a chord note"))

		token = stream.peek()

		if token.kind == tonelang.lexer.SPACE:
			stream.skip_space()
		elif token.kind not in (tonelang.lexer.RBRACKET, tonelang.lexer.END, tonelang.lexer.SEMICOLON):
			raise _unexpected(token, "expected whitespace between chord notes")

	if not notes:
		raise tonelang.errors.ToneLangSyntaxError(
			f"syntax error: Empty chord at position {opening.position}",
			text="[]",
			position=opening.position
		)

	stream.advance()
	modifiers = _parse_modifiers(stream, _NOTE_MODIFIERS, "a chord")

	return tonelang.syntax_tree.Chord(
		notes=tuple(notes),
		velocity=_velocity(modifiers),
		duration=_duration(modifiers),
		time_gap=_time_gap(modifiers),
	)


def _parse_rest (stream: _TokenStream) -> tonelang.syntax_tree.Rest:

	stream.advance()
	modifiers = _parse_modifiers(stream, _REST_MODIFIERS, "a rest")

	return tonelang.syntax_tree.Rest(duration=_duration(modifiers))


def _parse_group (stream: _TokenStream) -> tonelang.syntax_tree.Repetition:

	opening = stream.advance()
	body = _parse_sequence(stream, closing=tonelang.lexer.RPAREN)

	if stream.peek().kind != tonelang.lexer.RPAREN:
		raise _unclosed(opening, ")")

	stream.advance()
	modifiers = _parse_modifiers(stream, _GROUP_MODIFIERS, "a group")

	count = 1
	count_token = modifiers.get("duration")

	if count_token is not None:

		if "." in count_token.text:
			raise tonelang.errors.ToneLangSyntaxError(
				f"syntax error: Repetition count must be a whole number, got {_where(count_token)}",
				text=count_token.text,
				position=count_token.position
			)

		count = int(count_token.value)

		if count < 1:
			raise tonelang.errors.ToneLangRangeError(
				f"Repetition count {count} is outside valid range (must be at least 1) in {_where(count_token)}",
				field="count",
				value=count,
				text=count_token.text,
				position=count_token.position
			)

		expanded = count * _expanded_size(body)

		if expanded > MAX_GROUP_EXPANSION:
			raise tonelang.errors.ToneLangRangeError(
				f"Repetition count {count} is outside valid range (group would unfold into {expanded} "
				f"elements, limit {MAX_GROUP_EXPANSION}) in {_where(count_token)}",
				field="count",
				value=count,
				text=count_token.text,
				position=count_token.position
			)

	return tonelang.syntax_tree.Repetition(body=body, count=count, velocity=_velocity(modifiers))


def _expanded_size (sequence: tonelang.syntax_tree.Sequence) -> int:

	"""Number of notes and rests ``sequence`` produces once every repeat is unfolded."""

	size = 0

	for element in sequence.elements:

		if isinstance(element, tonelang.syntax_tree.Repetition):
			size += element.count * _expanded_size(element.body)
		elif isinstance(element, tonelang.syntax_tree.Chord):
			size += len(element.notes)
		else:
			size += 1

	return size


def _parse_modifiers (stream: _TokenStream, allowed: typing.FrozenSet[str], context: str) -> typing.Dict[str, tonelang.lexer.Token]:

	"""Collect the modifiers directly following an element, keyed by family."""

	modifiers: typing.Dict[str, tonelang.lexer.Token] = {}

	while stream.peek().kind in tonelang.lexer.MODIFIER_KINDS:

		token = stream.advance()
		family = _MODIFIER_FAMILY[token.kind]

		if token.kind not in allowed:
			raise tonelang.errors.ToneLangSyntaxError(
				f"syntax error: A {family} ({_where(token)}) is not allowed on {context}",
				text=token.text,
				position=token.position
			)

		if family in modifiers:
			raise tonelang.errors.ToneLangSyntaxError(
				f"syntax error: Duplicate modifier {_where(token)}: {family} already set by '{modifiers[family].text}'",
				text=token.text,
				position=token.position
			)

		modifiers[family] = token

	return modifiers


def _velocity (modifiers: typing.Dict[str, tonelang.lexer.Token]) -> typing.Optional[int]:

	token = modifiers.get("velocity")

	if token is None:
		return None

	if not tonelang.constants.MIN_VELOCITY <= token.value <= tonelang.constants.MAX_VELOCITY:
		raise tonelang.errors.ToneLangRangeError(
			f"Velocity {token.value} is outside valid range "
			f"{tonelang.constants.MIN_VELOCITY}-{tonelang.constants.MAX_VELOCITY} in {_where(token)}",
			field="velocity",
			value=token.value,
			text=token.text,
			position=token.position
		)

	return typing.cast(int, token.value)


def _duration (modifiers: typing.Dict[str, tonelang.lexer.Token]) -> typing.Optional[float]:

	"""Return the duration in beats: ``*N`` is N quarter notes, ``/N`` is 1/N."""

	token = modifiers.get("duration")

	if token is None:
		return None

	if token.value <= 0:
		raise tonelang.errors.ToneLangRangeError(
			f"Duration {token.text!r} is outside valid range (must be positive) in {_where(token)}",
			field="duration",
			value=token.value,
			text=token.text,
			position=token.position
		)

	if token.kind == tonelang.lexer.DIVIDE:
		return tonelang.constants.DEFAULT_DURATION / token.value

	return tonelang.constants.DEFAULT_DURATION * token.value


def _time_gap (modifiers: typing.Dict[str, tonelang.lexer.Token]) -> typing.Optional[float]:

	token = modifiers.get("time gap")

	if token is None:
		return None

	return typing.cast(float, token.value)


def _where (token: tonelang.lexer.Token) -> str:

	return tonelang.errors.describe_position(token.text, token.position)


def _error_details (exc: tonelang.errors.ToneLangError, token: tonelang.lexer.Token) -> typing.Dict[str, typing.Any]:

	"""Keyword arguments to rebuild ``exc`` with the token's location."""

	details: typing.Dict[str, typing.Any] = {"text": token.text, "position": token.position}

	if isinstance(exc, tonelang.errors.ToneLangRangeError):
		details["field"] = exc.field
		details["value"] = exc.value

	return details


def _unexpected (token: tonelang.lexer.Token, hint: str) -> tonelang.errors.ToneLangSyntaxError:

	if token.kind == tonelang.lexer.END:
		return tonelang.errors.ToneLangSyntaxError(f"syntax error: Unexpected end of input ({hint})", text="", position=token.position)

	return tonelang.errors.ToneLangSyntaxError(
		f"syntax error: Unexpected {_where(token)} ({hint})",
		text=token.text,
		position=token.position
	)


def _unclosed (opening: tonelang.lexer.Token, closing_text: str) -> tonelang.errors.ToneLangSyntaxError:

	return tonelang.errors.ToneLangSyntaxError(
		f"syntax error: Missing closing '{closing_text}' for '{opening.text}' at position {opening.position}",
		text=opening.text,
		position=opening.position
	)
