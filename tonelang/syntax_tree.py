"""Syntax tree produced by the parser and consumed by the timeline compiler.

The node set is closed: an ``Element`` is exactly one of ``Note``, ``Chord``,
``Rest`` or ``Repetition``, and an ``Expression`` is a ``Sequence`` or a
``MultiVoice``. Code that walks the tree checks every kind explicitly and
raises ``TypeError`` for anything else.

Optional modifier fields are ``None`` when the text did not set them. They are
resolved against the enclosing chord, group and global defaults only when the
tree is compiled, so the tree records exactly what was written.

Nodes are frozen and hold tuples, so a parsed tree cannot be modified.
"""

import dataclasses
import typing


@dataclasses.dataclass(frozen=True)
class Note:

	"""A single pitch, e.g. ``C3v90*2t1``."""

	pitch_class: str
	octave: int
	pitch: int
	velocity: typing.Optional[int] = None
	duration: typing.Optional[float] = None
	time_gap: typing.Optional[float] = None


@dataclasses.dataclass(frozen=True)
class Chord:

	"""Notes sounding together, e.g. ``[C3 E3 G3]v80/2``.

	The chord's velocity and duration are defaults for its notes.
	"""

	notes: typing.Tuple[Note, ...]
	velocity: typing.Optional[int] = None
	duration: typing.Optional[float] = None
	time_gap: typing.Optional[float] = None


@dataclasses.dataclass(frozen=True)
class Rest:

	"""Silence, e.g. ``R`` or ``R*2``."""

	duration: typing.Optional[float] = None


@dataclasses.dataclass(frozen=True)
class Sequence:

	"""Elements played one after another."""

	elements: typing.Tuple["Element", ...] = ()


@dataclasses.dataclass(frozen=True)
class Repetition:

	"""A parenthesized group played ``count`` times, e.g. ``(C3 D3)v90*4``.

	A group written without ``*N`` has a count of 1.
	"""

	body: Sequence
	count: int = 1
	velocity: typing.Optional[int] = None


@dataclasses.dataclass(frozen=True)
class MultiVoice:

	"""Independent voices separated by ``;``, all starting at beat 0."""

	voices: typing.Tuple[Sequence, ...]


Element = typing.Union[Note, Chord, Rest, Repetition]
Expression = typing.Union[Sequence, MultiVoice]
