"""Exceptions raised by the ToneLang parser, formatter and configuration loader.

Every parse error is fatal to the call that raised it: there is no partial
result. Messages are written to be shown verbatim to whoever wrote the
notation, so they name the offending text and where it was found.
"""

import typing


class ToneLangError(Exception):

	"""
	Base class for all ToneLang errors.

	Attributes:
		text: The offending substring, when known.
		position: Character offset of ``text`` within the parsed input, when known.
	"""

	def __init__ (self, message: str, text: typing.Optional[str] = None, position: typing.Optional[int] = None) -> None:

		super().__init__(message)

		self.text = text
		self.position = position


class ToneLangSyntaxError(ToneLangError):

	"""Malformed token, unbalanced bracket, misplaced or duplicate modifier."""

	pass


class ToneLangRangeError(ToneLangError):

	"""
	A value is outside the range allowed for its field.

	Attributes:
		field: Which value was rejected (``"pitch"``, ``"velocity"``, ``"duration"``, ...).
		value: The rejected value.
	"""

	def __init__ (
		self,
		message: str,
		field: str,
		value: typing.Any,
		text: typing.Optional[str] = None,
		position: typing.Optional[int] = None
	) -> None:

		super().__init__(message, text=text, position=position)

		self.field = field
		self.value = value


class ToneLangConfigError(ToneLangError):

	"""A configuration file holds a value ToneLang cannot use."""

	pass


def describe_position (text: str, position: int) -> str:

	"""Render ``'text' at position N`` for error messages."""

	return f"'{text}' at position {position}"
