"""unwoff.errors -- exceptions raised while converting WOFF to SFNT."""


class ConversionError(Exception):
	"""Base class for all errors raised by unwoff."""


class UnexpectedEndOfData(ConversionError):
	"""The input ended before a header, directory entry or table could be read."""


class TableLengthMismatch(ConversionError):
	"""A table's data does not have the length declared in the directory."""


class DecompressionFailure(ConversionError):
	"""A table's payload is not a valid zlib/DEFLATE stream."""


class BadSignatureError(ConversionError):
	"""The input does not start with the 'wOFF' signature (strict mode)."""


class FileLengthMismatch(ConversionError):
	"""The header 'length' does not match the size of the input (strict mode)."""


class TableChecksumMismatch(ConversionError):
	"""A decoded table does not match its directory checksum."""


class DuplicateTableTag(ConversionError):
	"""The table directory lists the same tag more than once."""
