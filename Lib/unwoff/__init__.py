import logging
from fontTools.misc.loggingTools import configLogger
from unwoff.errors import (
	ConversionError, UnexpectedEndOfData, TableLengthMismatch,
	DecompressionFailure, BadSignatureError, FileLengthMismatch,
	TableChecksumMismatch, DuplicateTableTag)
from unwoff.converter import convert, woffToSFNT

try:
	from unwoff.version import version
except ImportError:
	# 'version.py' is missing; unwoff was not correctly installed
	version = None

log = logging.getLogger(__name__)

__all__ = [
	"version", "log", "configLogger", "convert", "woffToSFNT",
	"ConversionError", "UnexpectedEndOfData", "TableLengthMismatch",
	"DecompressionFailure", "BadSignatureError", "FileLengthMismatch",
	"TableChecksumMismatch", "DuplicateTableTag",
]
