"""unwoff/sfnt.py -- low-level module to lay out and write sfnt files.

Defines:
	getSearchRange
	planLayout
	SFNTWriter

A WOFF file carries everything needed to rebuild the sfnt table
directory except the output offsets, which depend on the original
length of every table before it. planLayout() computes them up front,
so SFNTWriter can write the directory first and each table at its
planned offset afterwards.
"""

from fontTools.misc import sstruct
from fontTools.misc.textTools import Tag
from unwoff.errors import ConversionError, TableLengthMismatch
from unwoff.misc.binTools import readBytes, align4, padding
from collections import OrderedDict
import logging


log = logging.getLogger(__name__)


# -- sfnt directory helpers and cruft

sfntDirectoryFormat = """
		> # big endian
		sfntVersion:    4s
		numTables:      H    # number of tables
		searchRange:    H    # (max2 <= numTables)*16
		entrySelector:  H    # log2(max2 <= numTables)
		rangeShift:     H    # numTables*16-searchRange
"""

sfntDirectorySize = sstruct.calcsize(sfntDirectoryFormat)

sfntDirectoryEntryFormat = """
		> # big endian
		tag:            4s
		checkSum:       L
		offset:         L
		length:         L
"""

sfntDirectoryEntrySize = sstruct.calcsize(sfntDirectoryEntryFormat)

# largest table count whose searchRange/rangeShift still fit in a uint16
maxTables = 0xFFFF // sfntDirectoryEntrySize


class DirectoryEntry(object):

	def fromFile(self, file):
		self.fromString(readBytes(file, self.formatSize))
		return self

	def fromString(self, data):
		sstruct.unpack(self.format, data, self)
		self.tag = Tag(self.tag)

	def toString(self):
		# sstruct would encode a str tag as ascii; tags are latin-1
		fields = dict(self.__dict__, tag=Tag(self.tag).tobytes())
		return sstruct.pack(self.format, fields)

	def __repr__(self):
		if hasattr(self, "tag"):
			return "<%s '%s' at %x>" % (self.__class__.__name__, self.tag, id(self))
		else:
			return "<%s at %x>" % (self.__class__.__name__, id(self))


class SFNTDirectoryEntry(DirectoryEntry):

	format = sfntDirectoryEntryFormat
	formatSize = sfntDirectoryEntrySize


def getSearchRange(n):
	"""Return (searchRange, entrySelector, rangeShift) for a directory of 'n'
	tables of 16 bytes each.

		>>> getSearchRange(5)
		(64, 2, 16)
		>>> getSearchRange(16)
		(256, 4, 0)
		>>> getSearchRange(0)
		(0, 0, 0)
	"""
	if n == 0:
		return 0, 0, 0
	entrySelector = 0
	while 2 ** entrySelector <= n:
		entrySelector += 1
	entrySelector -= 1
	searchRange = 2 ** entrySelector * 16
	rangeShift = n * 16 - searchRange
	return searchRange, entrySelector, rangeShift


def planLayout(entries):
	"""Assign sfnt output offsets to a sequence of WOFF directory entries.

	Return a list of new SFNTDirectoryEntry objects, in the same order as
	'entries'. Tables are laid out back to back starting right after the
	sfnt directory, each one starting on a 4-byte boundary. The WOFF
	entries themselves are left untouched.
	"""
	entries = list(entries)
	offset = sfntDirectorySize + len(entries) * sfntDirectoryEntrySize
	directory = []
	for woffEntry in entries:
		entry = SFNTDirectoryEntry()
		entry.tag = woffEntry.tag
		entry.checkSum = woffEntry.checkSum
		entry.offset = offset
		entry.length = woffEntry.origLength
		if offset + entry.length > 0xFFFFFFFF:
			raise ConversionError(
				"'%s' table: sfnt would exceed 4 GiB (offset %d, %d bytes)"
				% (entry.tag, offset, entry.length))
		log.debug("planned '%s' table at offset %d (%d bytes)",
			entry.tag, entry.offset, entry.length)
		directory.append(entry)
		offset = align4(offset + entry.length)
	return directory


class SFNTWriter(object):

	"""Write an sfnt file whose layout was computed by planLayout().

	The header and table directory are written on construction; table data
	is then assigned with writer[tag] = data, in any order.
	"""

	directoryFormat = sfntDirectoryFormat
	directorySize = sfntDirectorySize

	def __init__(self, file, sfntVersion, directory):
		self.file = file
		self.sfntVersion = Tag(sfntVersion)
		self.tables = OrderedDict((Tag(entry.tag), entry) for entry in directory)
		self.numTables = len(self.tables)
		if self.numTables * sfntDirectoryEntrySize > 0xFFFF:
			# searchRange and rangeShift are uint16
			raise ConversionError(
				"too many tables for an sfnt directory: %d (at most %d)"
				% (self.numTables, maxTables))
		self.searchRange, self.entrySelector, self.rangeShift = getSearchRange(self.numTables)
		self.written = set()
		self._writeDirectory()

	def _writeDirectory(self):
		header = {
			"sfntVersion": self.sfntVersion.tobytes(),
			"numTables": self.numTables,
			"searchRange": self.searchRange,
			"entrySelector": self.entrySelector,
			"rangeShift": self.rangeShift,
		}
		directory = sstruct.pack(self.directoryFormat, header)
		for entry in self.tables.values():
			directory = directory + entry.toString()
		self.file.seek(0)
		self.file.write(directory)

	def __setitem__(self, tag, data):
		"""Write raw table data at its planned offset, padded to 4 bytes."""
		tag = Tag(tag)
		if tag not in self.tables:
			raise ConversionError("no room was planned for '%s' table" % tag)
		if tag in self.written:
			raise ConversionError("cannot rewrite '%s' table" % tag)
		entry = self.tables[tag]
		if len(data) != entry.length:
			raise TableLengthMismatch(
				"'%s' table: expected %d bytes, found %d" % (tag, entry.length, len(data)))
		self.file.seek(entry.offset)
		self.file.write(data)
		# pad explicitly; a seek past the end wouldn't zero-fill after the last table
		self.file.write(padding(entry.length))
		self.written.add(tag)

	def close(self):
		"""All planned tables must have been written."""
		missing = [tag for tag in self.tables if tag not in self.written]
		if missing:
			raise ConversionError("tables never written: %s" % ", ".join(missing))
