"""unwoff/woff.py -- read the WOFF 1.0 header, table directory and tables.

Defines:
	WOFFHeader
	WOFFDirectoryEntry
	WOFFFlavorData
	WOFFReader
	readTableDirectory
"""

from fontTools.misc import sstruct
from fontTools.misc.textTools import Tag
from fontTools.ttLib.sfnt import calcChecksum
from unwoff.errors import (
	BadSignatureError, DecompressionFailure, DuplicateTableTag,
	FileLengthMismatch, TableChecksumMismatch, TableLengthMismatch)
from unwoff.misc.binTools import readBytes
from unwoff.sfnt import DirectoryEntry
from collections import OrderedDict
import logging
import zlib


log = logging.getLogger(__name__)


woffSignature = "wOFF"

# tables a WOFF -> sfnt conversion invalidates
droppedTableTags = ("DSIG",)

# -- WOFF directory helpers and cruft

woffDirectoryFormat = """
		> # big endian
		signature:      4s   # "wOFF"
		sfntVersion:    4s
		length:         L    # total woff file size
		numTables:      H    # number of tables
		reserved:       H    # set to 0
		totalSfntSize:  L    # uncompressed size
		majorVersion:   H    # major version of WOFF file
		minorVersion:   H    # minor version of WOFF file
		metaOffset:     L    # offset to metadata block
		metaLength:     L    # length of compressed metadata
		metaOrigLength: L    # length of uncompressed metadata
		privOffset:     L    # offset to private data block
		privLength:     L    # length of private data block
"""

woffDirectorySize = sstruct.calcsize(woffDirectoryFormat)

woffDirectoryEntryFormat = """
		> # big endian
		tag:            4s
		offset:         L
		length:         L    # compressed length
		origLength:     L    # original length
		checkSum:       L    # original checksum
"""

woffDirectoryEntrySize = sstruct.calcsize(woffDirectoryEntryFormat)


class WOFFHeader(object):

	format = woffDirectoryFormat
	formatSize = woffDirectorySize

	@classmethod
	def fromFile(cls, file):
		"""Decode the header from the current position of 'file' (normally 0).
		The signature is not checked here.
		"""
		self = cls()
		sstruct.unpack(cls.format, readBytes(file, cls.formatSize), self)
		self.signature = Tag(self.signature)
		self.sfntVersion = Tag(self.sfntVersion)
		return self

	def __repr__(self):
		return "<%s %r %d tables>" % (
			self.__class__.__name__, self.sfntVersion, self.numTables)


class WOFFDirectoryEntry(DirectoryEntry):

	format = woffDirectoryEntryFormat
	formatSize = woffDirectoryEntrySize

	@property
	def compressed(self):
		return self.length != self.origLength

	def loadData(self, file):
		file.seek(self.offset)
		data = readBytes(file, self.length)
		return self.decodeData(data)

	def decodeData(self, rawData):
		if not self.compressed:
			data = rawData
		else:
			data = self._inflate(rawData)
		if len(data) != self.origLength:
			raise TableLengthMismatch(
				"'%s' table: expected %d bytes after decompression, found %d"
				% (self.tag, self.origLength, len(data)))
		return data

	def _inflate(self, rawData):
		# skip the 2-byte zlib header, the rest is raw DEFLATE; the trailing
		# adler32 ends up in unused_data
		decompressor = zlib.decompressobj(-zlib.MAX_WBITS)
		try:
			data = decompressor.decompress(rawData[2:], self.origLength + 1)
		except zlib.error as e:
			raise DecompressionFailure(
				"'%s' table: %s" % (self.tag, e)) from e
		if len(data) <= self.origLength and not decompressor.eof:
			raise DecompressionFailure(
				"'%s' table: truncated compressed stream" % self.tag)
		return data


def readTableDirectory(file, numTables):
	"""Read 'numTables' WOFF directory entries from the current position of
	'file'. Return an OrderedDict of entries keyed by tag, in directory
	order, without the tables listed in 'droppedTableTags'.
	"""
	tables = OrderedDict()
	seen = set()
	for i in range(numTables):
		entry = WOFFDirectoryEntry().fromFile(file)
		if entry.tag in seen:
			raise DuplicateTableTag("'%s' table is listed twice" % entry.tag)
		seen.add(entry.tag)
		if entry.tag in droppedTableTags:
			log.info("dropping '%s' table", entry.tag)
			continue
		log.debug("'%s' table: offset %d, length %d, origLength %d",
			entry.tag, entry.offset, entry.length, entry.origLength)
		tables[entry.tag] = entry
	return tables


class WOFFFlavorData(object):

	flavor = "woff"

	def __init__(self, reader=None):
		self.majorVersion = None
		self.minorVersion = None
		self.metaData = b""
		self.privData = b""
		if reader:
			header = reader.header
			self.majorVersion = header.majorVersion
			self.minorVersion = header.minorVersion
			if header.metaLength:
				reader.file.seek(header.metaOffset)
				rawData = readBytes(reader.file, header.metaLength)
				data = self.decodeData(rawData)
				if len(data) != header.metaOrigLength:
					raise TableLengthMismatch(
						"metadata: expected %d bytes after decompression, found %d"
						% (header.metaOrigLength, len(data)))
				self.metaData = data
			if header.privLength:
				reader.file.seek(header.privOffset)
				self.privData = readBytes(reader.file, header.privLength)

	@staticmethod
	def decodeData(rawData):
		try:
			return zlib.decompress(rawData)
		except zlib.error as e:
			raise DecompressionFailure("metadata: %s" % e) from e


class WOFFReader(object):

	"""Read the directory and tables of a WOFF file.

	Table data is fetched with reader[tag]. Tables the conversion must not
	carry over (DSIG) are left out of the directory entirely.

	checkChecksums: 0 = don't check, 1 = log a warning on mismatch,
	2 = raise TableChecksumMismatch.
	strict: reject a bad signature, and a header 'length' that doesn't
	match the size of 'file'.
	"""

	flavor = "woff"
	signature = woffSignature

	def __init__(self, file, checkChecksums=0, strict=False):
		self.file = file
		self.checkChecksums = checkChecksums
		self.strict = strict
		self._flavorData = None

		self.file.seek(0)
		self.header = WOFFHeader.fromFile(self.file)
		self._checkHeader()
		self.sfntVersion = self.header.sfntVersion
		self.tables = readTableDirectory(self.file, self.header.numTables)

	def _checkHeader(self):
		header = self.header
		if header.signature != self.signature:
			if self.strict:
				raise BadSignatureError(
					"Not a %s font (bad signature %r)" % (self.flavor.upper(), header.signature))
			log.warning("bad signature %r; reading as WOFF anyway", header.signature)
		if self.strict:
			pos = self.file.tell()
			self.file.seek(0, 2)
			size = self.file.tell()
			self.file.seek(pos)
			if header.length != size:
				raise FileLengthMismatch(
					"reported 'length' (%d) doesn't match the actual file size (%d)"
					% (header.length, size))

	@property
	def numTables(self):
		return len(self.tables)

	def has_key(self, tag):
		return Tag(tag) in self.tables

	__contains__ = has_key

	def keys(self):
		return self.tables.keys()

	def __getitem__(self, tag):
		"""Fetch the decompressed table data."""
		entry = self.tables[Tag(tag)]
		data = entry.loadData(self.file)
		if self.checkChecksums:
			self._checkChecksum(entry, data)
		return data

	def _checkChecksum(self, entry, data):
		if entry.tag == 'head':
			# checkSumAdjustment is summed as zero
			checksum = calcChecksum(data[:8] + b'\0\0\0\0' + data[12:])
		else:
			checksum = calcChecksum(data)
		if checksum == entry.checkSum:
			return
		if self.checkChecksums > 1:
			raise TableChecksumMismatch("bad checksum for '%s' table" % entry.tag)
		log.warning("bad checksum for '%s' table", entry.tag)

	@property
	def flavorData(self):
		"""Extended metadata and private data, read on first access."""
		if self._flavorData is None:
			self._flavorData = WOFFFlavorData(self)
		return self._flavorData
