"""Helpers for writing unit tests."""

from fontTools.misc import sstruct
from fontTools.misc.textTools import Tag
from fontTools.ttLib.sfnt import calcChecksum
from unwoff.misc.binTools import align4, padding
from unwoff.woff import (
	woffDirectoryFormat, woffDirectorySize, woffDirectoryEntryFormat,
	woffDirectoryEntrySize)
import zlib


def makeWOFF(tables, sfntVersion="\0\1\0\0", signature="wOFF",
		compress=True, origLengths=None, checkSums=None,
		metaData=b"", privData=b"", length=None):
	"""Build WOFF file data from a sequence of (tag, data) pairs.

	Tables are stored in the given order. A table is stored compressed if
	'compress' is true and zlib actually makes it smaller. 'origLengths'
	and 'checkSums' map tags to values written in place of the real ones,
	and 'length' overrides the header's total file size.
	"""
	tables = [(Tag(tag), data) for tag, data in tables]
	origLengths = origLengths or {}
	checkSums = checkSums or {}

	offset = woffDirectorySize + woffDirectoryEntrySize * len(tables)
	directory = b""
	tableData = b""
	totalSfntSize = 12 + 16 * len(tables)
	for tag, data in tables:
		storedData = data
		if compress:
			compressedData = zlib.compress(data)
			if len(compressedData) < len(data):
				storedData = compressedData
		entry = {
			"tag": tag.tobytes(),
			"offset": offset,
			"length": len(storedData),
			"origLength": origLengths.get(tag, len(data)),
			"checkSum": checkSums.get(tag, calcChecksum(data)),
		}
		directory += sstruct.pack(woffDirectoryEntryFormat, entry)
		tableData += storedData + padding(len(storedData))
		offset = align4(offset + len(storedData))
		totalSfntSize += align4(len(data))

	header = {
		"signature": Tag(signature).tobytes(),
		"sfntVersion": Tag(sfntVersion).tobytes(),
		"numTables": len(tables),
		"reserved": 0,
		"totalSfntSize": totalSfntSize,
		"majorVersion": 1,
		"minorVersion": 0,
		"metaOffset": 0,
		"metaLength": 0,
		"metaOrigLength": 0,
		"privOffset": 0,
		"privLength": 0,
	}
	extraData = b""
	if metaData:
		compressedMetaData = zlib.compress(metaData)
		header["metaOffset"] = offset
		header["metaLength"] = len(compressedMetaData)
		header["metaOrigLength"] = len(metaData)
		extraData += compressedMetaData
		offset += len(compressedMetaData)
	if privData:
		# private data starts on a 4-byte boundary
		extraData += padding(offset)
		offset = align4(offset)
		header["privOffset"] = offset
		header["privLength"] = len(privData)
		extraData += privData
		offset += len(privData)
	header["length"] = offset if length is None else length
	return sstruct.pack(woffDirectoryFormat, header) + directory + tableData + extraData
