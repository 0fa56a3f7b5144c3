"""unwoff.misc.binTools -- big-endian integer primitives over binary streams.

All functions take a file-like object supporting read(), write(), seek()
and tell(). Nothing is assumed about alignment; access is byte-granular.

readUInt16/readUInt32 and writeUInt16/writeUInt32 are public helpers for
callers decoding or patching single fields (e.g. a 'head' table's
checkSumAdjustment). The WOFF and sfnt records themselves are packed with
sstruct, but every read goes through readBytes, so a short stream always
raises UnexpectedEndOfData.
"""

from unwoff.errors import UnexpectedEndOfData
import struct


def readBytes(file, size):
	"""Read exactly 'size' bytes from 'file', or raise UnexpectedEndOfData.

		>>> from io import BytesIO
		>>> readBytes(BytesIO(b"abcdef"), 4)
		b'abcd'
		>>> readBytes(BytesIO(b"ab"), 4)  # doctest: +IGNORE_EXCEPTION_DETAIL
		Traceback (most recent call last):
		UnexpectedEndOfData: expected 4 bytes at offset 0, found 2
	"""
	pos = file.tell()
	data = file.read(size)
	if len(data) != size:
		raise UnexpectedEndOfData(
			"expected %d bytes at offset %d, found %d" % (size, pos, len(data)))
	return data


def readUInt16(file):
	"""
		>>> from io import BytesIO
		>>> readUInt16(BytesIO(b"\\x01\\x02"))
		258
	"""
	value, = struct.unpack(">H", readBytes(file, 2))
	return value


def readUInt32(file):
	"""
		>>> from io import BytesIO
		>>> hex(readUInt32(BytesIO(b"\\x00\\x01\\x00\\x00")))
		'0x10000'
	"""
	value, = struct.unpack(">L", readBytes(file, 4))
	return value


def writeUInt16(file, value):
	file.write(struct.pack(">H", value))


def writeUInt32(file, value):
	file.write(struct.pack(">L", value))


def align4(offset):
	"""Round 'offset' up to the next multiple of 4.

		>>> [align4(n) for n in range(9)]
		[0, 4, 4, 4, 4, 8, 8, 8, 8]
	"""
	return (offset + 3) & ~3


def padding(length):
	"""Return the NUL bytes needed to pad 'length' bytes to a 4-byte boundary.

		>>> padding(5)
		b'\\x00\\x00\\x00'
		>>> padding(8)
		b''
	"""
	return b"\0" * (align4(length) - length)
