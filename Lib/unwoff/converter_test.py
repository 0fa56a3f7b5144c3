from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen
from fontTools.ttLib import TTFont
from fontTools.ttLib.sfnt import SFNTReader
from unwoff import convert, woffToSFNT
from unwoff.errors import (
	ConversionError, DecompressionFailure, TableLengthMismatch, UnexpectedEndOfData)
from unwoff.misc.testTools import makeWOFF
from io import BytesIO
import os
import struct
import pytest


TABLES = [
	("head", b"\0\1\0\0" + b"\x01" * 50),
	("hhea", b"hhea" * 9),
	("maxp", b"\0\0\x50\0\0\x02"),
	("name", b"Name table!"),
	("post", b"\0\3\0\0" + b"\0" * 28),
	("cmap", b"\0\0\0\1" * 64),
]


def parseSFNT(data):
	sfntVersion, numTables, searchRange, entrySelector, rangeShift = \
		struct.unpack(">4sHHHH", data[:12])
	directory = []
	for i in range(numTables):
		directory.append(struct.unpack(">4sLLL", data[12 + 16 * i:28 + 16 * i]))
	return (sfntVersion, numTables, searchRange, entrySelector, rangeShift), directory


def makeTestFont(flavor="woff"):
	fb = FontBuilder(1000, isTTF=True)
	fb.setupGlyphOrder([".notdef", "A"])
	fb.setupCharacterMap({ord("A"): "A"})
	glyphs = {}
	for glyphName in (".notdef", "A"):
		pen = TTGlyphPen(None)
		pen.moveTo((100, 0))
		pen.lineTo((100, 700))
		pen.lineTo((500, 700))
		pen.lineTo((500, 0))
		pen.closePath()
		glyphs[glyphName] = pen.glyph()
	fb.setupGlyf(glyphs)
	fb.setupHorizontalMetrics({".notdef": (600, 100), "A": (600, 100)})
	fb.setupHorizontalHeader(ascent=800, descent=-200)
	fb.setupNameTable({"familyName": "Unwoff Test", "styleName": "Regular"})
	fb.setupOS2()
	fb.setupPost()
	fb.setupDummyDSIG()
	fb.font.flavor = flavor
	buf = BytesIO()
	fb.save(buf)
	return buf.getvalue()


class ConvertTest:

	def test_structure(self):
		sfnt = woffToSFNT(makeWOFF(TABLES, compress=False))
		header, directory = parseSFNT(sfnt)
		n = len(TABLES)
		assert header == (b"\0\1\0\0", n, 64, 2, 32)
		offset = 12 + n * 16
		for (tag, data), (outTag, checkSum, outOffset, length) in zip(TABLES, directory):
			assert outTag == tag.encode("latin-1")
			assert outOffset == offset
			assert length == len(data)
			assert sfnt[outOffset:outOffset + length] == data
			end = outOffset + length
			offset = (end + 3) & ~3
			assert sfnt[end:offset] == b"\0" * (offset - end)
		assert len(sfnt) == offset

	def test_compressed_tables(self):
		woff = makeWOFF(TABLES)
		assert woffToSFNT(woff) == woffToSFNT(makeWOFF(TABLES, compress=False))

	def test_cff_flavor(self):
		sfnt = woffToSFNT(makeWOFF(TABLES, sfntVersion="OTTO"))
		assert sfnt[:4] == b"OTTO"

	def test_drop_DSIG(self):
		tables = TABLES[:3] + [("DSIG", b"\0\0\0\1\0\0\0\0")] + TABLES[3:]
		sfnt = woffToSFNT(makeWOFF(tables))
		header, directory = parseSFNT(sfnt)
		assert header[1] == len(tables) - 1
		assert header[2:] == (64, 2, 32)
		assert b"DSIG" not in [entry[0] for entry in directory]
		assert directory[0][2] == 12 + 16 * (len(tables) - 1)

	def test_checksums_copied(self):
		checkSums = {tag: 0x10000 + i for i, (tag, data) in enumerate(TABLES)}
		sfnt = woffToSFNT(makeWOFF(TABLES, checkSums=checkSums))
		header, directory = parseSFNT(sfnt)
		assert [entry[1] for entry in directory] == [checkSums[tag] for tag, data in TABLES]

	def test_no_tables(self):
		assert woffToSFNT(makeWOFF([])) == b"\0\1\0\0" + b"\0" * 8

	def test_readable_by_fontTools(self):
		sfnt = woffToSFNT(makeWOFF(TABLES))
		reader = SFNTReader(BytesIO(sfnt), checkChecksums=0)
		assert reader.numTables == len(TABLES)
		for tag, data in TABLES:
			assert reader[tag] == data

	def test_length_mismatch(self):
		woff = makeWOFF(TABLES, origLengths={"cmap": 300})
		with pytest.raises(TableLengthMismatch) as excinfo:
			woffToSFNT(woff)
		assert "'cmap' table" in str(excinfo.value)

	def test_truncated_input(self):
		woff = makeWOFF(TABLES, compress=False)
		with pytest.raises(UnexpectedEndOfData):
			woffToSFNT(woff[:-20])

	def test_corrupt_table(self):
		woff = bytearray(makeWOFF([("cmap", b"\0\0\0\1" * 64)]))
		# first byte after the 2-byte zlib header: a reserved block type
		woff[44 + 20 + 2] = 0xff
		with pytest.raises(DecompressionFailure):
			woffToSFNT(bytes(woff))

	def test_errors_are_conversion_errors(self):
		with pytest.raises(ConversionError):
			woffToSFNT(b"wOFF")

	def test_huge_declared_length(self):
		woff = makeWOFF(
			[("head", b"\1" * 64), ("name", b"\2" * 64)], origLengths={"head": 0xFFFFFFF0})
		with pytest.raises(ConversionError):
			woffToSFNT(woff)

	def test_too_many_tables(self):
		woff = makeWOFF([("t%03x" % i, b"") for i in range(4096)])
		with pytest.raises(ConversionError):
			woffToSFNT(woff)

	def test_convert_file_objects(self):
		infile = BytesIO(makeWOFF(TABLES))
		outfile = BytesIO()
		convert(infile, outfile)
		assert outfile.getvalue() == woffToSFNT(makeWOFF(TABLES))
		assert not infile.closed
		assert not outfile.closed

	def test_nothing_written_on_failure(self):
		outfile = BytesIO()
		with pytest.raises(TableLengthMismatch):
			convert(BytesIO(makeWOFF(TABLES, origLengths={"post": 1})), outfile)
		assert outfile.getvalue() == b""

	def test_convert_paths(self, tmpdir):
		inpath = os.path.join(str(tmpdir), "test.woff")
		outpath = os.path.join(str(tmpdir), "test.ttf")
		with open(inpath, "wb") as f:
			f.write(makeWOFF(TABLES))
		convert(inpath, outpath)
		with open(outpath, "rb") as f:
			assert f.read() == woffToSFNT(makeWOFF(TABLES))

	def test_no_output_file_on_failure(self, tmpdir):
		inpath = os.path.join(str(tmpdir), "bad.woff")
		outpath = os.path.join(str(tmpdir), "bad.ttf")
		with open(inpath, "wb") as f:
			f.write(makeWOFF(TABLES)[:100])
		with pytest.raises(UnexpectedEndOfData):
			convert(inpath, outpath)
		assert not os.path.exists(outpath)


class RealFontTest:

	def test_round_trip(self):
		woff = makeTestFont()
		sfnt = woffToSFNT(woff, checkChecksums=2, strict=True)
		woffFont = TTFont(BytesIO(woff))
		font = TTFont(BytesIO(sfnt))
		assert font.flavor is None
		assert font.sfntVersion == woffFont.sfntVersion
		assert "DSIG" in woffFont.reader
		assert "DSIG" not in font.reader
		tags = [tag for tag in woffFont.reader.keys() if tag != "DSIG"]
		assert sorted(font.reader.keys()) == sorted(tags)
		for tag in tags:
			assert font.reader[tag] == woffFont.reader[tag]
		assert font["name"].getDebugName(1) == "Unwoff Test"

	def test_offsets_aligned(self):
		header, directory = parseSFNT(woffToSFNT(makeTestFont()))
		for tag, checkSum, offset, length in directory:
			assert offset % 4 == 0
