"""unwoff/converter.py -- convert a WOFF file back to an sfnt (TTF/OTF) file.

	>>> from unwoff.misc.testTools import makeWOFF
	>>> sfnt = woffToSFNT(makeWOFF([("head", b"\\0" * 54), ("DSIG", b"\\0" * 8)]))
	>>> sfnt[:6] == b"\\0\\1\\0\\0\\0\\1"
	True
	>>> len(sfnt)
	84
"""

from fontTools.misc.loggingTools import Timer
from unwoff.sfnt import SFNTWriter, planLayout
from unwoff.woff import WOFFReader
from io import BytesIO
import logging


log = logging.getLogger(__name__)


def convert(infile, outfile, checkChecksums=0, strict=False):
	"""Convert the WOFF font in 'infile' to an sfnt font in 'outfile'.

	Both arguments may be paths or binary file objects; 'infile' must be
	seekable. File objects passed in are left open. The font is assembled
	in memory, and nothing reaches 'outfile' unless the whole conversion
	succeeds. See WOFFReader for 'checkChecksums' and 'strict'.
	"""
	if not hasattr(infile, "read"):
		with open(infile, "rb") as f:
			data = _convert(f, checkChecksums, strict)
	else:
		data = _convert(infile, checkChecksums, strict)
	if not hasattr(outfile, "write"):
		with open(outfile, "wb") as f:
			f.write(data)
	else:
		outfile.write(data)


def woffToSFNT(data, checkChecksums=0, strict=False):
	"""Return the sfnt font data for the WOFF font data 'data'."""
	return _convert(BytesIO(data), checkChecksums, strict)


def _convert(file, checkChecksums, strict):
	with Timer(log, "converted WOFF to sfnt"):
		reader = WOFFReader(file, checkChecksums=checkChecksums, strict=strict)
		# every offset depends on all the tables before it, so the layout
		# is planned in full before any table is decompressed
		directory = planLayout(reader.tables.values())
		buf = BytesIO()
		writer = SFNTWriter(buf, reader.sfntVersion, directory)
		for entry in directory:
			writer[entry.tag] = reader[entry.tag]
		writer.close()
	return buf.getvalue()
