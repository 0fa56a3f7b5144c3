#! /usr/bin/env python

from setuptools import setup, find_packages

# Force distutils to use py_compile.compile() function with 'doraise' argument
# set to True, in order to raise an exception on compilation errors
import py_compile
orig_py_compile = py_compile.compile

def doraise_py_compile(file, cfile=None, dfile=None, doraise=False):
	orig_py_compile(file, cfile=cfile, dfile=dfile, doraise=True)

py_compile.compile = doraise_py_compile


# Trove classifiers for PyPI
classifiers = {"classifiers": [
	"Development Status :: 4 - Beta",
	"Intended Audience :: Developers",
	"License :: OSI Approved :: BSD License",
	"Natural Language :: English",
	"Operating System :: OS Independent",
	"Programming Language :: Python",
	"Programming Language :: Python :: 3",
	"Topic :: Multimedia :: Graphics",
	"Topic :: Multimedia :: Graphics :: Graphics Conversion",
]}

long_description = """\
unwoff converts WOFF 1.0 web fonts back into the TrueType/OpenType (sfnt)
fonts they were made from. Table data is decompressed, the DSIG table is
dropped, and the sfnt table directory is rebuilt with 4-byte aligned
offsets. Conversion works on in-memory streams as well as on files.
"""


def guess_next_dev_version(version):
	""" If the distance from the last version tag is N != 0, increase the
	last number by one, and append '.devN' suffix. Else return the version tag
	as is.

	Note: The version tag must be two to three non-negative integer values,
	separated by dots: MAJOR.MINOR[.MICRO].
	When 'MICRO' is omitted, it's assumed to be 0.
	"""
	if version.exact:
		return version.format_with("{tag}")
	else:
		import re

		tag = str(version.tag)
		version_tag_re = re.compile(r"^([0-9]+.[0-9]+)(?:.([0-9]+))?$")
		try:
			major_minor, micro = version_tag_re.match(tag).groups()
		except AttributeError:
			raise ValueError(
				'Invalid version tag: %r. It must match MAJOR.MINOR[.MICRO]' % tag)
		return '%s.%d.dev%s' % (
			major_minor, int(micro or '0') + 1, version.distance)


def my_scm_version():
	return {
		"write_to": "Lib/unwoff/version.py",
		"version_scheme": guess_next_dev_version,
		# used for source trees without git metadata
		"fallback_version": "0.1.0",
	}


setup(
	name="unwoff",
	use_scm_version=my_scm_version,
	description="Convert WOFF web fonts back to TrueType/OpenType",
	license="OpenSource, BSD-style",
	platforms=["Any"],
	long_description=long_description,
	package_dir={'': 'Lib'},
	packages=find_packages("Lib"),
	python_requires=">=3.7",
	install_requires=[
		"fonttools>=4.33",
	],
	extras_require={
		"test": [
			"pytest>=3.0",
		],
	},
	**classifiers
)
