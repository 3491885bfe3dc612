#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from setuptools import setup
try:
	from cx_Freeze import setup, Executable
	cx_Freeze = True
except ImportError:
	cx_Freeze = False
import sys
from pathlib import Path

basedir = Path(__file__).parent.absolute()
sys.path.insert(0, str(basedir))

from libtotpauth import __version__

extraKeywords = {}
if cx_Freeze:
	extraKeywords["executables"] = [ Executable(script="totpauth") ]
	extraKeywords["options"] = {
		"build_exe" : {
			"packages" : [ "cffi",
				       "Cryptodome", ],
			"excludes" : [ "tkinter", ],
		}
	}

with open(basedir / "README.rst", "rb") as fd:
	readmeText = fd.read().decode("UTF-8")

setup(
	name		= "totpauth",
	version		= __version__,
	description	= "Commandline TOTP authenticator",
	author		= "Michael Büsch",
	author_email	= "m@bues.ch",
	license		= "GPL-2.0-or-later",
	python_requires = ">=3.7",
	install_requires = [
		"cffi",
		"pycryptodomex",
	],
	extras_require	= {
		"test" : [ "pytest", ],
	},
	packages	= [ "libtotpauth", ],
	scripts		= [ "totpauth", ],
	keywords	= "TOTP HOTP 2FA OATH authenticator command line",
	classifiers	= [
		"Development Status :: 5 - Production/Stable",
		"Environment :: Console",
		"Intended Audience :: End Users/Desktop",
		"Intended Audience :: System Administrators",
		"Operating System :: OS Independent",
		"Programming Language :: Python :: 3",
		"Topic :: Security",
	],
	long_description=readmeText,
	long_description_content_type="text/x-rst",
	**extraKeywords
)

# vim: ts=8 sw=8 noexpandtab
