# -*- coding: utf-8 -*-
"""
# TOTP authenticator
# Copyright (c) 2011-2026 Michael Büsch <m@bues.ch>
# Licensed under the GNU/GPL version 2 or later.
"""

import os
import pathlib

__all__ = [
	"osIsPosix",
	"wipe",
	"getDefaultStore",
]

osIsPosix = os.name == "posix"

def wipe(buf):
	"""Overwrite a mutable buffer with zeros.
	buf: bytearray, writable memoryview or None.
	Immutable objects are silently left alone.
	"""
	if isinstance(buf, (bytearray, memoryview)) and not getattr(buf, "readonly", False):
		buf[:] = bytes(len(buf))

def getDefaultStore():
	"""Get the default credential store path.
	Returns a pathlib.Path() instance.
	"""
	store = os.getenv("TOTPAUTH_STORE")
	if store:
		return pathlib.Path(store)
	return pathlib.Path.home() / ".totpauth.store"
