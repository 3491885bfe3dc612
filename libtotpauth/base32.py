# -*- coding: utf-8 -*-
"""
# RFC 4648 base32 codec for TOTP secrets
# Copyright (c) 2019-2026 Michael Büsch <m@bues.ch>
# Licensed under the GNU/GPL version 2 or later.
"""

from libtotpauth.exception import *

from base64 import b32decode, b32encode
import binascii

__all__ = [
	"ALPHABET",
	"decode",
	"encode",
]

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_ALPHABET_CHARS = frozenset(ALPHABET + ALPHABET.lower())

# Possible numbers of data characters in the last 8 character quantum.
_VALID_TAILS = (0, 2, 4, 5, 7)

def decode(text):
	"""Decode a base32 encoded secret.
	text: The base32 string. Case-insensitive. Padding is optional,
	      but if present, it must fill up the last 8 character quantum.
	Returns the raw secret as bytearray.
	Raises EmptyInputError, InvalidCharacterError or InvalidPaddingError.
	"""
	if not isinstance(text, str):
		raise InvalidCharacterError("Base32 input is not a string.")
	data = text.rstrip("=")
	nrPad = len(text) - len(data)
	if not data:
		raise EmptyInputError("Base32 input is empty.")
	for i, c in enumerate(data):
		if c == "=":
			raise InvalidPaddingError("Base32 padding character "
						  "at position %d." % i)
		if c not in _ALPHABET_CHARS:
			raise InvalidCharacterError("Invalid base32 character "
						    "%r at position %d." % (c, i))
	tail = len(data) % 8
	if tail not in _VALID_TAILS:
		raise InvalidPaddingError("Invalid base32 data length %d." % len(data))
	if nrPad:
		if len(text) % 8 != 0 or nrPad >= 8:
			raise InvalidPaddingError("Base32 padding does not complete "
						  "the last 8 character quantum.")
	# The low bits of the last character that do not encode data must be zero.
	unusedBits = (tail * 5) % 8
	if ALPHABET.index(data[-1].upper()) & ((1 << unusedBits) - 1):
		raise InvalidPaddingError("Base32 trailing bits are not zero.")
	padded = data.upper() + ("=" * ((8 - tail) % 8))
	try:
		return bytearray(b32decode(padded.encode("ASCII")))
	except (binascii.Error, UnicodeError) as e:
		raise InvalidPaddingError("Base32 decoding failed: %s" % str(e))

def encode(data):
	"""Encode raw bytes into a padded upper case base32 string.
	"""
	return b32encode(bytes(data)).decode("ASCII")
