# -*- coding: utf-8 -*-
"""
# HOTP/TOTP support
# Copyright (c) 2019-2026 Michael Büsch <m@bues.ch>
# Licensed under the GNU/GPL version 2 or later.
"""

from libtotpauth.cryptobackend import *
from libtotpauth.exception import TOTPAuthError

import time

__all__ = [
	"OtpError",
	"DEFAULT_DIGITS",
	"DEFAULT_HASH",
	"DEFAULT_PERIOD",
	"hotp",
	"totp",
	"totpCounter",
]

DEFAULT_DIGITS = 6
DEFAULT_HASH = "SHA1"
DEFAULT_PERIOD = 30

class OtpError(TOTPAuthError):
	"""HOTP/TOTP exception.
	"""

def hotp(key, counter, nrDigits=DEFAULT_DIGITS, hmacHash=DEFAULT_HASH, backend=None):
	"""HOTP - An HMAC-Based One-Time Password Algorithm.
	key: The raw HOTP key bytes.
	counter: The HOTP counter integer.
	nrDigits: The number of digits to return. Can be 1 to 8.
	hmacHash: The name string of the hashing algorithm.
	backend: The CryptoBackend. Uses the default backend, if not given.
	Returns the calculated HOTP token string.
	"""
	if not isinstance(key, (bytes, bytearray, memoryview)) or len(key) <= 0:
		raise OtpError("Invalid key.")
	if not (0 <= counter <= (2 ** 64) - 1):
		raise OtpError("Invalid counter.")
	if not (1 <= nrDigits <= 8):
		raise OtpError("Invalid number of digits.")
	try:
		hmacHash = normalizeHashName(hmacHash)
	except CryptoBackendError:
		raise OtpError("Invalid HMAC hash type.")
	if backend is None:
		backend = CryptoBackend.get()

	counter = counter.to_bytes(length=8, byteorder="big", signed=False)
	h = bytearray(backend.hmac(key, counter, hmacHash))
	offset = h[-1] & 0xF
	h[offset] &= 0x7F
	hSlice = int.from_bytes(h[offset:offset+4], byteorder="big", signed=False)
	otp = hSlice % (10 ** nrDigits)
	fmt = "%0" + str(nrDigits) + "d"
	return fmt % otp

def totpCounter(t, timeStep=DEFAULT_PERIOD):
	"""Get the TOTP counter for the time 't' in seconds.
	"""
	if timeStep < 1:
		raise OtpError("Invalid time step.")
	if t < 0:
		raise OtpError("Invalid time.")
	return int(t // timeStep)

def totp(key, t=None, timeStep=DEFAULT_PERIOD, nrDigits=DEFAULT_DIGITS,
	 hmacHash=DEFAULT_HASH, backend=None):
	"""TOTP - Time-Based One-Time Password Algorithm.
	key: The raw TOTP key bytes.
	t: Optional; the time in seconds. Uses time.time(), if not given.
	timeStep: The TOTP period in seconds.
	nrDigits: The number of digits to return. Can be 1 to 8.
	hmacHash: The name string of the hashing algorithm.
	Returns the calculated TOTP token string.
	"""
	if t is None:
		t = time.time()
	return hotp(key, totpCounter(t, timeStep), nrDigits, hmacHash, backend)
