# -*- coding: utf-8 -*-
"""
#
# TOTP authenticator
# Register and authenticate use cases
#
# Copyright (c) 2019-2026 Michael Büsch <m@bues.ch>
# Licensed under the GNU/GPL version 2 or later.
#
"""

from libtotpauth.exception import *
from libtotpauth.otp import *
from libtotpauth.util import *
import libtotpauth.base32

import time
from dataclasses import dataclass

__all__ = [
	"Register",
	"Authenticate",
	"Otp",
	"Authenticator",
]

@dataclass
class Register:
	"""Bind 'label' to the base32 encoded TOTP secret.
	"""
	label		: str
	base32Secret	: str
	periodSeconds	: int = DEFAULT_PERIOD

	def __repr__(self):
		return "Register(label=%r, periodSeconds=%d)" % (
			self.label, self.periodSeconds)

@dataclass
class Authenticate:
	"""Generate the TOTP for 'label'.
	timestamp: Seconds since the epoch. The clock is used, if None.
	"""
	label		: str
	timestamp	: int = None

class Otp(str):
	"""A generated one-time password, left-zero-padded.
	"""

class Authenticator:
	"""The TOTP authenticator.
	Operates on a CredentialStore that is opened once per invocation.
	"""

	def __init__(self, store, clock=time.time, backend=None):
		"""store: The open CredentialStore.
		clock: Callable returning the current time in seconds since the epoch.
		backend: The CryptoBackend for the OTP calculation.
		"""
		self.__store = store
		self.__clock = clock
		self.__backend = backend

	def register(self, command):
		"""Decode the secret and store the credential.
		Nothing is written, if the secret cannot be decoded.
		"""
		secret = libtotpauth.base32.decode(command.base32Secret)
		try:
			self.__store.put(label=command.label,
					 secret=secret,
					 periodSeconds=command.periodSeconds)
		finally:
			wipe(secret)

	def authenticate(self, command):
		"""Look up the credential and calculate the current TOTP.
		Returns an Otp.
		"""
		cred = self.__store.get(command.label)
		timestamp = command.timestamp
		if timestamp is None:
			timestamp = int(self.__clock())
		return Otp(cred.generate(t=timestamp, backend=self.__backend))

	def run(self, command):
		"""Dispatch a Register or Authenticate command.
		"""
		if isinstance(command, Register):
			return self.register(command)
		if isinstance(command, Authenticate):
			return self.authenticate(command)
		raise TOTPAuthError("Unexpected command: %r" % (command, ))
