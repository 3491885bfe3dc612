# -*- coding: utf-8 -*-
"""
#
# TOTP authenticator
# Credential store
#
# Copyright (c) 2011-2026 Michael Büsch <m@bues.ch>
# Licensed under the GNU/GPL version 2 or later.
#
"""

from libtotpauth.cryptobackend import *
from libtotpauth.exception import *
from libtotpauth.fileobj import *
from libtotpauth.otp import *
from libtotpauth.util import *

import sys
from dataclasses import dataclass, field

__all__ = [
	"MIN_SECRET_LEN",
	"Credential",
	"CredentialStore",
]

MIN_SECRET_LEN = 10

@dataclass
class Credential:
	"""A label bound to a TOTP secret and its parameters.
	"""
	label		: str
	secret		: bytearray = field(repr=False)
	hmacHash	: str = DEFAULT_HASH
	digits		: int = DEFAULT_DIGITS
	periodSeconds	: int = DEFAULT_PERIOD

	def generate(self, t=None, backend=None):
		return totp(key=self.secret,
			    t=t,
			    timeStep=self.periodSeconds,
			    nrDigits=self.digits,
			    hmacHash=self.hmacHash,
			    backend=backend)

	def clear(self):
		"""Zero the secret.
		"""
		wipe(self.secret)

class CredentialStore:
	"""Label -> Credential mapping, persisted as one image.
	"""

	STORE_HEADER = b"TOTPAUTH store v1"

	def __init__(self, storage, crypto=None, silent=True):
		"""storage: The StorageBackend holding the image.
		crypto: The CryptoBackend for the image checksum.
		        Uses the default backend, if not given.
		silent: Do not print information messages to the console.
		"""
		self.__storage = storage
		self.__crypto = crypto if crypto is not None else CryptoBackend.get()
		self.__silent = silent
		self.__credentials = {}
		self.__exists = False
		self.__open()

	def __enter__(self):
		return self

	def __exit__(self, exc_type, exc_value, traceback):
		self.close()

	def __len__(self):
		return len(self.__credentials)

	def __contains__(self, label):
		return label in self.__credentials

	def __info(self, message):
		if not self.__silent:
			print(message, file=sys.stderr)

	def __open(self):
		"""Load and validate the image.
		A missing image is an empty store.
		"""
		raw = self.__storage.loadImage()
		if raw is None:
			return
		try:
			self.__credentials = self.__parseImage(raw)
		finally:
			wipe(raw)
		self.__exists = True

	def __parseImage(self, raw):
		cls = self.__class__
		credentials = {}
		try:
			try:
				fc = FileObjCollection.parseRaw(raw)
				head = fc.get(
					name=b"HEAD",
					error="Missing file header object",
				)
				if bytes(head) != cls.STORE_HEADER:
					raise StorageCorruptError("Invalid file header")
				body = fc.get(
					name=b"BODY",
					error="Missing BODY object",
				)
				checksum = fc.get(
					name=b"SUM",
					error="Missing SUM object",
				)
				if bytes(self.__crypto.digest(body, "SHA256")) != bytes(checksum):
					raise StorageCorruptError("Checksum mismatch")

				for credRaw in FileObjCollection.parseRaw(body).getAll(b"CRED"):
					cred = self.__parseCredential(credRaw)
					if cred.label in credentials:
						cred.clear()
						raise StorageCorruptError("Duplicate label '%s'" % cred.label)
					credentials[cred.label] = cred
			except FileObjError as e:
				raise StorageCorruptError("Store file error: %s" % str(e))
		except Exception:
			for cred in credentials.values():
				cred.clear()
			raise
		return credentials

	@staticmethod
	def __parseCredential(credRaw):
		fc = FileObjCollection.parseRaw(credRaw)
		label = fc.get(
			name=b"LABEL",
			error="Missing LABEL object",
		)
		try:
			label = bytes(label).decode("UTF-8")
		except UnicodeError:
			raise FileObjError("Invalid LABEL encoding")
		if not label:
			raise FileObjError("Empty LABEL")
		secret = fc.get(
			name=b"SECRET",
			error="Missing SECRET object",
		)
		if len(secret) < MIN_SECRET_LEN:
			raise FileObjError("Invalid SECRET length: %d" % len(secret))
		hmacHash = decodeChoices(
			buf=fc.get(name=b"HASH", error="Missing HASH object"),
			choices=HASH_NAMES,
			error="Unknown HASH value",
		)
		digits = decodeInt(
			buf=fc.get(name=b"DIGITS", error="Missing DIGITS object"),
			minValue=1,
			maxValue=8,
			error="Invalid DIGITS value",
		)
		periodSeconds = decodeInt(
			buf=fc.get(name=b"PERIOD", error="Missing PERIOD object"),
			minValue=1,
			maxValue=((1 << 32) - 1),
			error="Invalid PERIOD value",
		)
		return Credential(label=label,
				  secret=bytearray(secret),
				  hmacHash=hmacHash,
				  digits=digits,
				  periodSeconds=periodSeconds)

	@staticmethod
	def __packCredential(cred):
		fc = FileObjCollection((
			FileObj(b"LABEL", cred.label.encode("UTF-8")),
			FileObj(b"SECRET", cred.secret),
			FileObj(b"HASH", cred.hmacHash.encode("UTF-8")),
			FileObj(b"DIGITS", str(cred.digits).encode("UTF-8")),
			FileObj(b"PERIOD", str(cred.periodSeconds).encode("UTF-8")),
		))
		return fc.getRaw()

	def __commit(self, credentials):
		"""Write the complete image for 'credentials'.
		"""
		cls = self.__class__
		buffers = []
		try:
			body = FileObjCollection()
			for cred in credentials.values():
				credRaw = self.__packCredential(cred)
				buffers.append(credRaw)
				body.append(FileObj(b"CRED", credRaw))
			bodyRaw = body.getRaw()
			buffers.append(bodyRaw)
			image = FileObjCollection((
				FileObj(b"HEAD", cls.STORE_HEADER),
				FileObj(b"BODY", bodyRaw),
				FileObj(b"SUM", self.__crypto.digest(bodyRaw, "SHA256")),
			))
			raw = image.getRaw()
			buffers.append(raw)
			if not self.__exists:
				self.__info("Creating NEW credential store '%s'..." % (
					    self.__storage.describe()))
			self.__storage.atomicallyReplaceImage(raw)
			self.__exists = True
		except FileObjError as e:
			raise StoreError("Failed to serialize the store: %s" % str(e))
		finally:
			for buf in buffers:
				wipe(buf)

	def put(self, label, secret, hmacHash=DEFAULT_HASH,
		digits=DEFAULT_DIGITS, periodSeconds=DEFAULT_PERIOD):
		"""Insert or replace the credential for 'label'.
		The secret is copied. The caller keeps ownership of 'secret'.
		The complete store is written before this returns.
		"""
		if not isinstance(label, str) or not label:
			raise LabelEmptyError("The credential label is empty.")
		try:
			label.encode("UTF-8")
		except UnicodeError:
			raise StoreError("The credential label is not UTF-8 encodable.")
		if (not isinstance(secret, (bytes, bytearray, memoryview)) or
		    len(secret) == 0):
			raise SecretInvalidError("The credential secret is empty.")
		if len(secret) < MIN_SECRET_LEN:
			raise SecretInvalidError("The credential secret is too short "
						 "(%d bytes). At least %d bytes are required." % (
						 len(secret), MIN_SECRET_LEN))
		try:
			hmacHash = normalizeHashName(hmacHash)
		except CryptoBackendError as e:
			raise StoreError(str(e))
		if not (1 <= digits <= 8):
			raise StoreError("Invalid number of digits: %d" % digits)
		if not (1 <= periodSeconds <= ((1 << 32) - 1)):
			raise StoreError("Invalid TOTP period: %d" % periodSeconds)

		newCred = Credential(label=label,
				     secret=bytearray(secret),
				     hmacHash=hmacHash,
				     digits=digits,
				     periodSeconds=periodSeconds)
		oldCred = self.__credentials.get(label)
		credentials = dict(self.__credentials)
		credentials[label] = newCred
		try:
			self.__commit(credentials)
		except Exception:
			newCred.clear()
			raise
		self.__credentials = credentials
		if oldCred is not None:
			self.__info("Replaced the credential '%s'." % label)
			oldCred.clear()

	def get(self, label):
		"""Get the Credential for 'label'.
		The returned object is owned by the store.
		Raises NotFoundError.
		"""
		cred = self.__credentials.get(label)
		if cred is None:
			raise NotFoundError(label)
		return cred

	def labels(self):
		"""Get all labels in insertion order.
		"""
		return list(self.__credentials.keys())

	def close(self):
		"""Zero all secrets and forget the credentials.
		"""
		for cred in self.__credentials.values():
			cred.clear()
		self.__credentials = {}
