# -*- coding: utf-8 -*-
"""
# Keyed hash backend
# Copyright (c) 2023-2026 Michael Büsch <m@bues.ch>
# Licensed under the GNU/GPL version 2 or later.
"""

from libtotpauth.exception import TOTPAuthError

__all__ = [
	"CryptoBackendError",
	"CryptoBackend",
	"CryptodomeBackend",
	"HASH_NAMES",
	"normalizeHashName",
]

HASH_NAMES = ("SHA1", "SHA256", "SHA512")

class CryptoBackendError(TOTPAuthError):
	"""Crypto backend exception.
	"""

def normalizeHashName(hashName):
	"""Normalize a hash name string like 'sha-1' or 'SHA_256'.
	Returns one of HASH_NAMES.
	"""
	try:
		name = hashName.replace("-", "")
		name = name.replace("_", "")
		name = name.replace(" ", "")
		name = name.upper().strip()
	except AttributeError:
		raise CryptoBackendError("Invalid HMAC hash type.")
	if name not in HASH_NAMES:
		raise CryptoBackendError("Invalid HMAC hash type '%s'." % hashName)
	return name

class CryptoBackend:
	"""Abstraction layer for the keyed hash implementation.
	Subclasses implement hmac() and digest().
	"""

	__singleton = None

	@classmethod
	def get(cls):
		"""Get the default backend singleton.
		"""
		if CryptoBackend.__singleton is None:
			CryptoBackend.__singleton = CryptodomeBackend()
		return CryptoBackend.__singleton

	def hmac(self, key, message, hashName="SHA1"):
		"""Calculate the HMAC of 'message' with 'key'.
		Returns the raw MAC bytes.
		"""
		raise NotImplementedError

	def digest(self, data, hashName="SHA256"):
		"""Calculate the plain hash of 'data'.
		Returns the raw digest bytes.
		"""
		raise NotImplementedError

	def quickSelfTest(self):
		# RFC 2202, test case 1
		mac = self.hmac(key=(b"\x0B" * 20), message=b"Hi There", hashName="SHA1")
		if bytes(mac) != bytes.fromhex("b617318655057264e28bc0b6fb378c8ef146be00"):
			raise CryptoBackendError("HMAC-SHA1: Quick self test failed.")

class CryptodomeBackend(CryptoBackend):
	"""pycryptodomex based backend.
	"""

	def __init__(self):
		try:
			import Cryptodome.Hash.HMAC
			import Cryptodome.Hash.SHA1
			import Cryptodome.Hash.SHA256
			import Cryptodome.Hash.SHA512
		except ImportError as e:
			raise CryptoBackendError("Python module import error: %s\n"
						 "'pycryptodomex' is not installed." % str(e))
		self.__HMAC = Cryptodome.Hash.HMAC
		self.__hashes = {
			"SHA1"   : Cryptodome.Hash.SHA1,
			"SHA256" : Cryptodome.Hash.SHA256,
			"SHA512" : Cryptodome.Hash.SHA512,
		}

	def hmac(self, key, message, hashName="SHA1"):
		hashMod = self.__hashes[normalizeHashName(hashName)]
		if len(key) <= 0:
			raise CryptoBackendError("HMAC: Invalid key length.")
		try:
			return self.__HMAC.new(key, msg=message, digestmod=hashMod).digest()
		except (TypeError, ValueError) as e:
			raise CryptoBackendError("HMAC error: %s: %s" % (type(e), str(e)))

	def digest(self, data, hashName="SHA256"):
		hashMod = self.__hashes[normalizeHashName(hashName)]
		try:
			return hashMod.new(data).digest()
		except (TypeError, ValueError) as e:
			raise CryptoBackendError("Hash error: %s: %s" % (type(e), str(e)))
