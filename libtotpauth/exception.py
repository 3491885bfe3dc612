# -*- coding: utf-8 -*-
"""
# TOTP authenticator
# Copyright (c) 2011-2026 Michael Büsch <m@bues.ch>
# Licensed under the GNU/GPL version 2 or later.
"""

__all__ = [
	"TOTPAuthError",
	"DecodeError",
	"InvalidCharacterError",
	"InvalidPaddingError",
	"EmptyInputError",
	"StoreError",
	"LabelEmptyError",
	"SecretInvalidError",
	"StorageIOError",
	"StorageCorruptError",
	"CredentialLookupError",
	"NotFoundError",
]

class TOTPAuthError(Exception):
	"""Main totpauth exception.
	"""

class DecodeError(TOTPAuthError):
	"""The base32 secret text could not be decoded.
	"""

class InvalidCharacterError(DecodeError):
	pass

class InvalidPaddingError(DecodeError):
	pass

class EmptyInputError(DecodeError):
	pass

class StoreError(TOTPAuthError):
	"""Credential store exception.
	"""

class LabelEmptyError(StoreError):
	pass

class SecretInvalidError(StoreError):
	pass

class StorageIOError(StoreError):
	pass

class StorageCorruptError(StoreError):
	"""The store image failed structure or integrity validation.
	"""

class CredentialLookupError(TOTPAuthError):
	pass

class NotFoundError(CredentialLookupError):
	"""There is no credential with the requested label.
	"""

	def __init__(self, label):
		super().__init__("Could not find a credential labelled '%s'" % label)
		self.label = label
