# -*- coding: utf-8 -*-
"""
# Store image persistence
# Copyright (c) 2011-2026 Michael Büsch <m@bues.ch>
# Licensed under the GNU/GPL version 2 or later.
"""

from libtotpauth.exception import *
from libtotpauth.util import *

import errno
import os
import pathlib
import sys
import tempfile

__all__ = [
	"StorageBackend",
	"FileStorage",
	"MemoryStorage",
]

class StorageBackend:
	"""Abstraction of the medium holding the store image.
	"""

	def loadImage(self):
		"""Read the complete store image.
		Returns a bytearray or None, if no image has been stored, yet.
		"""
		raise NotImplementedError

	def atomicallyReplaceImage(self, raw):
		"""Replace the complete store image by 'raw'.
		A reader must observe either the old or the new image, never a mix.
		"""
		raise NotImplementedError

	def describe(self):
		return self.__class__.__name__

class FileStorage(StorageBackend):
	"""Store image in a single file.
	Updates are written to a temporary file next to the target,
	synced and then renamed over the target.
	"""

	def __init__(self, path):
		self.__path = pathlib.Path(path)

	@property
	def path(self):
		return self.__path

	def describe(self):
		return str(self.__path)

	def exists(self):
		return self.__path.exists()

	def loadImage(self):
		try:
			with open(self.__path, "rb") as f:
				size = os.fstat(f.fileno()).st_size
				raw = bytearray(size)
				nrRead = f.readinto(raw)
				if nrRead != size:
					raise StorageIOError("Short read on '%s'." % self.__path)
				return raw
		except IOError as e:
			if e.errno == errno.ENOENT:
				return None
			raise StorageIOError("Failed to read file '%s': %s" % (
					     self.__path, e.strerror))

	def atomicallyReplaceImage(self, raw):
		directory = self.__path.parent
		tmpName = None
		try:
			directory.mkdir(parents=True, exist_ok=True)
			fd, tmpName = tempfile.mkstemp(dir=directory,
						       prefix="." + self.__path.name + ".",
						       suffix=".tmp")
			with os.fdopen(fd, "wb") as f:
				f.write(raw)
				f.flush()
				os.fsync(f.fileno())
			self._commit(tmpName)
			tmpName = None
		except OSError as e:
			raise StorageIOError("Failed to write file '%s': %s" % (
					     self.__path, e.strerror or str(e)))
		finally:
			if tmpName is not None:
				try:
					os.unlink(tmpName)
				except OSError:
					pass

		# The new image is committed at this point.
		try:
			self._syncDirectory(directory)
		except OSError as e:
			print("WARNING: Failed to sync directory '%s': %s" % (
			      directory, e.strerror or str(e)),
			      file=sys.stderr)

	def _commit(self, tmpName):
		"""Swap the fully written temporary file into place.
		"""
		os.replace(tmpName, self.__path)

	def _syncDirectory(self, directory):
		if not osIsPosix:
			return
		fd = os.open(directory, os.O_RDONLY)
		try:
			os.fsync(fd)
		finally:
			os.close(fd)

class MemoryStorage(StorageBackend):
	"""Volatile in-memory store image.
	"""

	def __init__(self, raw=None):
		self._image = None if raw is None else bytes(raw)

	def loadImage(self):
		if self._image is None:
			return None
		return bytearray(self._image)

	def atomicallyReplaceImage(self, raw):
		self._image = bytes(raw)
