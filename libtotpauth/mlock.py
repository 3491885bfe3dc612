# -*- coding: utf-8 -*-
"""
# mlock support
# Copyright (c) 2019-2026 Michael Büsch <m@bues.ch>
# Licensed under the GNU/GPL version 2 or later.
"""

import platform
import os
import sys

__all__ = [
	"MLockWrapper",
]

class MLockWrapper:
	"""OS mlock wrapper.
	Keeps TOTP secrets from being swapped out to disk.
	"""

	__singleton = None

	@classmethod
	def get(cls):
		if cls.__singleton is None:
			cls.__singleton = cls()
		return cls.__singleton

	def __init__(self):
		self.__ffi = None
		self.__libc = None
		self.__importError = None

		if os.name == "posix" and "linux" in sys.platform.lower():
			try:
				from cffi import FFI
			except ImportError as e:
				self.__importError = "Failed to import CFFI: %s" % str(e)
				return
			self.__ffi = FFI()
			# Use getattr to avoid Cython cdef compile error.
			getattr(self.__ffi, "cdef")("int mlockall(int flags);")
			self.__libc = self.__ffi.dlopen(None)

	@staticmethod
	def __flags():
		if platform.machine().lower() in (
				"alpha",
				"ppc", "ppc64", "ppcle", "ppc64le",
				"sparc", "sparc64" ):
			MCL_CURRENT	= 0x2000
			MCL_FUTURE	= 0x4000
		else:
			MCL_CURRENT	= 0x1
			MCL_FUTURE	= 0x2
		return MCL_CURRENT | MCL_FUTURE

	def mlockall(self):
		"""Lock all current and all future memory.
		Returns an empty string on success or an error message.
		"""
		if self.__importError:
			return self.__importError
		if self.__libc is None or self.__ffi is None:
			return "mlockall() is not supported on this operating system."
		ret = self.__libc.mlockall(self.__flags())
		return os.strerror(self.__ffi.errno) if ret else ""
