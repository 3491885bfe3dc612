# -*- coding: utf-8 -*-
"""
# Simple object file format.
# Copyright (c) 2011-2026 Michael Büsch <m@bues.ch>
# Licensed under the GNU/GPL version 2 or later.
"""

__all__ = [
	"FileObjError",
	"FileObj",
	"FileObjCollection",
	"decodeInt",
	"decodeChoices",
]

class FileObjError(Exception):
	pass

def decodeInt(buf, error, minValue=None, maxValue=None):
	"""Decode bytes into a int as decimal representation.
	buf: Bytes buffer.
	error: Error message string, in case of conversion failure.
	minValue: The smallest allowed integer value.
	maxValue: The biggest allowed integer value.
	"""
	try:
		value = int(bytes(buf).decode("UTF-8"), 10)
		if minValue is not None and value < minValue:
			raise ValueError
		if maxValue is not None and value > maxValue:
			raise ValueError
		return value
	except (ValueError, UnicodeError) as e:
		raise FileObjError("%s: %s" % (error, bytes(buf).decode("UTF-8", "ignore")))

def decodeChoices(buf, error, choices):
	"""Decode bytes into one of the possible choices strings.
	buf: Bytes buffer.
	error: Error message string, in case of conversion failure.
	choices: An iterable of possible strings.
	"""
	try:
		string = bytes(buf).decode("UTF-8")
		if string not in choices:
			raise ValueError
		return string
	except (ValueError, UnicodeError) as e:
		raise FileObjError("%s: %s" % (error, bytes(buf).decode("UTF-8", "ignore")))

class FileObj:
	# Raw object layout:
	#   [ 1 byte  ] => Name length
	#   [ x bytes ] => Name
	#   [ 4 bytes ] => Payload data length
	#   [ x bytes ] => Payload data

	__slots__ = (
		"__name",
		"__data",
	)

	def __init__(self, name, data):
		"""Construct FileObj().
		name: The object name. Must be bytes-like.
		data: The object payload. Must be bytes-like.
		"""
		assert isinstance(name, (bytes, bytearray, memoryview)),\
		       "FileObj: Invalid 'name' type."
		assert isinstance(data, (bytes, bytearray, memoryview)),\
		       "FileObj: Invalid 'data' type."
		self.__name = memoryview(name)
		self.__data = memoryview(data)
		if len(self.__name) > 0x7F:
			raise FileObjError("FileObj: Name too long")
		if len(self.__data) > 0x7FFFFFFF:
			raise FileObjError("FileObj: Data too long")

	def getName(self):
		return self.__name

	def getData(self):
		return self.__data

	def getRaw(self, buffer):
		nameLen = len(self.__name)
		assert nameLen <= 0x7F
		buffer += b"%c" % (nameLen & 0xFF)
		buffer += self.__name
		dataLen = len(self.__data)
		assert dataLen <= 0x7FFFFFFF
		buffer += b"%c" % (dataLen & 0xFF)
		buffer += b"%c" % ((dataLen >> 8) & 0xFF)
		buffer += b"%c" % ((dataLen >> 16) & 0xFF)
		buffer += b"%c" % ((dataLen >> 24) & 0xFF)
		buffer += self.__data

	@classmethod
	def parseRaw(cls, raw):
		assert isinstance(raw, (bytes, bytearray, memoryview)),\
		       "FileObj: Invalid 'raw' type."
		raw = memoryview(raw)
		try:
			off = 0
			nameLen = raw[off]
			if nameLen & 0x80:
				raise FileObjError("FileObj: Name length extension bit is set, "
						   "but not supported by this version.")
			off += 1
			name = raw[off : off + nameLen]
			if len(name) != nameLen:
				raise FileObjError("FileObj: Truncated name")
			off += nameLen
			dataLen = (raw[off] |
				   (raw[off + 1] << 8) |
				   (raw[off + 2] << 16) |
				   (raw[off + 3] << 24))
			if dataLen & 0x80000000:
				raise FileObjError("FileObj: Data length extension bit is set, "
						   "but not supported by this version.")
			off += 4
			data = raw[off : off + dataLen]
			if len(data) != dataLen:
				raise FileObjError("FileObj: Truncated data")
			off += dataLen
		except (IndexError, KeyError) as e:
			raise FileObjError("Failed to parse file object")
		return (cls(name, data), off)

class FileObjCollection:
	"""An ordered sequence of FileObj.
	Names may occur more than once.
	"""

	__slots__ = (
		"__objects",
	)

	def __init__(self, objects=()):
		self.__objects = list(objects)

	def append(self, obj):
		self.__objects.append(obj)

	def getRaw(self):
		raw = bytearray()
		for obj in self.__objects:
			obj.getRaw(raw)
		return raw

	@property
	def objects(self):
		return tuple(self.__objects)

	def get(self, name, error=None, default=None):
		"""Get the data of the first object called 'name'.
		Returns a memoryview into the parsed buffer.
		"""
		for obj in self.__objects:
			if obj.getName() == name:
				return obj.getData()
		if error:
			raise FileObjError(error)
		return default

	def getAll(self, name):
		"""Get the data of all objects called 'name'.
		"""
		return [ obj.getData()
			 for obj in self.__objects
			 if obj.getName() == name ]

	@classmethod
	def parseRaw(cls, raw):
		assert isinstance(raw, (bytes, bytearray, memoryview)),\
		       "FileObjCollection: Invalid 'raw' type."
		raw = memoryview(raw)
		offset = 0
		objects = []
		while offset < len(raw):
			obj, objLen = FileObj.parseRaw(raw[offset:])
			objects.append(obj)
			offset += objLen
		return cls(objects)
