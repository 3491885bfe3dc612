from totpauth_tstlib import *
initTest(__file__)

from libtotpauth.fileobj import *

class Test_FileObj(TestCase):
	def test_raw_layout(self):
		raw = bytearray()
		FileObj(b"AB", b"xyz").getRaw(raw)
		self.assertEqual(raw, b"\x02AB\x03\x00\x00\x00xyz")
		obj, objLen = FileObj.parseRaw(raw)
		self.assertEqual(objLen, len(raw))
		self.assertEqual(obj.getName(), b"AB")
		self.assertEqual(obj.getData(), b"xyz")

	def test_collection(self):
		fc = FileObjCollection((
			FileObj(b"HEAD", b"h"),
			FileObj(b"CRED", b"one"),
			FileObj(b"CRED", b""),
			FileObj(b"CRED", b"three"),
		))
		fc2 = FileObjCollection.parseRaw(fc.getRaw())
		self.assertEqual(len(fc2.objects), 4)
		self.assertEqual(bytes(fc2.get(b"HEAD")), b"h")
		self.assertEqual(bytes(fc2.get(b"CRED")), b"one")
		self.assertEqual([ bytes(d) for d in fc2.getAll(b"CRED") ],
				 [ b"one", b"", b"three" ])
		self.assertEqual(fc2.getAll(b"NONE"), [])
		self.assertIsNone(fc2.get(b"NONE"))
		self.assertEqual(fc2.get(b"NONE", default=b"d"), b"d")
		self.assertRaises(FileObjError, lambda: fc2.get(b"NONE", error="missing"))
		self.assertEqual(FileObjCollection.parseRaw(b"").objects, ())

	def test_corrupt(self):
		raw = FileObjCollection((FileObj(b"HEAD", b"header data"), )).getRaw()
		for i in range(1, len(raw)):
			self.assertRaises(FileObjError,
					  lambda: FileObjCollection.parseRaw(raw[:i]))
		self.assertRaises(FileObjError,
				  lambda: FileObj.parseRaw(b"\x81" + b"A" * 0x81 + b"\x00" * 4))
		self.assertRaises(FileObjError,
				  lambda: FileObj.parseRaw(b"\x01A\x00\x00\x00\x80"))
		self.assertRaises(FileObjError, lambda: FileObj(b"N" * 0x80, b""))

	def test_decode(self):
		self.assertEqual(decodeInt(b"30", error="e", minValue=1), 30)
		self.assertRaises(FileObjError, lambda: decodeInt(b"0", error="e", minValue=1))
		self.assertRaises(FileObjError, lambda: decodeInt(b"9", error="e", maxValue=8))
		self.assertRaises(FileObjError, lambda: decodeInt(b"x", error="e"))
		self.assertEqual(decodeChoices(memoryview(b"SHA1"), error="e",
					       choices=("SHA1", "SHA256")), "SHA1")
		self.assertRaises(FileObjError,
				  lambda: decodeChoices(b"MD5", error="e", choices=("SHA1",)))
