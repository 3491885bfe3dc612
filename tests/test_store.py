from totpauth_tstlib import *
initTest(__file__)

import contextlib
import io
import pathlib
import tempfile
from libtotpauth.exception import *
from libtotpauth.fileobj import *
from libtotpauth.storage import *
from libtotpauth.store import *
from libtotpauth.cryptobackend import CryptoBackend

SECRET1 = b"12345678901234567890"
SECRET2 = b"Hello!\xDE\xAD\xBE\xEF"

class NoDirSyncStorage(FileStorage):
	def _syncDirectory(self, directory):
		raise OSError("directory sync failed")

class Test_CredentialStore(TestCase):
	def test_empty(self):
		storage = MemoryStorage()
		with CredentialStore(storage) as store:
			self.assertEqual(len(store), 0)
			self.assertEqual(store.labels(), [])
			self.assertRaises(NotFoundError, lambda: store.get("alice"))
		# Nothing is written without a put.
		self.assertIsNone(storage.loadImage())

	def test_put_get(self):
		storage = MemoryStorage()
		with CredentialStore(storage) as store:
			store.put("alice@example.com", SECRET1)
			store.put("bob@example.com", bytearray(SECRET2), periodSeconds=60)
			cred = store.get("alice@example.com")
			self.assertEqual(cred.label, "alice@example.com")
			self.assertEqual(cred.secret, SECRET1)
			self.assertEqual(cred.hmacHash, "SHA1")
			self.assertEqual(cred.digits, 6)
			self.assertEqual(cred.periodSeconds, 30)
			self.assertNotIn("12345", repr(cred))
			self.assertIn("alice@example.com", store)
			self.assertNotIn("Alice@example.com", store)

		with CredentialStore(storage) as store:
			self.assertEqual(store.labels(), [ "alice@example.com",
							   "bob@example.com" ])
			self.assertEqual(store.get("alice@example.com").secret, SECRET1)
			cred = store.get("bob@example.com")
			self.assertEqual(cred.secret, SECRET2)
			self.assertEqual(cred.periodSeconds, 60)
			self.assertEqual(cred.generate(t=59), cred.generate(t=0))
			self.assertRaises(NotFoundError, lambda: store.get("Bob@example.com"))

	def test_overwrite(self):
		storage = MemoryStorage()
		with CredentialStore(storage) as store:
			store.put("alice", SECRET1)
			store.put("other", SECRET1)
			oldCred = store.get("alice")
			store.put("alice", SECRET2)
			self.assertEqual(store.get("alice").secret, SECRET2)
			self.assertEqual(oldCred.secret, bytes(len(SECRET1)))
			self.assertEqual(len(store), 2)
		with CredentialStore(storage) as store:
			self.assertEqual(store.get("alice").secret, SECRET2)
			self.assertEqual(store.get("other").secret, SECRET1)
			self.assertEqual(store.labels(), [ "alice", "other" ])

	def test_secret_copied_and_wiped(self):
		secret = bytearray(SECRET1)
		store = CredentialStore(MemoryStorage())
		store.put("alice", secret)
		secret[:] = bytes(len(secret))
		cred = store.get("alice")
		self.assertEqual(cred.secret, SECRET1)
		store.close()
		self.assertEqual(cred.secret, bytes(len(SECRET1)))
		self.assertRaises(NotFoundError, lambda: store.get("alice"))

	def test_put_errors(self):
		storage = MemoryStorage()
		with CredentialStore(storage) as store:
			self.assertRaises(LabelEmptyError, lambda: store.put("", SECRET1))
			self.assertRaises(LabelEmptyError, lambda: store.put(None, SECRET1))
			self.assertRaises(SecretInvalidError, lambda: store.put("alice", b""))
			self.assertRaises(SecretInvalidError, lambda: store.put("alice", None))
			self.assertRaises(SecretInvalidError, lambda: store.put("alice", "JBSWY3DPEHPK3PXP"))
			self.assertRaises(SecretInvalidError, lambda: store.put("alice", b"123456789"))
			self.assertRaises(StoreError, lambda: store.put("alice", SECRET1, digits=9))
			self.assertRaises(StoreError, lambda: store.put("alice", SECRET1, periodSeconds=0))
			self.assertRaises(StoreError, lambda: store.put("alice", SECRET1, hmacHash="MD5"))
			self.assertRaises(StoreError, lambda: store.put("\udcff", SECRET1))
			self.assertEqual(len(store), 0)
		self.assertIsNone(storage.loadImage())

	def test_crash_atomicity(self):
		storage = CrashingStorage()
		with CredentialStore(storage) as store:
			store.put("alice", SECRET1)
			store.put("bob", SECRET2)
		committed = storage.loadImage()
		for crashAtByte in (0, 1, 17, 64, None):
			storage.crashAtByte = crashAtByte if crashAtByte is not None else 10 ** 6
			with CredentialStore(storage) as store:
				self.assertRaises(StorageIOError,
						  lambda: store.put("alice", b"x" * 32))
				self.assertRaises(StorageIOError,
						  lambda: store.put("carol", b"y" * 32))
				# The in-memory state is unchanged, too.
				self.assertEqual(store.get("alice").secret, SECRET1)
				self.assertNotIn("carol", store)
			self.assertEqual(storage.loadImage(), committed)
			storage.crashAtByte = None
			with CredentialStore(storage) as store:
				self.assertEqual(store.get("alice").secret, SECRET1)
				self.assertEqual(store.get("bob").secret, SECRET2)
				self.assertRaises(NotFoundError, lambda: store.get("carol"))

	def test_torn_image_detected(self):
		storage = CrashingStorage()
		with CredentialStore(storage) as store:
			store.put("alice", SECRET1)
		storage.crashAtByte = 10 ** 6
		with CredentialStore(storage) as store:
			self.assertRaises(StorageIOError, lambda: store.put("bob", SECRET2))
		fullImage = storage.pending
		for i in range(0, len(fullImage), 7):
			torn = MemoryStorage(fullImage[:i])
			self.assertRaises(StorageCorruptError, lambda: CredentialStore(torn))
		with CredentialStore(MemoryStorage(fullImage)) as store:
			self.assertEqual(store.get("bob").secret, SECRET2)

	def test_corrupt(self):
		storage = MemoryStorage()
		with CredentialStore(storage) as store:
			store.put("alice", SECRET1)
		image = storage.loadImage()

		# Flip every single byte.
		for i in range(len(image)):
			corrupt = bytearray(image)
			corrupt[i] ^= 0x01
			self.assertRaises(StorageCorruptError,
					  lambda: CredentialStore(MemoryStorage(corrupt)))
		self.assertRaises(StorageCorruptError,
				  lambda: CredentialStore(MemoryStorage(image + b"\x00")))
		self.assertRaises(StorageCorruptError,
				  lambda: CredentialStore(MemoryStorage(b"garbage")))

	def __buildImage(self, creds, header=CredentialStore.STORE_HEADER, checksum=None):
		body = FileObjCollection([ FileObj(b"CRED", FileObjCollection(
			[ FileObj(name, data) for name, data in fields ]).getRaw())
			for fields in creds ]).getRaw()
		if checksum is None:
			checksum = CryptoBackend.get().digest(body, "SHA256")
		return FileObjCollection((
			FileObj(b"HEAD", header),
			FileObj(b"BODY", body),
			FileObj(b"SUM", checksum),
		)).getRaw()

	def test_structure_validation(self):
		good = ((b"LABEL", b"alice"), (b"SECRET", SECRET1), (b"HASH", b"SHA1"),
			(b"DIGITS", b"6"), (b"PERIOD", b"30"))
		with CredentialStore(MemoryStorage(self.__buildImage([ good ]))) as store:
			self.assertEqual(store.get("alice").secret, SECRET1)

		def replace(name, data):
			return tuple((n, data if n == name else d) for n, d in good)
		def remove(name):
			return tuple((n, d) for n, d in good if n != name)

		bad = [
			[ good, good ],
			[ replace(b"LABEL", b"") ],
			[ replace(b"LABEL", b"\xFF\xFE") ],
			[ replace(b"SECRET", b"short") ],
			[ replace(b"HASH", b"MD5") ],
			[ replace(b"DIGITS", b"0") ],
			[ replace(b"DIGITS", b"9") ],
			[ replace(b"PERIOD", b"0") ],
			[ replace(b"PERIOD", b"x") ],
		] + [ [ remove(name) ] for name, _ in good ]
		for creds in bad:
			self.assertRaises(StorageCorruptError,
					  lambda: CredentialStore(MemoryStorage(self.__buildImage(creds))))
		self.assertRaises(StorageCorruptError,
				  lambda: CredentialStore(MemoryStorage(
					  self.__buildImage([ good ], header=b"TOTPAUTH store v0"))))
		self.assertRaises(StorageCorruptError,
				  lambda: CredentialStore(MemoryStorage(
					  self.__buildImage([ good ], checksum=bytes(32)))))

	def test_file_store(self):
		with tempfile.TemporaryDirectory() as tmpdir:
			path = pathlib.Path(tmpdir, "store")
			with CredentialStore(FileStorage(path)) as store:
				self.assertFalse(path.exists())
				store.put("alice@example.com", SECRET1)
			self.assertTrue(path.exists())
			with CredentialStore(FileStorage(path)) as store:
				self.assertEqual(store.get("alice@example.com").secret, SECRET1)
			path.write_bytes(path.read_bytes()[:-1])
			self.assertRaises(StorageCorruptError,
					  lambda: CredentialStore(FileStorage(path)))

	def test_directory_sync_failure(self):
		with tempfile.TemporaryDirectory() as tmpdir:
			path = pathlib.Path(tmpdir, "store")
			with CredentialStore(FileStorage(path)) as store:
				store.put("alice", SECRET1)
			with contextlib.redirect_stderr(io.StringIO()):
				with CredentialStore(NoDirSyncStorage(path)) as store:
					store.put("bob", SECRET2)
					self.assertEqual(store.get("bob").secret, SECRET2)
			with CredentialStore(FileStorage(path)) as store:
				self.assertEqual(store.labels(), [ "alice", "bob" ])
				self.assertEqual(store.get("bob").secret, SECRET2)
