# -*- coding: utf-8 -*-

import sys
if sys.version_info[0:2] < (3, 7):
	raise Exception("totpauth requires Python >=3.7")
del sys

import libtotpauth.authenticator
import libtotpauth.base32
import libtotpauth.cryptobackend
import libtotpauth.exception
import libtotpauth.fileobj
import libtotpauth.mlock
import libtotpauth.otp
import libtotpauth.storage
import libtotpauth.store
import libtotpauth.util
import libtotpauth.version

from libtotpauth.authenticator import *
from libtotpauth.exception import *
from libtotpauth.storage import *
from libtotpauth.store import *
from libtotpauth.version import *

__version__ = VERSION_STRING
