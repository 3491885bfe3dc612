# -*- coding: utf-8 -*-
"""
# TOTP authenticator
# Copyright (c) 2011-2026 Michael Büsch <m@bues.ch>
# Licensed under the GNU/GPL version 2 or later.
"""

import argparse
import libtotpauth
import pathlib
import sys

from libtotpauth.cryptobackend import CryptoBackend

__all__ = [
	"EXIT_OK",
	"EXIT_ERROR",
	"EXIT_DECODE",
	"EXIT_STORE",
	"EXIT_LOOKUP",
	"main",
]

EXIT_OK		= 0
EXIT_ERROR	= 1
EXIT_DECODE	= 3
EXIT_STORE	= 4
EXIT_LOOKUP	= 5

def parseTimestamp(string):
	try:
		value = int(string, 10)
	except ValueError:
		raise argparse.ArgumentTypeError("invalid timestamp: '%s'" % string)
	if value < 0:
		raise argparse.ArgumentTypeError("timestamp must not be negative")
	return value

def getCommand(args):
	if args.subcommand == "register":
		return libtotpauth.Register(label=args.label,
					    base32Secret=args.secret)
	if args.subcommand == "authenticate":
		return libtotpauth.Authenticate(label=args.label,
						timestamp=args.timestamp)
	assert 0, "Invalid subcommand"

def run_command(storePath, command, silent):
	backend = CryptoBackend.get()
	backend.quickSelfTest()
	storage = libtotpauth.FileStorage(storePath)
	with libtotpauth.CredentialStore(storage=storage,
					 crypto=backend,
					 silent=silent) as store:
		authenticator = libtotpauth.Authenticator(store=store,
							  backend=backend)
		result = authenticator.run(command)
		if isinstance(command, libtotpauth.Register):
			print("Registered credential '%s'." % command.label)
		else:
			print(result)
	return EXIT_OK

def main(argv=None):
	p = argparse.ArgumentParser(
		description="Commandline TOTP authenticator - "
			    "totpauth version %s" % libtotpauth.__version__)
	p.add_argument("-v", "--version", action="version",
		       version="totpauth version %s" % libtotpauth.__version__,
		       help="show the totpauth version and exit")
	p.add_argument("-s", "--state-file", type=pathlib.Path,
		       default=libtotpauth.util.getDefaultStore(), metavar="STORE_PATH",
		       help="Use STORE_PATH as credential store file. If not given, %s is used." % (
			    libtotpauth.util.getDefaultStore()))
	p.add_argument("--no-mlock", action="store_true",
		       help="Do not lock memory and allow swapping to disk.")
	p.add_argument("-q", "--quiet", action="store_true",
		       help="Do not print informational messages.")
	sub = p.add_subparsers(dest="subcommand", metavar="COMMAND")
	sub.required = True
	reg = sub.add_parser("register", help="register a TOTP secret")
	reg.add_argument("label", metavar="LABEL",
			 help="label to use for the TOTP secret, e.g. alice@example.com")
	reg.add_argument("secret", metavar="SECRET",
			 help="the base32 encoded TOTP seed, e.g. JBSWY3DPEHPK3PXP")
	auth = sub.add_parser("authenticate",
			      help="generate a TOTP from a previously registered secret")
	auth.add_argument("-t", "--timestamp", type=parseTimestamp, default=None,
			  metavar="TIMESTAMP",
			  help="timestamp to use to generate the OTP, "
			       "as seconds since the UNIX epoch")
	auth.add_argument("label", metavar="LABEL",
			  help="label of the TOTP secret to use, e.g. alice@example.com")
	args = p.parse_args(argv)

	if not args.no_mlock:
		err = libtotpauth.mlock.MLockWrapper.get().mlockall()
		if err and not args.quiet:
			print("WARNING: %s\n"
			      "The TOTP secrets could possibly be written "
			      "to an unencrypted swap-file or swap-partition on disk." % err,
			      file=sys.stderr)

	try:
		return run_command(storePath=args.state_file,
				   command=getCommand(args),
				   silent=args.quiet)
	except libtotpauth.DecodeError as e:
		print("Invalid secret: " + str(e), file=sys.stderr)
		return EXIT_DECODE
	except libtotpauth.StoreError as e:
		print("Store error: " + str(e), file=sys.stderr)
		return EXIT_STORE
	except libtotpauth.CredentialLookupError as e:
		print("Error: " + str(e), file=sys.stderr)
		return EXIT_LOOKUP
	except libtotpauth.TOTPAuthError as e:
		print("Error: " + str(e), file=sys.stderr)
		return EXIT_ERROR

if __name__ == "__main__":
	sys.exit(main())
