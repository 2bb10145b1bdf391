"""
ectoken Demo Application

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

Usage:
    ectoken-demo [KEY]                 build, encrypt and decrypt a sample policy
    ectoken-demo encrypt KEY POLICY    encrypt a serialized policy string
    ectoken-demo decrypt KEY TOKEN     decrypt a wire token

KEY falls back to ECTOKEN_SECRET_KEY when omitted. Set ECTOKEN_VERBOSE=1 to
log the iv, ciphertext and tag of every operation.
"""

import logging
import sys
import time
from typing import List, Optional

from ectoken.core.config import CodecConfig
from ectoken.crypto import encrypt, decrypt
from ectoken.errors import ECTokenError
from ectoken.token import PolicyToken


def run_walkthrough(config: CodecConfig) -> int:
    """Build a sample policy and take it through a full round trip"""
    print("ectoken Demo Application")
    print("=" * 50)
    print()

    print("Step 1: Build Policy")
    print("-" * 40)
    token = PolicyToken.from_dict({
        "ec_expire": int(time.time()) + 3600,
        "ec_country_allow": ["US", "CA"],
        "ec_country_deny": "MX",
    })
    token.add_value("ec_proto_allow", "https")
    print(f"✓ Policy: {token}")
    print()

    print("Step 2: Encrypt")
    print("-" * 40)
    sealed = encrypt(config.secret_key, token, verbose=config.verbose)
    print(f"✓ Token: {sealed}")
    print()

    print("Step 3: Decrypt")
    print("-" * 40)
    opened = decrypt(config.secret_key, sealed, verbose=config.verbose)
    print(f"✓ Policy: {opened}")
    print()

    if opened != token.serialize():
        print("✗ Round trip mismatch")
        return 1

    print("Demo completed successfully!")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ectoken-demo console script"""
    args = list(sys.argv[1:] if argv is None else argv)
    config = CodecConfig.from_env()

    if config.verbose:
        logging.basicConfig(level=logging.INFO, format="| %(message)s")

    command = "demo"
    if args and args[0] in ("encrypt", "decrypt"):
        command = args.pop(0)
        if len(args) != 2:
            print(__doc__)
            return 2

    if args:
        config.secret_key = args[0]

    try:
        config.validate()
    except ValueError as e:
        print(f"✗ {e} (pass KEY or set ECTOKEN_SECRET_KEY)")
        return 2

    try:
        if command == "encrypt":
            print(encrypt(config.secret_key, args[1], verbose=config.verbose))
        elif command == "decrypt":
            print(decrypt(config.secret_key, args[1], verbose=config.verbose))
        else:
            return run_walkthrough(config)
    except ECTokenError as e:
        print(f"✗ {e.error_code}: {e.message}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
