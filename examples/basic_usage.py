"""
Basic ectoken usage example.

This example demonstrates the fundamental ectoken operations:
- Building an access-control policy
- Encrypting it into a wire token
- Decrypting and verifying the token
- Handling tampered tokens
"""

import time

from ectoken import PolicyToken, encrypt, decrypt
from ectoken.errors import AuthenticationError


def basic_example():
    """Demonstrate basic ectoken usage"""
    print("Basic ectoken Example")
    print("=" * 30)

    key = "example-secret"

    # 1. Build a policy
    token = PolicyToken()
    token.add_value("ec_expire", int(time.time()) + 300)
    token.add_value("ec_host_allow", "media.example.com")
    token.add_value("ec_ref_allow", "www.example.com")
    token.add_value("ec_proto_allow", "https")
    print(f"✓ Policy: {token}")

    # 2. Encrypt
    sealed = encrypt(key, token)
    print(f"✓ Token: {sealed}")

    # 3. Decrypt
    print(f"✓ Decrypted: {decrypt(key, sealed)}")

    # 4. Tampering is detected
    tampered = ("A" if sealed[0] != "A" else "B") + sealed[1:]
    try:
        decrypt(key, tampered)
    except AuthenticationError as e:
        print(f"✓ Tampered token rejected: {e.error_code}")


if __name__ == "__main__":
    basic_example()
