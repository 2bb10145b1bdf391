# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
AES-256-GCM token codec.

Wire token: base64url (no padding) of the envelope

    iv (12 bytes) || ciphertext (len(plaintext) bytes) || tag (16 bytes)

The key is the SHA-256 digest of the UTF-8 passphrase. That is a fast hash,
not a password-hardening function: a token is only as strong as the
passphrase's own entropy.
"""

import hashlib
import logging
import os
from typing import Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..core.config import CodecConfig
from ..errors import AuthenticationError, FormatError
from ..token import PolicyToken
from ..util.encoding import hex_encode, url_safe_decode, url_safe_encode

logger = logging.getLogger(__name__)

IV_SIZE = 12
TAG_SIZE = 16
KEY_SIZE = 32
MIN_ENVELOPE_SIZE = IV_SIZE + TAG_SIZE

Passphrase = Union[str, bytes]


def derive_key(passphrase: Passphrase) -> bytes:
    """Reduce a passphrase of any length to a 256-bit AES key."""
    if isinstance(passphrase, str):
        passphrase = passphrase.encode('utf-8')
    return hashlib.sha256(passphrase).digest()


def encrypt(key: Passphrase, token: Union[str, PolicyToken], verbose: bool = False,
            log: Optional[logging.Logger] = None) -> str:
    """
    Encrypt a serialized policy with a passphrase.

    Args:
        key: Shared secret passphrase
        token: Serialized policy string or a PolicyToken
        verbose: Log iv, ciphertext, tag and envelope to ``log``
        log: Diagnostic sink for verbose output; defaults to this module's logger

    Returns:
        base64url wire token

    Raises:
        TypeError: token is neither a str nor a PolicyToken
    """
    log = log or logger
    if isinstance(token, PolicyToken):
        plaintext = token.serialize()
    elif isinstance(token, str):
        plaintext = token
    else:
        raise TypeError(f"token must be a str or PolicyToken, got {type(token).__name__}")

    # Fresh IV on every call; GCM loses all guarantees on IV reuse under one key.
    iv = os.urandom(IV_SIZE)
    sealed = AESGCM(derive_key(key)).encrypt(iv, plaintext.encode('utf-8'), None)
    ciphertext, tag = sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]
    envelope = iv + ciphertext + tag

    if verbose:
        log.info(f"iv: {hex_encode(iv)}")
        log.info(f"ciphertext: {hex_encode(ciphertext)}")
        log.info(f"tag: {hex_encode(tag)}")
        log.info(f"encoded_token: {hex_encode(envelope)}")

    return url_safe_encode(envelope)


def decrypt(key: Passphrase, token: str, verbose: bool = False,
            log: Optional[logging.Logger] = None) -> str:
    """
    Decrypt and authenticate a wire token.

    Raises:
        FormatError: token is not base64url, is shorter than iv + tag, or
            does not decrypt to UTF-8
        AuthenticationError: tag verification failed
    """
    log = log or logger

    envelope = url_safe_decode(token)
    if len(envelope) < MIN_ENVELOPE_SIZE:
        raise FormatError(
            f"Token too short: {len(envelope)} bytes, need at least {MIN_ENVELOPE_SIZE}",
            details={"length": len(envelope)},
        )

    iv = envelope[:IV_SIZE]
    ciphertext = envelope[IV_SIZE:-TAG_SIZE]
    tag = envelope[-TAG_SIZE:]

    if verbose:
        log.info(f"decoded_token: {hex_encode(envelope)}")
        log.info(f"iv: {hex_encode(iv)}")
        log.info(f"ciphertext: {hex_encode(ciphertext)}")
        log.info(f"tag: {hex_encode(tag)}")

    try:
        data = AESGCM(derive_key(key)).decrypt(iv, ciphertext + tag, None)
    except InvalidTag as e:
        log.warning("Token authentication failed")
        raise AuthenticationError() from e

    try:
        plaintext = data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise FormatError(f"Decrypted token is not valid UTF-8: {e}") from e

    if verbose:
        log.info(f"decrypted_str: {plaintext}")

    return plaintext


class V3:
    """Namespace kept for callers of the V3 token API."""

    encrypt = staticmethod(encrypt)
    decrypt = staticmethod(decrypt)


class AeadCodec:
    """
    Codec bound to a configured passphrase.

    Holds only the passphrase; the key is derived again on every call.
    """

    def __init__(self, config: Optional[CodecConfig] = None,
                 log: Optional[logging.Logger] = None):
        self.config = config or CodecConfig.from_env()
        self.config.validate()
        self.log = log or logger

    def encrypt(self, token: Union[str, PolicyToken]) -> str:
        return encrypt(self.config.secret_key, token,
                       verbose=self.config.verbose, log=self.log)

    def decrypt(self, token: str) -> str:
        return decrypt(self.config.secret_key, token,
                       verbose=self.config.verbose, log=self.log)
