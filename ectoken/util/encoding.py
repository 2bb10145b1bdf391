# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Encoding and decoding utilities for ectoken.
Wire tokens use base64url (RFC 4648 section 5) without '=' padding.
"""

import base64
import binascii
import re
from typing import Union

from ..errors import FormatError

_URL_SAFE_PATTERN = re.compile(r'^[A-Za-z0-9_-]*={0,2}$')


def url_safe_encode(data: Union[str, bytes]) -> str:
    """Encode data to URL-safe base64 string without padding."""
    if isinstance(data, str):
        data = data.encode('utf-8')

    return base64.urlsafe_b64encode(data).decode('ascii').rstrip('=')


def url_safe_decode(encoded: str) -> bytes:
    """
    Decode URL-safe base64 string to bytes.

    Padding is optional. Characters outside the base64url alphabet, and
    lengths no base64 encoder can produce, raise FormatError.
    """
    if not isinstance(encoded, str):
        raise FormatError(f"Token must be a string, got {type(encoded).__name__}")

    if not _URL_SAFE_PATTERN.match(encoded):
        raise FormatError("Invalid URL-safe base64 data: unexpected characters")

    stripped = encoded.rstrip('=')
    if len(stripped) % 4 == 1:
        raise FormatError(f"Invalid URL-safe base64 data: bad length {len(stripped)}")

    # Add padding if needed
    padding = 4 - (len(stripped) % 4)
    if padding != 4:
        stripped += '=' * padding

    try:
        return base64.urlsafe_b64decode(stripped)
    except (binascii.Error, ValueError) as e:
        raise FormatError(f"Invalid URL-safe base64 data: {e}") from e


def hex_encode(data: Union[str, bytes]) -> str:
    """Encode data to hexadecimal string."""
    if isinstance(data, str):
        data = data.encode('utf-8')

    return data.hex()
