# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
ectoken Python Package

Encrypted access-control tokens for content delivery: build an allow/deny
policy, seal it with AES-256-GCM, and verify it back.
"""

__version__ = "0.1.0"
__author__ = "Mauricio Fernandez"
__email__ = "mauricio.fernandez@siemens.com"

from .token import PolicyField, PolicyToken
from .crypto import V3, AeadCodec, derive_key, encrypt, decrypt
from .core.config import CodecConfig
from .errors import ECTokenError, ValidationError, FormatError, AuthenticationError

__all__ = [
    "PolicyField",
    "PolicyToken",
    "V3",
    "AeadCodec",
    "derive_key",
    "encrypt",
    "decrypt",
    "CodecConfig",
    "ECTokenError",
    "ValidationError",
    "FormatError",
    "AuthenticationError",
]
