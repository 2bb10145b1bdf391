# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Utility package providing helper functions for ectoken.

This package includes:
- Encoding utilities for base64url wire tokens and hex diagnostics
- Configuration utilities for environment and file based settings
"""

from .encoding import url_safe_encode, url_safe_decode, hex_encode
from .config import ENV_PREFIX, load_config_from_env, parse_bool, load_config_file

__all__ = [
    # Encoding utilities
    'url_safe_encode', 'url_safe_decode', 'hex_encode',

    # Configuration utilities
    'ENV_PREFIX', 'load_config_from_env', 'parse_bool', 'load_config_file'
]
