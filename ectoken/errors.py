# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Error classes for ectoken.
"""


class ECTokenError(Exception):
    """Base ectoken error."""

    def __init__(self, message: str, error_code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "ECTOKEN_ERROR"
        self.details = details or {}


class ValidationError(ECTokenError):
    """Unrecognized policy field or unusable field value."""

    def __init__(self, message: str, error_code: str = None, details: dict = None):
        super().__init__(message, error_code or "VALIDATION_ERROR", details)


class FormatError(ECTokenError):
    """
    Malformed wire token: bad base64url text, an envelope shorter than
    IV + tag, or decrypted bytes that are not UTF-8.
    """

    def __init__(self, message: str, error_code: str = None, details: dict = None):
        super().__init__(message, error_code or "FORMAT_ERROR", details)


class AuthenticationError(ECTokenError):
    """Tag verification failed. Never retriable."""

    def __init__(self, message: str = "Token authentication failed", details: dict = None):
        super().__init__(message, "AUTHENTICATION_ERROR", details)
