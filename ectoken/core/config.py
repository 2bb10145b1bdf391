"""
Configuration module for ectoken.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.
"""

from dataclasses import dataclass

from ..util.config import load_config_file, load_config_from_env, parse_bool


@dataclass
class CodecConfig:
    """Settings for an AeadCodec"""
    secret_key: str = ""
    verbose: bool = False

    @classmethod
    def from_env(cls) -> "CodecConfig":
        """Create configuration from ECTOKEN_* environment variables"""
        env = load_config_from_env()
        return cls(
            secret_key=env.get("secret_key", ""),
            verbose=parse_bool(env.get("verbose", False)),
        )

    @classmethod
    def from_file(cls, file_path: str) -> "CodecConfig":
        """Create configuration from a JSON or YAML file"""
        data = load_config_file(file_path)

        # A null key stays empty so validate() rejects it.
        secret_key = data.get("secret_key")
        if secret_key is None:
            secret_key = ""
        elif not isinstance(secret_key, str):
            raise ValueError(
                f"secret_key must be a string, got {type(secret_key).__name__}"
            )

        return cls(
            secret_key=secret_key,
            verbose=parse_bool(data.get("verbose", False)),
        )

    def validate(self) -> bool:
        """Validate the configuration"""
        if not self.secret_key:
            raise ValueError("secret_key is required")
        return True

    def __repr__(self) -> str:
        return f"CodecConfig(secret_key='***', verbose={self.verbose})"
