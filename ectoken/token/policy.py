# Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
# All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
# See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
# Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.

"""
Access-control policy model for ectoken.

A PolicyToken holds the eleven recognized policy fields and serializes them
into the canonical query-string-like form that gets encrypted:

    ec_expire=1700000000&ec_country_allow=US,CA&ec_clientip=1.2.3.4
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Union

from ..errors import ValidationError


class PolicyField(Enum):
    """Recognized policy fields, in canonical serialization order."""

    EXPIRE = "ec_expire"
    COUNTRY_ALLOW = "ec_country_allow"
    COUNTRY_DENY = "ec_country_deny"
    URL_ALLOW = "ec_url_allow"
    HOST_ALLOW = "ec_host_allow"
    HOST_DENY = "ec_host_deny"
    REF_ALLOW = "ec_ref_allow"
    REF_DENY = "ec_ref_deny"
    CLIENT_IP = "ec_clientip"
    PROTO_ALLOW = "ec_proto_allow"
    PROTO_DENY = "ec_proto_deny"

    @property
    def is_multi_value(self) -> bool:
        return self is not PolicyField.EXPIRE

    @classmethod
    def from_name(cls, name: Union[str, "PolicyField"]) -> "PolicyField":
        """Look up a field by its wire name, rejecting anything unrecognized."""
        if isinstance(name, PolicyField):
            return name
        try:
            return cls(name)
        except ValueError:
            raise ValidationError(
                f"Invalid key: {name}",
                details={"field": name},
            ) from None


FieldRef = Union[str, PolicyField]


class PolicyToken:
    """
    Builder for a serialized access-control policy.

    ec_expire holds a single epoch-seconds value; every other field is an
    ordered, duplicate-free list of strings.
    """

    def __init__(self):
        self._expire = 0
        self._multi: Dict[PolicyField, List[str]] = {
            f: [] for f in PolicyField if f.is_multi_value
        }

    @classmethod
    def parse(cls, text: str) -> "PolicyToken":
        """
        Build a token from a serialized policy string.

        Raises:
            ValidationError: on unknown fields or malformed segments
        """
        token = cls()
        if not text:
            return token

        for segment in text.split("&"):
            name, sep, raw = segment.partition("=")
            if not sep:
                raise ValidationError(
                    f"Malformed policy segment: {segment!r}",
                    details={"segment": segment},
                )
            field = PolicyField.from_name(name)
            if field.is_multi_value:
                for value in raw.split(","):
                    token.add_value(field, value)
            else:
                token.add_value(field, raw)

        return token

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "PolicyToken":
        """Build a token from a mapping of field name to a value or list of values."""
        token = cls()
        for name, value in values.items():
            field = PolicyField.from_name(name)
            if field.is_multi_value and isinstance(value, (list, tuple)):
                for item in value:
                    token.add_value(field, item)
            else:
                token.add_value(field, value)
        return token

    def add_value(self, key: FieldRef, value: Any) -> None:
        """
        Set or append a value to the token.

        ec_expire is replaced on every call; other fields append the string
        form of value unless it is already present.

        Raises:
            ValidationError: if key is not a recognized field, or the value
                cannot be stored for that field
        """
        field = PolicyField.from_name(key)

        if field is PolicyField.EXPIRE:
            self._expire = self._parse_expire(value)
            return

        item = str(value)
        if not item:
            raise ValidationError(
                f"Empty value for {field.value}",
                details={"field": field.value},
            )

        values = self._multi[field]
        if item not in values:
            values.append(item)

    # Kept under the legacy name used by existing token builders.
    addValue = add_value

    @staticmethod
    def _parse_expire(value: Any) -> int:
        try:
            expire = int(value)
        except (TypeError, ValueError):
            raise ValidationError(
                f"ec_expire must be an integer, got {value!r}",
                details={"field": PolicyField.EXPIRE.value},
            ) from None
        if expire < 0:
            raise ValidationError(
                f"ec_expire must be non-negative, got {expire}",
                details={"field": PolicyField.EXPIRE.value},
            )
        return expire

    @property
    def expire(self) -> int:
        return self._expire

    def get_values(self, key: FieldRef) -> List[str]:
        """Return a copy of a multi-value field's sequence."""
        field = PolicyField.from_name(key)
        if not field.is_multi_value:
            raise ValidationError(f"{field.value} is not a multi-value field")
        return list(self._multi[field])

    @property
    def values(self) -> Dict[str, Any]:
        """Snapshot of every field keyed by wire name."""
        snapshot: Dict[str, Any] = {PolicyField.EXPIRE.value: self._expire}
        for field, items in self._multi.items():
            snapshot[field.value] = list(items)
        return snapshot

    def is_empty(self) -> bool:
        return self._expire <= 0 and not any(self._multi.values())

    def serialize(self) -> str:
        """Serialize the token as field=value segments joined by '&'."""
        segments = []
        for field in PolicyField:
            if field is PolicyField.EXPIRE:
                if self._expire > 0:
                    segments.append(f"{field.value}={self._expire}")
            elif self._multi[field]:
                segments.append(f"{field.value}={','.join(self._multi[field])}")
        return "&".join(segments)

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return f"PolicyToken({self.serialize()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PolicyToken):
            return NotImplemented
        return self._expire == other._expire and self._multi == other._multi
