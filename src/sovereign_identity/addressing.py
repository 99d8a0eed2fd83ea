"""Deterministic record addressing.

Every record lives at an address derived from a namespace tag and one or more
seeds. The derivation is a pure function, so the store, an authority, and an
external reader all compute the same address without looking anything up::

    address = SHA-256(DOMAIN || part_0 || part_1 || ...)
    part_i  = u16_be(len(bytes_i)) || bytes_i

where ``bytes_0`` is the UTF-8 namespace and the remaining parts are the
seeds in order. Length-prefixing every part keeps the mapping injective over
the part sequence (``("ab", "c")`` and ``("a", "bc")`` never collide).
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import ClassVar

from sovereign_identity.principal import FixedKey, Principal

ADDRESS_DOMAIN: bytes = b"sovereign-identity/address/v1"

IDENTITY_NAMESPACE: str = "identity"
DETAIL_NAMESPACE: str = "detail"

_MAX_PART_LENGTH = 0xFFFF


@dataclass(frozen=True, order=True, repr=False)
class Address(FixedKey):
    """A derived 32-byte record address."""

    kind: ClassVar[str] = "address"


def derive_address(namespace: str, *seeds: bytes) -> Address:
    """Derive the address for *namespace* and *seeds*.

    Parameters
    ----------
    namespace:
        Non-empty namespace tag (for example ``"identity"``).
    seeds:
        Raw byte seeds, each at most 65535 bytes.

    Returns
    -------
    Address

    Raises
    ------
    ValueError
        If the namespace is empty or any part is too long.
    """
    if not namespace:
        raise ValueError("namespace must not be empty")

    digest = hashlib.sha256(ADDRESS_DOMAIN)
    for part in (namespace.encode("utf-8"), *seeds):
        if len(part) > _MAX_PART_LENGTH:
            raise ValueError(
                f"address seed of {len(part)} bytes exceeds the {_MAX_PART_LENGTH}-byte limit"
            )
        digest.update(len(part).to_bytes(2, "big"))
        digest.update(bytes(part))
    return Address(digest.digest())


def identity_address(owner: Principal) -> Address:
    """Address of the identity record owned by *owner*."""
    return derive_address(IDENTITY_NAMESPACE, owner.raw)


def detail_address(identity: Address, dimension: object) -> Address:
    """Address of the detail record for *identity* in *dimension*.

    *dimension* may be a :class:`~sovereign_identity.scoring.dimensions.Dimension`
    or its string value.
    """
    label = str(getattr(dimension, "value", dimension))
    return derive_address(DETAIL_NAMESPACE, identity.raw, label.encode("utf-8"))


__all__ = [
    "ADDRESS_DOMAIN",
    "Address",
    "DETAIL_NAMESPACE",
    "IDENTITY_NAMESPACE",
    "derive_address",
    "detail_address",
    "identity_address",
]
