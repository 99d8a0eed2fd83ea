"""Principal identifiers.

A principal is any external actor the system knows about: an identity owner,
a dimension authority, or the caller of an operation. Principals are 32-byte
values (in practice Ed25519 public keys) and render as base58btc text.

Proving that a caller really controls a principal is the transport layer's
job; everything in this package receives principals that are already
verified.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, TypeVar

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from sovereign_identity.encoding import b58decode, b58encode

KEY_LENGTH: int = 32

_K = TypeVar("_K", bound="FixedKey")


@dataclass(frozen=True, order=True)
class FixedKey:
    """A 32-byte identifier with a base58btc text form.

    Subclasses of different types never compare equal, so a principal can
    not be mistaken for an address that happens to share its bytes.
    """

    raw: bytes

    kind: ClassVar[str] = "key"

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray)):
            raise TypeError(f"{self.kind} must be bytes, got {type(self.raw).__name__}")
        if len(self.raw) != KEY_LENGTH:
            raise ValueError(
                f"{self.kind} must be exactly {KEY_LENGTH} bytes, got {len(self.raw)}"
            )
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def from_text(cls: type[_K], text: str) -> _K:
        """Parse the base58btc text form.

        Raises
        ------
        ValueError
            If *text* is not valid base58btc or does not decode to 32 bytes.
        """
        return cls(b58decode(text.strip()))

    @classmethod
    def coerce(cls: type[_K], value: "_K | str | bytes") -> _K:
        """Accept an instance, its text form, or its raw bytes."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_text(value)
        if isinstance(value, (bytes, bytearray)):
            return cls(bytes(value))
        raise TypeError(f"Cannot interpret {type(value).__name__} as {cls.kind}")

    @property
    def text(self) -> str:
        return b58encode(self.raw)

    def is_zero(self) -> bool:
        return self.raw == bytes(KEY_LENGTH)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.text!r})"


@dataclass(frozen=True, order=True, repr=False)
class Principal(FixedKey):
    """An external actor: owner, authority, or caller."""

    kind: ClassVar[str] = "principal"

    @classmethod
    def zero(cls) -> "Principal":
        """The all-zero principal, which can never hold an authority."""
        return cls(bytes(KEY_LENGTH))


@dataclass(frozen=True)
class PrincipalKeypair:
    """An Ed25519 keypair whose public half is used as a :class:`Principal`.

    Parameters
    ----------
    principal:
        The public key as a principal.
    private_key:
        The 32-byte raw Ed25519 private key.
    """

    principal: Principal
    private_key: bytes

    def to_dict(self) -> dict[str, object]:
        """Serialize to a plain dictionary (private key as hex)."""
        return {
            "principal": self.principal.text,
            "private_key_hex": self.private_key.hex(),
        }


def generate_keypair() -> PrincipalKeypair:
    """Generate a fresh Ed25519 keypair and wrap its public key as a principal."""
    private_key = Ed25519PrivateKey.generate()
    private_bytes = private_key.private_bytes(
        Encoding.Raw, PrivateFormat.Raw, NoEncryption()
    )
    public_bytes = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
    return PrincipalKeypair(principal=Principal(public_bytes), private_key=private_bytes)


def generate_principal() -> Principal:
    """Return a new random principal."""
    return generate_keypair().principal


__all__ = [
    "FixedKey",
    "KEY_LENGTH",
    "Principal",
    "PrincipalKeypair",
    "generate_keypair",
    "generate_principal",
]
