"""Identity store and snapshot persistence."""
from __future__ import annotations

from sovereign_identity.store.identity_store import IdentityStore, utc_now

__all__ = ["IdentityStore", "utc_now"]
