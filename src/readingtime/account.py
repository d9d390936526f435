"""Signed-in identity, as handed over by the external sign-in provider."""

from __future__ import annotations

import logging
from typing import Optional

from readingtime.library.models import Identity
from readingtime.library.store import PersistenceGateway

log = logging.getLogger(__name__)


class AccountService:
    def __init__(self, store: PersistenceGateway) -> None:
        self._store = store
        self._identity = store.load_identity()

    @property
    def is_signed_in(self) -> bool:
        return self._identity is not None

    def current(self) -> Optional[Identity]:
        return self._identity

    def sign_in(self, identity: Identity) -> None:
        self._store.save_identity(identity)
        self._identity = identity
        log.info("Signed in as %s", identity.user_id)

    def sign_out(self) -> None:
        self._store.save_identity(None)
        self._identity = None
