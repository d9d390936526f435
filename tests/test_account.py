"""Tests for the stored sign-in identity."""

from __future__ import annotations

from readingtime.account import AccountService
from readingtime.library.models import Identity
from readingtime.library.store import Store


class TestAccountService:
    def test_signed_out_by_default(self, store: Store):
        account = AccountService(store)
        assert account.is_signed_in is False
        assert account.current() is None

    def test_sign_in_persists(self, store: Store):
        AccountService(store).sign_in(Identity("u-1", "Ada", None))
        account = AccountService(store)
        assert account.is_signed_in
        assert account.current() == Identity("u-1", "Ada", None)

    def test_sign_out(self, store: Store):
        account = AccountService(store)
        account.sign_in(Identity("u-1", email="a@b.c"))
        account.sign_out()
        assert account.current() is None
        assert AccountService(store).current() is None
