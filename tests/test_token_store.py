try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from consent_bridge.services import NeedsAuthorization, TokenStore, check_access


def test_set_overwrites_previous_token() -> None:
    store = TokenStore()
    assert store.get() is None

    store.set("first")
    store.set("second")

    assert store.get() == "second"


def test_set_rejects_empty_token() -> None:
    with pytest.raises(ValueError):
        TokenStore().set("")


def test_check_access_returns_token_when_held() -> None:
    assert check_access(TokenStore("shpat_1"), "/customers") == "shpat_1"


def test_check_access_without_token_asks_for_authorization() -> None:
    outcome = check_access(TokenStore(), "/customers?page=2")

    assert outcome == NeedsAuthorization(return_path="/customers?page=2")
    assert outcome.redirect_url == "/auth?next=%2Fcustomers%3Fpage%3D2"
