"""End-to-end flows through ShopfrontService with a fake transport."""

from __future__ import annotations

import pytest

from shopfront_client.models import Anonymous, Authenticated, FailureKind, Success
from shopfront_client.services import ShopfrontService

from .conftest import make_response


@pytest.fixture
def service(session, products_api, store) -> ShopfrontService:
    return ShopfrontService(session=session, products_api=products_api, credential_store=store)


def test_sign_up_then_fetch_products(service, store, fake_session) -> None:
    fake_session.queue(make_response(201, {"user": {"username": "a", "email": "a@b.com"}, "token": "tok123"}))
    fake_session.queue(make_response(200, [{"id": "1", "name": "Widget", "price": 9.5}]))

    view = service.sign_up("a@b.com", "a", "secret")
    result = service.fetch_products()

    assert isinstance(view, Authenticated)
    assert store.get() == "tok123"
    assert service.credential_for_clipboard() == "tok123"
    assert isinstance(result, Success)
    assert [p.display_price for p in result.value] == ["$9.50"]
    assert fake_session.calls[1]["headers"] == {"Authorization": "Bearer tok123"}


def test_authorization_rejection_keeps_session(service, fake_session) -> None:
    fake_session.queue(make_response(200, {"user": {"username": "a", "email": "a@b.com"}, "token": "tok123"}))
    fake_session.queue(make_response(401, {"message": "Invalid or expired token"}))

    service.sign_in("a@b.com", "secret")
    result = service.fetch_products()

    assert result.kind is FailureKind.AUTHORIZATION_REJECTED
    assert isinstance(service.session_view(), Authenticated)


def test_sign_out_blocks_protected_calls(service, fake_session) -> None:
    fake_session.queue(make_response(200, {"user": {"username": "a", "email": "a@b.com"}, "token": "tok123"}))
    service.sign_in("a@b.com", "secret")

    assert service.sign_out() == Anonymous()
    assert not service.has_stored_credential()
    assert service.credential_for_clipboard() is None
    assert service.fetch_products().kind is FailureKind.PRECONDITION_FAILED
    assert len(fake_session.calls) == 1
