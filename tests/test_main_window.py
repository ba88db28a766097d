from __future__ import annotations

from types import SimpleNamespace

import pytest

pytest.importorskip("customtkinter")

from shopfront_client.config import AppSettings  # noqa: E402
from shopfront_client.credential_store import FileCredentialStore, InMemoryCredentialStore  # noqa: E402
from shopfront_client.models import Anonymous  # noqa: E402
from shopfront_client.ui.main_window import MainWindow, build_credential_store, build_service  # noqa: E402


def test_credential_store_follows_persistence_setting(tmp_path) -> None:
    persisted = AppSettings(base_url="https://shop.example.test", credential_path=str(tmp_path / "token.bin"))
    transient = AppSettings(base_url="https://shop.example.test", persist_credential=False)

    assert isinstance(build_credential_store(persisted), FileCredentialStore)
    assert isinstance(build_credential_store(transient), InMemoryCredentialStore)


def test_build_service_starts_anonymous(tmp_path) -> None:
    settings = AppSettings(base_url="https://shop.example.test", credential_path=str(tmp_path / "token.bin"))

    service = build_service(settings)

    assert service.session_view() == Anonymous()
    assert not service.has_stored_credential()


def test_mask_email_domain() -> None:
    assert MainWindow._mask_email_domain("alice@example.com") == "alice@******e.com"
    assert MainWindow._mask_email_domain("alice") == "alice"


class _Widget:
    def __init__(self) -> None:
        self.options: dict = {}
        self.started = False

    def configure(self, **kwargs) -> None:
        self.options.update(kwargs)

    def start(self) -> None:
        self.started = True


def test_busy_flag_disables_sign_out_with_the_other_actions() -> None:
    window = SimpleNamespace(
        _sign_in_btn=_Widget(),
        _sign_up_btn=_Widget(),
        _sign_out_btn=_Widget(),
        _fetch_products_btn=_Widget(),
        _fetch_profile_btn=_Widget(),
        _request_progress_label=_Widget(),
        _request_progress_bar=_Widget(),
    )

    MainWindow._set_busy(window, True)

    assert window._busy is True
    assert window._sign_out_btn.options["state"] == "disabled"
    assert window._sign_in_btn.options["state"] == "disabled"
    assert window._request_progress_bar.started


def test_build_service_survives_unusable_credential_directory(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    settings = AppSettings(base_url="https://shop.example.test", credential_path=str(blocker / "token.bin"))

    service = build_service(settings)

    assert not service.has_stored_credential()


def test_sign_out_is_ignored_while_a_request_is_running() -> None:
    calls = []
    window = SimpleNamespace(_busy=True, _service=SimpleNamespace(sign_out=lambda: calls.append("sign_out")))

    MainWindow._sign_out(window)

    assert calls == []
