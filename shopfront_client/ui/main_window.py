from __future__ import annotations

import logging
import threading

import customtkinter as ctk

from shopfront_client.apis import AuthApi, ProductsApi
from shopfront_client.config import AppSettings, ConfigurationError
from shopfront_client.credential_store import CredentialStore, FileCredentialStore, InMemoryCredentialStore
from shopfront_client.http import HttpClient
from shopfront_client.logging_utils import configure_logging
from shopfront_client.models import Authenticated, Failure, FailureKind, SessionView
from shopfront_client.services import ShopfrontService
from shopfront_client.session import SessionStateMachine

logger = logging.getLogger(__name__)

COPIED_RESET_MS = 2000
ERROR_COLOR = "#d14343"
PRICE_COLOR = "#2f9e44"


class MainWindow(ctk.CTk):
	def __init__(self, service: ShopfrontService):
		super().__init__()
		self._service = service
		self._busy = False
		self.title("Shopfront Client")
		self.geometry("760x640")
		self.minsize(640, 560)

		self._status_label = ctk.CTkLabel(self, text="Not signed in")
		self._status_label.pack(anchor="w", padx=16, pady=(16, 8))

		self._request_progress_label = ctk.CTkLabel(self, text="")
		self._request_progress_label.pack(anchor="w", padx=16, pady=(0, 4))

		self._request_progress_bar = ctk.CTkProgressBar(self, mode="indeterminate")
		self._request_progress_bar.pack(fill="x", padx=16, pady=(0, 8))
		self._set_progress_idle()

		action_row = ctk.CTkFrame(self)
		action_row.pack(fill="x", padx=16, pady=(0, 8))

		self._sign_out_btn = ctk.CTkButton(action_row, text="Sign out", command=self._sign_out)
		self._sign_out_btn.pack(side="left", padx=(8, 6), pady=8)

		self._copy_token_btn = ctk.CTkButton(action_row, text="Copy token", command=self._copy_token)
		self._copy_token_btn.pack(side="left", padx=6, pady=8)

		self._theme_mode = ctk.StringVar(value="System")
		ctk.CTkSegmentedButton(
			action_row,
			values=["System", "Light", "Dark"],
			variable=self._theme_mode,
			command=ctk.set_appearance_mode,
		).pack(side="right", padx=8, pady=8)

		self._tabview = ctk.CTkTabview(self)
		self._tabview.pack(fill="both", expand=True, padx=16, pady=(0, 16))

		self._tabview.add("Sign In")
		self._tabview.add("Sign Up")
		self._tabview.add("Products")

		sign_in_tab = self._tabview.tab("Sign In")
		self._signin_email = ctk.CTkEntry(sign_in_tab, placeholder_text="Email")
		self._signin_email.pack(fill="x", padx=12, pady=(12, 6))
		self._signin_password = ctk.CTkEntry(sign_in_tab, placeholder_text="Password", show="*")
		self._signin_password.pack(fill="x", padx=12, pady=6)
		self._sign_in_btn = ctk.CTkButton(sign_in_tab, text="Sign In", command=self._sign_in)
		self._sign_in_btn.pack(fill="x", padx=12, pady=8)

		sign_up_tab = self._tabview.tab("Sign Up")
		self._signup_email = ctk.CTkEntry(sign_up_tab, placeholder_text="Email")
		self._signup_email.pack(fill="x", padx=12, pady=(12, 6))
		self._signup_username = ctk.CTkEntry(sign_up_tab, placeholder_text="Username")
		self._signup_username.pack(fill="x", padx=12, pady=6)
		self._signup_password = ctk.CTkEntry(
			sign_up_tab,
			placeholder_text="Password (min 6 characters)",
			show="*",
		)
		self._signup_password.pack(fill="x", padx=12, pady=6)
		self._sign_up_btn = ctk.CTkButton(sign_up_tab, text="Sign Up", command=self._sign_up)
		self._sign_up_btn.pack(fill="x", padx=12, pady=8)

		self._auth_error_label = ctk.CTkLabel(self, text="", text_color=ERROR_COLOR)
		self._auth_error_label.pack(anchor="w", padx=16, pady=(0, 8))

		products_tab = self._tabview.tab("Products")
		products_row = ctk.CTkFrame(products_tab)
		products_row.pack(fill="x", padx=12, pady=(12, 6))

		self._fetch_products_btn = ctk.CTkButton(
			products_row,
			text="Fetch Products",
			command=self._fetch_products,
		)
		self._fetch_products_btn.pack(side="left", padx=(8, 6), pady=8)

		self._fetch_profile_btn = ctk.CTkButton(
			products_row,
			text="Who am I?",
			command=self._fetch_profile,
		)
		self._fetch_profile_btn.pack(side="left", padx=6, pady=8)

		self._products_notice_label = ctk.CTkLabel(products_tab, text="", text_color=ERROR_COLOR)
		self._products_notice_label.pack(anchor="w", padx=12, pady=(0, 6))

		self._products_output = ctk.CTkTextbox(products_tab, height=320)
		self._products_output.pack(fill="both", expand=True, padx=12, pady=(4, 12))
		self._products_output.tag_config("price", foreground=PRICE_COLOR)

		self._render_session(self._service.session_view())

	def _run_in_background(self, call, on_done):
		self._set_busy(True)

		def worker():
			try:
				result = call()
			except Exception as exc:
				logger.exception("Unexpected error in background request")
				result = Failure(f"{type(exc).__name__}: {exc}", FailureKind.REQUEST_FAILED)

			def finish():
				self._set_busy(False)
				on_done(result)

			self.after(0, finish)

		threading.Thread(target=worker, daemon=True).start()

	def _set_busy(self, busy: bool):
		self._busy = busy
		state = "disabled" if busy else "normal"
		for button in (
			self._sign_in_btn,
			self._sign_up_btn,
			self._sign_out_btn,
			self._fetch_products_btn,
			self._fetch_profile_btn,
		):
			button.configure(state=state)

		if busy:
			self._request_progress_label.configure(text="Request in progress...")
			self._request_progress_bar.start()
		else:
			self._request_progress_bar.stop()
			self._set_progress_idle()
			self._render_session(self._service.session_view())

	def _set_progress_idle(self):
		self._request_progress_label.configure(text="Idle")
		self._request_progress_bar.set(0)

	def _render_session(self, view: SessionView):
		if isinstance(view, Authenticated):
			email = self._mask_email_domain(view.user.email)
			self._status_label.configure(text=f"Signed in as {view.user.username} ({email})")
			self._auth_error_label.configure(text="")
			self._sign_out_btn.configure(state="disabled" if self._busy else "normal")
			self._copy_token_btn.configure(state="normal")
		else:
			self._status_label.configure(text="Not signed in")
			self._auth_error_label.configure(text=view.last_error or "")
			self._sign_out_btn.configure(state="disabled")
			self._copy_token_btn.configure(state="disabled")

		if self._busy:
			return

		if self._service.has_stored_credential():
			self._products_notice_label.configure(text="")
			self._fetch_products_btn.configure(state="normal")
			self._fetch_profile_btn.configure(state="normal")
		else:
			self._products_notice_label.configure(text="You need to sign in first to access products")
			self._fetch_products_btn.configure(state="disabled")
			self._fetch_profile_btn.configure(state="disabled")

	def _sign_in(self):
		if self._busy:
			return
		email = self._signin_email.get()
		password = self._signin_password.get()
		self._status_label.configure(text="Signing in...")
		self._run_in_background(
			lambda: self._service.sign_in(email, password),
			self._on_auth_done,
		)

	def _sign_up(self):
		if self._busy:
			return
		email = self._signup_email.get()
		username = self._signup_username.get()
		password = self._signup_password.get()
		self._status_label.configure(text="Creating account...")
		self._run_in_background(
			lambda: self._service.sign_up(email, username, password),
			self._on_auth_done,
		)

	def _on_auth_done(self, result):
		if isinstance(result, Failure):
			self._auth_error_label.configure(text=result.message)
			return
		self._render_session(result)

		failure = self._service.last_auth_failure()
		if isinstance(result, Authenticated) and failure is not None:
			self._auth_error_label.configure(text=failure.message)

	def _sign_out(self):
		if self._busy:
			return
		view = self._service.sign_out()
		for entry in (
			self._signin_email,
			self._signin_password,
			self._signup_email,
			self._signup_username,
			self._signup_password,
		):
			entry.delete(0, "end")
		self._copy_token_btn.configure(text="Copy token")
		self._render_output("")
		self._render_session(view)

	def _copy_token(self):
		credential = self._service.credential_for_clipboard()
		if not credential:
			return
		self.clipboard_clear()
		self.clipboard_append(credential)
		self._copy_token_btn.configure(text="Copied!")
		self.after(COPIED_RESET_MS, lambda: self._copy_token_btn.configure(text="Copy token"))

	def _fetch_products(self):
		if self._busy:
			return
		self._render_output("Loading...")
		self._run_in_background(self._service.fetch_products, self._on_products_done)

	def _on_products_done(self, result):
		if isinstance(result, Failure):
			self._render_output(result.message)
			return

		products = result.value
		if not products:
			self._render_output("No products available.")
			return

		self._render_output("")
		for product in products:
			self._products_output.insert("end", f"{product.name}\n")
			self._products_output.insert("end", f"{product.display_price}\n", "price")
			self._products_output.insert("end", f"ID: {product.id}\n\n")

	def _fetch_profile(self):
		if self._busy:
			return
		self._render_output("Loading...")
		self._run_in_background(self._service.fetch_profile, self._on_profile_done)

	def _on_profile_done(self, result):
		if isinstance(result, Failure):
			self._render_output(result.message)
			return
		user = result.value
		self._render_output(f"Username: {user.username}\nEmail: {user.email}")

	def _render_output(self, text: str):
		self._products_output.delete("1.0", "end")
		self._products_output.insert("1.0", text)

	@staticmethod
	def _mask_email_domain(email: str) -> str:
		value = email.strip()
		if "@" not in value:
			return value

		local, domain = value.split("@", 1)
		if not domain:
			return value

		mask_count = min(6, len(domain))
		masked_domain = ("*" * mask_count) + domain[mask_count:]
		return f"{local}@{masked_domain}"


def build_credential_store(settings: AppSettings) -> CredentialStore:
	if settings.persist_credential:
		return FileCredentialStore(settings.credential_path)
	return InMemoryCredentialStore()


def build_service(settings: AppSettings | None = None) -> ShopfrontService:
	settings = settings or AppSettings.from_env()
	http_client = HttpClient(settings)
	credential_store = build_credential_store(settings)
	session = SessionStateMachine(AuthApi(settings, http_client), credential_store)
	return ShopfrontService(
		session=session,
		products_api=ProductsApi(settings, http_client, credential_store),
		credential_store=credential_store,
	)


def run_app() -> None:
	configure_logging()
	ctk.set_appearance_mode("System")
	ctk.set_default_color_theme("blue")

	try:
		settings = AppSettings.from_env()
	except ConfigurationError as exc:
		logger.error("Configuration error: %s", exc)
		app = ctk.CTk()
		app.title("Shopfront Client - Configuration Error")
		app.geometry("760x360")
		message = ctk.CTkTextbox(app)
		message.pack(fill="both", expand=True, padx=16, pady=16)
		message.insert(
			"1.0",
			"Configuration error. Set required environment variables and restart:\n\n"
			f"{exc}\n\n"
			"Required:\n"
			"- SHOPFRONT_BASE_URL\n",
		)
		app.mainloop()
		return

	configure_logging(settings.log_level)
	window = MainWindow(build_service(settings))
	window.mainloop()
