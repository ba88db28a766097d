from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import sys
from urllib.parse import urlparse


class ConfigurationError(ValueError):
    pass


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class AppSettings:
    base_url: str
    signin_path: str = "/api/auth/signin"
    signup_path: str = "/api/auth/signup"
    products_path: str = "/api/routes/products"
    me_path: str = "/api/auth/me"
    timeout_seconds: float | None = None
    credential_path: str = ""
    persist_credential: bool = True
    credential_field: str = "token"
    log_level: str = "INFO"

    @staticmethod
    def from_env() -> "AppSettings":
        _load_dotenv_if_present()

        base_url = os.getenv("SHOPFRONT_BASE_URL", "").strip().rstrip("/")
        signin_path = os.getenv("SHOPFRONT_SIGNIN_PATH", "/api/auth/signin").strip()
        signup_path = os.getenv("SHOPFRONT_SIGNUP_PATH", "/api/auth/signup").strip()
        products_path = os.getenv("SHOPFRONT_PRODUCTS_PATH", "/api/routes/products").strip()
        me_path = os.getenv("SHOPFRONT_ME_PATH", "/api/auth/me").strip()

        raw_timeout = os.getenv("SHOPFRONT_TIMEOUT_SECONDS", "").strip()
        try:
            timeout_seconds = float(raw_timeout) if raw_timeout else None
        except ValueError:
            raise ConfigurationError("SHOPFRONT_TIMEOUT_SECONDS must be a number") from None

        default_credential_path = os.path.join(
            os.getenv("LOCALAPPDATA", os.getcwd()),
            "ShopfrontClient",
            "token.bin",
        )
        credential_path = os.getenv("SHOPFRONT_CREDENTIAL_PATH", default_credential_path).strip()
        persist_credential = _parse_bool(
            "SHOPFRONT_PERSIST_CREDENTIAL",
            os.getenv("SHOPFRONT_PERSIST_CREDENTIAL", "true"),
        )
        credential_field = os.getenv("SHOPFRONT_CREDENTIAL_FIELD", "token").strip()
        log_level = os.getenv("SHOPFRONT_LOG_LEVEL", "INFO").strip().upper()

        settings = AppSettings(
            base_url=base_url,
            signin_path=signin_path,
            signup_path=signup_path,
            products_path=products_path,
            me_path=me_path,
            timeout_seconds=timeout_seconds,
            credential_path=credential_path,
            persist_credential=persist_credential,
            credential_field=credential_field,
            log_level=log_level,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if not self.base_url:
            raise ConfigurationError("Missing required settings: SHOPFRONT_BASE_URL")

        parsed = urlparse(self.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError("SHOPFRONT_BASE_URL must be an absolute http(s) URL")

        path_fields = {
            "SHOPFRONT_SIGNIN_PATH": self.signin_path,
            "SHOPFRONT_SIGNUP_PATH": self.signup_path,
            "SHOPFRONT_PRODUCTS_PATH": self.products_path,
            "SHOPFRONT_ME_PATH": self.me_path,
        }
        invalid_paths = [name for name, value in path_fields.items() if not value.startswith("/")]
        if invalid_paths:
            raise ConfigurationError(
                "Endpoint paths must start with '/': " + ", ".join(invalid_paths)
            )

        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ConfigurationError("SHOPFRONT_TIMEOUT_SECONDS must be greater than 0")

        if self.persist_credential and not self.credential_path:
            raise ConfigurationError(
                "SHOPFRONT_CREDENTIAL_PATH is required when SHOPFRONT_PERSIST_CREDENTIAL is enabled"
            )

        if not self.credential_field:
            raise ConfigurationError("SHOPFRONT_CREDENTIAL_FIELD must not be empty")

        if self.log_level not in _LOG_LEVELS:
            raise ConfigurationError(
                "SHOPFRONT_LOG_LEVEL must be one of: " + ", ".join(sorted(_LOG_LEVELS))
            )


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean (true/false)")


def _load_dotenv_if_present(file_name: str = ".env") -> None:
    for candidate in _candidate_env_files(file_name):
        _load_env_file(candidate)


def _candidate_env_files(file_name: str) -> list[Path]:
    candidates: list[Path] = []

    explicit = os.getenv("SHOPFRONT_ENV_FILE", "").strip()
    if explicit:
        candidates.append(Path(explicit).expanduser())

    candidates.append(Path.cwd() / file_name)

    if getattr(sys, "frozen", False):
        exe_dir = Path(sys.executable).resolve().parent
        candidates.append(exe_dir / file_name)
    else:
        project_root = Path(__file__).resolve().parent.parent
        candidates.append(project_root / file_name)

    unique_candidates: list[Path] = []
    seen: set[str] = set()
    for path in candidates:
        normalized = str(path.resolve()) if path.exists() else str(path)
        if normalized in seen:
            continue
        seen.add(normalized)
        unique_candidates.append(path)
    return unique_candidates


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return

    try:
        with path.open("r", encoding="utf-8") as env_file:
            for raw_line in env_file:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")

                if key and key not in os.environ:
                    os.environ[key] = value
    except OSError:
        return
