from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")

_CENTS = Decimal("0.01")


class FailureKind(str, Enum):
    VALIDATION_ERROR = "validation_error"
    AUTH_REJECTED = "auth_rejected"
    AUTHORIZATION_REJECTED = "authorization_rejected"
    REQUEST_FAILED = "request_failed"
    INVALID_RESPONSE = "invalid_response"
    NETWORK_ERROR = "network_error"
    PRECONDITION_FAILED = "precondition_failed"


@dataclass(frozen=True)
class UserIdentity:
    username: str
    email: str

    @staticmethod
    def from_payload(payload: Any) -> "UserIdentity":
        if not isinstance(payload, dict):
            raise ValueError("User payload must be an object")

        username = payload.get("username")
        email = payload.get("email")
        if not isinstance(username, str) or not username.strip():
            raise ValueError("User payload is missing a username")
        if not isinstance(email, str):
            raise ValueError("User payload is missing an email")
        return UserIdentity(username=username, email=email)


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: Decimal

    @property
    def display_price(self) -> str:
        return format_price(self.price)

    @staticmethod
    def from_payload(payload: Any) -> "Product":
        if not isinstance(payload, dict):
            raise ValueError("Product payload must be an object")

        product_id = payload.get("id")
        name = payload.get("name")
        if not isinstance(product_id, str) or not product_id:
            raise ValueError("Product payload is missing an id")
        if not isinstance(name, str):
            raise ValueError("Product payload is missing a name")
        return Product(id=product_id, name=name, price=parse_price(payload.get("price")))


def parse_price(value: Any) -> Decimal:
    # bool is an int subclass; JSON true/false is not a price.
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ValueError(f"Invalid price: {value!r}")
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid price: {value!r}") from None
    if not price.is_finite() or price < 0:
        raise ValueError(f"Invalid price: {value!r}")
    try:
        _round_to_cents(price)
    except ArithmeticError:
        raise ValueError(f"Price out of range: {value!r}") from None
    return price


def format_price(price: Decimal) -> str:
    """Render a price with exactly two fraction digits, rounding half up."""
    return f"${_round_to_cents(price)}"


def _round_to_cents(price: Decimal) -> Decimal:
    # Room for every integer digit, a rounding carry and the two cents digits.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, price.adjusted() + 4)
        return price.quantize(_CENTS, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Anonymous:
    last_error: str | None = None


@dataclass(frozen=True)
class Authenticated:
    user: UserIdentity
    credential: str = field(repr=False)


SessionView = Union[Anonymous, Authenticated]


@dataclass(frozen=True)
class AuthSuccess:
    user: UserIdentity
    credential: str = field(repr=False)


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    message: str
    kind: FailureKind


AuthResult = Union[AuthSuccess, Failure]
