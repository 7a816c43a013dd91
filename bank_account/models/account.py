"""
Account Data Models

These models define the value types that flow between the account
entity, the validator, the orchestrator and the console driver.

DESIGN DECISION: The validated mutator does not raise on a rule
violation. It returns an AccountUpdateResult that is either an
accepted result (carrying the committed Balances) or a rejected
result (carrying an AccountRejection). Each caller decides at the
call site whether to swallow or report the rejection.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# CONSTANTS - Fixed minimums shared by every account
# =============================================================================

MIN_AVAILABLE_BALANCE = Decimal("5.00")
MIN_PRESENT_BALANCE = Decimal("5.00")


Amount = Union[Decimal, int, float, str]


class InvalidAmountError(ValueError):
    """Raised when a value cannot be read as a currency amount."""


def to_amount(value: Amount) -> Decimal:
    """
    Coerce a caller supplied value into a Decimal amount.

    Floats go through str() so that 10.1 becomes Decimal("10.1")
    rather than its binary expansion. The value is not rounded.
    Infinities are kept: Decimal orders them, so the balance rules
    decide what to do with them. NaN has no order and is rejected.

    Raises:
        InvalidAmountError: If the value is not numeric or is NaN
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Not an amount: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidAmountError("Amount required")
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise InvalidAmountError(f"Not a number: {text!r}") from None
    else:
        raise InvalidAmountError(f"Not an amount: {value!r}")

    if amount.is_nan():
        raise InvalidAmountError(f"Not a number: {value!r}")
    return amount


# =============================================================================
# ENUMS - Error taxonomy
# =============================================================================

class AccountErrorKind(str, Enum):
    """
    Why a pair of balances was rejected.

    UNKNOWN is reserved for uncategorized failures; the balance rules
    never produce it.
    """
    AVAILABLE_BELOW_MINIMUM = "available_below_minimum"
    PRESENT_BELOW_MINIMUM = "present_below_minimum"
    AVAILABLE_EXCEEDS_PRESENT = "available_exceeds_present"
    UNKNOWN = "unknown"


# =============================================================================
# VALUE MODELS
# =============================================================================

class Balances(BaseModel):
    """An immutable (available, present) pair."""
    model_config = ConfigDict(frozen=True)

    available: Decimal = Field(
        ...,
        allow_inf_nan=True,
        description="Funds the holder can use right now"
    )
    present: Decimal = Field(
        ...,
        allow_inf_nan=True,
        description="Funds on the account including pending amounts"
    )

    @classmethod
    def defaults(cls) -> "Balances":
        """The minimum balances every account falls back to."""
        return cls(available=MIN_AVAILABLE_BALANCE, present=MIN_PRESENT_BALANCE)

    def as_tuple(self) -> tuple[Decimal, Decimal]:
        return self.available, self.present


class AccountRejection(BaseModel):
    """A rule violation found while validating a pair of balances."""
    model_config = ConfigDict(frozen=True)

    kind: AccountErrorKind = Field(
        default=AccountErrorKind.UNKNOWN,
        description="Which rule failed"
    )
    message: str = Field(
        ...,
        min_length=1,
        description="Human-readable description of the violation"
    )

    def __str__(self) -> str:
        return self.message


class AccountUpdateResult(BaseModel):
    """
    Outcome of a validated mutation.

    Exactly one of `balances` / `rejection` is set:
    - ok=True: `balances` holds the newly committed pair
    - ok=False: `rejection` says why nothing changed
    """

    ok: bool = Field(
        ...,
        description="Was the new pair committed?"
    )
    balances: Optional[Balances] = Field(
        default=None,
        description="Committed balances (accepted results only)"
    )
    rejection: Optional[AccountRejection] = Field(
        default=None,
        description="Rule violation (rejected results only)"
    )

    @model_validator(mode='after')
    def validate_outcome(self) -> 'AccountUpdateResult':
        """Keep `ok` consistent with the payload."""
        if self.ok:
            if self.balances is None or self.rejection is not None:
                raise ValueError("Accepted result must carry balances only")
        else:
            if self.rejection is None or self.balances is not None:
                raise ValueError("Rejected result must carry a rejection only")
        return self

    @classmethod
    def accepted(cls, balances: Balances) -> "AccountUpdateResult":
        return cls(ok=True, balances=balances)

    @classmethod
    def rejected(cls, rejection: AccountRejection) -> "AccountUpdateResult":
        return cls(ok=False, rejection=rejection)

    @property
    def kind(self) -> Optional[AccountErrorKind]:
        """The rejection kind, or None for an accepted result."""
        return self.rejection.kind if self.rejection else None

    @property
    def message(self) -> Optional[str]:
        return self.rejection.message if self.rejection else None
