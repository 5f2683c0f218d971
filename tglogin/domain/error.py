"""Domain layer errors."""

from enum import Enum


class DomainError(Exception):
    """Base domain error."""

    pass


class LoginErrorKind(str, Enum):
    """Why a login attempt was aborted."""

    UNAUTHORIZED = "unauthorized"
    EXPIRED = "expired"
    INVALID_PAYLOAD = "invalid_payload"
    EXTERNAL_ID_CONFLICT = "external_id_conflict"
    SIGNUP_DISABLED = "signup_disabled"
    ACCOUNT_CREATION_FAILED = "account_creation_failed"
    ACCOUNT_UPDATE_FAILED = "account_update_failed"
    ALLOCATION_EXHAUSTED = "allocation_exhausted"


# Rejections the caller can act on (link accounts, ask an admin), as opposed
# to store-level failures.
BUSINESS_REJECTIONS = frozenset(
    {LoginErrorKind.EXTERNAL_ID_CONFLICT, LoginErrorKind.SIGNUP_DISABLED}
)


class LoginError(DomainError):
    """Terminal failure of a login attempt.

    Every subclass pins a ``kind`` so the interface layer can map failures
    without matching on exception types.
    """

    kind: LoginErrorKind

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @property
    def is_business_rejection(self) -> bool:
        """Whether this is a policy rejection rather than a store failure."""
        return self.kind in BUSINESS_REJECTIONS


class UnauthorizedError(LoginError):
    """The payload signature does not match."""

    kind = LoginErrorKind.UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized! Data is NOT from Telegram"):
        super().__init__(message)


class ExpiredError(LoginError):
    """The payload is older than the allowed window."""

    kind = LoginErrorKind.EXPIRED

    def __init__(self, message: str = "Invalid! The data is outdated"):
        super().__init__(message)


class InvalidPayloadError(LoginError):
    """A signed payload is missing fields or carries malformed values."""

    kind = LoginErrorKind.INVALID_PAYLOAD

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Invalid login data: {detail}")


class ExternalIdConflictError(LoginError):
    """The Telegram id is bound to an account other than the logged-in one."""

    kind = LoginErrorKind.EXTERNAL_ID_CONFLICT

    def __init__(self, external_id: int):
        self.external_id = external_id
        super().__init__(
            "The Telegram User ID is already associated with another existing user. "
            "Please contact the admin"
        )


class SignupDisabledError(LoginError):
    """An unknown Telegram user tried to log in while signup is disabled."""

    kind = LoginErrorKind.SIGNUP_DISABLED

    def __init__(self):
        super().__init__(
            "Sign up via Telegram is disabled. You must first create an account "
            "and connect it to Telegram to be able to use Telegram Login"
        )


class AccountCreationFailedError(LoginError):
    """The account store refused to create the account."""

    kind = LoginErrorKind.ACCOUNT_CREATION_FAILED

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Telegram sign in could not be completed. {detail}")


class AccountUpdateFailedError(LoginError):
    """The account store refused to update the account."""

    kind = LoginErrorKind.ACCOUNT_UPDATE_FAILED

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Telegram sign in could not be completed. {detail}")


class AllocationExhaustedError(LoginError):
    """No unique username or email was found within the attempt limit."""

    kind = LoginErrorKind.ALLOCATION_EXHAUSTED

    def __init__(self, base: str, attempts: int):
        self.base = base
        self.attempts = attempts
        super().__init__(
            f"Could not find a unique value for '{base}' after {attempts} attempts"
        )


class AccountStoreError(DomainError):
    """The account store rejected a read or write.

    Raised by repository implementations; the reconciler converts it into a
    login error for the branch that was running.
    """

    pass


class ExternalIdTakenError(AccountStoreError):
    """Another account already carries the Telegram user id.

    Raised when the store-level uniqueness constraint on the external-id
    metadata fires, which happens when two logins race to link the same
    Telegram user.
    """

    def __init__(self, external_id: int):
        self.external_id = external_id
        super().__init__(
            f"Telegram user id already linked to an account: {external_id}"
        )
