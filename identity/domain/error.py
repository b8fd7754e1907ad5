"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class UserNotFoundError(NotFoundError):
    """Raised when no live user matches a lookup."""

    def __init__(self, identifier: str):
        super().__init__("user", identifier)


class SocialAccountNotFoundError(NotFoundError):
    """Raised when a user holds no account for a provider/social ID pair."""

    def __init__(self, provider: str, social_id: str):
        super().__init__("social account", f"{provider}:{social_id}")


class ConflictError(DomainError):
    """Raised when a uniqueness invariant would be violated."""

    pass


class UserExistsError(ConflictError):
    """Raised when a username is already taken by a live user."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"user exists: {username}")


class AccountExistsError(ConflictError):
    """Raised when a social account is already bound."""

    def __init__(self, provider: str, social_id: str):
        self.provider = provider
        self.social_id = social_id
        super().__init__(f"account exists: {provider}:{social_id}")


class ProviderNotSupportedError(DomainError):
    """Raised when no verifier is configured for a provider."""

    def __init__(self, provider: str):
        super().__init__(f"provider not supported: {provider}")


class AudienceNotFoundError(DomainError):
    """Raised when no audience (client ID) is configured for a provider."""

    def __init__(self, provider: str):
        super().__init__(f"audience not found for provider: {provider}")


class ClaimMissingError(DomainError):
    """Raised when a verified identity lacks a required claim."""

    def __init__(self, claim: str):
        self.claim = claim
        super().__init__(f"{claim} not found")


class InvalidStateError(DomainError):
    """Raised when a transition is not allowed from the user's status."""

    def __init__(self, operation: str, status: str):
        self.operation = operation
        self.status = status
        super().__init__(f"cannot {operation} a {status} user")


class InvalidEventError(DomainError):
    """Raised when a message cannot be decoded into a known user event."""

    pass


class VerificationError(DomainError):
    """Raised when a credential fails verification.

    Covers invalid or expired tokens and nonce mismatches.
    """

    pass
