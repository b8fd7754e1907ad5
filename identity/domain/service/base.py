"""Base class for domain services."""


class Service:
    """Marker base for domain services.

    Services hold the rules that need more than one user at a time (username
    and social ID uniqueness) or an external collaborator (verifiers, the
    passkey provider, the event sink).
    """

    pass
