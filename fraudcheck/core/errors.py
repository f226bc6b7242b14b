"""
Engine exceptions.

Only InvalidRequest is allowed to reach a caller of the engine. Lookup
failures are folded into verdict statuses by the orchestrator.
"""


class VerificationError(Exception):
    """Base class for engine errors."""


class RegistryUnavailable(VerificationError):
    """A registry or ledger could not be reached. Distinct from not-found."""

    def __init__(self, registry: str, reason: str = "unavailable"):
        self.registry = registry
        self.reason = reason
        super().__init__(f"{registry} registry {reason}")


class InvalidRequest(VerificationError):
    """The request cannot be dispatched to any verification flow."""
