"""Error types shared across domains."""


class DatastoreUnavailable(RuntimeError):
    """Raised when a datastore read fails."""


class WriteFailure(RuntimeError):
    """Raised when the datastore rejects or fails to apply a write."""


class OwnershipViolation(ValueError):
    """Raised when a domain tries to write a tag it does not own."""

    def __init__(self, domain: str, tags: set[str]) -> None:
        self.domain = domain
        self.tags = frozenset(tags)
        listed = ", ".join(sorted(tags))
        super().__init__(f"Domain {domain!r} does not own tags: {listed}")


class LedgerConflict(RuntimeError):
    """Raised when a ledger write loses a version check."""


class ConflictRetry(RuntimeError):
    """Raised when a ledger merge keeps losing version checks."""

    def __init__(self, ledger_id: str, attempts: int) -> None:
        self.ledger_id = ledger_id
        self.attempts = attempts
        super().__init__(
            f"Ledger {ledger_id} changed concurrently; "
            f"gave up after {attempts} attempts"
        )


class TemplateNotFound(LookupError):
    """Raised when a template is missing or owned by another user."""
