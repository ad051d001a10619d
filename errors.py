"""Error types raised by Budgetr services.

Every service error derives from BudgetrError so that callers (the CLI entry
point) can report them uniformly. Store failures are left as sqlite3 errors.
"""


class BudgetrError(Exception):
    """Base class for all Budgetr errors."""


class ValidationError(BudgetrError):
    """Malformed input: non-positive amount, bad percentage, bad date, etc."""


class NotFoundError(BudgetrError):
    """The referenced record does not exist or belongs to another owner."""

    def __init__(self, kind: str, identifier):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} {identifier} not found")


class ConflictError(BudgetrError):
    """A uniqueness constraint was violated."""
