"""Domain error types and the messages bookkit raises with them."""


class DomainError(ValueError):
    """Base class for bookkit domain errors.

    Deriving from ValueError lets the CLI report every domain failure with
    a single ``except ValueError`` clause.
    """


class ValidationError(DomainError):
    """Input rejected before it reaches the ledger."""


class NotFoundError(DomainError):
    """No ledger record exists for the requested id or name."""


class ConflictError(DomainError):
    """A name is already taken."""


class DependencyError(DomainError):
    """Ledger rows still reference the record being removed."""


def bank_account_not_found(account_id: int) -> str:
    """Return message for missing bank account."""
    return f"Bank account {account_id} not found"


def bank_account_name_taken(name: str) -> str:
    """Return message for duplicate bank account names."""
    return f"Bank account with name '{name}' already exists"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def category_name_not_found(name: str) -> str:
    """Return message for missing category by name."""
    return f"Category '{name}' not found"


def category_name_taken(name: str) -> str:
    """Return message for duplicate category names."""
    return f"Category '{name}' already exists"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def report_not_found(report_id: int) -> str:
    """Return message for missing saved report."""
    return f"Report {report_id} not found"


def rule_not_found(rule_id: int) -> str:
    """Return message for missing categorization rule."""
    return f"Rule {rule_id} not found"


def rule_name_taken(name: str) -> str:
    """Return message for duplicate rule names."""
    return f"Rule '{name}' already exists"


def bank_account_delete_blocked(account_id: int, transaction_count: int) -> str:
    """Return message when a bank account still has transactions."""
    return (
        f"Cannot delete bank account {account_id}: it has {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}. "
        "Please reassign or delete them first."
    )
