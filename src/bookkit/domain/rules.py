"""Rule-based transaction categorization."""

from decimal import Decimal, InvalidOperation
from typing import Optional

from bookkit.config.logging import get_logger
from bookkit.database.base import Database
from bookkit.domain.entities import (
    RuleField,
    RuleOperator,
    Transaction,
    TransactionRule,
    TransactionType,
)
from bookkit.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_name_not_found,
    rule_name_taken,
    rule_not_found,
)

logger = get_logger(__name__)

# Ordering comparisons only make sense for amounts
_AMOUNT_ONLY = (RuleOperator.GREATER_THAN, RuleOperator.LESS_THAN)


def rule_matches(rule: TransactionRule, txn: Transaction) -> bool:
    """Return True if the transaction satisfies the rule's condition.

    Text comparisons ignore case. Amount comparisons are numeric, except
    ``contains`` which looks for the value in the formatted amount.
    """
    if rule.field == RuleField.AMOUNT:
        if rule.operator == RuleOperator.CONTAINS:
            return rule.value in str(txn.amount)
        target = Decimal(rule.value)
        if rule.operator == RuleOperator.EQUALS:
            return txn.amount == target
        if rule.operator == RuleOperator.GREATER_THAN:
            return txn.amount > target
        return txn.amount < target

    if rule.field == RuleField.VENDOR_NAME:
        text = (txn.vendor_name or "").lower()
    else:
        text = txn.description.lower()

    value = rule.value.lower()
    if rule.operator == RuleOperator.CONTAINS:
        return value in text
    return text == value


def first_matching_rule(
    rules: list[TransactionRule], txn: Transaction
) -> Optional[TransactionRule]:
    """First active rule matching the transaction, in the order given."""
    for rule in rules:
        if rule.is_active and rule_matches(rule, txn):
            return rule
    return None


class RuleService:
    """Service for managing categorization rules and applying them."""

    def __init__(self, db: Database):
        """Initialize rule service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_rule(
        self,
        name: str,
        value: str,
        category_name: str,
        field: RuleField | str = RuleField.DESCRIPTION,
        operator: RuleOperator | str = RuleOperator.CONTAINS,
        type: Optional[TransactionType | str] = None,
        priority: int = 100,
    ) -> int:
        """Create a categorization rule.

        Args:
            name: Rule name (unique)
            value: Value the field is compared with
            category_name: Category assigned to matching transactions
            field: "description", "vendor_name" or "amount"
            operator: "contains", "equals", "greater_than" or "less_than"
            type: Type given to matching transactions (default: the
                category's type)
            priority: Higher priorities are tried first

        Returns:
            Rule ID

        Raises:
            ValidationError: If the condition is malformed
            ConflictError: If a rule with the same name exists
            NotFoundError: If the category doesn't exist
        """
        name = name.strip()
        if not name:
            raise ValidationError("Rule name cannot be empty")
        value = value.strip()
        if not value:
            raise ValidationError("Rule value cannot be empty")

        try:
            field = RuleField(field)
        except ValueError:
            supported = ", ".join(f.value for f in RuleField)
            raise ValidationError(f"Invalid rule field '{field}'. Supported: {supported}")
        try:
            operator = RuleOperator(operator)
        except ValueError:
            supported = ", ".join(o.value for o in RuleOperator)
            raise ValidationError(
                f"Invalid rule operator '{operator}'. Supported: {supported}"
            )

        if operator in _AMOUNT_ONLY and field != RuleField.AMOUNT:
            raise ValidationError(f"Operator '{operator.value}' only applies to amounts")
        if field == RuleField.AMOUNT and operator != RuleOperator.CONTAINS:
            try:
                is_amount = Decimal(value).is_finite()
            except InvalidOperation:
                is_amount = False
            if not is_amount:
                raise ValidationError(f"Rule value '{value}' is not a valid amount")

        category = self.db.get_category_by_name(category_name)
        if category is None:
            raise NotFoundError(category_name_not_found(category_name))

        if type is None:
            type = category.type
        try:
            type = TransactionType(type)
        except ValueError:
            raise ValidationError(
                f"Invalid transaction type '{type}'. Must be 'income' or 'expense'"
            )

        if self.db.get_rule_by_name(name) is not None:
            raise ConflictError(rule_name_taken(name))

        rule_id = self.db.create_rule(
            name=name,
            condition_field=field.value,
            condition_operator=operator.value,
            condition_value=value,
            category_id=category.id,
            action_type=type.value,
            priority=priority,
        )
        logger.info(
            "rule_created",
            rule_id=rule_id,
            field=field.value,
            operator=operator.value,
            category=category.name,
        )
        return rule_id

    def get_rule(self, rule_id: int) -> Optional[TransactionRule]:
        """Get rule by ID."""
        return self.db.get_rule(rule_id)

    def require_rule(self, rule_id: int) -> TransactionRule:
        """Get rule by ID or raise NotFoundError."""
        rule = self.db.get_rule(rule_id)
        if rule is None:
            raise NotFoundError(rule_not_found(rule_id))
        return rule

    def list_rules(self, active_only: bool = False) -> list[TransactionRule]:
        """List rules in the order they are tried."""
        return self.db.list_rules(active_only=active_only)

    def set_active(self, rule_id: int, is_active: bool) -> None:
        """Enable or disable a rule."""
        self.db.set_rule_active(rule_id, is_active)
        logger.info("rule_toggled", rule_id=rule_id, is_active=is_active)

    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule."""
        self.db.delete_rule(rule_id)
        logger.info("rule_deleted", rule_id=rule_id)

    def find_matches(
        self, transaction_ids: Optional[list[int]] = None
    ) -> list[tuple[Transaction, TransactionRule]]:
        """Pair each uncategorized transaction with the rule that would categorize it.

        Args:
            transaction_ids: Only consider these transactions (default: all)

        Returns:
            (transaction, rule) pairs for transactions some active rule matches
        """
        rules = self.db.list_rules(active_only=True)
        if not rules:
            return []

        candidates = self.db.list_transactions(uncategorized=True)
        if transaction_ids is not None:
            wanted = set(transaction_ids)
            candidates = [txn for txn in candidates if txn.id in wanted]

        matches = []
        for txn in candidates:
            rule = first_matching_rule(rules, txn)
            if rule is not None:
                matches.append((txn, rule))
        return matches

    def apply_rules(self, transaction_ids: Optional[list[int]] = None) -> int:
        """Categorize uncategorized transactions with the first matching rule.

        A matched transaction gets the rule's category and type and is no
        longer flagged for review.

        Returns:
            Number of transactions categorized
        """
        matches = self.find_matches(transaction_ids)
        for txn, rule in matches:
            self.db.update_transaction_category(txn.id, rule.category_id)
            if txn.type != rule.type:
                self.db.update_transaction_type(txn.id, rule.type.value)
            self.db.update_transaction_flags(txn.id, needs_review=False)
            logger.debug("rule_applied", transaction_id=txn.id, rule_id=rule.id)

        logger.info("rules_applied", categorized=len(matches))
        return len(matches)
