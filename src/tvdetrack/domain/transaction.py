"""Transaction domain service."""

import logging
import math
from typing import Optional
from datetime import date

from tvdetrack.database.base import Database
from tvdetrack.domain.derivation import IdGenerator, derive_tax_transactions
from tvdetrack.domain.entities import (
    CORPORATE_ONLY_CATEGORIES,
    Driver,
    EntityType,
    ExpenseCategory,
    Transaction,
    TransactionInput,
    TransactionType,
)
from tvdetrack.domain.errors import (
    NotFoundError,
    ValidationError,
    derived_transaction_locked,
    entity_not_found,
    reference_not_found,
)
from tvdetrack.utils.ids import new_id

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for recording transactions and their derived tax entries."""

    def __init__(self, db: Database, id_generator: IdGenerator = new_id):
        """Initialize transaction service.

        Args:
            db: Database instance
            id_generator: Callable returning new unique IDs
        """
        self.db = db
        self.id_generator = id_generator

    def validate_input(self, payload: TransactionInput) -> Driver:
        """Check a payload against the store.

        Args:
            payload: Transaction payload

        Returns:
            The payload's driver

        Raises:
            ValidationError: If a field is missing or invalid, or a reference
                doesn't resolve
        """
        try:
            txn_type = TransactionType(payload.type)
        except ValueError:
            raise ValidationError(f"Invalid transaction type '{payload.type}'")

        if payload.amount is None or not math.isfinite(payload.amount):
            raise ValidationError("Amount must be a number")
        if payload.amount < 0:
            raise ValidationError("Amount cannot be negative")
        if not (payload.description or "").strip():
            raise ValidationError("Description is required")
        if payload.date is None:
            raise ValidationError("Date is required")

        driver = self.db.get_driver(payload.driver_id) if payload.driver_id else None
        if driver is None:
            raise ValidationError(reference_not_found("Driver", payload.driver_id or ""))

        if not payload.vehicle_id or self.db.get_vehicle(payload.vehicle_id) is None:
            raise ValidationError(reference_not_found("Vehicle", payload.vehicle_id or ""))

        if txn_type == TransactionType.INCOME:
            if not payload.platform_id:
                raise ValidationError("Income transactions require a platform")
            if self.db.get_platform(payload.platform_id) is None:
                raise ValidationError(reference_not_found("Platform", payload.platform_id))
            if payload.category is not None:
                raise ValidationError("Income transactions cannot have a category")
            if payload.vat_amount is not None:
                raise ValidationError("A VAT amount can only be recorded on expenses")
        else:
            if payload.category is None:
                raise ValidationError("Expense transactions require a category")
            try:
                category = ExpenseCategory(payload.category)
            except ValueError:
                raise ValidationError(f"Invalid expense category '{payload.category}'")
            if (
                category in CORPORATE_ONLY_CATEGORIES
                and driver.entity_type != EntityType.EMPRESA
            ):
                raise ValidationError(
                    f"Category '{category.value}' is only available for empresa drivers"
                )
            if payload.vat_amount is not None:
                if not math.isfinite(payload.vat_amount) or payload.vat_amount < 0:
                    raise ValidationError("VAT amount cannot be negative")

        return driver

    def save_transaction(
        self, payload: TransactionInput, existing_id: Optional[str] = None
    ) -> Transaction:
        """Create or replace a transaction together with its derived tax entries.

        Income entries get VAT (and, for ENI drivers, IRS and social security)
        estimates as child expenses. When editing, the previous entry and all
        of its children are removed and the set is derived again from the new
        values, in a single atomic write.

        Args:
            payload: Transaction payload
            existing_id: ID of the transaction being edited, or None to create

        Returns:
            The saved main transaction

        Raises:
            ValidationError: If the payload is invalid or existing_id is a
                derived entry
            NotFoundError: If existing_id doesn't exist
        """
        driver = self.validate_input(payload)

        if existing_id is not None:
            existing = self.db.get_transaction(existing_id)
            if existing is None:
                raise NotFoundError(entity_not_found("Transaction", existing_id))
            if existing.is_derived:
                raise ValidationError(
                    derived_transaction_locked(existing_id, existing.parent_id)
                )

        txn_type = TransactionType(payload.type)
        main = Transaction(
            id=existing_id or self.id_generator(),
            date=payload.date,
            type=txn_type,
            amount=float(payload.amount),
            description=payload.description.strip(),
            driver_id=payload.driver_id,
            vehicle_id=payload.vehicle_id,
            platform_id=payload.platform_id if txn_type == TransactionType.INCOME else None,
            category=(
                ExpenseCategory(payload.category)
                if txn_type == TransactionType.EXPENSE
                else None
            ),
            vat_amount=(
                float(payload.vat_amount)
                if txn_type == TransactionType.EXPENSE and payload.vat_amount is not None
                else None
            ),
        )
        derived = derive_tax_transactions(main, driver, self.id_generator)

        self.db.replace_transactions(existing_id, [main, *derived])
        logger.info(
            "%s %s transaction %s (%.2f) with %d derived entries",
            "Replaced" if existing_id else "Created",
            main.type.value,
            main.id,
            main.amount,
            len(derived),
        )
        return main

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        return self.db.get_transaction(transaction_id)

    def list_derived_transactions(self, parent_id: str) -> list[Transaction]:
        """List the tax entries generated from a transaction."""
        return self.db.list_transactions(parent_id=parent_id)

    def delete_transaction(self, transaction_id: str) -> int:
        """Delete a transaction and every entry derived from it.

        Deleting a derived entry removes only that entry. Deleting an unknown
        ID is a no-op.

        Args:
            transaction_id: Transaction ID to delete

        Returns:
            Number of transactions removed
        """
        removed = self.db.delete_transaction(transaction_id)
        if removed:
            logger.info("Deleted transaction %s (%d rows)", transaction_id, removed)
        else:
            logger.debug("Transaction %s already absent, nothing deleted", transaction_id)
        return removed

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        driver_id: Optional[str] = None,
        vehicle_id: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions with filters, newest first.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            driver_id: Optional driver ID filter
            vehicle_id: Optional vehicle ID filter

        Returns:
            List of transaction entities
        """
        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            driver_id=driver_id,
            vehicle_id=vehicle_id,
        )
