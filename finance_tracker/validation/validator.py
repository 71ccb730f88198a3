"""
Ledger Command Validation

Every command is checked here before the engine touches any state.
The engine raises InvalidArgumentError when a result carries errors, so a
malformed command can never leave a balance half-updated.

Severity levels:
- error: the command is rejected (non-positive amount, missing transfer
  destination, malformed date, unknown enum literal, blank name)
- warning: the command proceeds and the warning is logged (same-account
  transfer, reference to an account id that does not exist)

IMPORTANT: Validation NEVER silently fixes issues.
"""

from decimal import Decimal
from enum import Enum
from typing import Collection, Optional, Type

from finance_tracker.models.ledger import (
    AccountRole,
    AccountType,
    TransactionType,
)
from finance_tracker.models.validation import ValidationIssue, ValidationResult
from finance_tracker.utils.dates import parse_timestamp
from finance_tracker.utils.decimal_utils import coerce_decimal


class LedgerValidator:
    """
    Validates ledger commands at the engine boundary.

    Stateless: anything it needs to know about the ledger (which account
    ids exist) is passed in by the caller.
    """

    def validate_account(
        self,
        name: str,
        type,
        role,
        balance,
    ) -> ValidationResult:
        issues: list[ValidationIssue] = []
        self._check_name(issues, "name", name)
        self._check_enum(issues, "type", type, AccountType)
        self._check_enum(issues, "role", role, AccountRole)
        self._check_number(issues, "balance", balance)
        return ValidationResult(command="add_account", issues=issues)

    def validate_transaction(
        self,
        account_id: str,
        type,
        amount,
        date,
        related_account_id: Optional[str] = None,
        known_account_ids: Optional[Collection[str]] = None,
        command: str = "add_transaction",
    ) -> ValidationResult:
        """
        Check a new transaction.

        Args:
            known_account_ids: Ids of existing accounts. When given, unknown
                references are reported as warnings.
        """
        issues: list[ValidationIssue] = []

        if not account_id or not str(account_id).strip():
            issues.append(ValidationIssue(
                field="account_id",
                issue_type="missing",
                message="An account is required",
                severity="error",
                suggested_fix="Select the account this movement belongs to",
            ))

        tx_type = self._check_enum(issues, "type", type, TransactionType)
        self._check_positive(issues, "amount", amount)
        self._check_timestamp(issues, "date", date)

        if tx_type == TransactionType.TRANSFER:
            if not related_account_id:
                issues.append(ValidationIssue(
                    field="related_account_id",
                    issue_type="missing",
                    message="A transfer needs a destination account",
                    severity="error",
                    suggested_fix="Select the destination account",
                ))
            elif related_account_id == account_id:
                issues.append(ValidationIssue(
                    field="related_account_id",
                    issue_type="same_account",
                    message="Transfer source and destination are the same account",
                    severity="warning",
                    suggested_fix="Pick a different destination account",
                ))
        elif tx_type is not None and related_account_id:
            issues.append(ValidationIssue(
                field="related_account_id",
                issue_type="unexpected",
                message=f"Only transfers take a destination account, not {tx_type.value}",
                severity="error",
                suggested_fix="Leave the destination empty or change the type to transfer",
            ))

        if known_account_ids is not None:
            self._check_reference(issues, "account_id", account_id, known_account_ids)
            if tx_type == TransactionType.TRANSFER and related_account_id:
                self._check_reference(
                    issues, "related_account_id", related_account_id, known_account_ids
                )

        return ValidationResult(command=command, issues=issues)

    def validate_goal(
        self,
        name: str,
        target_amount,
        deadline,
        linked_reserve_account_id: Optional[str] = None,
        known_account_ids: Optional[Collection[str]] = None,
    ) -> ValidationResult:
        issues: list[ValidationIssue] = []
        self._check_name(issues, "name", name)
        self._check_positive(issues, "target_amount", target_amount)
        self._check_timestamp(issues, "deadline", deadline)
        if linked_reserve_account_id and known_account_ids is not None:
            self._check_reference(
                issues,
                "linked_reserve_account_id",
                linked_reserve_account_id,
                known_account_ids,
            )
        return ValidationResult(command="add_goal", issues=issues)

    def validate_goal_amount(self, current_amount) -> ValidationResult:
        issues: list[ValidationIssue] = []
        value = self._check_number(issues, "current_amount", current_amount)
        if value is not None and value < 0:
            issues.append(ValidationIssue(
                field="current_amount",
                issue_type="invalid_value",
                message="Saved amount cannot be negative",
                severity="error",
            ))
        return ValidationResult(command="update_goal", issues=issues)

    def validate_debt(
        self,
        name: str,
        total_amount,
        due_date,
        installments: Optional[int] = None,
    ) -> ValidationResult:
        issues: list[ValidationIssue] = []
        self._check_name(issues, "name", name)
        self._check_positive(issues, "total_amount", total_amount)
        self._check_timestamp(issues, "due_date", due_date)
        if installments is not None:
            if isinstance(installments, bool) or not isinstance(installments, int) or installments < 1:
                issues.append(ValidationIssue(
                    field="installments",
                    issue_type="invalid_value",
                    message="Installments must be a whole number of at least 1",
                    severity="error",
                ))
        return ValidationResult(command="add_debt", issues=issues)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """One line per issue, errors first."""
        if not result.issues:
            return "All checks passed."

        lines = []
        for severity, label in (("error", "Error"), ("warning", "Warning")):
            for issue in result.issues:
                if issue.severity != severity:
                    continue
                lines.append(f"{label}: {issue.message}")
                if issue.suggested_fix:
                    lines.append(f"  -> {issue.suggested_fix}")
        return "\n".join(lines)

    # -------------------------------------------------------------------------
    # Individual checks
    # -------------------------------------------------------------------------

    def _check_name(self, issues: list[ValidationIssue], field: str, value) -> None:
        if not isinstance(value, str) or not value.strip():
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{field} is required",
                severity="error",
            ))

    def _check_number(
        self,
        issues: list[ValidationIssue],
        field: str,
        value,
    ) -> Optional[Decimal]:
        if value is None:
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{field} is required",
                severity="error",
            ))
            return None
        try:
            return coerce_decimal(value)
        except ValueError:
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_format",
                message=f"{field} is not a number: {value!r}",
                severity="error",
            ))
            return None

    def _check_positive(self, issues: list[ValidationIssue], field: str, value) -> None:
        number = self._check_number(issues, field, value)
        if number is not None and number <= 0:
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_value",
                message=f"{field} must be greater than zero",
                severity="error",
                suggested_fix="Enter a positive value",
            ))

    def _check_timestamp(self, issues: list[ValidationIssue], field: str, value) -> None:
        try:
            parse_timestamp(value)
        except ValueError as e:
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_format",
                message=str(e),
                severity="error",
                suggested_fix="Use an ISO-8601 date such as 2024-01-31",
            ))

    def _check_enum(
        self,
        issues: list[ValidationIssue],
        field: str,
        value,
        enum_cls: Type[Enum],
    ) -> Optional[Enum]:
        try:
            return enum_cls(value)
        except ValueError:
            allowed = ", ".join(member.value for member in enum_cls)
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_value",
                message=f"{field} must be one of: {allowed} (got {value!r})",
                severity="error",
            ))
            return None

    def _check_reference(
        self,
        issues: list[ValidationIssue],
        field: str,
        account_id: str,
        known_account_ids: Collection[str],
    ) -> None:
        if account_id and account_id not in known_account_ids:
            issues.append(ValidationIssue(
                field=field,
                issue_type="unknown_reference",
                message=f"Account {account_id} does not exist; its balance will not change",
                severity="warning",
            ))
