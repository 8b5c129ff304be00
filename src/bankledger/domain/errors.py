"""Shared domain error messages and error types."""

from datetime import date
from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class MalformedAmount(ValidationError):
    """A numeric statement token could not be parsed."""

    def __init__(self, token: str, reason: str):
        super().__init__(f"Malformed amount '{token}': {reason}")
        self.token = token


class ParseAmbiguity(ValidationError):
    """A statement line's columns cannot be attributed unambiguously."""


class DuplicateTransaction(ConflictError):
    """Transaction fingerprint already exists for the company."""


class OutOfPeriod(ValidationError):
    """Transaction date falls outside the selected fiscal period."""


class DocumentError(DomainError):
    """The statement document as a whole cannot be processed."""


def company_not_found(company: int | str) -> str:
    """Return message for missing company."""
    if isinstance(company, int):
        return f"Company {company} not found"
    return f"Company '{company}' not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account by ID."""
    return f"Account {account_id} not found"


def account_code_not_found(code: str, company_id: int) -> str:
    """Return message for missing account by code."""
    return f"Account '{code}' not found for company {company_id}"


def fiscal_period_not_found(period: int | str) -> str:
    """Return message for missing fiscal period."""
    if isinstance(period, int):
        return f"Fiscal period {period} not found"
    return f"Fiscal period '{period}' not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def not_owned_by_company(kind: str, entity_id: int, company_id: int) -> str:
    """Return message when an entity belongs to another company."""
    return f"{kind} {entity_id} does not belong to company {company_id}"


def duplicate_transaction(uploaded_on: Optional[date]) -> str:
    """Return message for a transaction that was already imported."""
    if uploaded_on is None:
        return "Transaction already exists"
    return f"Transaction already exists (uploaded on {uploaded_on.isoformat()})"
