"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic: enumerations are stored as plain
strings and come back as enum members, and JSON text columns come back as
tuples.
"""

import json
from typing import Optional

from burnrate.domain import entities as domain
from burnrate.database.models import (
    Document as ORMDocument,
    InvestmentAccount as ORMInvestmentAccount,
    Signal as ORMSignal,
    TaxDocument as ORMTaxDocument,
)


def _frequency_or_none(value: Optional[str]) -> Optional[domain.RecurringFrequency]:
    if not value:
        return None
    try:
        return domain.RecurringFrequency(value)
    except ValueError:
        return None


def signal_to_domain(orm_signal: ORMSignal) -> domain.FinancialSignal:
    """Convert SQLAlchemy Signal model to domain FinancialSignal entity."""
    return domain.FinancialSignal(
        id=orm_signal.id,
        date=orm_signal.date,
        amount=orm_signal.amount,
        currency=orm_signal.currency,
        flow=domain.FlowDirection(orm_signal.flow),
        nature=domain.SignalNature(orm_signal.nature),
        frequency=_frequency_or_none(orm_signal.frequency),
        merchant=orm_signal.merchant,
        category=orm_signal.category,
        source_doc_id=orm_signal.source_doc_id,
        created_at=orm_signal.created_at,
    )


def signal_to_orm(signal: domain.FinancialSignal) -> ORMSignal:
    """Convert a domain FinancialSignal into a new SQLAlchemy Signal row."""
    orm_signal = ORMSignal(id=signal.id, created_at=signal.created_at)
    apply_signal(orm_signal, signal)
    return orm_signal


def apply_signal(orm_signal: ORMSignal, signal: domain.FinancialSignal) -> None:
    """Copy every mutable field of a domain signal onto an ORM row."""
    orm_signal.date = signal.date
    orm_signal.amount = signal.amount
    orm_signal.currency = signal.currency
    orm_signal.flow = signal.flow.value
    orm_signal.nature = signal.nature.value
    orm_signal.frequency = signal.frequency.value if signal.frequency else None
    orm_signal.merchant = signal.merchant
    orm_signal.category = signal.category
    orm_signal.source_doc_id = signal.source_doc_id


def document_to_domain(orm_document: ORMDocument) -> domain.UploadedDocument:
    """Convert SQLAlchemy Document model to domain UploadedDocument entity."""
    return domain.UploadedDocument(
        id=orm_document.id,
        file_name=orm_document.file_name,
        uploaded_at=orm_document.uploaded_at,
        signal_count=orm_document.signal_count,
    )


def investment_account_to_domain(
    orm_account: ORMInvestmentAccount,
) -> domain.InvestmentAccount:
    """Convert SQLAlchemy InvestmentAccount model to domain entity."""
    return domain.InvestmentAccount(
        id=orm_account.id,
        name=orm_account.name,
        current_balance=orm_account.current_balance,
        monthly_contribution=orm_account.monthly_contribution,
        annual_growth_rate=orm_account.annual_growth_rate,
        signal_id=orm_account.signal_id,
    )


def tax_document_to_domain(orm_document: ORMTaxDocument) -> domain.TaxDocument:
    """Convert SQLAlchemy TaxDocument model to domain TaxDocument entity."""
    return domain.TaxDocument(
        id=orm_document.id,
        file_name=orm_document.file_name,
        doc_type=domain.TaxDocumentType(orm_document.doc_type),
        tax_year=orm_document.tax_year,
        uploaded_at=orm_document.uploaded_at,
        entity_name=orm_document.entity_name,
        gross_income=orm_document.gross_income,
        federal_tax_withheld=orm_document.federal_tax_withheld,
        social_security_tax=orm_document.social_security_tax,
        medicare_tax=orm_document.medicare_tax,
        state_tax_withheld=orm_document.state_tax_withheld,
        state=orm_document.state,
        property_tax_amount=orm_document.property_tax_amount,
        insights=tuple(json.loads(orm_document.insights or "[]")),
    )
