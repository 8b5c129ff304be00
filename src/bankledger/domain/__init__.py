"""Domain layer for bankledger application."""

_SERVICES = {
    "AccountService": "bankledger.domain.account",
    "ClassificationEngine": "bankledger.domain.classification",
    "CompanyService": "bankledger.domain.company",
    "DuplicateDetector": "bankledger.domain.duplicates",
    "FiscalPeriodBoundaryValidator": "bankledger.domain.fiscal_period",
    "FiscalPeriodService": "bankledger.domain.fiscal_period",
    "MappingRuleService": "bankledger.domain.mapping_rules",
    "StatementImportService": "bankledger.domain.statement_import",
    "TransactionService": "bankledger.domain.transaction",
}

__all__ = list(_SERVICES)


# Import services lazily so that the database layer can import entities
# without pulling in the services that depend on it
def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
