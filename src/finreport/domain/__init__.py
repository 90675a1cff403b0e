"""Domain layer for finreport."""

from finreport.domain.filtering import filter_transactions
from finreport.domain.aggregation import aggregate
from finreport.domain.classification import ClassificationMap
from finreport.domain.statement import compute_statement
from finreport.domain.kpis import calculate_kpis
from finreport.domain.insights import generate_insights

__all__ = [
    "filter_transactions",
    "aggregate",
    "ClassificationMap",
    "compute_statement",
    "calculate_kpis",
    "generate_insights",
]
