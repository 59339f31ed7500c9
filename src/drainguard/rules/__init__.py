"""Deterministic wallet-drain risk rules."""

from .models import FindingCode, RiskFinding, RiskVerdict
from .engine import (
    RiskRuleEngine,
    assess_risk,
    might_be_risky,
    UNLIMITED_THRESHOLD,
    MULTI_ACCOUNT_THRESHOLD,
    LARGE_TRANSFER_THRESHOLD,
)
from .formatting import truncate_address, format_large_number

__all__ = [
    "FindingCode",
    "RiskFinding",
    "RiskVerdict",
    "RiskRuleEngine",
    "assess_risk",
    "might_be_risky",
    "UNLIMITED_THRESHOLD",
    "MULTI_ACCOUNT_THRESHOLD",
    "LARGE_TRANSFER_THRESHOLD",
    "truncate_address",
    "format_large_number",
]
