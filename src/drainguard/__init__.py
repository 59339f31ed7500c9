"""
drainguard: pre-signing wallet-drain detection for Solana transactions.

Parses the raw wire format, decodes SPL Token instructions and runs a fixed
battery of deterministic rules that produce a human-readable risk verdict.
"""

from .core.analyzer import (
    TransactionAnalysis,
    analyze_transaction,
    assess_transaction,
    decode_transaction_text,
)
from .rules import RiskFinding, RiskVerdict, FindingCode, RiskRuleEngine

__version__ = "0.1.0"

__all__ = [
    "TransactionAnalysis",
    "analyze_transaction",
    "assess_transaction",
    "decode_transaction_text",
    "RiskFinding",
    "RiskVerdict",
    "FindingCode",
    "RiskRuleEngine",
]
