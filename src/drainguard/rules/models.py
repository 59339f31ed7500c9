"""
Data models for risk findings and verdicts.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple


class FindingCode(Enum):
    """Machine-checkable identifier for each rule."""
    UNLIMITED_APPROVAL = "unlimited_approval"
    AUTHORITY_TRANSFER = "authority_transfer"
    AUTHORITY_REVOCATION = "authority_revocation"
    MULTI_ACCOUNT = "multi_account"
    UNKNOWN_PROGRAM = "unknown_program"
    DRAIN_PATTERN = "drain_pattern"
    SUSPICIOUS_CLOSURE = "suspicious_closure"
    LARGE_TRANSFER = "large_transfer"


@dataclass(frozen=True)
class RiskFinding:
    """One rule firing for one offending instruction (or once per transaction)."""
    code: str
    message: str

    def _split(self) -> Tuple[str, str]:
        colon = self.message.find(":")
        if 0 < colon < 40:
            return self.message[:colon].strip(), self.message[colon + 1:].strip()
        return "SECURITY THREAT", self.message

    @property
    def title(self) -> str:
        return self._split()[0]

    @property
    def description(self) -> str:
        return self._split()[1]

    def to_dict(self) -> Dict:
        return {
            "code": self.code,
            "title": self.title,
            "message": self.message,
        }


@dataclass(frozen=True)
class RiskVerdict:
    """
    Outcome of assessing one transaction.

    There is no severity scale: any finding makes the transaction high risk.
    An empty verdict means nothing was detected, not that analysis failed.
    """
    findings: Tuple[RiskFinding, ...] = field(default_factory=tuple)

    @property
    def is_high_risk(self) -> bool:
        return len(self.findings) > 0

    @property
    def codes(self) -> List[str]:
        return [f.code for f in self.findings]

    def to_dict(self) -> Dict:
        return {
            "is_high_risk": self.is_high_risk,
            "findings": [f.to_dict() for f in self.findings],
        }

    def summary(self) -> str:
        """Return a human-readable summary."""
        if not self.is_high_risk:
            return "✅ Transaction appears safe"
        lines = [f"🚨 HIGH RISK: {len(self.findings)} finding(s)"]
        for finding in self.findings:
            lines.append(f"  • {finding.message}")
        return "\n".join(lines)
