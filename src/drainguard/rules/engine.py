"""
Risk Rule Engine: deterministic wallet-drain detection.

Every rule runs on every transaction; findings are additive and are never
merged, deduplicated or weighted. A rule that needs a field the decoder
could not supply simply does not fire for that operation.
"""

from typing import Iterable, List

from ..codec import MAX_U64
from ..core.models import TransactionAnalysis
from ..decoder.models import (
    Approve,
    CloseAccount,
    SetAuthority,
    Transfer,
    Unrecognized,
    source_account,
)
from ..decoder.programs import TOKEN_PROGRAM_ID, is_known_safe_program
from .formatting import format_large_number, truncate_address
from .models import FindingCode, RiskFinding, RiskVerdict

# 99.9% of u64 max counts as unlimited
UNLIMITED_THRESHOLD = MAX_U64 * 999 // 1000

MULTI_ACCOUNT_THRESHOLD = 3

# Raw smallest units; mint decimals are unknown here
LARGE_TRANSFER_THRESHOLD = 10 ** 12


class RiskRuleEngine:
    """
    Evaluates the fixed rule battery against a TransactionAnalysis.

    Holds no per-call state, so one engine may be shared across threads.
    """

    def assess(self, analysis: TransactionAnalysis, user_address: str) -> RiskVerdict:
        """
        Assess a decoded transaction on behalf of `user_address`.

        Args:
            analysis: Decoded operations of the transaction
            user_address: Base58 address of the signer being protected

        Returns:
            RiskVerdict, high risk iff at least one rule fired
        """
        findings: List[RiskFinding] = []
        ops = analysis.operations

        self._check_unlimited_approval(ops, findings)
        self._check_authority_transfer(ops, user_address, findings)
        self._check_authority_revocation(ops, user_address, findings)
        self._check_multi_account(ops, findings)
        self._check_unknown_program(ops, user_address, findings)
        self._check_drain_pattern(ops, user_address, findings)
        self._check_suspicious_closure(ops, user_address, findings)
        self._check_large_transfer(ops, user_address, findings)

        return RiskVerdict(findings=tuple(findings))

    def _check_unlimited_approval(self, ops, findings: List[RiskFinding]):
        for op in ops:
            if isinstance(op, Approve) and op.amount is not None and op.amount >= UNLIMITED_THRESHOLD:
                findings.append(RiskFinding(
                    code=FindingCode.UNLIMITED_APPROVAL.value,
                    message=(
                        f"UNLIMITED TOKEN APPROVAL: Granting unlimited spending permission to "
                        f"{truncate_address(op.delegate)}. The delegate can drain every token "
                        f"in this account at any time."
                    ),
                ))

    def _check_authority_transfer(self, ops, user_address: str, findings: List[RiskFinding]):
        for op in ops:
            if not isinstance(op, SetAuthority) or op.current_authority != user_address:
                continue
            if op.new_authority is not None and op.new_authority != user_address:
                findings.append(RiskFinding(
                    code=FindingCode.AUTHORITY_TRANSFER.value,
                    message=(
                        f"AUTHORITY TRANSFER: Handing {op.authority_kind or 'account'} authority "
                        f"from your wallet to {truncate_address(op.new_authority)}. "
                        f"You will lose control over this account."
                    ),
                ))

    def _check_authority_revocation(self, ops, user_address: str, findings: List[RiskFinding]):
        for op in ops:
            if not isinstance(op, SetAuthority) or op.current_authority != user_address:
                continue
            if op.new_authority is None:
                findings.append(RiskFinding(
                    code=FindingCode.AUTHORITY_REVOCATION.value,
                    message=(
                        f"AUTHORITY REVOCATION: Removing {op.authority_kind or 'account'} authority "
                        f"from {truncate_address(op.account)} entirely. This cannot be undone and "
                        f"you will permanently lose control."
                    ),
                ))

    def _check_multi_account(self, ops, findings: List[RiskFinding]):
        sources = {source_account(op) for op in ops} - {None}
        if len(sources) >= MULTI_ACCOUNT_THRESHOLD:
            findings.append(RiskFinding(
                code=FindingCode.MULTI_ACCOUNT.value,
                message=(
                    f"MULTI-ACCOUNT OPERATION: This transaction touches {len(sources)} different "
                    f"token accounts. Drainers sweep several accounts in one transaction to take "
                    f"as much as possible."
                ),
            ))

    def _check_unknown_program(self, ops, user_address: str, findings: List[RiskFinding]):
        for op in ops:
            if not isinstance(op, Unrecognized) or op.program != "unknown":
                continue
            if op.program_id is None or is_known_safe_program(op.program_id):
                continue
            if user_address in op.account_addresses:
                findings.append(RiskFinding(
                    code=FindingCode.UNKNOWN_PROGRAM.value,
                    message=(
                        f"UNKNOWN PROGRAM: Unverified program {truncate_address(op.program_id)} "
                        f"is requesting access to your wallet. It is not on the known-safe list "
                        f"and could move your assets."
                    ),
                ))

    def _check_drain_pattern(self, ops, user_address: str, findings: List[RiskFinding]):
        grants = any(isinstance(op, (Approve, SetAuthority)) for op in ops)
        if not grants:
            return

        def leaves_wallet(op) -> bool:
            if isinstance(op, Transfer):
                destination = op.destination
            elif isinstance(op, CloseAccount):
                destination = op.rent_destination
            else:
                return False
            return destination is not None and destination != user_address

        if any(leaves_wallet(op) for op in ops):
            findings.append(RiskFinding(
                code=FindingCode.DRAIN_PATTERN.value,
                message=(
                    "DRAIN PATTERN: This transaction combines a permission grant with an "
                    "immediate transfer to an external address. This is a common wallet "
                    "drain technique."
                ),
            ))

    def _check_suspicious_closure(self, ops, user_address: str, findings: List[RiskFinding]):
        for op in ops:
            if not isinstance(op, CloseAccount) or op.rent_destination is None:
                continue
            if op.rent_destination != user_address:
                findings.append(RiskFinding(
                    code=FindingCode.SUSPICIOUS_CLOSURE.value,
                    message=(
                        f"SUSPICIOUS ACCOUNT CLOSURE: Closing {truncate_address(op.account)} and "
                        f"sending its rent refund to {truncate_address(op.rent_destination)} "
                        f"instead of your wallet."
                    ),
                ))

    def _check_large_transfer(self, ops, user_address: str, findings: List[RiskFinding]):
        for op in ops:
            if not isinstance(op, Transfer) or op.amount is None:
                continue
            if op.destination is None or op.destination == user_address:
                continue
            if op.amount >= LARGE_TRANSFER_THRESHOLD:
                findings.append(RiskFinding(
                    code=FindingCode.LARGE_TRANSFER.value,
                    message=(
                        f"LARGE TRANSFER: Sending {format_large_number(op.amount)} raw token "
                        f"units to {truncate_address(op.destination)}. Check that you intend "
                        f"to move this much."
                    ),
                ))


_default_engine = RiskRuleEngine()


def assess_risk(analysis: TransactionAnalysis, user_address: str) -> RiskVerdict:
    return _default_engine.assess(analysis, user_address)


def might_be_risky(program_ids: Iterable[str]) -> bool:
    """
    Cheap pre-filter on a transaction's program ids.

    True when the token program or any program outside the allow-list is
    involved; only transactions touching nothing but known-safe non-token
    programs can skip full analysis.
    """
    for program_id in program_ids:
        if program_id == TOKEN_PROGRAM_ID or not is_known_safe_program(program_id):
            return True
    return False
