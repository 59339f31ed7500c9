"""Per-transaction analysis result fed to the rule engine."""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Tuple

from ..decoder.models import DecodedOperation, is_token_operation


@dataclass(frozen=True)
class TransactionAnalysis:
    """Decoded operations of one transaction, in instruction order."""
    operations: Tuple[DecodedOperation, ...] = ()
    touched_addresses: FrozenSet[str] = field(default_factory=frozenset)
    program_ids: Tuple[str, ...] = ()  # distinct, first-seen order
    truncated: bool = False

    @property
    def token_operations(self) -> List[DecodedOperation]:
        return [op for op in self.operations if is_token_operation(op)]

    def __len__(self) -> int:
        return len(self.operations)
