"""Program Registry: well-known Solana program ids."""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional


@dataclass(frozen=True)
class ProgramInfo:
    name: str
    address: str


TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"

KNOWN_PROGRAMS: Dict[str, ProgramInfo] = {
    info.address: info
    for info in (
        ProgramInfo("SPL Token", TOKEN_PROGRAM_ID),
        ProgramInfo("Token-2022", "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"),
        ProgramInfo("System Program", "11111111111111111111111111111111"),
        ProgramInfo("Associated Token Account", "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"),
        ProgramInfo("Compute Budget", "ComputeBudget111111111111111111111111111111"),
        ProgramInfo("Metaplex Token Metadata", "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s"),
        ProgramInfo("Jupiter v6", "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4"),
        ProgramInfo("Orca Whirlpool", "whirLbMiicVdio4qvUfM5KAg6Ct8VwpYzGff3uctyCc"),
        ProgramInfo("Raydium CLMM", "CAMMCzo5YL8w4VFF8KVHrK22GGUsp5VTaW7grrKgrWqK"),
        ProgramInfo("Serum DEX v3", "srmqPvymJeFKQ4zGQed1GFppgkRHL9kaELCbyksJtPX"),
        ProgramInfo("Meteora", "LBUZKhRxPF3XUpBCjp4YzTKgLccjZhTSDM9YuVaPwxo"),
    )
}

SAFE_PROGRAM_IDS: FrozenSet[str] = frozenset(KNOWN_PROGRAMS)


def is_known_safe_program(address: str) -> bool:
    return address in SAFE_PROGRAM_IDS


def get_program_name(address: str) -> Optional[str]:
    info = KNOWN_PROGRAMS.get(address)
    return info.name if info else None
