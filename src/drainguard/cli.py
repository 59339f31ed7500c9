"""
CLI entry point for drainguard.

Usage:
    drainguard analyze <BASE64_TX> --wallet YOUR_WALLET
    drainguard analyze --file tx.b58 --encoding base58 -w YOUR_WALLET --output verdict.json
    drainguard decode <BASE64_TX>
    drainguard programs
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import GuardConfig, load_env
from .core.analyzer import ENCODINGS, analyze_transaction, decode_transaction_text
from .decoder import (
    KNOWN_PROGRAMS,
    Approve,
    CloseAccount,
    SetAuthority,
    Transfer,
    Unrecognized,
    get_program_name,
)
from .rules import assess_risk, truncate_address

console = Console()

EXIT_SAFE = 0
EXIT_ERROR = 1
EXIT_HIGH_RISK = 2


def setup_logging(level: str):
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def read_transaction(args: argparse.Namespace) -> bytes:
    """Read the transaction text from the argument or --file and decode it."""
    if args.file:
        text = Path(args.file).read_text()
    elif args.transaction:
        text = args.transaction
    else:
        raise ValueError("Provide a transaction or --file")
    return decode_transaction_text(text, args.encoding)


def describe_operation(op) -> str:
    if isinstance(op, Transfer):
        return (
            f"{truncate_address(op.source)} → {truncate_address(op.destination)} "
            f"amount={op.amount if op.amount is not None else '?'}"
        )
    if isinstance(op, Approve):
        return (
            f"{truncate_address(op.source)} delegate={truncate_address(op.delegate)} "
            f"amount={op.amount if op.amount is not None else '?'}"
        )
    if isinstance(op, SetAuthority):
        new = truncate_address(op.new_authority) if op.new_authority else "(revoked)"
        return f"{truncate_address(op.account)} {op.authority_kind or '?'} → {new}"
    if isinstance(op, CloseAccount):
        return f"{truncate_address(op.account)} rent → {truncate_address(op.rent_destination)}"
    if isinstance(op, Unrecognized):
        name = get_program_name(op.program_id or "") or truncate_address(op.program_id)
        return f"{name} ({len(op.account_addresses)} accounts, {len(op.data)} bytes)"
    return repr(op)


def run_analyze(args: argparse.Namespace, config: GuardConfig) -> int:
    """Assess a transaction for a wallet."""
    wallet = args.wallet or config.default_wallet
    if not wallet:
        console.print("[red]Error: --wallet is required (or set DRAINGUARD_WALLET)[/red]")
        return EXIT_ERROR

    try:
        data = read_transaction(args)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return EXIT_ERROR

    analysis = analyze_transaction(data)
    verdict = assess_risk(analysis, wallet)

    console.print()
    if verdict.is_high_risk:
        body = "\n\n".join(
            f"[bold red]{finding.title}[/bold red]\n{finding.description}"
            for finding in verdict.findings
        )
        console.print(Panel(
            body,
            title=f"[bold red]🚨 HIGH RISK ({len(verdict.findings)} findings)[/bold red]",
            subtitle=f"[dim]Wallet: {truncate_address(wallet)}[/dim]",
        ))
    else:
        console.print(Panel(
            "[green]No drain patterns detected[/green]",
            title="[bold green]✅ Transaction appears safe[/bold green]",
            subtitle=f"[dim]Wallet: {truncate_address(wallet)}[/dim]",
        ))

    console.print(
        f"[dim]Operations: {len(analysis)} | Accounts touched: {len(analysis.touched_addresses)}"
        f"{' | input truncated' if analysis.truncated else ''}[/dim]"
    )

    if args.output:
        output_data = verdict.to_dict()
        output_data["wallet"] = wallet
        output_data["operations"] = len(analysis)
        output_data["truncated"] = analysis.truncated
        with open(args.output, "w") as f:
            json.dump(output_data, f, indent=2)
        console.print(f"\n[dim]Verdict exported to: {args.output}[/dim]")

    return EXIT_HIGH_RISK if verdict.is_high_risk else EXIT_SAFE


def run_decode(args: argparse.Namespace) -> int:
    """Show the decoded operations of a transaction."""
    try:
        data = read_transaction(args)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return EXIT_ERROR

    analysis = analyze_transaction(data)
    if not analysis.operations:
        console.print("[yellow]No instructions recovered[/yellow]")
        return EXIT_SAFE

    table = Table(title="Decoded Operations")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Operation", style="cyan")
    table.add_column("Details")
    for i, op in enumerate(analysis.operations):
        table.add_row(str(i), op.kind, describe_operation(op))
    console.print(table)

    if analysis.truncated:
        console.print("[yellow]Input was truncated; showing what could be recovered[/yellow]")
    return EXIT_SAFE


def list_programs(args: argparse.Namespace) -> int:
    """List the known-safe program allow-list."""
    table = Table(title="Known-Safe Programs")
    table.add_column("Name", style="cyan")
    table.add_column("Program ID", style="dim")
    for info in KNOWN_PROGRAMS.values():
        table.add_row(info.name, info.address)
    console.print(table)
    return EXIT_SAFE


def _add_input_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        "transaction",
        nargs="?",
        help="Serialized transaction text"
    )
    parser.add_argument(
        "--file", "-f",
        type=str,
        help="Read the transaction text from a file"
    )
    parser.add_argument(
        "--encoding", "-e",
        choices=ENCODINGS,
        default="base64",
        help="Text encoding of the transaction (default: base64)"
    )


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drainguard",
        description="Detect wallet-drain patterns in unsigned Solana transactions",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    analyze_parser = subparsers.add_parser("analyze", help="Assess a transaction for a wallet")
    _add_input_arguments(analyze_parser)
    analyze_parser.add_argument(
        "--wallet", "-w",
        type=str,
        help="Address of the wallet being protected"
    )
    analyze_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Export the verdict to a JSON file"
    )

    decode_parser = subparsers.add_parser("decode", help="Show decoded operations")
    _add_input_arguments(decode_parser)

    subparsers.add_parser("programs", help="List known-safe programs")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    load_env()
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = GuardConfig.from_env()
    except ValueError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        return EXIT_ERROR
    setup_logging("DEBUG" if args.verbose else config.log_level)

    if args.command == "analyze":
        return run_analyze(args, config)
    elif args.command == "decode":
        return run_decode(args)
    elif args.command == "programs":
        return list_programs(args)
    else:
        parser.print_help()
        return EXIT_SAFE


if __name__ == "__main__":
    sys.exit(main())
