"""
Signing interception for wallet providers.

Wraps a provider's signing methods so every transaction is assessed before
the original method runs. When a transaction is high risk the host-supplied
`confirm` callback decides whether signing continues.

The provider is any object exposing some of:
    sign_transaction(tx, ...)
    sign_all_transactions(txs, ...)
    sign_and_send_transaction(tx, ...)
    public_key
    on(event, callback)          # "connect" / "disconnect"
Methods may be plain functions or coroutines.
"""

import functools
import inspect
import logging
from enum import Enum
from typing import Any, Callable, List, Optional

from solders.message import Message, MessageV0
from solders.signature import Signature
from solders.transaction import Transaction, VersionedTransaction

from ..config import GuardConfig
from ..rules import RiskVerdict
from ..rules.formatting import truncate_address
from .analyzer import assess_transaction

logger = logging.getLogger(__name__)

SINGLE_TX_METHODS = ("sign_transaction", "sign_and_send_transaction")
MULTI_TX_METHODS = ("sign_all_transactions",)

_HOOK_ATTR = "_drainguard_guard"

# Set once by install_guard() and never reset
_GUARD_INSTALLED = False

_MISSING = object()


class Decision(Enum):
    """Answer from the confirmation surface."""
    PROCEED = "proceed"
    CANCEL = "cancel"


class TransactionRejected(RuntimeError):
    """Raised in place of signing when a transaction is refused."""


ConfirmCallback = Callable[[RiskVerdict], Any]


def _is_async_callable(fn: Any) -> bool:
    return inspect.iscoroutinefunction(fn) or inspect.iscoroutinefunction(getattr(fn, "__call__", None))


def extract_transaction_bytes(tx: Any) -> Optional[bytes]:
    """
    Get wire bytes for whatever the host handed to a signing method.

    Bare messages are wrapped as unsigned transactions so the result always
    carries a signature block. Returns None when no bytes can be obtained.
    """
    try:
        if isinstance(tx, (bytes, bytearray, memoryview)):
            return bytes(tx)
        if isinstance(tx, (Transaction, VersionedTransaction)):
            return bytes(tx)
        if isinstance(tx, Message):
            return bytes(Transaction.new_unsigned(tx))
        if isinstance(tx, MessageV0):
            signatures = [Signature.default()] * tx.header.num_required_signatures
            return bytes(VersionedTransaction.populate(tx, signatures))
        serialize = getattr(tx, "serialize", None)
        if callable(serialize):
            return bytes(serialize())
    except Exception as e:
        logger.error("Error serializing transaction: %s", e)
        return None

    logger.warning("Unknown transaction format: %s", type(tx).__name__)
    return None


class WalletSession:
    """Tracks the address of the currently connected wallet."""

    def __init__(self, address: Optional[str] = None):
        self.address = address

    def connect(self, public_key: Any = None):
        self.address = str(public_key) if public_key is not None else None
        logger.info("Wallet connected: %s", truncate_address(self.address))

    def disconnect(self, *_args):
        self.address = None
        logger.info("Wallet disconnected")


class SigningGuard:
    """
    Assesses transactions on their way into a provider's signing methods.

    Args:
        provider: Object whose signing methods are wrapped in place
        confirm: Called with the verdict of a high-risk transaction; returns a
            Decision. May be async only when every signing method is a coroutine
        config: Fail-open policy; defaults to GuardConfig()
        session: Wallet session; built from provider.public_key if omitted
    """

    def __init__(
        self,
        provider: Any,
        confirm: ConfirmCallback,
        config: Optional[GuardConfig] = None,
        session: Optional[WalletSession] = None,
    ):
        self.provider = provider
        self.confirm = confirm
        self.config = config or GuardConfig()
        if session is None:
            public_key = getattr(provider, "public_key", None)
            session = WalletSession(str(public_key) if public_key is not None else None)
        self.session = session

    def install(self) -> List[str]:
        """
        Wrap the provider's signing methods. Returns the names wrapped.

        Raises:
            TypeError: if `confirm` is a coroutine function and any signing
                method is synchronous (its answer could never be awaited)
        """
        if getattr(self.provider, _HOOK_ATTR, None) is not None:
            logger.debug("Provider already guarded")
            return []

        originals = {}
        for name in SINGLE_TX_METHODS + MULTI_TX_METHODS:
            original = getattr(self.provider, name, None)
            if callable(original):
                originals[name] = original

        if _is_async_callable(self.confirm):
            sync_methods = [n for n, m in originals.items() if not inspect.iscoroutinefunction(m)]
            if sync_methods:
                raise TypeError(
                    f"Async confirm callback cannot guard synchronous methods: {', '.join(sync_methods)}"
                )

        subscribe = getattr(self.provider, "on", None)
        if callable(subscribe):
            subscribe("connect", self.session.connect)
            subscribe("disconnect", self.session.disconnect)

        for name, original in originals.items():
            setattr(self.provider, name, self._wrap(original, many=name in MULTI_TX_METHODS))

        setattr(self.provider, _HOOK_ATTR, self)
        wrapped = list(originals)
        logger.info("Provider guarded: %s", ", ".join(wrapped) or "no signing methods")
        return wrapped

    def _wrap(self, original: Callable, many: bool) -> Callable:
        try:
            signature = inspect.signature(original)
        except (TypeError, ValueError):
            signature = None

        def transactions(args, kwargs) -> Optional[List[Any]]:
            """The transaction(s) of a call, however passed; None if absent."""
            if signature is None:
                value = args[0] if args else _MISSING
            else:
                try:
                    bound = signature.bind_partial(*args, **kwargs)
                except TypeError:
                    return None
                params = list(signature.parameters.values())
                if not params:
                    return None
                first = params[0]
                value = bound.arguments.get(first.name, _MISSING)
                if first.kind is inspect.Parameter.VAR_KEYWORD:
                    return None
                if first.kind is inspect.Parameter.VAR_POSITIONAL:
                    value = value[0] if value is not _MISSING and value else _MISSING
            if value is _MISSING:
                return None
            return list(value) if many else [value]

        if inspect.iscoroutinefunction(original):
            @functools.wraps(original)
            async def guarded_async(*args, **kwargs):
                txs = transactions(args, kwargs)
                if txs is None:
                    self._unanalyzable("No transaction argument found")
                    txs = []
                for tx in txs:
                    await self.check_async(tx)
                return await original(*args, **kwargs)
            return guarded_async

        @functools.wraps(original)
        def guarded(*args, **kwargs):
            txs = transactions(args, kwargs)
            if txs is None:
                self._unanalyzable("No transaction argument found")
                txs = []
            for tx in txs:
                self.check(tx)
            return original(*args, **kwargs)
        return guarded

    def _unanalyzable(self, reason: str):
        """Apply the fail-open policy to a call that cannot be assessed."""
        if self.config.fail_open:
            logger.warning("%s, allowing by default", reason)
            return
        raise TransactionRejected(f"Transaction could not be analyzed: {reason}")

    def _assess(self, tx: Any) -> Optional[RiskVerdict]:
        data = extract_transaction_bytes(tx)
        if data is None:
            self._unanalyzable("Could not serialize transaction")
            return None

        verdict = assess_transaction(data, self.session.address or "")
        if not verdict.is_high_risk:
            logger.info("Transaction appears safe")
            return None

        logger.warning("HIGH RISK DETECTED: %s", ", ".join(verdict.codes))
        return verdict

    def _apply(self, decision: Decision):
        if decision is not Decision.PROCEED:
            logger.info("User cancelled high-risk transaction")
            raise TransactionRejected("Transaction rejected by user")
        logger.warning("User proceeded despite warnings")

    def check(self, tx: Any):
        """Assess one transaction; raises TransactionRejected if refused."""
        verdict = self._assess(tx)
        if verdict is None:
            return
        decision = self.confirm(verdict)
        if inspect.isawaitable(decision):
            if inspect.iscoroutine(decision):
                decision.close()
            raise TypeError("confirm returned an awaitable from a synchronous signing method")
        self._apply(decision)

    async def check_async(self, tx: Any):
        verdict = self._assess(tx)
        if verdict is None:
            return
        decision = self.confirm(verdict)
        if inspect.isawaitable(decision):
            decision = await decision
        self._apply(decision)


def install_guard(
    provider: Any,
    confirm: ConfirmCallback,
    config: Optional[GuardConfig] = None,
) -> Optional[SigningGuard]:
    """
    Install the signing guard once per process.

    Later calls are no-ops and return None.
    """
    global _GUARD_INSTALLED
    if _GUARD_INSTALLED:
        logger.debug("Signing guard already installed")
        return None

    guard = SigningGuard(provider, confirm, config)
    guard.install()
    _GUARD_INSTALLED = True
    return guard


def is_guard_installed() -> bool:
    return _GUARD_INSTALLED
