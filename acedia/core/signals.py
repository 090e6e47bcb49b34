"""
signals.py — Host Callback Republishing
========================================
The orchestrator is the only object the host calls back. It republishes
three of those callbacks here so that features and packages can react
without being part of the host's handler chain.

SIGNAL KINDS:
-------------
MUTATE             (command, sender) -> None
    Generic command input typed by a player or admin.
CHECK_REPLACEMENT  (candidate) -> bool
    Asked for every object the host spawns. Returning False removes it.
    All handlers must agree to keep; the first False wins and the rest are
    not asked.
MODIFY_LOGIN       (request: LoginRequest) -> None
    Handlers edit `request.portal` / `request.options` in place, in
    subscription order.

Every subscriber is called at most once per emit, synchronously. One
handler per (kind, receiver); subscribing again replaces the handler.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class SignalKind(str, Enum):
    MUTATE = "mutate"
    CHECK_REPLACEMENT = "check_replacement"
    MODIFY_LOGIN = "modify_login"


@dataclass
class LoginRequest:
    portal: str
    options: str


class SignalBus:
    def __init__(self) -> None:
        # kind → {receiver → handler}, insertion ordered
        self._handlers: dict[SignalKind, dict[Any, Callable[..., Any]]] = {kind: {} for kind in SignalKind}

    def subscribe(self, kind: SignalKind, receiver: Any, handler: Callable[..., Any]) -> None:
        self._handlers[SignalKind(kind)][receiver] = handler

    def unsubscribe(self, kind: SignalKind, receiver: Any) -> None:
        self._handlers[SignalKind(kind)].pop(receiver, None)

    def unsubscribe_all(self, receiver: Any) -> None:
        for handlers in self._handlers.values():
            handlers.pop(receiver, None)

    def clear(self) -> None:
        for handlers in self._handlers.values():
            handlers.clear()

    def subscriber_count(self, kind: SignalKind) -> int:
        return len(self._handlers[SignalKind(kind)])

    def _snapshot(self, kind: SignalKind) -> list[tuple[Any, Callable[..., Any]]]:
        # Handlers may (un)subscribe while being called.
        return list(self._handlers[kind].items())

    # ── Emitters ─────────────────────────────────────

    def emit_mutate(self, command: str, sender: Any) -> None:
        for receiver, handler in self._snapshot(SignalKind.MUTATE):
            try:
                handler(command, sender)
            except Exception:
                logger.exception(f"Mutate handler of {receiver!r} failed on command {command!r}")

    def emit_check_replacement(self, candidate: Any) -> bool:
        for receiver, handler in self._snapshot(SignalKind.CHECK_REPLACEMENT):
            try:
                keep = handler(candidate)
            except Exception:
                logger.exception(f"Replacement check of {receiver!r} failed for {candidate!r}")
                continue
            if not keep:
                return False
        return True

    def emit_modify_login(self, request: LoginRequest) -> LoginRequest:
        for receiver, handler in self._snapshot(SignalKind.MODIFY_LOGIN):
            try:
                handler(request)
            except Exception:
                logger.exception(f"Login modification of {receiver!r} failed")
        return request


_bus: SignalBus | None = None


def get_signal_bus() -> SignalBus:
    global _bus
    if not _bus:
        _bus = SignalBus()
    return _bus
