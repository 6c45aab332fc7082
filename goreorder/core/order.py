"""Order planning: complete a partial category order against the default one."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

CONST = "const"
VAR = "var"
INTERFACE = "interface"
TYPE = "type"
FUNC = "func"
INIT = "init"
MAIN = "main"

DEFAULT_ORDER: Tuple[str, ...] = (CONST, VAR, INTERFACE, TYPE, FUNC)

# init and main are plain functions unless pulled out explicitly
SPECIAL_FUNCTIONS: Tuple[str, ...] = (INIT, MAIN)

VALID_TOKENS: Tuple[str, ...] = DEFAULT_ORDER + SPECIAL_FUNCTIONS


@dataclass(frozen=True)
class ResolvedOrder:
    """A complete order plus which special functions get their own slot."""

    tokens: Tuple[str, ...]
    extract_init: bool = False
    extract_main: bool = False

    def extracted(self) -> Tuple[str, ...]:
        """Function names the generic func pass must skip."""
        out = []
        if self.extract_init:
            out.append(INIT)
        if self.extract_main:
            out.append(MAIN)
        return tuple(out)


def validate_order(order: Iterable[str]) -> Tuple[str, ...]:
    """Check order tokens, returning them normalized (stripped, lower-cased).

    Raises:
        ValueError: An unknown token was given.
    """
    tokens = []
    for raw in order:
        token = str(raw).strip().lower()
        if not token:
            continue
        if token not in VALID_TOKENS:
            raise ValueError(f"invalid order name {raw!r}, valid names are {', '.join(VALID_TOKENS)}")
        tokens.append(token)
    return tuple(tokens)


def resolve_order(
    order: Optional[Sequence[str]] = None,
    default: Sequence[str] = DEFAULT_ORDER,
) -> ResolvedOrder:
    """Complete ``order`` with the missing ``default`` categories.

    Tokens are expected to be valid already (see :func:`validate_order`).
    Repeated tokens keep their first position.
    """
    tokens = []
    for token in order or ():
        if token not in tokens:
            tokens.append(token)
    for token in default:
        if token not in tokens:
            tokens.append(token)

    return ResolvedOrder(
        tokens=tuple(tokens),
        extract_init=INIT in tokens,
        extract_main=MAIN in tokens,
    )
