"""Reorder pipeline: extract -> plan -> splice -> format -> (diff)."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from ..diff import Differ, UnifiedDiffer
from ..formatting import Formatter, get_formatter
from ..parser.go import decode_source, extract, summarize
from .errors import ReorderError, ReorderIOError
from .models import ReorderConfig
from .order import resolve_order
from .splice import splice

logger = logging.getLogger(__name__)


def reorder_source(
    config: ReorderConfig,
    *,
    formatter: Optional[Formatter] = None,
    differ: Optional[Differ] = None,
) -> str:
    """Reorder the declarations of one Go file.

    Args:
        config: File, options and order to apply
        formatter: Formatting capability (default: chosen from ``config.format_tool``)
        differ: Diff capability, used when ``config.diff`` is set

    Returns:
        The reordered and formatted source, or a unified diff in diff mode

    Raises:
        ReorderError: Any failure. ``exc.content`` holds the original source,
            as raw bytes when it is not valid UTF-8 (None when the file could
            not be read).
    """
    raw = load_source(config)
    content: Union[bytes, str] = raw

    try:
        content = decode_source(raw, filename=config.filename)
        info = extract(content, filename=config.filename)
        logger.debug("%s: found %s", config.filename, summarize(info))
        if info.is_empty():
            logger.debug("%s: no declarations to move", config.filename)
            spliced = content
        else:
            order = resolve_order(config.order)
            logger.debug("%s: order %s", config.filename, ",".join(order.tokens))
            spliced = splice(content, info, order, reorder_types=config.reorder_types)

        if formatter is None:
            formatter = get_formatter(config.format_tool)
        logger.debug("%s: formatting with %s", config.filename, config.format_tool)
        formatted = formatter.format(spliced)

        if not config.diff:
            return formatted
        if differ is None:
            differ = UnifiedDiffer()
        return differ.diff(content, formatted, config.filename)
    except ReorderError as exc:
        exc.content = content
        raise


def load_source(config: ReorderConfig) -> Union[bytes, str]:
    """Source from the config, falling back to reading ``config.filename``."""
    if config.source is not None:
        return config.source
    try:
        return Path(config.filename).read_bytes()
    except OSError as exc:
        raise ReorderIOError(f"cannot read {config.filename}: {exc}") from exc
