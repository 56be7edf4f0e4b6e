"""Parsing and sanitizing of hybrid chat replies.

A hybrid reply is free-text summary followed by a JSON array of action
items, e.g. ``Summary here. ["Do X", "Do Y"]``. The reply is split at the
first ``[``. A summary that itself contains a literal ``[`` is split
early; that limitation is accepted to stay compatible with stored data.
"""

from __future__ import annotations

import json
import logging
import re

logger = logging.getLogger(__name__)

# Arrows, miscellaneous symbols and dingbats, emoji blocks, zero-width
# joiner and the emoji variation selector.
DECORATIVE_GLYPHS = re.compile(
    "["
    "\u2190-\u21ff"
    "\u2600-\u27bf"
    "\U0001f300-\U0001f6ff"
    "\U0001f900-\U0001f9ff"
    "\U0001fa70-\U0001faff"
    "\u200d"
    "\ufe0f"
    "]"
)


def strip_decorative_glyphs(text: str) -> str:
    """Remove emoji and decorative symbols, leaving all other text intact."""
    if not text:
        return text
    return DECORATIVE_GLYPHS.sub("", text)


def split_hybrid_reply(reply: str) -> tuple[str, list[str]]:
    """Split a reply into summary text and action items.

    Args:
        reply: The assistant's full reply text.

    Returns:
        (summary, action_items). Without a ``[`` the whole reply is the
        summary. Otherwise the text before the first ``[`` (trimmed) is
        the summary and the remainder must parse as a JSON array of
        strings; if it does not, the action list is empty and the
        summary is kept.
    """
    index = reply.find("[")
    if index < 0:
        return reply, []

    summary = reply[:index].strip()
    fragment = reply[index:]
    try:
        parsed = json.loads(fragment)
    except (json.JSONDecodeError, RecursionError) as exc:
        logger.warning("Could not parse action items JSON from reply: %s", exc)
        return summary, []

    if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
        logger.warning("Action items fragment is not a JSON array of strings")
        return summary, []

    return summary, parsed


def parse_hybrid_reply(reply: str) -> tuple[str, list[str]]:
    """Split a reply and strip decorative glyphs from every part."""
    summary, actions = split_hybrid_reply(reply)
    return strip_decorative_glyphs(summary), [
        strip_decorative_glyphs(action) for action in actions
    ]
