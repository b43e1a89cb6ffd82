"""Flatten a structured page record into one labelled text blob.

Page shape (as exported by the document source)::

    {
      "id": "...",
      "properties": {"Name": {"type": "title", "title": [{"plain_text": "..."}]}, ...},
      "content": "optional pre-flattened body",
      "blocks": [optional raw content blocks],
      "created_time": "2024-03-01T09:00:00.000Z",
      "last_edited_time": "2024-03-05T10:30:00.000Z",
      "url": "https://..."
    }

Missing or malformed fields are omitted from the output; extraction never raises.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

# ------------------------------------------------------------------
# Property rendering
# ------------------------------------------------------------------


def _plain(items: Any) -> str:
    if not isinstance(items, list):
        return ""
    return "".join(
        str(t.get("plain_text") or "") for t in items if isinstance(t, dict)
    )


def _select(prop: dict[str, Any]) -> str:
    option = prop.get("select")
    return str(option.get("name") or "") if isinstance(option, dict) else ""


def _multi_select(prop: dict[str, Any]) -> str:
    options = prop.get("multi_select")
    if not isinstance(options, list):
        return ""
    return ", ".join(str(o.get("name")) for o in options if isinstance(o, dict) and o.get("name"))


def _date(prop: dict[str, Any]) -> str:
    value = prop.get("date")
    if not isinstance(value, dict) or not value.get("start"):
        return ""
    if value.get("end"):
        return f"{value['start']} ~ {value['end']}"
    return str(value["start"])


def _number(prop: dict[str, Any]) -> str:
    value = prop.get("number")
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _checkbox(prop: dict[str, Any]) -> str:
    return "Yes" if prop.get("checkbox") else "No"


def _raw(key: str) -> Callable[[dict[str, Any]], str]:
    return lambda prop: str(prop.get(key) or "")


_RENDERERS: dict[str, Callable[[dict[str, Any]], str]] = {
    "title": lambda prop: _plain(prop.get("title")),
    "rich_text": lambda prop: _plain(prop.get("rich_text")),
    "select": _select,
    "multi_select": _multi_select,
    "date": _date,
    "number": _number,
    "checkbox": _checkbox,
    "url": _raw("url"),
    "email": _raw("email"),
    "phone_number": _raw("phone_number"),
}


def property_text(prop: Any) -> str:
    """Render one typed property as plain text; unknown types render as ""."""
    if not isinstance(prop, dict):
        return ""
    renderer = _RENDERERS.get(str(prop.get("type")))
    return renderer(prop) if renderer else ""


def page_title(page: dict[str, Any], default: str = "Untitled") -> str:
    """Return the page title, else *default*.

    Looks at the first ``title``-typed property, then an untyped property named
    ``title`` holding a ``title`` text list, then a top-level ``title`` string.
    """
    properties = page.get("properties")
    if isinstance(properties, dict):
        for prop in properties.values():
            if isinstance(prop, dict) and prop.get("type") == "title":
                text = _plain(prop.get("title"))
                if text:
                    return text
        untyped = properties.get("title")
        if isinstance(untyped, dict):
            text = _plain(untyped.get("title"))
            if text:
                return text
    title = page.get("title")
    return title if isinstance(title, str) and title else default


# ------------------------------------------------------------------
# Content blocks
# ------------------------------------------------------------------

_BLOCK_PREFIX: dict[str, str] = {
    "paragraph": "",
    "heading_1": "# ",
    "heading_2": "## ",
    "heading_3": "### ",
    "bulleted_list_item": "• ",
    "numbered_list_item": "1. ",
    "quote": "> ",
}


def blocks_to_text(blocks: Any) -> str:
    """Flatten a list of content blocks to newline-separated text.

    Unknown block types and blocks without text are dropped.
    """
    if not isinstance(blocks, list):
        return ""

    lines: list[str] = []
    for block in blocks:
        if not isinstance(block, dict):
            continue
        kind = block.get("type")
        body = block.get(kind) if isinstance(kind, str) else None
        if not isinstance(body, dict):
            continue
        text = _plain(body.get("rich_text"))

        if kind in _BLOCK_PREFIX:
            line = f"{_BLOCK_PREFIX[kind]}{text}" if text else ""
        elif kind == "to_do":
            line = f"{'[x]' if body.get('checked') else '[ ]'} {text}"
        elif kind == "code":
            line = f"```\n{text}\n```"
        else:
            line = ""

        if line:
            lines.append(line)
    return "\n".join(lines)


# ------------------------------------------------------------------
# Timestamps
# ------------------------------------------------------------------


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed). None if unparseable."""
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def display_timestamp(value: Any) -> str:
    """Render a timestamp as ``YYYY년 M월 D일 HH:MM``; "" if unparseable."""
    dt = parse_timestamp(value)
    if dt is None:
        return ""
    return f"{dt.year}년 {dt.month}월 {dt.day}일 {dt:%H:%M}"


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------


def extract_text(page: dict[str, Any]) -> str:
    """Flatten *page* into a labelled text blob.

    If the page already carries pre-flattened ``content`` it is returned
    verbatim. Otherwise the blob is composed of a title line, one line per
    non-title property, the flattened ``blocks`` (if any), and the creation and
    modification timestamps.
    """
    content = page.get("content")
    if isinstance(content, str) and content:
        return content

    lines: list[str] = []
    title = page_title(page, default="")
    if title:
        lines.append(f"Title: {title}")

    properties = page.get("properties")
    if isinstance(properties, dict):
        for name, prop in properties.items():
            if isinstance(prop, dict) and prop.get("type") == "title":
                continue
            text = property_text(prop)
            if text:
                lines.append(f"{name}: {text}")

    body = blocks_to_text(page.get("blocks"))
    if body:
        lines.append(f"Content:\n{body}")

    created = display_timestamp(page.get("created_time"))
    if created:
        lines.append(f"Created: {created}")
    edited = display_timestamp(page.get("last_edited_time"))
    if edited:
        lines.append(f"Last edited: {edited}")

    return "\n".join(lines)
