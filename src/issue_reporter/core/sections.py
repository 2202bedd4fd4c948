"""
Rendering and truncation of the variable description sections.

Each section is a collapsible Jira panel holding a JSON code block. A
section whose content does not fit its allocation is cut, marked, and its
complete content is recorded in the overflow document.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .budget import NETWORK_CALLS, HEADERS, RESPONSE, PAYLOAD
from .overflow import OverflowDocument
from ..config.format_functions import to_pretty_json

PANEL_STYLE = "collapsed=true|borderStyle=solid|borderColor=#ddd|titleBGColor=#f7f7f7|bgColor=#fff"
PANEL_END = "{panel}\n\n"
CODE_START = "{code:json}\n"
CODE_END = "\n{code}\n"
TRUNCATION_MARKER = "...[truncated]..."
TRUNCATION_NOTICE = "Data truncated to fit Jira limit. Complete content is in the comments.\n"

SECTION_TITLES = {
    NETWORK_CALLS: "Failed Network Calls",
    HEADERS: "Request Headers",
    RESPONSE: "Response",
    PAYLOAD: "Full Payload Data",
}

SECTION_PLACEHOLDERS = {
    NETWORK_CALLS: "No failed network calls available.",
    HEADERS: "No request headers available.",
    RESPONSE: "No response data available.",
    PAYLOAD: "No payload data available.",
}


def panel_start(title: str) -> str:
    return f"{{panel:title={title}|{PANEL_STYLE}}}\n"


def markup_overhead(title: str) -> int:
    """Characters a section spends on wrappers around its content."""
    return len(panel_start(title)) + len(PANEL_END) + len(CODE_START) + len(CODE_END)


@dataclass(frozen=True)
class RenderedSection:
    name: str
    title: str
    text: str
    truncated: bool = False
    content: str = ""
    full_content: Optional[str] = None


def render_content(value: Any) -> Optional[str]:
    """
    Render a section value for a code block.

    Strings are used as-is (they are usually pre-serialized JSON), anything
    else is pretty-printed. Empty values render as None.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, (dict, list, tuple)) and not value:
        return None
    return to_pretty_json(value)


def render_section(name: str, value: Any, allocation: int, overflow: OverflowDocument) -> RenderedSection:
    """
    Render one variable section within its allocation.

    Args:
        name: Section name (see budget module)
        value: Raw section content
        allocation: Characters this section may use
        overflow: Overflow document receiving the full content on truncation

    Returns:
        RenderedSection
    """
    title = SECTION_TITLES[name]
    start = panel_start(title)

    content = render_content(value)
    if content is None:
        placeholder = SECTION_PLACEHOLDERS[name]
        return RenderedSection(name, title, start + placeholder + "\n" + PANEL_END, content=placeholder)

    usable = allocation - markup_overhead(title)
    if len(content) <= usable:
        text = start + CODE_START + content + CODE_END + PANEL_END
        return RenderedSection(name, title, text, content=content)

    keep = max(0, usable - len(TRUNCATION_NOTICE) - len("\n" + TRUNCATION_MARKER))
    shown = content[:keep] + "\n" + TRUNCATION_MARKER
    text = start + TRUNCATION_NOTICE + CODE_START + shown + CODE_END + PANEL_END

    overflow.add(title, content)
    return RenderedSection(name, title, text, truncated=True, content=shown, full_content=content)
