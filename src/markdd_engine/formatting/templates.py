"""Templated insertions: headings, links, images, tables, math and code blocks.

Every template follows the same rule: wrap the selection when there is one,
otherwise insert a placeholder.
"""

from __future__ import annotations

from markdd_engine.selection import SelectionRange

from .edits import EditInstruction, line_start

DEFAULT_LINK_URL = "https://example.com"
DEFAULT_IMAGE_URL = "https://example.com/image.jpg"

DIAGRAM_TEMPLATES = {
    "mermaid": (
        "graph TD\n"
        "    A[Start] --> B{Decision}\n"
        "    B -->|Yes| C[Action 1]\n"
        "    B -->|No| D[Action 2]\n"
        "    C --> E[End]\n"
        "    D --> E"
    ),
    "tikz": (
        "\\draw (0,0) circle (1cm);\n"
        "\\draw (-1,0) -- (1,0);\n"
        "\\draw (0,-1) -- (0,1);"
    ),
    "plantuml": (
        "@startuml\n"
        "Alice -> Bob: Authentication Request\n"
        "Bob --> Alice: Authentication Response\n"
        "@enduml"
    ),
    "vega-lite": (
        "{\n"
        '  "$schema": "https://vega.github.io/schema/vega-lite/v5.json",\n'
        '  "data": {"values": [{"a": "A", "b": 28}, {"a": "B", "b": 55}]},\n'
        '  "mark": "bar",\n'
        '  "encoding": {\n'
        '    "x": {"field": "a", "type": "nominal"},\n'
        '    "y": {"field": "b", "type": "quantitative"}\n'
        "  }\n"
        "}"
    ),
    "latex": (
        "\\documentclass{article}\n"
        "\\begin{document}\n"
        "Hello LaTeX!\n"
        "\\end{document}"
    ),
}


def _wrap_or_insert(
    content: str, selection: SelectionRange, prefix: str, suffix: str, placeholder: str
) -> EditInstruction:
    selected = selection.text_in(content)
    if selected:
        return EditInstruction.at_selection(
            selection, f"{prefix}{selected}{suffix}", select_inserted=True
        )
    return EditInstruction.at_selection(selection, f"{prefix}{placeholder}{suffix}")


def heading(content: str, selection: SelectionRange, level: int = 1) -> EditInstruction:
    level = min(max(1, level), 6)
    return _wrap_or_insert(
        content, selection, "#" * level + " ", "", f"Heading {level}"
    )


def inline_code(content: str, selection: SelectionRange) -> EditInstruction:
    return _wrap_or_insert(content, selection, "`", "`", "code")


def keyboard_shortcut(content: str, selection: SelectionRange) -> EditInstruction:
    return _wrap_or_insert(content, selection, "[[", "]]", "Ctrl+Key")


def math(content: str, selection: SelectionRange) -> EditInstruction:
    return _wrap_or_insert(content, selection, "$", "$", "E = mc^2")


def link(
    content: str, selection: SelectionRange, url: str = "", title: str = ""
) -> EditInstruction:
    text = selection.text_in(content) or title or "link text"
    return EditInstruction.at_selection(
        selection, f"[{text}]({url or DEFAULT_LINK_URL})", select_inserted=True
    )


def image(
    content: str, selection: SelectionRange, url: str = "", alt: str = ""
) -> EditInstruction:
    alt_text = alt or selection.text_in(content) or "image description"
    return EditInstruction.at_selection(
        selection, f"![{alt_text}]({url or DEFAULT_IMAGE_URL})"
    )


def table(
    content: str, selection: SelectionRange, rows: int = 3, cols: int = 3
) -> EditInstruction:
    """Insert a ``rows`` x ``cols`` table; the header counts as the first row."""

    del content
    rows = max(1, rows)
    cols = max(1, cols)
    header = " | ".join(f"Header {col + 1}" for col in range(cols))
    separator = " | ".join("---" for _ in range(cols))
    lines = ["", f"| {header} |", f"| {separator} |"]
    for row in range(rows - 1):
        cells = " | ".join(f"Cell {row + 1}.{col + 1}" for col in range(cols))
        lines.append(f"| {cells} |")
    lines.append("\n")
    return EditInstruction.at_selection(selection, "\n".join(lines))


def code_block(
    content: str, selection: SelectionRange, language: str = "", body: str = ""
) -> EditInstruction:
    selected = selection.text_in(content)
    inner = selected or body or "code"
    lead = "" if line_start(content, selection.start) == selection.start else "\n"
    block = f"{lead}```{language}\n{inner}\n```\n"
    return EditInstruction.at_selection(
        selection, block, select_inserted=bool(selected)
    )


def diagram(content: str, selection: SelectionRange, kind: str) -> EditInstruction:
    try:
        template = DIAGRAM_TEMPLATES[kind]
    except KeyError as exc:
        raise ValueError(
            f"Unknown diagram kind '{kind}'; "
            f"expected one of {sorted(DIAGRAM_TEMPLATES)}"
        ) from exc
    lead = "" if line_start(content, selection.start) == selection.start else "\n"
    return EditInstruction.at_selection(
        selection, f"{lead}```{kind}\n{template}\n```\n"
    )


__all__ = [
    "DIAGRAM_TEMPLATES",
    "code_block",
    "diagram",
    "heading",
    "image",
    "inline_code",
    "keyboard_shortcut",
    "link",
    "math",
    "table",
]
