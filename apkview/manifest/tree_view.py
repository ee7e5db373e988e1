#!/usr/bin/env python3
"""
Tree View Module - collapsible presentation of projected manifest nodes

Turns RenderNodes plus an ExpansionState into either plain text lines or a
rich ``Tree``. Collapsed nodes read ``<tag ...> ... </tag>``; expanded ones
show their children followed by the closing tag; leaves are self-closing.
Only visible nodes are ever materialized.
"""

from typing import Iterable, List, Tuple

from rich.text import Text
from rich.tree import Tree

from .projector import ExpansionState, RenderNode

TAG_STYLE = "#22863a"
ATTR_NAME_STYLE = "#6f42c1"
ATTR_VALUE_STYLE = "#032f62"
BRACKET_STYLE = "#24292e"
ELLIPSIS_STYLE = "#999999"

EXPANDED_MARKER = "▼"
COLLAPSED_MARKER = "▶"


def format_attributes(attributes: Iterable[Tuple[str, str]]) -> str:
    return "".join(f' {name}="{value}"' for name, value in attributes)


def summary(node: RenderNode, expanded: bool) -> str:
    """One-line label for a node in its current state"""
    attrs = format_attributes(node.attributes)
    if not node.has_children:
        return f"<{node.tag_name}{attrs} />"
    if expanded:
        return f"<{node.tag_name}{attrs}>"
    return f"<{node.tag_name}{attrs}> ... </{node.tag_name}>"


def closing_tag(node: RenderNode) -> str:
    return f"</{node.tag_name}>"


def render_lines(root: RenderNode, state: ExpansionState, indent: str = "  ") -> List[str]:
    """
    Plain text rendering of the visible part of the tree

    Args:
        root: Node to start from
        state: Expand/collapse flags
        indent: Indentation per depth level

    Returns:
        List[str]: One line per visible tag, with expand markers
    """
    lines: List[str] = []
    _render_node_lines(lines, root, state, indent, 0)
    return lines


def _render_node_lines(lines: List[str], node: RenderNode, state: ExpansionState,
                       indent: str, depth: int) -> None:
    pad = indent * depth
    if not node.has_children:
        lines.append(f"{pad}  {summary(node, False)}")
        return

    expanded = state.is_expanded(node.path)
    marker = EXPANDED_MARKER if expanded else COLLAPSED_MARKER
    lines.append(f"{pad}{marker} {summary(node, expanded)}")
    if not expanded:
        return

    for child in node.children:
        _render_node_lines(lines, child, state, indent, depth + 1)
    lines.append(f"{pad}  {closing_tag(node)}")


def styled_summary(node: RenderNode, expanded: bool) -> Text:
    """Same as ``summary`` but with syntax colouring"""
    text = Text()
    text.append("<", style=BRACKET_STYLE)
    text.append(node.tag_name, style=TAG_STYLE)
    for name, value in node.attributes:
        text.append(" ")
        text.append(name, style=ATTR_NAME_STYLE)
        text.append("=", style=BRACKET_STYLE)
        text.append(f'"{value}"', style=ATTR_VALUE_STYLE)

    if not node.has_children:
        text.append(" />", style=BRACKET_STYLE)
        return text

    text.append(">", style=BRACKET_STYLE)
    if not expanded:
        text.append(" ... ", style=ELLIPSIS_STYLE)
        text.append("</", style=BRACKET_STYLE)
        text.append(node.tag_name, style=TAG_STYLE)
        text.append(">", style=BRACKET_STYLE)
    return text


def _styled_closing(node: RenderNode) -> Text:
    text = Text()
    text.append("</", style=BRACKET_STYLE)
    text.append(node.tag_name, style=TAG_STYLE)
    text.append(">", style=BRACKET_STYLE)
    return text


def build_tree(root: RenderNode, state: ExpansionState) -> Tree:
    """
    Build a rich Tree for the visible part of the manifest

    Args:
        root: Projected root node
        state: Expand/collapse flags

    Returns:
        Tree: Renderable for ``Console.print``
    """
    expanded = state.is_expanded(root.path)
    tree = Tree(styled_summary(root, expanded), guide_style="dim")
    if expanded and root.has_children:
        _add_children(tree, root, state)
    return tree


def _add_children(branch: Tree, node: RenderNode, state: ExpansionState) -> None:
    for child in node.children:
        expanded = child.has_children and state.is_expanded(child.path)
        sub = branch.add(styled_summary(child, expanded))
        if expanded:
            _add_children(sub, child, state)
    branch.add(_styled_closing(node))
