#!/usr/bin/env python3
"""
Manifest Serializer Module - decoded manifest -> AndroidManifest.xml text

## Formatting rules (kept stable for diffing):
- no attributes, no children: ``<tag />``
- up to two attributes: attributes inline, ``<tag a="1">`` or ``<tag a="1" />``
- more than two: tag name alone, one attribute per indented line, then ``>``
  or ``/>`` on its own line at the attribute indentation
- four spaces per nesting depth

```python
from apkview.manifest import serialize

xml = serialize({'package': 'com.example.app', 'usesSdk': {'minSdkVersion': 21}})
```
"""

import logging
from collections.abc import Mapping
from typing import Any, List, Optional

from .classifier import escape_attribute, partition, prepare_root
from .mapping import DEFAULT_FORMAT, ROOT_TAG, XML_DECLARATION, FormatConfig

logger = logging.getLogger(__name__)


class ManifestSerializer:
    """
    Depth-first writer producing one XML document per call

    Holds only formatting configuration, so a single instance can be shared.
    """

    def __init__(self, config: Optional[FormatConfig] = None):
        self.config = config or DEFAULT_FORMAT

    def serialize(self, manifest: Any) -> str:
        """
        Serialize a decoded manifest root

        Args:
            manifest: Decoded manifest (the object under ``manifest``)

        Returns:
            str: Complete XML document

        Raises:
            EmptyOrMissingRoot: If there is no usable manifest
        """
        root = prepare_root(manifest)
        lines: List[str] = []

        if self.config.xml_declaration:
            lines.append(XML_DECLARATION)

        self._write_element(lines, ROOT_TAG, root, 0)
        logger.debug(f"Serialized manifest into {len(lines)} lines")
        return "\n".join(lines)

    def _write_element(self, lines: List[str], tag: str, node: Mapping, depth: int) -> None:
        indent = self.config.indent
        pad = indent * depth

        attributes, children = partition(node)
        attrs = [f'{name}="{escape_attribute(value)}"' for name, value in attributes]
        has_children = bool(children)

        if not attrs and not has_children:
            lines.append(f"{pad}<{tag} />")
            return

        if len(attrs) <= self.config.inline_attribute_limit:
            attr_str = " " + " ".join(attrs) if attrs else ""
            if not has_children:
                lines.append(f"{pad}<{tag}{attr_str} />")
                return
            lines.append(f"{pad}<{tag}{attr_str}>")
        else:
            lines.append(f"{pad}<{tag}")
            for attr in attrs:
                lines.append(f"{pad}{indent}{attr}")
            lines.append(f"{pad}{indent}{'>' if has_children else '/>'}")
            if not has_children:
                return

        for child_tag, child in children:
            self._write_element(lines, child_tag, child, depth + 1)

        lines.append(f"{pad}</{tag}>")


def serialize(manifest: Any, config: Optional[FormatConfig] = None) -> str:
    """
    Convenience function to serialize a decoded manifest to XML

    Args:
        manifest: Decoded manifest root
        config: Optional formatting overrides

    Returns:
        str: XML document
    """
    return ManifestSerializer(config).serialize(manifest)
