#!/usr/bin/env python3
"""
Manifest Classifier Module - decides what each decoded key becomes in XML

Every key of a decoded manifest node is one of:
- an attribute (optionally restored with the ``android:`` prefix)
- a single child element (object value under a TAG_MAP key)
- a repeated child element (list value under a TAG_MAP key)
- a suppressed key (decoder convenience data, never emitted)

``partition()`` applies this to a whole node and is the single place both the
serializer and the tree projector get their attributes and children from, so
the exported XML and the displayed tree cannot disagree.

Malformed input (an object under an attribute key, a scalar under a child key,
a non-object inside a child list) is dropped and logged, never raised.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Tuple
from xml.sax.saxutils import escape

from .exceptions import EmptyOrMissingRoot, MalformedNode
from .mapping import (
    ANDROID_ATTRS,
    ANDROID_NAMESPACE,
    ANDROID_PREFIX,
    NAMESPACE_DECLARATION,
    SUPPRESSED,
    TAG_MAP,
)

logger = logging.getLogger(__name__)

_ATTRIBUTE_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}

# Everything outside the XML 1.0 Char production
_INVALID_XML_CHARS = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


class ValueKind(Enum):
    """Runtime shape of a decoded value"""
    ABSENT = "absent"
    SCALAR = "scalar"
    NODE = "node"
    SEQUENCE = "sequence"
    OTHER = "other"


class KeyKind(Enum):
    """What a decoded key turns into"""
    ATTRIBUTE = "attribute"
    NAMESPACED_ATTRIBUTE = "namespaced_attribute"
    CHILD = "child"
    REPEATED_CHILD = "repeated_child"
    SUPPRESSED = "suppressed"
    ABSENT = "absent"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class Classification:
    """
    Result of classifying one key

    Attributes:
        kind: What the key becomes
        name: Formatted attribute name, or XML tag name for children
        reason: Why the key was rejected (MALFORMED only)
    """
    kind: KeyKind
    name: Optional[str] = None
    reason: str = ""

    @property
    def is_attribute(self) -> bool:
        return self.kind in (KeyKind.ATTRIBUTE, KeyKind.NAMESPACED_ATTRIBUTE)

    @property
    def is_child(self) -> bool:
        return self.kind in (KeyKind.CHILD, KeyKind.REPEATED_CHILD)


class Partition(NamedTuple):
    """Attributes and child elements of one node, in emission order"""
    attributes: List[Tuple[str, str]]
    children: List[Tuple[str, Mapping]]


def kind_of(value: Any) -> ValueKind:
    """Map a decoded value onto the scalar / node / sequence union"""
    if value is None:
        return ValueKind.ABSENT
    if isinstance(value, (str, bool, int, float)):
        return ValueKind.SCALAR
    if isinstance(value, Mapping):
        return ValueKind.NODE
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    return ValueKind.OTHER


def format_attribute_name(key: str) -> str:
    """Restore the android: prefix for whitelisted framework attributes"""
    if key in ANDROID_ATTRS:
        return f"{ANDROID_PREFIX}{key}"
    return key


def format_value(value: Any) -> str:
    """Render a scalar the way it appears in a manifest (true, 21, ...)"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def escape_attribute(value: str) -> str:
    """Escape markup characters, quotes and line breaks for an attribute value"""
    return escape(value, _ATTRIBUTE_ENTITIES)


def strip_invalid_chars(value: str) -> str:
    """Remove characters XML 1.0 cannot carry at all (C0 controls, lone surrogates)"""
    return _INVALID_XML_CHARS.sub("", value)


def classify(key: str, value: Any) -> Classification:
    """
    Classify a decoded key given the shape of its value

    Args:
        key: Decoded property name
        value: Its value

    Returns:
        Classification: Kind plus the attribute or tag name to emit
    """
    kind = kind_of(value)

    if key in TAG_MAP:
        tag = TAG_MAP[key]
        if tag is SUPPRESSED:
            return Classification(KeyKind.SUPPRESSED)
        if kind is ValueKind.NODE:
            return Classification(KeyKind.CHILD, tag)
        if kind is ValueKind.SEQUENCE:
            return Classification(KeyKind.REPEATED_CHILD, tag)
        if kind is ValueKind.ABSENT:
            return Classification(KeyKind.ABSENT, tag)
        return Classification(
            KeyKind.MALFORMED, tag,
            reason=f"child key <{tag}> holds a {kind.value} value"
        )

    if kind is ValueKind.SCALAR:
        if key in ANDROID_ATTRS:
            return Classification(KeyKind.NAMESPACED_ATTRIBUTE, format_attribute_name(key))
        return Classification(KeyKind.ATTRIBUTE, key)
    if kind is ValueKind.ABSENT:
        return Classification(KeyKind.ABSENT, format_attribute_name(key))
    return Classification(
        KeyKind.MALFORMED, format_attribute_name(key),
        reason=f"attribute key holds a {kind.value} value"
    )


def _drop(error: MalformedNode) -> None:
    logger.warning(f"Dropping malformed manifest key {error}")


def partition(node: Mapping) -> Partition:
    """
    Split a decoded node into ordered attributes and child elements

    Attributes keep the node's key order. Children keep the node's key order
    with list-valued keys expanded in list order.

    Args:
        node: Decoded manifest node

    Returns:
        Partition: (name, raw value) attribute pairs and (tag, node) child pairs
    """
    attributes: List[Tuple[str, str]] = []
    children: List[Tuple[str, Mapping]] = []

    for key, value in node.items():
        result = classify(key, value)

        if result.is_attribute:
            text = format_value(value)
            clean = strip_invalid_chars(text)
            if clean != text:
                logger.warning(f"Removed characters not allowed in XML from {key!r}")
            attributes.append((result.name, clean))
        elif result.kind is KeyKind.CHILD:
            children.append((result.name, value))
        elif result.kind is KeyKind.REPEATED_CHILD:
            for index, item in enumerate(value):
                if kind_of(item) is ValueKind.NODE:
                    children.append((result.name, item))
                else:
                    _drop(MalformedNode(f"{key}[{index}]", item, "list item is not an object"))
        elif result.kind is KeyKind.MALFORMED:
            _drop(MalformedNode(key, value, result.reason))

    return Partition(attributes, children)


def prepare_root(manifest: Any) -> Dict[str, Any]:
    """
    Validate the manifest root and inject the android namespace declaration

    The declaration is always the first attribute and appears exactly once,
    whatever the input already carried under that key.

    Raises:
        EmptyOrMissingRoot: If the root is None, not a mapping, or empty
    """
    if kind_of(manifest) is not ValueKind.NODE or not manifest:
        raise EmptyOrMissingRoot(manifest)

    root = {NAMESPACE_DECLARATION: ANDROID_NAMESPACE}
    for key, value in manifest.items():
        if key != NAMESPACE_DECLARATION:
            root[key] = value
    return root
