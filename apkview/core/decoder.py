#!/usr/bin/env python3
"""
Manifest Decoder Module - androguard manifest element -> decoded manifest

androguard gives us the binary manifest as an lxml element tree. The viewer
works on the JSON-like shape instead, the same one app-info style parsers
produce:

- repeated elements become plural camelCase lists (``activity`` -> ``activities``)
- ``application``, ``uses-sdk``, ``supports-screens`` and ``uses-configuration``
  become single objects
- attribute names lose their namespace (``android:name`` -> ``name``)
- ``"true"``/``"false"`` and plain decimal strings become bool/int
- ``application.launcherActivities`` lists the activities that handle
  MAIN/LAUNCHER (derived convenience data, never serialized back)

Tags with no entry in the tag table are skipped.
"""

import logging
import re
from typing import Any, Dict, List

from lxml import etree

from apkview.manifest.exceptions import EmptyOrMissingRoot
from apkview.manifest.mapping import KEY_FOR_TAG, SINGLETON_TAGS

logger = logging.getLogger(__name__)

ACTION_MAIN = "android.intent.action.MAIN"
CATEGORY_LAUNCHER = "android.intent.category.LAUNCHER"

_DECIMAL = re.compile(r"-?(?:0|[1-9][0-9]*)")


def coerce_value(value: str) -> Any:
    """Type an attribute string the way the decoded manifest carries it"""
    if value == "true":
        return True
    if value == "false":
        return False
    if _DECIMAL.fullmatch(value):
        return int(value)
    return value


def _local_name(name) -> str:
    return etree.QName(name).localname


def _decode_element(element) -> Dict[str, Any]:
    node: Dict[str, Any] = {}

    for name, value in element.attrib.items():
        node[_local_name(name)] = coerce_value(value)

    for child in element:
        # comments and processing instructions
        if not isinstance(child.tag, str):
            continue

        tag = _local_name(child.tag)
        key = KEY_FOR_TAG.get(tag)
        if key is None:
            logger.debug(f"Skipping unmapped tag <{tag}>")
            continue

        decoded = _decode_element(child)
        if tag in SINGLETON_TAGS:
            node[key] = decoded
            continue

        items = node.get(key)
        if not isinstance(items, list):
            items = []
            node[key] = items
        items.append(decoded)

    return node


def _handles_launcher(component: Dict[str, Any]) -> bool:
    for intent_filter in component.get('intentFilters') or []:
        actions = [a.get('name') for a in intent_filter.get('actions') or []]
        categories = [c.get('name') for c in intent_filter.get('categories') or []]
        if ACTION_MAIN in actions and CATEGORY_LAUNCHER in categories:
            return True
    return False


def find_launcher_activities(application: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Activities and aliases with a MAIN/LAUNCHER intent filter, in manifest order"""
    components = list(application.get('activities') or [])
    components += application.get('activityAliases') or []
    return [c for c in components if _handles_launcher(c)]


def decode_manifest_element(root) -> Dict[str, Any]:
    """
    Convert the decoded manifest element tree into a decoded manifest node

    Args:
        root: ``<manifest>`` lxml element, as returned by
            ``APK.get_android_manifest_xml()``

    Returns:
        Dict[str, Any]: Decoded manifest

    Raises:
        EmptyOrMissingRoot: If there is no manifest element
    """
    if root is None:
        raise EmptyOrMissingRoot(root)

    manifest = _decode_element(root)

    application = manifest.get('application')
    if isinstance(application, dict):
        application['launcherActivities'] = find_launcher_activities(application)

    logger.debug(f"Decoded manifest with {len(manifest)} top-level keys")
    return manifest
