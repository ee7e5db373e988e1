#!/usr/bin/env python3
"""
Manifest Mapping Module - fixed tables for rebuilding AndroidManifest.xml

The decoder hands us a JSON-like manifest: repeated elements become plural
camelCase lists, singletons become nested objects, and the ``android:``
prefix is gone. The tables here are the only knowledge used to invert that.

## Tables:
- **ANDROID_ATTRS**: attribute names restored with the ``android:`` prefix.
  Closed set, anything else is emitted unprefixed.
- **TAG_MAP**: decoded key -> XML tag name. A key listed here is always a
  child element, never an attribute. ``SUPPRESSED`` marks keys the decoder
  derives for convenience (e.g. ``launcherActivities``); they are skipped.

Both the serializer and the tree projector read these exact objects.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

ANDROID_NAMESPACE = "http://schemas.android.com/apk/res/android"
NAMESPACE_DECLARATION = "xmlns:android"
ANDROID_PREFIX = "android:"

ROOT_TAG = "manifest"
XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'

# Sentinel target for keys that exist structurally but are not XML.
SUPPRESSED = None

ANDROID_ATTRS: FrozenSet[str] = frozenset({
    'name', 'label', 'icon', 'theme', 'versionCode', 'versionName',
    'minSdkVersion', 'targetSdkVersion', 'allowBackup', 'supportsRtl',
    'exported', 'enabled', 'permission', 'authorities', 'resource',
    'value', 'configChanges', 'screenOrientation', 'launchMode',
    'hardwareAccelerated', 'windowSoftInputMode', 'grantUriPermissions',
    'fullBackupContent', 'appComponentFactory', 'roundIcon',
    'networkSecurityConfig', 'debuggable', 'directBootAware',
    'required', 'glEsVersion',
})

TAG_MAP: Dict[str, Optional[str]] = {
    'usesPermissions': 'uses-permission',
    'usesPermissionsSDK23': 'uses-permission-sdk-23',
    'permissions': 'permission',
    'permissionTrees': 'permission-tree',
    'permissionGroups': 'permission-group',
    'usesFeatures': 'uses-feature',
    'usesSdk': 'uses-sdk',
    'usesConfiguration': 'uses-configuration',
    'usesLibraries': 'uses-library',
    'supportsScreens': 'supports-screens',
    'compatibleScreens': 'compatible-screens',
    'supportsGlTextures': 'supports-gl-texture',
    'application': 'application',
    'activities': 'activity',
    'activityAliases': 'activity-alias',
    'launcherActivities': SUPPRESSED,
    'services': 'service',
    'receivers': 'receiver',
    'providers': 'provider',
    'intentFilters': 'intent-filter',
    'metaData': 'meta-data',
    'actions': 'action',
    'categories': 'category',
    'grantUriPermissions': 'grant-uri-permission',
    'pathPermissions': 'path-permission',
    'data': 'data',
}

# Reverse lookup used by the decoder adapter.
KEY_FOR_TAG: Dict[str, str] = {
    tag: key for key, tag in TAG_MAP.items() if tag is not SUPPRESSED
}

# Tags the decoder exposes as a single object rather than a list.
SINGLETON_TAGS: FrozenSet[str] = frozenset({
    'application', 'uses-sdk', 'supports-screens', 'uses-configuration',
})

# More attributes than this switches to one attribute per line.
INLINE_ATTRIBUTE_LIMIT = 2
INDENT = "    "


@dataclass(frozen=True)
class FormatConfig:
    """
    Output formatting for the serialized document

    Attributes:
        indent: Indentation unit per nesting depth
        inline_attribute_limit: Max attribute count kept on the tag line
        xml_declaration: Prefix the document with the XML declaration
    """
    indent: str = INDENT
    inline_attribute_limit: int = INLINE_ATTRIBUTE_LIMIT
    xml_declaration: bool = True


DEFAULT_FORMAT = FormatConfig()
