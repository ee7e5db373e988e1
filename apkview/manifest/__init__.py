#!/usr/bin/env python3
"""
apkview Manifest Module
Rebuilds AndroidManifest.xml from a decoded manifest, as text or as a lazy tree
"""

from .classifier import Classification, KeyKind, ValueKind, classify, partition
from .exceptions import EmptyOrMissingRoot, MalformedNode, ManifestError
from .mapping import ANDROID_ATTRS, ANDROID_NAMESPACE, TAG_MAP, FormatConfig
from .projector import ExpansionState, RenderNode, flatten, project, project_root
from .serializer import ManifestSerializer, serialize

__all__ = [
    'Classification',
    'KeyKind',
    'ValueKind',
    'classify',
    'partition',
    'EmptyOrMissingRoot',
    'MalformedNode',
    'ManifestError',
    'ANDROID_ATTRS',
    'ANDROID_NAMESPACE',
    'TAG_MAP',
    'FormatConfig',
    'ExpansionState',
    'RenderNode',
    'flatten',
    'project',
    'project_root',
    'ManifestSerializer',
    'serialize',
]
