#!/usr/bin/env python3
"""
apkview Core Module
Package loading, manifest decoding, file digests
"""

from .apk_handler import APKHandler, APKInfo, analyze_apk
from .decoder import decode_manifest_element
from .file_info import FileInfo, compute_hashes, read_apk

__all__ = [
    'APKHandler',
    'APKInfo',
    'analyze_apk',
    'decode_manifest_element',
    'FileInfo',
    'compute_hashes',
    'read_apk',
]
