#!/usr/bin/env python3
"""
apkview - APK manifest viewer
"""

__version__ = "0.1.0"
