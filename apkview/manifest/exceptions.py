#!/usr/bin/env python3
"""
Manifest reconstruction errors
"""


class ManifestError(Exception):
    """Base class for manifest reconstruction errors"""


class MalformedNode(ManifestError):
    """
    A key's value shape disagrees with its classification

    Never raised out of a walk: the offending key is logged and dropped so a
    hostile manifest still yields best-effort output.
    """

    def __init__(self, key: str, value: object, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"{key!r} ({type(value).__name__}): {reason}")


class EmptyOrMissingRoot(ManifestError):
    """The manifest root is absent, empty, or not object-shaped"""

    def __init__(self, root: object):
        self.root = root
        if root is None:
            message = "No manifest available"
        else:
            message = f"No manifest available (got {type(root).__name__})"
        super().__init__(message)
