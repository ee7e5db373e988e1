#!/usr/bin/env python3
"""
APK Handler Module
Loads an APK with Androguard and exposes its decoded manifest, icon,
file digests and a human-readable summary
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from androguard.core.apk import APK

from apkview.manifest import FormatConfig, RenderNode, project_root, serialize
from .decoder import decode_manifest_element
from .file_info import FileInfo, build_file_info, is_apk_name, read_apk

UNKNOWN_LABEL = "Unknown"
NOT_AVAILABLE = "N/A"

# Component list key -> (display title, am command prefix)
COMPONENT_KINDS = {
    'activities': ("Activity", "am start"),
    'services': ("Service", "am startservice"),
    'receivers': ("Receiver", "am broadcast -a android.intent.action.BOOT_COMPLETED"),
    'providers': ("Provider", None),
}


@dataclass
class Component:
    """One application component and the shell command that starts it"""
    kind: str
    name: str
    command: Optional[str] = None


@dataclass
class APKInfo:
    """Data class to store APK information"""
    package_name: str = ""
    app_name: str = UNKNOWN_LABEL
    version_name: str = ""
    version_code: str = ""
    min_sdk: str = NOT_AVAILABLE
    target_sdk: str = NOT_AVAILABLE
    main_activity: Optional[str] = None
    main_activity_command: Optional[str] = None
    permissions: List[str] = field(default_factory=list)
    components: Dict[str, List[Component]] = field(default_factory=dict)
    file: Optional[FileInfo] = None


def resolve_label(raw: Any) -> Optional[str]:
    """
    Pick a display label from a resolved application label

    Resource resolution may return a list (one entry per locale) or an
    unresolved reference; only a real, non-empty string is accepted.
    """
    candidates = raw if isinstance(raw, (list, tuple)) else [raw]
    for candidate in candidates:
        if (isinstance(candidate, str) and candidate
                and not candidate.startswith("resourceId:")
                and not candidate.startswith("@")):
            return candidate
    return None


def am_command(kind: str, package_name: str, component_name: str) -> Optional[str]:
    """Shell command launching a component, or None for providers"""
    prefix = COMPONENT_KINDS[kind][1]
    if not prefix:
        return None
    return f"{prefix} -n {package_name}/{component_name}"


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def summarize_manifest(manifest: Dict[str, Any]) -> APKInfo:
    """
    Build APKInfo from a decoded manifest

    Args:
        manifest: Decoded manifest

    Returns:
        APKInfo: Summary without file information
    """
    info = APKInfo()
    application = manifest.get('application')
    if not isinstance(application, dict):
        application = {}
    uses_sdk = manifest.get('usesSdk')

    info.package_name = _text(manifest.get('package'))
    label = application.get('label')
    info.app_name = label if isinstance(label, str) and label else UNKNOWN_LABEL
    info.version_name = _text(manifest.get('versionName'))
    info.version_code = _text(manifest.get('versionCode'))

    if isinstance(uses_sdk, dict):
        info.min_sdk = _text(uses_sdk.get('minSdkVersion'), NOT_AVAILABLE)
        info.target_sdk = _text(uses_sdk.get('targetSdkVersion'), NOT_AVAILABLE)

    info.permissions = [
        _text(p.get('name')) for p in manifest.get('usesPermissions') or []
        if isinstance(p, dict) and p.get('name')
    ]

    launchers = application.get('launcherActivities') or []
    first = launchers[0] if isinstance(launchers, list) and launchers else None
    if isinstance(first, dict) and first.get('name'):
        info.main_activity = _text(first['name'])
        info.main_activity_command = am_command('activities', info.package_name, info.main_activity)

    for kind in COMPONENT_KINDS:
        info.components[kind] = [
            Component(kind, _text(item['name']), am_command(kind, info.package_name, _text(item['name'])))
            for item in application.get(kind) or []
            if isinstance(item, dict) and item.get('name')
        ]

    return info


def build_summary(info: APKInfo) -> str:
    """
    Plain multi-line summary suitable for pasting elsewhere

    Args:
        info: Extracted APK information

    Returns:
        str: Summary text
    """
    lines = [
        f"App Name: {info.app_name}",
        f"Package: {info.package_name}",
        f"VersionName: {info.version_name}",
        f"VersionCode: {info.version_code}",
        f"Min SDK: {info.min_sdk}",
        f"Target SDK: {info.target_sdk}",
    ]
    if info.main_activity:
        lines.append(f"Main Activity: {info.main_activity}")
        lines.append(f"AM Command: {info.main_activity_command}")
    if info.file:
        lines.append(f"File Size: {info.file.size_kb}")
        lines.append(f"MD5: {info.file.md5}")
        lines.append(f"SHA-1: {info.file.sha1}")
        lines.append(f"SHA-256: {info.file.sha256}")
    return "\n".join(lines)


class APKHandler:
    """
    APK Handler for inspecting Android APK files
    Uses Androguard to decode the package, everything else works on the
    decoded manifest
    """

    def __init__(self, apk_path: str):
        """
        Initialize APK Handler

        Args:
            apk_path: Path to the APK file

        Raises:
            FileNotFoundError: If APK file doesn't exist
            ValueError: If the file name doesn't end in .apk
        """
        self.logger = logging.getLogger(__name__)
        self.apk_path = Path(apk_path)

        if not self.apk_path.exists():
            raise FileNotFoundError(f"APK file not found: {apk_path}")

        if not is_apk_name(self.apk_path.name):
            raise ValueError(f"Not an APK file: {self.apk_path.name}")

        self.logger.info(f"Loading APK: {self.apk_path.name}")
        self.apk: Optional[APK] = None
        self.file_info: Optional[FileInfo] = None
        self.manifest: Optional[Dict[str, Any]] = None
        self.info: Optional[APKInfo] = None

    def load(self) -> bool:
        """
        Load and parse the APK file

        Returns:
            bool: True if loaded successfully, False otherwise
        """
        try:
            data, name, mtime = read_apk(self.apk_path)
            self.file_info = build_file_info(data, name, mtime)
            self.apk = APK(data, raw=True)
            self.logger.info(f"Successfully loaded APK: {self.apk.get_package()}")
            return True
        except Exception as e:
            self.logger.error(f"Failed to load APK: {e}")
            return False

    def _ensure_loaded(self) -> None:
        if not self.apk:
            if not self.load():
                raise RuntimeError("Failed to load APK")

    def _resolved_label(self) -> Optional[str]:
        try:
            return resolve_label(self.apk.get_app_name())
        except Exception as e:
            self.logger.warning(f"Could not resolve application label: {e}")
            return None

    def decode_manifest(self) -> Dict[str, Any]:
        """
        Decode the binary manifest into its JSON-like form

        The application label is replaced by its resolved string when
        resources allow it.

        Returns:
            Dict[str, Any]: Decoded manifest

        Raises:
            EmptyOrMissingRoot: If the package has no manifest
        """
        if self.manifest is not None:
            return self.manifest

        self._ensure_loaded()
        manifest = decode_manifest_element(self.apk.get_android_manifest_xml())

        label = self._resolved_label()
        application = manifest.get('application')
        if label and isinstance(application, dict):
            application['label'] = label

        self.manifest = manifest
        return manifest

    def extract_info(self) -> APKInfo:
        """
        Extract summary information from the APK

        Returns:
            APKInfo: Dataclass containing APK information
        """
        self.logger.info("Extracting APK information...")

        info = summarize_manifest(self.decode_manifest())
        info.file = self.file_info

        self.info = info
        self.logger.info(f"Extracted info for package: {info.package_name}")
        return info

    def get_icon(self) -> Optional[bytes]:
        """
        Get the application icon image

        Returns:
            Optional[bytes]: Icon file content, or None if there is none
        """
        self._ensure_loaded()

        try:
            icon_path = self.apk.get_app_icon()
        except Exception as e:
            self.logger.warning(f"Could not resolve application icon: {e}")
            return None
        if not icon_path:
            return None

        try:
            return self.apk.get_file(icon_path)
        except Exception as e:
            self.logger.warning(f"Could not read icon {icon_path}: {e}")
            return None

    def extract_icon(self, output_path: str) -> Optional[str]:
        """
        Write the application icon to disk

        Args:
            output_path: Destination file

        Returns:
            Optional[str]: Path written, or None if the APK has no icon
        """
        data = self.get_icon()
        if not data:
            self.logger.error("No icon found in APK")
            return None

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        self.logger.info(f"Extracted icon -> {path}")
        return str(path)

    def get_manifest_xml(self, config: Optional[FormatConfig] = None) -> str:
        """
        Get the reconstructed AndroidManifest.xml content

        Returns:
            str: XML document
        """
        return serialize(self.decode_manifest(), config)

    def get_manifest_tree(self) -> RenderNode:
        """Get the lazily projected manifest tree"""
        return project_root(self.decode_manifest())

    def get_components(self) -> Dict[str, List[Component]]:
        if not self.info:
            self.extract_info()
        return self.info.components

    def get_summary(self) -> str:
        """
        Get a human-readable summary of the APK

        Returns:
            str: Formatted summary string
        """
        if not self.info:
            self.extract_info()
        return build_summary(self.info)


def analyze_apk(apk_path: str, verbose: bool = False) -> APKInfo:
    """
    Convenience function to analyze an APK file

    Args:
        apk_path: Path to the APK file
        verbose: Print the summary

    Returns:
        APKInfo: Extracted APK information
    """
    handler = APKHandler(apk_path)
    info = handler.extract_info()

    if verbose:
        print(handler.get_summary())

    return info
