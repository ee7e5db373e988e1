"""Pytest fixtures for apkview tests."""

from __future__ import annotations

import copy

import pytest
from lxml import etree

EXAMPLE_MANIFEST = {
    "package": "com.example.app",
    "versionName": "1.0",
    "usesSdk": {"minSdkVersion": 21, "targetSdkVersion": 30},
    "application": {
        "label": "Example",
        "activities": [{"name": ".MainActivity", "exported": True}],
    },
}

MANIFEST_XML = b"""<?xml version="1.0" encoding="utf-8"?>
<manifest xmlns:android="http://schemas.android.com/apk/res/android"
    package="com.example.app" android:versionCode="7" android:versionName="1.0">
  <uses-sdk android:minSdkVersion="21" android:targetSdkVersion="30"/>
  <uses-permission android:name="android.permission.INTERNET"/>
  <uses-permission android:name="android.permission.CAMERA"/>
  <application android:label="@7F0E001B" android:icon="@7F0C0000" android:allowBackup="true">
    <activity android:name=".MainActivity" android:exported="true">
      <intent-filter>
        <action android:name="android.intent.action.MAIN"/>
        <category android:name="android.intent.category.LAUNCHER"/>
      </intent-filter>
    </activity>
    <activity android:name=".SettingsActivity" android:exported="false"/>
    <service android:name=".SyncService"/>
    <receiver android:name=".BootReceiver"/>
    <provider android:name=".DataProvider" android:authorities="com.example.app.data"/>
    <profileable android:shell="true"/>
  </application>
</manifest>
"""


@pytest.fixture
def example_manifest() -> dict:
    """Decoded manifest used across serializer and projector tests."""
    return copy.deepcopy(EXAMPLE_MANIFEST)


@pytest.fixture
def manifest_element():
    """The manifest element tree as androguard hands it over."""
    return etree.fromstring(MANIFEST_XML)


class FakeAPK:
    """Stands in for androguard's APK in handler and CLI tests."""

    manifest_xml = MANIFEST_XML
    app_name = "Example App"
    icon_path = "res/mipmap/ic_launcher.png"
    icon_data = b"\x89PNG fake"

    def __init__(self, data, raw=False):
        self.data = data
        self.raw = raw

    def get_package(self):
        return "com.example.app"

    def get_android_manifest_xml(self):
        if self.manifest_xml is None:
            return None
        return etree.fromstring(self.manifest_xml)

    def get_app_name(self):
        return self.app_name

    def get_app_icon(self):
        return self.icon_path

    def get_file(self, path):
        if path != self.icon_path:
            raise FileNotFoundError(path)
        return self.icon_data


@pytest.fixture
def fake_apk(monkeypatch):
    """Patch androguard's APK class used by the handler."""
    monkeypatch.setattr("apkview.core.apk_handler.APK", FakeAPK)
    return FakeAPK


@pytest.fixture
def apk_file(tmp_path):
    path = tmp_path / "example.apk"
    path.write_bytes(b"PK\x03\x04 not really a zip")
    return path
