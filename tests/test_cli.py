"""
Tests for the command line interface

Run with: pytest tests/test_cli.py -v
"""

from click.testing import CliRunner

from apkview import __version__
from apkview.__main__ import cli


def invoke(*args):
    return CliRunner().invoke(cli, list(args), obj={})


class TestCLI:
    """Tests for the apkview commands."""

    def test_version(self):
        result = invoke("--version")
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_manifest_stdout(self, fake_apk, apk_file):
        result = invoke("manifest", str(apk_file))
        assert result.exit_code == 0
        assert result.output.startswith('<?xml version="1.0" encoding="utf-8"?>\n<manifest')
        assert "</manifest>" in result.output

    def test_manifest_no_declaration(self, fake_apk, apk_file):
        result = invoke("manifest", str(apk_file), "--no-declaration")
        assert result.exit_code == 0
        assert result.output.startswith("<manifest")

    def test_manifest_to_file(self, fake_apk, apk_file, tmp_path):
        output = tmp_path / "AndroidManifest.xml"
        result = invoke("manifest", str(apk_file), "-o", str(output))
        assert result.exit_code == 0
        text = output.read_text(encoding="utf-8")
        assert 'android:label="Example App"' in text
        assert text.endswith("</manifest>\n")

    def test_info_plain(self, fake_apk, apk_file):
        result = invoke("info", str(apk_file), "--plain")
        assert result.exit_code == 0
        assert "Package: com.example.app" in result.output
        assert "AM Command: am start -n com.example.app/.MainActivity" in result.output
        assert "SHA-256: " in result.output

    def test_info_rich(self, fake_apk, apk_file):
        result = invoke("info", str(apk_file))
        assert result.exit_code == 0
        assert "com.example.app" in result.output

    def test_info_rich_markup_in_manifest(self, fake_apk, apk_file, monkeypatch):
        monkeypatch.setattr(fake_apk, "app_name", "Evil [/bold] app")
        monkeypatch.setattr(fake_apk, "manifest_xml", fake_apk.manifest_xml
                            .replace(b".MainActivity", b".A[/x]")
                            .replace(b"android.permission.CAMERA", b"[red]perm"))
        result = invoke("info", str(apk_file))
        assert result.exit_code == 0
        assert "Evil [/bold] app" in result.output
        assert ".A[/x]" in result.output
        assert "[red]perm" in result.output

    def test_components_markup_in_names(self, fake_apk, apk_file, monkeypatch):
        monkeypatch.setattr(fake_apk, "manifest_xml", fake_apk.manifest_xml.replace(b".MainActivity", b".A[/x]"))
        result = invoke("components", str(apk_file), "-k", "activities")
        assert result.exit_code == 0
        assert ".A[/x]" in result.output

    def test_info_icon(self, fake_apk, apk_file, tmp_path):
        icon = tmp_path / "icon.png"
        result = invoke("info", str(apk_file), "--plain", "--icon", str(icon))
        assert result.exit_code == 0
        assert icon.read_bytes() == fake_apk.icon_data

    def test_tree_plain_default(self, fake_apk, apk_file):
        result = invoke("tree", str(apk_file), "--plain")
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0].startswith("▼ <manifest")
        assert any(line.startswith("  ▶ <application") for line in lines)
        assert lines[-1] == "  </manifest>"

    def test_tree_depth_zero(self, fake_apk, apk_file):
        result = invoke("tree", str(apk_file), "--plain", "--depth", "0")
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert len(lines) == 1
        assert lines[0].startswith("▶ <manifest")
        assert lines[0].endswith("> ... </manifest>")

    def test_tree_expand_path(self, fake_apk, apk_file):
        # root children: uses-sdk, uses-permission x2, application
        result = invoke("tree", str(apk_file), "--plain", "-e", "3")
        assert result.exit_code == 0
        assert "  ▼ <application" in result.output
        assert '<service android:name=".SyncService" />' in result.output

    def test_tree_all(self, fake_apk, apk_file):
        result = invoke("tree", str(apk_file), "--plain", "--all")
        assert result.exit_code == 0
        assert "android.intent.category.LAUNCHER" in result.output
        assert "▶" not in result.output

    def test_tree_bad_path(self, fake_apk, apk_file):
        result = invoke("tree", str(apk_file), "-e", "x.1")
        assert result.exit_code == 1
        assert "Invalid tree path" in result.output

    def test_components(self, fake_apk, apk_file):
        result = invoke("components", str(apk_file), "-k", "services")
        assert result.exit_code == 0
        assert ".SyncService" in result.output
        assert ".MainActivity" not in result.output

    def test_not_an_apk(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        result = invoke("manifest", str(path))
        assert result.exit_code == 1
        assert "Not an APK file" in result.output

    def test_missing_manifest(self, fake_apk, apk_file, monkeypatch):
        monkeypatch.setattr(fake_apk, "manifest_xml", None)
        result = invoke("manifest", str(apk_file))
        assert result.exit_code == 1
        assert "No manifest available" in result.output
