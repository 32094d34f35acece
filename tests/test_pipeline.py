"""Tests for FilePipeline and the sanitize_text fold."""

from __future__ import annotations

import os
import stat

import pytest

from script_qa.core.config import Settings
from script_qa.core.models import FileStatus
from script_qa.core.pipeline import FilePipeline, build_rules, output_path_for, sanitize_text
from script_qa.core.reporting import ConsoleReporter
from script_qa.core.rules.characters import NonAsciiSpacesRule


class TestSanitizeText:
    rules = build_rules()

    def test_nbsp_is_handled_by_the_first_rule_only(self):
        fixed, findings = sanitize_text("\u00a0", self.rules)
        assert fixed == " "
        assert [f.rule_id for f in findings] == ["script.non_ascii_spaces"]

    def test_hidden_breakers_rule_sees_nbsp_when_spaces_rule_is_disabled(self):
        settings = Settings(rules={"script.non_ascii_spaces": {"enabled": False}})
        fixed, findings = sanitize_text("a\u00a0b", build_rules(settings))
        assert fixed == "a b"
        assert [f.rule_id for f in findings] == ["script.hidden_bash_breakers"]

    def test_findings_follow_registry_order(self, dirty_script):
        _, findings = sanitize_text(dirty_script, self.rules)
        orders = [f.order for f in findings]
        assert orders == sorted(orders)
        assert [f.rule_id for f in findings] == [
            "script.non_ascii_spaces",
            "script.non_ascii_punctuation",
            "script.invisible_controls",
            "script.mixed_line_endings",
            "script.hidden_bash_breakers",
            "script.non_tab_indent",
            "script.missing_block_spacing",
        ]

    def test_clean_text_has_no_findings(self, clean_script):
        fixed, findings = sanitize_text(clean_script, self.rules)
        assert fixed == clean_script
        assert findings == []

    def test_later_rules_see_earlier_fixes(self):
        # NBSP indentation only becomes visible to the indent rule once the
        # spaces rule has turned it into ordinary spaces.
        fixed, findings = sanitize_text("\u00a0\u00a0\u00a0\u00a0echo\r\n", self.rules)
        assert fixed == "\techo\n"
        assert "script.non_tab_indent" in [f.rule_id for f in findings]

    def test_detect_only_rule_still_counts_as_finding(self):
        fixed, findings = sanitize_text("cd /tmp/é\n", self.rules)
        assert fixed == "cd /tmp/é\n"
        assert [f.rule_id for f in findings] == ["script.unicode_in_paths"]


class TestFilePipeline:
    def test_writes_fixed_artifact(self, write_script, dirty_script):
        path = write_script(dirty_script)
        result = FilePipeline().run(path)

        assert result.status == FileStatus.FIXED
        assert result.output_path == output_path_for(path)
        assert result.output_path.name == "setup_script.fixed"
        assert result.output_path.read_text(encoding="utf-8") == (
            "#!/usr/bin/env bash\n"
            "set -e\n"
            "\n"
            "# ---- install\n"
            "echo \"ready\" now\n"
            "\tapt-get install -y curl\n"
            "VAR=1\n"
        )

    def test_source_is_never_modified(self, write_script, dirty_script):
        path = write_script(dirty_script)
        before = path.read_bytes()
        FilePipeline().run(path)
        assert path.read_bytes() == before

    def test_clean_file_produces_no_artifact(self, write_script, clean_script):
        path = write_script(clean_script)
        result = FilePipeline().run(path)
        assert result.status == FileStatus.CLEAN
        assert result.output_path is None
        assert not output_path_for(path).exists()
        assert not result.changed

    def test_nbsp_only_file(self, write_script):
        path = write_script("\u00a0")
        result = FilePipeline().run(path)
        assert result.rule_ids == ["script.non_ascii_spaces"]
        assert result.output_path.read_bytes() == b" "

    def test_line_endings_in_artifact(self, write_script):
        path = write_script("a\r\nb\r\n")
        result = FilePipeline().run(path)
        assert result.output_path.read_bytes() == b"a\nb\n"

    def test_detect_only_finding_still_emits_artifact(self, write_script):
        path = write_script("cd /tmp/é\n")
        result = FilePipeline().run(path)
        assert result.status == FileStatus.FIXED
        assert result.output_path.read_bytes() == path.read_bytes()

    def test_missing_file_is_skipped(self, tmp_path):
        path = tmp_path / "nope"
        result = FilePipeline().run(path)
        assert result.status == FileStatus.SKIPPED
        assert not output_path_for(path).exists()
        assert list(tmp_path.iterdir()) == []

    def test_directory_is_skipped(self, tmp_path):
        result = FilePipeline().run(tmp_path)
        assert result.status == FileStatus.SKIPPED

    def test_undecodable_bytes_survive_verbatim(self, write_script):
        raw = b"echo caf\xe9\r\n\xff\xfe ok\n"
        path = write_script(raw)
        result = FilePipeline().run(path)
        assert result.status == FileStatus.FIXED
        assert result.meta.decoded_cleanly is False
        assert result.output_path.read_bytes() == b"echo caf\xe9\n\xff\xfe ok\n"

    def test_bom_is_removed(self, write_script):
        path = write_script(b"\xef\xbb\xbf#!/bin/sh\n")
        result = FilePipeline().run(path)
        assert result.rule_ids == ["script.hidden_bash_breakers"]
        assert result.output_path.read_bytes() == b"#!/bin/sh\n"

    def test_bom_is_removed_with_utf8_sig_codec(self, write_script):
        path = write_script(b"\xef\xbb\xbfecho hi\r\n")
        result = FilePipeline(Settings(encoding="utf-8-sig")).run(path)
        assert result.rule_ids == ["script.mixed_line_endings", "script.hidden_bash_breakers"]
        assert result.output_path.read_bytes() == b"echo hi\n"

    def test_bom_is_removed_with_utf16_codec(self, write_script):
        path = write_script(b"\xff\xfe" + "echo hi\r\n".encode("utf-16-le"))
        result = FilePipeline(Settings(encoding="utf-16")).run(path)
        assert result.meta.encoding == "utf-16-le"
        assert result.output_path.read_bytes() == "echo hi\n".encode("utf-16-le")

    def test_artifact_is_clean_on_a_second_run(self, write_script):
        path = write_script("a\r\n    \t\n# ---- b\n     c\n")
        first = FilePipeline().run(path)
        assert first.status == FileStatus.FIXED

        second = FilePipeline().run(first.output_path)
        assert second.status == FileStatus.CLEAN
        assert second.findings == []

    def test_custom_output_suffix(self, write_script):
        path = write_script("a\r\n")
        result = FilePipeline(Settings(output_suffix=".clean")).run(path)
        assert result.output_path.name == "setup_script.clean"

    def test_disabled_rule_is_not_run(self, write_script):
        path = write_script("    x\n")
        settings = Settings(rules={"script.non_tab_indent": {"enabled": False}})
        result = FilePipeline(settings).run(path)
        assert result.status == FileStatus.CLEAN

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    def test_artifact_keeps_source_mode(self, write_script):
        path = write_script("a\r\n")
        path.chmod(0o755)
        result = FilePipeline().run(path)
        assert stat.S_IMODE(result.output_path.stat().st_mode) == 0o755

    def test_no_scratch_files_left_behind(self, write_script, dirty_script, tmp_path):
        path = write_script(dirty_script)
        FilePipeline().run(path)
        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "setup_script",
            "setup_script.fixed",
        ]

    def test_failing_rule_aborts_only_this_file(self, write_script, tmp_path, monkeypatch):
        path = write_script("\u00a0")

        def boom(self, text):
            raise RuntimeError("boom")

        monkeypatch.setattr(NonAsciiSpacesRule, "fix", boom)
        result = FilePipeline().run(path)

        assert result.status == FileStatus.FAILED
        assert "boom" in result.error
        assert result.rule_ids == ["script.non_ascii_spaces"]
        assert path.read_bytes() == "\u00a0".encode("utf-8")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["setup_script"]

    def test_failed_write_removes_scratch_file(self, write_script, tmp_path, monkeypatch):
        path = write_script("a\r\n")

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("script_qa.core.pipeline.os.replace", fail_replace)
        result = FilePipeline().run(path)

        assert result.status == FileStatus.FAILED
        assert sorted(p.name for p in tmp_path.iterdir()) == ["setup_script"]


class TestConsoleOutput:
    def test_report_lists_categories_in_order(self, write_script, dirty_script, capsys):
        path = write_script(dirty_script)
        FilePipeline(reporter=ConsoleReporter()).run(path)
        out = capsys.readouterr().out.splitlines()

        assert out[0] == f"=== Validating: {path} ==="
        assert out[1] == "  • non-ASCII spaces detected"
        assert out[2] == "    Auto-fixing: non-ASCII spaces"
        assert "    Auto-fixing: missing newline between blocks" in out
        assert f"✅ Wrote sanitized file: {path}.fixed" in out

    def test_clean_report(self, write_script, clean_script, capsys):
        path = write_script(clean_script)
        FilePipeline(reporter=ConsoleReporter()).run(path)
        out = capsys.readouterr().out
        assert "No issues found" in out
        assert "Auto-fixing" not in out

    def test_skip_report(self, tmp_path, capsys):
        FilePipeline(reporter=ConsoleReporter()).run(tmp_path / "missing")
        out = capsys.readouterr().out
        assert out.startswith("❌ Skipping")
        assert "Validating" not in out

    def test_unicode_in_paths_lists_lines(self, write_script, capsys):
        path = write_script("ok\nA=é\n")
        FilePipeline(reporter=ConsoleReporter()).run(path)
        out = capsys.readouterr().out
        assert "line(s): 2" in out
