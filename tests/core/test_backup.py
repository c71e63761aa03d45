"""Tests for core/backup.py - .bak copies before overwrites."""

from unittest.mock import patch

import pytest

from agent_rules.core.backup import BackupRecord, backup_path_for, maybe_backup, plan_backup
from agent_rules.core.installer import InstallOptions


class TestBackupPathFor:

    def test_appends_bak_suffix(self, tmp_path):
        assert backup_path_for(tmp_path / "agent.md") == tmp_path / "agent.md.bak"

    def test_dotfile(self, tmp_path):
        assert backup_path_for(tmp_path / ".cursorrules") == tmp_path / ".cursorrules.bak"


class TestPlanBackup:

    def test_record_when_enabled(self):
        record = plan_backup(".claude/agent.md", InstallOptions())
        assert record == BackupRecord(".claude/agent.md", ".claude/agent.md.bak")

    def test_none_when_disabled(self):
        assert plan_backup("x.md", InstallOptions(backup=False)) is None


# ===========================================================================
# maybe_backup
# ===========================================================================
class TestMaybeBackup:

    def test_copies_current_bytes(self, tmp_path):
        dest = tmp_path / "agent.md"
        dest.write_bytes(b"local edits\n")
        with patch("agent_rules.core.backup.message"):
            record = maybe_backup(dest, "agent.md", InstallOptions(force=True))

        assert record == BackupRecord("agent.md", "agent.md.bak")
        assert (tmp_path / "agent.md.bak").read_bytes() == b"local edits\n"
        assert dest.read_bytes() == b"local edits\n"

    def test_disabled_does_no_io(self, tmp_path):
        dest = tmp_path / "agent.md"
        dest.write_text("x")
        with patch("agent_rules.core.backup.shutil.copyfile") as mock_copy:
            assert maybe_backup(dest, "agent.md", InstallOptions(backup=False)) is None
        mock_copy.assert_not_called()
        assert not (tmp_path / "agent.md.bak").exists()

    def test_last_write_wins(self, tmp_path):
        dest = tmp_path / "agent.md"
        (tmp_path / "agent.md.bak").write_text("older backup")
        dest.write_text("newer content")
        with patch("agent_rules.core.backup.message"):
            maybe_backup(dest, "agent.md", InstallOptions())
        assert (tmp_path / "agent.md.bak").read_text() == "newer content"

    def test_copy_failure_propagates(self, tmp_path):
        dest = tmp_path / "agent.md"
        dest.write_text("x")
        with (
            patch("agent_rules.core.backup.shutil.copyfile", side_effect=PermissionError("denied")),
            pytest.raises(PermissionError),
        ):
            maybe_backup(dest, "agent.md", InstallOptions())

    def test_logs_backup_at_debug(self, tmp_path):
        dest = tmp_path / "agent.md"
        dest.write_text("x")
        with patch("agent_rules.core.backup.message") as mock_message:
            maybe_backup(dest, "agent.md", InstallOptions())
        assert "agent.md.bak" in mock_message.call_args[0][0]
