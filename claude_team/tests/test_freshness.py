"""
Tests for File Freshness Detector.

测试两级新文件检测：
- git status --porcelain 解析
- git 不可用/无结果时回退修改时间
- git 有结果时以 git 为准
- 最新文件选择
"""

import os
import shutil
import subprocess
import time
from pathlib import Path
from unittest.mock import patch

import pytest

from claude_team.hooks.freshness import (
    find_fresh_files,
    find_newest_fresh_file,
    git_fresh_files,
    parse_porcelain,
    recent_files,
)
from claude_team.hooks.process import CommandResult

GIT_MISSING = CommandResult(exit_code=-1, stderr="Command not found")
NOT_A_REPO = CommandResult(exit_code=128, stderr="fatal: not a git repository")


class TestParsePorcelain:
    """测试 porcelain 解析"""

    def test_fresh_status_codes(self):
        """??、A、M 状态码算新文件"""
        output = "\n".join([
            "?? specs/new.md",
            "A  specs/added.md",
            " M specs/modified.md",
            "MM specs/both.md",
            " D specs/deleted.md",
            "?? specs/notes.txt",
        ])
        fresh = [r.path for r in parse_porcelain(output, ".md") if r.is_fresh]
        assert fresh == ["specs/new.md", "specs/added.md", "specs/modified.md", "specs/both.md"]

    def test_blank_lines_ignored(self):
        """空行被忽略"""
        assert parse_porcelain("\n\n", ".md") == []

    def test_records_carry_source(self):
        """记录来源为 git"""
        records = parse_porcelain("?? specs/a.md", ".md")
        assert records[0].source == "git"
        assert records[0].is_fresh is True


class TestGitFreshFiles:
    """测试第 1 级查询"""

    def test_git_failure_yields_nothing(self):
        """git 非零退出时第 1 级无结果"""
        with patch("claude_team.hooks.freshness.run_command", return_value=NOT_A_REPO):
            assert git_fresh_files("specs", ".md") == []

    def test_git_missing_yields_nothing(self):
        """git 不存在时第 1 级无结果"""
        with patch("claude_team.hooks.freshness.run_command", return_value=GIT_MISSING):
            assert git_fresh_files("specs", ".md") == []

    def test_queries_directory(self):
        """只查询目标目录"""
        with patch(
            "claude_team.hooks.freshness.run_command",
            return_value=CommandResult(0, stdout="?? specs/plan.md"),
        ) as runner:
            assert git_fresh_files("specs", ".md") == ["specs/plan.md"]

        assert runner.call_args[0][0] == ["git", "status", "--porcelain", "specs"]

    def test_leading_space_status_kept(self):
        """第一行的 " M" 状态码不能被 strip 掉"""
        with patch(
            "claude_team.hooks.freshness.run_command",
            return_value=CommandResult(0, stdout=" M specs/a.md\n?? specs/b.md\n"),
        ) as runner:
            assert git_fresh_files("specs", ".md") == ["specs/a.md", "specs/b.md"]

        assert runner.call_args.kwargs["strip"] is False


class TestRecentFiles:
    """测试第 2 级修改时间判断"""

    def test_within_window(self, make_file):
        """窗口内的文件算新文件"""
        make_file(Path("specs/plan.md"), "# Plan\n", age_seconds=120)
        assert recent_files("specs", ".md", 5) == ["specs/plan.md"]

    def test_outside_window(self, make_file, tmp_path):
        """窗口外的文件不算"""
        make_file(tmp_path / "old.md", "# Old\n", age_seconds=600)
        assert recent_files(str(tmp_path), ".md", 5) == []

    def test_extension_filter(self, make_file, tmp_path):
        """扩展名不匹配的文件不算"""
        make_file(tmp_path / "plan.txt", "x\n")
        assert recent_files(str(tmp_path), ".md", 5) == []

    def test_subdirectories_ignored(self, tmp_path):
        """子目录不算"""
        (tmp_path / "folder.md").mkdir()
        assert recent_files(str(tmp_path), ".md", 5) == []

    def test_missing_directory(self, tmp_path):
        """目录不存在时返回空列表"""
        assert recent_files(str(tmp_path / "nope"), ".md", 5) == []

    def test_explicit_now(self, make_file, tmp_path):
        """可以指定当前时间"""
        make_file(tmp_path / "plan.md", "x\n")
        later = time.time() + 3600
        assert recent_files(str(tmp_path), ".md", 5, now=later) == []


class TestFindFreshFiles:
    """测试两级策略"""

    def test_mtime_fallback_when_git_reports_nothing(self, make_file, tmp_path):
        """git 无结果时回退 mtime"""
        make_file(tmp_path / "plan.md", "# Plan\n", age_seconds=120)

        with patch(
            "claude_team.hooks.freshness.run_command",
            return_value=CommandResult(0, stdout=""),
        ):
            report = find_fresh_files(str(tmp_path), ".md", 5)

        assert report.found
        assert report.source == "mtime"
        assert report.files == [str(tmp_path / "plan.md")]

    def test_mtime_fallback_when_git_missing(self, make_file, tmp_path):
        """git 不存在时回退 mtime"""
        make_file(tmp_path / "plan.md", "# Plan\n")

        with patch("claude_team.hooks.freshness.run_command", return_value=GIT_MISSING):
            report = find_fresh_files(str(tmp_path), ".md", 5)

        assert report.source == "mtime"

    def test_git_result_is_authoritative(self, make_file, tmp_path):
        """git 有结果时不再查看 mtime"""
        make_file(tmp_path / "recent.md", "# Recent\n")

        with patch(
            "claude_team.hooks.freshness.run_command",
            return_value=CommandResult(0, stdout="?? specs/tracked-by-git.md"),
        ):
            report = find_fresh_files(str(tmp_path), ".md", 5)

        assert report.source == "git"
        assert report.files == ["specs/tracked-by-git.md"]

    def test_nothing_fresh(self, make_file, tmp_path):
        """两级都没有结果"""
        make_file(tmp_path / "old.md", "# Old\n", age_seconds=3600)

        with patch("claude_team.hooks.freshness.run_command", return_value=NOT_A_REPO):
            report = find_fresh_files(str(tmp_path), ".md", 5)

        assert not report.found
        assert report.source is None


class TestFindNewestFreshFile:
    """测试最新文件选择"""

    def test_picks_max_mtime(self, make_file, tmp_path):
        """选择修改时间最新的文件"""
        make_file(tmp_path / "plan-1.md", "one\n", age_seconds=200)
        make_file(tmp_path / "plan-2.md", "two\n", age_seconds=30)
        make_file(tmp_path / "plan-3.md", "three\n", age_seconds=100)

        assert find_newest_fresh_file(str(tmp_path), ".md", 5) == str(tmp_path / "plan-2.md")

    def test_ignores_files_outside_window(self, make_file, tmp_path):
        """窗口外的文件不参与选择"""
        make_file(tmp_path / "ancient.md", "old\n", age_seconds=7200)
        assert find_newest_fresh_file(str(tmp_path), ".md", 5) is None

    def test_window_boundary_included(self, make_file, tmp_path):
        """年龄恰好等于窗口的文件仍可被选中，而第 2 级检测不包含边界"""
        path = make_file(tmp_path / "plan.md", "x\n")
        stamp = 1_700_000_000
        os.utime(path, (stamp, stamp))
        now = stamp + 5 * 60

        assert find_newest_fresh_file(str(tmp_path), ".md", 5, now=now) == str(path)
        assert recent_files(str(tmp_path), ".md", 5, now=now) == []

    def test_does_not_consult_git(self, make_file, tmp_path):
        """最新文件选择不调用 git"""
        make_file(tmp_path / "plan.md", "x\n")
        with patch("claude_team.hooks.freshness.run_command") as runner:
            find_newest_fresh_file(str(tmp_path), ".md", 5)
        runner.assert_not_called()


def git(*args):
    subprocess.run(
        ["git", "-c", "user.email=dev@example.com", "-c", "user.name=dev", "-c", "commit.gpgsign=false", *args],
        check=True,
        capture_output=True,
    )


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
class TestRealGitRepository:
    """在真实 git 仓库中检测"""

    def test_worktree_modified_file_listed_first(self, make_file):
        """仅工作区修改（" M"）排在第一行时路径完整"""
        git("init", "-q")
        make_file(Path("specs/a.md"), "# A\n")
        git("add", "specs/a.md")
        git("commit", "-q", "-m", "init")

        Path("specs/a.md").write_text("# A\n\nchanged\n")
        make_file(Path("specs/b.md"), "# B\n")

        report = find_fresh_files("specs", ".md", 5)

        assert report.source == "git"
        assert report.files == ["specs/a.md", "specs/b.md"]

    def test_clean_repository_falls_back_to_mtime(self, make_file):
        """已提交且未修改的文件由 git 判定为旧，回退到 mtime"""
        git("init", "-q")
        make_file(Path("specs/a.md"), "# A\n")
        git("add", "specs/a.md")
        git("commit", "-q", "-m", "init")

        report = find_fresh_files("specs", ".md", 5)

        assert report.source == "mtime"
        assert report.files == ["specs/a.md"]
