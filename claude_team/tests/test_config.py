"""
Tests for Configuration.

测试配置加载优先级：默认值 < 全局 < 项目 < 环境变量
"""

from pathlib import Path

import pytest

from claude_team.config import (
    ConfigLoadError,
    GateConfig,
    get_config,
    load_config,
    reset_config,
)


def write_config(directory: Path, content: str) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "config.yaml").write_text(content, encoding="utf-8")


class TestLoadConfig:
    """测试 load_config"""

    def test_defaults(self, tmp_path):
        """没有配置文件时使用默认值"""
        config = load_config(tmp_path / "global", tmp_path / "project")
        assert config == GateConfig()
        assert config.timeout_ms == 30_000
        assert config.gitignore_marker == "# Generated output"

    def test_global_file(self, tmp_path):
        """读取全局配置"""
        write_config(tmp_path / "global", "timeout_ms: 5000\ndirectory: plans\n")

        config = load_config(tmp_path / "global", tmp_path / "project")

        assert config.timeout_ms == 5000
        assert config.directory == "plans"

    def test_project_overrides_global(self, tmp_path):
        """项目配置覆盖全局配置"""
        write_config(tmp_path / "global", "directory: plans\nextension: .txt\n")
        write_config(tmp_path / "project", "directory: specs-out\n")

        config = load_config(tmp_path / "global", tmp_path / "project")

        assert config.directory == "specs-out"
        assert config.extension == ".txt"

    def test_env_overrides_files(self, tmp_path, monkeypatch):
        """环境变量覆盖配置文件"""
        write_config(tmp_path / "project", "timeout_ms: 5000\n")
        monkeypatch.setenv("CLAUDE_TEAM_TIMEOUT_MS", "750")
        monkeypatch.setenv("CLAUDE_TEAM_LOG_LEVEL", "DEBUG")

        config = load_config(tmp_path / "global", tmp_path / "project")

        assert config.timeout_ms == 750
        assert config.log_level == "DEBUG"

    def test_empty_file(self, tmp_path):
        """空配置文件等同于默认值"""
        write_config(tmp_path / "global", "")
        assert load_config(tmp_path / "global", tmp_path / "project") == GateConfig()

    def test_unknown_keys_ignored(self, tmp_path):
        """未知配置项被忽略"""
        write_config(tmp_path / "global", "unknown_key: 1\nmax_age_minutes: 10\n")

        config = load_config(tmp_path / "global", tmp_path / "project")

        assert config.max_age_minutes == 10
        assert not hasattr(config, "unknown_key")

    def test_invalid_yaml(self, tmp_path):
        """YAML 语法错误抛出 ConfigLoadError"""
        write_config(tmp_path / "global", "timeout_ms: [unclosed\n")

        with pytest.raises(ConfigLoadError):
            load_config(tmp_path / "global", tmp_path / "project")

    def test_non_mapping_root(self, tmp_path):
        """根节点不是映射时抛出 ConfigLoadError"""
        write_config(tmp_path / "global", "- a\n- b\n")

        with pytest.raises(ConfigLoadError):
            load_config(tmp_path / "global", tmp_path / "project")

    def test_invalid_integer(self, tmp_path, monkeypatch):
        """整数配置项非法时抛出 ConfigLoadError"""
        monkeypatch.setenv("CLAUDE_TEAM_TIMEOUT_MS", "soon")

        with pytest.raises(ConfigLoadError):
            load_config(tmp_path / "global", tmp_path / "project")


class TestGetConfig:
    """测试配置单例"""

    def test_cached(self):
        """get_config 返回同一个实例"""
        assert get_config() is get_config()

    def test_reset(self, monkeypatch):
        """reset_config 后重新加载"""
        first = get_config()
        monkeypatch.setenv("CLAUDE_TEAM_EXTENSION", ".rst")

        assert get_config() is first
        reset_config()
        assert get_config().extension == ".rst"

    def test_reads_project_directory(self):
        """读取当前目录下的项目配置"""
        write_config(Path(".claude-team"), "output_max_chars: 200\n")
        assert get_config().output_max_chars == 200

    def test_broken_config_falls_back_to_defaults(self):
        """配置损坏时 get_config 回退默认值"""
        write_config(Path(".claude-team"), "timeout_ms: [unclosed\n")
        assert get_config() == GateConfig()
