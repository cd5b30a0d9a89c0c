"""
Pytest configuration and fixtures for claude_team tests.

保证测试隔离：
1. 每个测试在独立的临时目录中运行（.gitignore / .claude-team 不会写到仓库）
2. 屏蔽用户的全局配置和 CLAUDE_TEAM_* 环境变量
3. 每个测试前后重置配置单例
"""

import os
import time
from pathlib import Path

import pytest

from claude_team import config as config_module


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """在临时目录中运行，并屏蔽全局配置"""
    for key in list(os.environ):
        if key.startswith("CLAUDE_TEAM_"):
            monkeypatch.delenv(key, raising=False)

    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setattr(config_module, "DEFAULT_GLOBAL_CONFIG_DIR", tmp_path / "global-config")

    config_module.reset_config()
    yield workdir
    config_module.reset_config()


@pytest.fixture
def make_file():
    """创建文件并可选地把修改时间设到 age_seconds 之前"""

    def _make(path: Path, content: str = "", age_seconds: float = 0) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        if age_seconds:
            stamp = time.time() - age_seconds
            os.utime(path, (stamp, stamp))
        return path

    return _make
