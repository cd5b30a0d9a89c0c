"""
Claude Team Configuration - 配置管理模块

支持以下配置来源（优先级从高到低）：
1. 命令行参数（由 CLI 直接传给门禁，不经过本模块）
2. 环境变量（CLAUDE_TEAM_ 前缀）
3. 项目配置文件（./.claude-team/config.yaml）
4. 全局配置文件（~/.claude-team/config.yaml）
5. 默认值

用法：
    from claude_team.config import get_config
    config = get_config()
    print(config.timeout_ms)
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

# 默认全局配置目录
DEFAULT_GLOBAL_CONFIG_DIR = Path.home() / ".claude-team"
DEFAULT_PROJECT_CONFIG_DIR = Path(".claude-team")


class ConfigLoadError(Exception):
    """配置加载错误"""

    pass


@dataclass
class GateConfig:
    """门禁配置"""

    # === 外部工具 ===
    timeout_ms: int = 30_000  # 单个候选工具的墙钟超时
    output_max_chars: int = 500  # block reason 中嵌入的工具输出上限
    tsc_max_lines: int = 10  # tsc 输出过滤后保留的最大行数

    # === Stop 门禁默认参数 ===
    directory: str = "specs"
    extension: str = ".md"
    max_age_minutes: int = 5

    # === .gitignore 维护 ===
    gitignore_marker: str = "# Generated output"

    # === 日志（只写 stderr） ===
    log_level: str = "WARNING"


_INT_KEYS = ("timeout_ms", "output_max_chars", "tsc_max_lines", "max_age_minutes")

_ENV_MAPPING = {
    "timeout_ms": "CLAUDE_TEAM_TIMEOUT_MS",
    "output_max_chars": "CLAUDE_TEAM_OUTPUT_MAX_CHARS",
    "max_age_minutes": "CLAUDE_TEAM_MAX_AGE_MINUTES",
    "directory": "CLAUDE_TEAM_DIRECTORY",
    "extension": "CLAUDE_TEAM_EXTENSION",
    "log_level": "CLAUDE_TEAM_LOG_LEVEL",
}


def _load_yaml_config(path: Path) -> dict:
    """
    加载 YAML 配置文件。

    Args:
        path: 配置文件路径

    Returns:
        配置字典，如果文件不存在则返回空字典

    Raises:
        ConfigLoadError: YAML 解析失败或其他错误
    """
    if not path.exists():
        logger.debug(f"Config file not found: {path}")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except FileNotFoundError:
        # 文件在 exists() 检查后被删除（罕见情况）
        logger.debug(f"Config file disappeared: {path}")
        return {}
    except yaml.YAMLError as e:
        logger.error(f"Invalid YAML in {path}: {e}")
        raise ConfigLoadError(f"Invalid YAML in {path}: {e}") from e
    except Exception as e:
        logger.error(f"Failed to load config from {path}: {e}")
        raise ConfigLoadError(f"Failed to load config from {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigLoadError(f"Config root in {path} must be a mapping, got {type(content).__name__}")
    return content


def load_config(
    config_dir: Optional[Path] = None,
    project_dir: Optional[Path] = None,
) -> GateConfig:
    """
    加载配置

    Args:
        config_dir: 全局配置目录（默认 ~/.claude-team）
        project_dir: 项目配置目录（默认 ./.claude-team）

    Returns:
        配置对象

    Raises:
        ConfigLoadError: 配置文件损坏或数值非法
    """
    global_cfg = _load_yaml_config((config_dir or DEFAULT_GLOBAL_CONFIG_DIR) / "config.yaml")
    project_cfg = _load_yaml_config((project_dir or DEFAULT_PROJECT_CONFIG_DIR) / "config.yaml")

    # 项目覆盖全局
    merged = {**global_cfg, **project_cfg}

    for config_key, env_key in _ENV_MAPPING.items():
        env_value = os.getenv(env_key)
        if env_value:
            merged[config_key] = env_value

    for key in _INT_KEYS:
        if key in merged:
            try:
                merged[key] = int(merged[key])
            except (TypeError, ValueError) as e:
                raise ConfigLoadError(f"Invalid integer value for {key}: {merged[key]!r}") from e

    known = {f.name for f in fields(GateConfig)}
    unknown = sorted(set(merged) - known)
    if unknown:
        logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")

    return GateConfig(**{k: v for k, v in merged.items() if k in known})


# === 全局单例 ===
_config: Optional[GateConfig] = None


def get_config(force_reload: bool = False) -> GateConfig:
    """
    获取配置单例

    门禁进程里配置损坏不能导致崩溃：记录警告后使用默认值。
    """
    global _config

    if _config is None or force_reload:
        try:
            _config = load_config()
        except ConfigLoadError as e:
            logger.warning(f"Using default config: {e}")
            _config = GateConfig()

    return _config


def reset_config():
    """重置配置单例（用于测试）"""
    global _config
    _config = None


__all__ = [
    "ConfigLoadError",
    "GateConfig",
    "get_config",
    "load_config",
    "reset_config",
]
