"""
File Freshness Detector - 本回合新建/修改文件检测

两级策略：
1. git status --porcelain（权威）：untracked / added / modified 且扩展名匹配
2. 修改时间（兜底）：mtime 距今小于 max_age_minutes

git 查询失败（非零退出或 git 不存在）不是错误，直接落到第 2 级。
每次调用都重新计算，不缓存。
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from claude_team.hooks.process import run_command

logger = logging.getLogger(__name__)

# porcelain 状态码中表示"本回合产出"的字符
FRESH_STATUS_CODES = frozenset("?AM")


@dataclass(frozen=True)
class FreshnessRecord:
    """一个文件及其是否新鲜"""
    path: str
    is_fresh: bool
    source: str  # "git" | "mtime"


@dataclass
class FreshnessReport:
    """检测结果；files 为空表示没有新文件"""
    source: Optional[str] = None
    files: list[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return bool(self.files)


def parse_porcelain(output: str, extension: str) -> list[FreshnessRecord]:
    """解析 git status --porcelain 输出

    每行格式：XY<空格>path，XY 为两字符状态码。
    """
    records: list[FreshnessRecord] = []
    for line in output.split("\n"):
        if not line.strip():
            continue
        status = line[:2]
        file_path = line[3:].strip()
        fresh = bool(FRESH_STATUS_CODES & set(status)) and file_path.endswith(extension)
        records.append(FreshnessRecord(path=file_path, is_fresh=fresh, source="git"))
    return records


def git_fresh_files(directory: str, extension: str) -> list[str]:
    """第 1 级：git 报告的新文件；查询失败返回空列表"""
    # 行首空格是状态码的一部分（" M" = 仅工作区修改），不能 strip
    result = run_command(["git", "status", "--porcelain", directory], strip=False)
    if result.exit_code != 0:
        logger.debug(f"git status unavailable for {directory} (exit={result.exit_code})")
        return []
    return [r.path for r in parse_porcelain(result.stdout, extension) if r.is_fresh]


def _candidate_files(
    directory: str,
    extension: str,
    max_age_minutes: float,
    now: float,
    inclusive: bool = False,
):
    """目录下扩展名匹配且在时间窗口内的文件，产出 (path, mtime)

    inclusive=True 时文件年龄恰好等于窗口也算在内。
    """
    max_age_seconds = max_age_minutes * 60
    try:
        entries = sorted(Path(directory).iterdir())
    except OSError as e:
        logger.debug(f"Cannot list {directory}: {e}")
        return

    for entry in entries:
        if not entry.name.endswith(extension):
            continue
        try:
            if not entry.is_file():
                continue
            mtime = entry.stat().st_mtime
        except OSError:
            continue
        age = now - mtime
        if age < max_age_seconds or (inclusive and age == max_age_seconds):
            yield str(entry), mtime


def recent_files(
    directory: str,
    extension: str,
    max_age_minutes: float,
    now: Optional[float] = None,
) -> list[str]:
    """第 2 级：按修改时间判断的新文件"""
    now = time.time() if now is None else now
    return [path for path, _ in _candidate_files(directory, extension, max_age_minutes, now)]


def find_fresh_files(directory: str, extension: str, max_age_minutes: float) -> FreshnessReport:
    """两级检测：git 有结果时以 git 为准，否则回退 mtime"""
    git_files = git_fresh_files(directory, extension)
    if git_files:
        return FreshnessReport(source="git", files=git_files)

    mtime_files = recent_files(directory, extension, max_age_minutes)
    if mtime_files:
        return FreshnessReport(source="mtime", files=mtime_files)

    return FreshnessReport()


def find_newest_fresh_file(
    directory: str,
    extension: str,
    max_age_minutes: float,
    now: Optional[float] = None,
) -> Optional[str]:
    """时间窗口内修改时间最新的文件（只看 mtime，不查 git；窗口边界包含在内）"""
    now = time.time() if now is None else now
    newest: Optional[tuple[str, float]] = None
    for path, mtime in _candidate_files(directory, extension, max_age_minutes, now, inclusive=True):
        if newest is None or mtime > newest[1]:
            newest = (path, mtime)
    return newest[0] if newest else None


__all__ = [
    "FreshnessRecord",
    "FreshnessReport",
    "find_fresh_files",
    "find_newest_fresh_file",
    "git_fresh_files",
    "parse_porcelain",
    "recent_files",
]
