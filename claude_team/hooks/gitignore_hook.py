"""
Claude Team Gitignore Hook - 生成目录加入 .gitignore

Write 之后确保输出目录（默认 specs/）写在项目根目录的 .gitignore 里。
幂等：已有 "specs/" 或 "specs" 行时不再追加；标记注释只写一次。
任何读写错误都放行，维护性工作失败不能阻止 agent。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from claude_team.hooks.base import (
    BaseHook,
    HookContext,
    HookResult,
    HookType,
)

logger = logging.getLogger(__name__)

GITIGNORE_FILENAME = ".gitignore"
DEFAULT_MARKER = "# Generated output"


def to_entry(directory: str) -> str:
    """规范化为带结尾斜杠的形式"""
    return directory.rstrip("/") + "/"


def missing_entries(existing_content: str, directories: Sequence[str]) -> list[str]:
    """尚未被 .gitignore 覆盖的目录条目（去重、保持顺序）"""
    existing_lines = {line.strip() for line in existing_content.split("\n")}
    to_add: list[str] = []
    for directory in directories:
        entry = to_entry(directory)
        bare = entry.rstrip("/")
        if entry in existing_lines or bare in existing_lines or entry in to_add:
            continue
        to_add.append(entry)
    return to_add


def build_block(existing_content: str, entries: Sequence[str], marker: str = DEFAULT_MARKER) -> str:
    """构造要追加的文本块"""
    block = ""
    if existing_content and not existing_content.endswith("\n"):
        block += "\n"
    if marker not in existing_content:
        # 已有内容时用空行与前文分隔
        block += f"\n{marker}\n" if existing_content else f"{marker}\n"
    block += "".join(f"{entry}\n" for entry in entries)
    return block


def ensure_gitignore(
    directories: Sequence[str],
    project_root: Optional[Path] = None,
    marker: str = DEFAULT_MARKER,
) -> list[str]:
    """确保 directories 都在 .gitignore 中

    Returns:
        本次新增的条目（已全部覆盖时为空列表）

    Raises:
        OSError: 读写失败（由 Hook 转成放行）
    """
    gitignore_path = (project_root or Path.cwd()) / GITIGNORE_FILENAME

    existed = gitignore_path.exists()
    existing_content = gitignore_path.read_text(encoding="utf-8") if existed else ""

    entries = missing_entries(existing_content, directories)
    if not entries:
        logger.debug(f"{gitignore_path} already covers {', '.join(directories)}")
        return []

    block = build_block(existing_content, entries, marker)
    if existed:
        with open(gitignore_path, "a", encoding="utf-8") as f:
            f.write(block)
    else:
        gitignore_path.write_text(block, encoding="utf-8")

    logger.info(f"Added to {gitignore_path}: {', '.join(entries)}")
    return entries


class GitignoreHook(BaseHook):
    """PostToolUse 维护门禁：总是放行"""

    def __init__(
        self,
        directories: Sequence[str] = ("specs",),
        project_root: Optional[Path] = None,
        marker: str = DEFAULT_MARKER,
    ):
        self.directories = list(directories) or ["specs"]
        self.project_root = project_root
        self.marker = marker

    @property
    def hook_type(self) -> HookType:
        return HookType.POST_TOOL_USE

    @property
    def name(self) -> str:
        return "gitignore"

    def execute(self, context: HookContext) -> HookResult:
        try:
            added = ensure_gitignore(self.directories, self.project_root, self.marker)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not update {GITIGNORE_FILENAME}: {e}")
            return HookResult.allow()

        result = HookResult.allow()
        result.metadata["added"] = added
        return result


__all__ = [
    "DEFAULT_MARKER",
    "GITIGNORE_FILENAME",
    "GitignoreHook",
    "build_block",
    "ensure_gitignore",
    "missing_entries",
    "to_entry",
]
