"""
Claude Team Stop Hooks - 回合结束门禁

1. NewFileHook - 本回合必须在目标目录产出新文件（如 specs/ 下的计划）
2. FileContainsHook - 最新产出的文件必须包含所有必需片段（如计划的必需章节）

用法：
    claude-team hook new-file --directory specs --extension .md
    claude-team hook file-contains --directory specs \\
        --contains '## Objective' --contains '## Risks'
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from claude_team.hooks.base import (
    BaseHook,
    HookContext,
    HookResult,
    HookType,
)
from claude_team.hooks.freshness import find_fresh_files, find_newest_fresh_file

logger = logging.getLogger(__name__)


class StopHook(BaseHook):
    """Stop 门禁基类：检查某个目录下的某类文件"""

    def __init__(self, directory: str = "specs", extension: str = ".md", max_age_minutes: float = 5):
        self.directory = directory
        self.extension = extension
        self.max_age_minutes = max_age_minutes

    @property
    def hook_type(self) -> HookType:
        return HookType.STOP


class NewFileHook(StopHook):
    """要求本回合在 directory 下新建或修改过 extension 文件"""

    @property
    def name(self) -> str:
        return "new-file"

    def execute(self, context: HookContext) -> HookResult:
        report = find_fresh_files(self.directory, self.extension, self.max_age_minutes)

        if report.source == "git":
            return HookResult.allow(f"New file(s) found: {', '.join(report.files)}")
        if report.source == "mtime":
            return HookResult.allow(f"Recent file(s) found: {', '.join(report.files)}")

        logger.info(f"No fresh {self.extension} file in {self.directory}")
        return HookResult.block(
            f"BLOCKED: No new {self.extension} file found in {self.directory}/. "
            f"You must create a file in {self.directory}/ before completing."
        )


def find_missing(content: str, required: Sequence[str]) -> list[str]:
    """返回 content 中缺失的必需片段（字面量、大小写敏感，保持原顺序）"""
    return [item for item in required if item not in content]


class FileContainsHook(StopHook):
    """要求最新的新鲜文件包含所有必需片段"""

    def __init__(
        self,
        directory: str = "specs",
        extension: str = ".md",
        max_age_minutes: float = 5,
        contains: Sequence[str] = (),
    ):
        super().__init__(directory, extension, max_age_minutes)
        self.contains = list(contains)

    @property
    def name(self) -> str:
        return "file-contains"

    def execute(self, context: HookContext) -> HookResult:
        if not self.contains:
            return HookResult.allow("No --contains checks specified, passing.")

        newest = find_newest_fresh_file(self.directory, self.extension, self.max_age_minutes)
        if newest is None:
            return HookResult.block(
                f"BLOCKED: No recent {self.extension} file found in {self.directory}/. "
                "Create the file first."
            )

        try:
            content = Path(newest).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return HookResult.block(f"BLOCKED: Cannot read {newest}: {e}")

        missing = find_missing(content, self.contains)
        if missing:
            missing_list = "\n".join(f'  - "{item}"' for item in missing)
            return HookResult.block(
                f"BLOCKED: {newest} is missing required sections:\n{missing_list}\n\n"
                "Add these sections to the file before completing."
            )

        return HookResult.allow(f"All {len(self.contains)} required sections found in {newest}.")


__all__ = [
    "StopHook",
    "NewFileHook",
    "FileContainsHook",
    "find_missing",
]
