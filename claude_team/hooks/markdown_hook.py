"""
Claude Team Markdown Hook - PostToolUse 文档结构检查

不依赖外部工具的内置检查（全部执行，不短路）：
1. 空文件
2. 标题层级跳级（h1 -> h3）
3. 连续 3 个及以上空行
4. 文件末尾缺少换行
"""

from __future__ import annotations

import logging
from pathlib import Path

from claude_team.hooks.base import HookContext, HookResult
from claude_team.hooks.lint_hooks import FileCheckHook

logger = logging.getLogger(__name__)

MD_EXTENSIONS = frozenset({".md", ".mdx", ".markdown"})

MAX_HEADING_LEVEL = 6
MAX_BLANK_LINES = 2


def heading_level(line: str) -> int:
    """返回标题级别，不是标题时返回 0

    只认 1-6 个 "#" 后跟空格的行；"#!" 开头和只有 "#" 的行不算标题。
    """
    stripped = line.lstrip()
    if not stripped.startswith("#") or stripped.startswith("#!"):
        return 0

    level = len(stripped) - len(stripped.lstrip("#"))
    if level <= MAX_HEADING_LEVEL and len(stripped) > level and stripped[level] == " ":
        return level
    return 0


def check_markdown(content: str) -> list[str]:
    """检查 markdown 内容，返回问题列表（空列表表示通过）"""
    if not content.strip():
        return ["File is empty"]

    issues: list[str] = []
    lines = content.split("\n")

    prev_level = 0
    for lineno, line in enumerate(lines, start=1):
        level = heading_level(line)
        if not level:
            continue
        if prev_level > 0 and level > prev_level + 1:
            issues.append(f"Line {lineno}: Heading level skipped (h{prev_level} -> h{level})")
        prev_level = level

    blank_count = 0
    for lineno, line in enumerate(lines, start=1):
        if line.strip():
            blank_count = 0
            continue
        blank_count += 1
        if blank_count > MAX_BLANK_LINES:
            issues.append(f"Line {lineno}: Multiple consecutive blank lines")
            break

    if not content.endswith("\n"):
        issues.append("File does not end with a newline")

    return issues


def format_issues(file_path: str, issues: list[str]) -> str:
    issues_text = "\n".join(f"- {issue}" for issue in issues)
    return f"Markdown issues found in {file_path}:\n{issues_text}"


class MarkdownLintHook(FileCheckHook):
    """Markdown 结构检查门禁"""

    extensions = MD_EXTENSIONS

    @property
    def name(self) -> str:
        return "markdownlint"

    @property
    def priority(self) -> int:
        return 50

    def execute(self, context: HookContext) -> HookResult:
        file_path = context.file_path
        try:
            content = Path(file_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            # 读不到文件不是文档结构问题，放行
            logger.warning(f"Cannot read {file_path}: {e}")
            return HookResult.allow()

        issues = check_markdown(content)
        if issues:
            return HookResult.block(format_issues(file_path, issues))
        return HookResult.allow()


__all__ = [
    "MD_EXTENSIONS",
    "MarkdownLintHook",
    "check_markdown",
    "format_issues",
    "heading_level",
]
