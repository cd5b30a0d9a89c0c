"""
Claude Team Hooks - 门禁系统

提供 2 个 Hook 点位的门禁：
1. PostToolUse - ruff / ty / eslint / tsc / markdownlint / gitignore
2. Stop - new-file / file-contains

用法：
    from claude_team.hooks import HookType, RuffHook, run_gate

    run_gate([RuffHook()], HookType.POST_TOOL_USE)
"""

from claude_team.hooks.base import (
    BaseHook,
    HookContext,
    HookDecision,
    HookResult,
    HookType,
)
from claude_team.hooks.emitter import (
    configure_logging,
    emit_verdict,
    render_verdict,
    run_gate,
)
from claude_team.hooks.gitignore_hook import GitignoreHook, ensure_gitignore
from claude_team.hooks.lint_hooks import (
    EslintHook,
    FileCheckHook,
    RuffHook,
    TscHook,
    TyHook,
)
from claude_team.hooks.markdown_hook import MarkdownLintHook, check_markdown
from claude_team.hooks.registry import HookRegistry
from claude_team.hooks.stop_hooks import FileContainsHook, NewFileHook

# 文件检查类门禁（post-tool 组合门禁按优先级依次执行）
FILE_CHECK_HOOKS: tuple[type[FileCheckHook], ...] = (
    RuffHook,
    TyHook,
    EslintHook,
    TscHook,
    MarkdownLintHook,
)


def default_post_tool_hooks() -> list[FileCheckHook]:
    """所有文件检查门禁的实例"""
    return [hook_cls() for hook_cls in FILE_CHECK_HOOKS]


__all__ = [
    # Base
    "HookType",
    "HookDecision",
    "HookContext",
    "HookResult",
    "BaseHook",
    # Registry / Emitter
    "HookRegistry",
    "configure_logging",
    "emit_verdict",
    "render_verdict",
    "run_gate",
    # PostToolUse
    "FILE_CHECK_HOOKS",
    "default_post_tool_hooks",
    "RuffHook",
    "TyHook",
    "EslintHook",
    "TscHook",
    "MarkdownLintHook",
    "check_markdown",
    "GitignoreHook",
    "ensure_gitignore",
    # Stop
    "NewFileHook",
    "FileContainsHook",
]
