"""
Claude Team Lint Hooks - PostToolUse 代码检查门禁

Write/Edit 之后对被修改的文件运行外部检查工具：
1. ruff - Python 代码风格（uvx ruff → ruff）
2. ty - Python 类型检查（uvx ty）
3. eslint - JS/TS 代码风格（bunx biome → npx eslint）
4. tsc - TypeScript 类型检查（npx tsc --noEmit，整个项目）

非目标扩展名的文件直接放行，不启动任何子进程。
"""

from __future__ import annotations

import logging
from pathlib import Path

from claude_team.config import GateConfig, get_config
from claude_team.hooks.base import (
    BaseHook,
    HookContext,
    HookResult,
    HookType,
)
from claude_team.hooks.process import CommandResult
from claude_team.hooks.toolchain import (
    FILE_PLACEHOLDER,
    ToolCandidate,
    excerpt,
    run_tool_chain,
)

logger = logging.getLogger(__name__)

PY_EXTENSIONS = frozenset({".py", ".pyi"})
JS_EXTENSIONS = frozenset({".js", ".jsx", ".ts", ".tsx", ".mjs", ".mts"})
TS_EXTENSIONS = frozenset({".ts", ".tsx", ".mts"})


def has_extension(file_path: str, extensions: frozenset[str]) -> bool:
    """扩展名是否属于集合（大小写不敏感）"""
    if not file_path:
        return False
    return Path(file_path).suffix.lower() in extensions


class FileCheckHook(BaseHook):
    """按扩展名过滤的 PostToolUse 门禁基类"""

    extensions: frozenset[str] = frozenset()

    def __init__(self, config: GateConfig | None = None):
        self._config = config

    @property
    def config(self) -> GateConfig:
        return self._config or get_config()

    @property
    def hook_type(self) -> HookType:
        return HookType.POST_TOOL_USE

    def should_run(self, context: HookContext) -> bool:
        """适用性过滤：路径缺失、扩展名不匹配或文件已不存在时跳过"""
        file_path = context.file_path
        if not has_extension(file_path, self.extensions):
            return False
        return Path(file_path).exists()


class ToolChainHook(FileCheckHook):
    """通过外部工具降级链检查文件"""

    candidates: tuple[ToolCandidate, ...] = ()

    def execute(self, context: HookContext) -> HookResult:
        return run_tool_chain(
            self.candidates,
            context.file_path,
            timeout_ms=self.config.timeout_ms,
            max_chars=self.config.output_max_chars,
        )


class RuffHook(ToolChainHook):
    """Python lint（ruff）"""

    extensions = PY_EXTENSIONS
    candidates = (
        ToolCandidate("uvx ruff", ("uvx", "ruff", "check", FILE_PLACEHOLDER), "Ruff lint errors in {file}"),
        ToolCandidate("ruff", ("ruff", "check", FILE_PLACEHOLDER), "Ruff lint errors in {file}"),
    )

    @property
    def name(self) -> str:
        return "ruff"

    @property
    def priority(self) -> int:
        return 10


class TyHook(ToolChainHook):
    """Python 类型检查（ty）"""

    extensions = PY_EXTENSIONS
    candidates = (
        ToolCandidate("uvx ty", ("uvx", "ty", "check", FILE_PLACEHOLDER), "Ty type errors in {file}"),
    )

    @property
    def name(self) -> str:
        return "ty"

    @property
    def priority(self) -> int:
        return 20


class EslintHook(ToolChainHook):
    """JS/TS lint：biome 优先，eslint 兜底"""

    extensions = JS_EXTENSIONS
    candidates = (
        ToolCandidate(
            "biome",
            ("bunx", "biome", "check", "--no-errors-on-unmatched", FILE_PLACEHOLDER),
            "Biome lint errors in {file}",
        ),
        ToolCandidate("eslint", ("npx", "eslint", FILE_PLACEHOLDER), "ESLint errors in {file}"),
    )

    @property
    def name(self) -> str:
        return "eslint"

    @property
    def priority(self) -> int:
        return 30


def summarize_tsc(result: CommandResult, file_path: str, max_chars: int, max_lines: int = 10) -> str:
    """只保留提到该文件或包含 "error TS" 的行，没有则回退普通截断"""
    relevant = [
        line for line in result.output.split("\n")
        if file_path in line or "error TS" in line
    ]
    if relevant:
        return "\n".join(relevant[:max_lines])
    return excerpt(result, max_chars)


class TscHook(ToolChainHook):
    """TypeScript 类型检查（检查整个项目）"""

    extensions = TS_EXTENSIONS

    @property
    def candidates(self) -> tuple[ToolCandidate, ...]:
        max_lines = self.config.tsc_max_lines
        return (
            ToolCandidate(
                "tsc",
                ("npx", "tsc", "--noEmit"),
                "TypeScript errors affecting {file}",
                summarize=lambda result, file_path, max_chars: summarize_tsc(
                    result, file_path, max_chars, max_lines
                ),
            ),
        )

    @property
    def name(self) -> str:
        return "tsc"

    @property
    def priority(self) -> int:
        return 40


__all__ = [
    "PY_EXTENSIONS",
    "JS_EXTENSIONS",
    "TS_EXTENSIONS",
    "has_extension",
    "FileCheckHook",
    "ToolChainHook",
    "RuffHook",
    "TyHook",
    "EslintHook",
    "TscHook",
    "summarize_tsc",
]
