"""
Tool Fallback Chain - 外部工具降级链

同一检查类别可能有多个可互换的外部工具（如 biome / eslint）。
按顺序尝试，第一个"找到"的工具决定结果，无论它通过还是失败；
全部找不到时放行（fail-open），开发环境缺少工具不能阻止 agent。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from claude_team.hooks.base import HookResult
from claude_team.hooks.process import DEFAULT_TIMEOUT_MS, CommandResult, run_command

logger = logging.getLogger(__name__)

FILE_PLACEHOLDER = "{file}"
DEFAULT_MAX_CHARS = 500


def excerpt(result: CommandResult, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """stdout 前 max_chars 个字符，stdout 为空时取 stderr"""
    return result.output[:max_chars]


@dataclass(frozen=True)
class ToolCandidate:
    """降级链中的一个候选工具

    Attributes:
        label: 工具名称（日志/doctor 展示）
        args: 命令行，"{file}" 会被替换为目标文件路径
        reason_template: block reason 首行，可用 {file}
        summarize: 自定义失败输出摘要 (result, file_path, max_chars) -> str
    """
    label: str
    args: tuple[str, ...]
    reason_template: str
    summarize: Optional[Callable[[CommandResult, str, int], str]] = None

    @property
    def executable(self) -> str:
        return self.args[0]

    def command(self, file_path: str) -> list[str]:
        return [file_path if arg == FILE_PLACEHOLDER else arg for arg in self.args]

    def block_reason(self, result: CommandResult, file_path: str, max_chars: int) -> str:
        if self.summarize is not None:
            output = self.summarize(result, file_path, max_chars)
        else:
            output = excerpt(result, max_chars)
        return f"{self.reason_template.format(file=file_path)}:\n{output}"


def run_tool_chain(
    candidates: Sequence[ToolCandidate],
    file_path: str,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    max_chars: int = DEFAULT_MAX_CHARS,
) -> HookResult:
    """依次尝试候选工具，第一个找到的工具给出结论

    Returns:
        通过或全部缺失 -> allow；找到的工具失败（含超时）-> block
    """
    for candidate in candidates:
        result = run_command(candidate.command(file_path), timeout_ms=timeout_ms)

        if not result.found:
            logger.debug(f"{candidate.label} not found, trying next candidate")
            continue

        if result.ok:
            logger.debug(f"{candidate.label} passed for {file_path}")
            return HookResult(metadata={"tool": candidate.label})

        logger.info(f"{candidate.label} failed for {file_path} (exit={result.exit_code})")
        blocked = HookResult.block(candidate.block_reason(result, file_path, max_chars))
        blocked.metadata["tool"] = candidate.label
        return blocked

    logger.debug(f"No tool available for {file_path}, passing through")
    return HookResult.allow()


__all__ = [
    "FILE_PLACEHOLDER",
    "ToolCandidate",
    "excerpt",
    "run_tool_chain",
]
