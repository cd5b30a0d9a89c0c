"""
Verdict Emitter - 门禁进程边界

一次门禁调用的完整流程：
    读取事件 -> HookRegistry（适用性过滤 + 执行） -> 渲染 -> stdout 输出一行 JSON

约定：
- stdout 只输出一行 JSON（verdict），诊断信息写 stderr
- 任何异常都在这里转成放行，退出码始终为 0
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Optional, Sequence, TextIO

from claude_team.hooks.base import (
    BaseHook,
    HookContext,
    HookResult,
    HookType,
)
from claude_team.hooks.registry import HookRegistry
from claude_team.models import HookEvent, PostToolVerdict, StopVerdict, parse_event

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    """日志只写 stderr，stdout 留给 verdict"""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def read_stdin(stream: Optional[TextIO] = None) -> str:
    """读取 stdin 全部内容；交互终端或读取失败时返回空字符串"""
    stream = sys.stdin if stream is None else stream
    if stream is None:
        return ""
    try:
        if stream.isatty():
            return ""
        return stream.read()
    except (OSError, ValueError) as e:
        logger.debug(f"Cannot read stdin: {e}")
        return ""


def build_context(hook_type: HookType, event: HookEvent) -> HookContext:
    return HookContext(
        hook_type=hook_type,
        tool_name=event.tool_name,
        tool_input=event.tool_input_dict(),
        session_id=event.session_id,
    )


def render_verdict(hook_type: HookType, result: HookResult) -> dict[str, Any]:
    """把内部 allow/block 结果渲染为对应 Hook 点位的 JSON 形状"""
    if hook_type == HookType.STOP:
        if result.blocked:
            verdict = StopVerdict(result="block", reason=result.reason or "")
        else:
            verdict = StopVerdict(result="continue", message=result.message or "")
        return verdict.model_dump(exclude_none=True)

    if result.blocked:
        return PostToolVerdict(decision="block", reason=result.reason or "").model_dump(exclude_none=True)
    return PostToolVerdict().model_dump(exclude_none=True)


def emit_verdict(hook_type: HookType, result: HookResult, stream: Optional[TextIO] = None) -> dict[str, Any]:
    """输出唯一一行 verdict JSON"""
    verdict = render_verdict(hook_type, result)
    print(json.dumps(verdict), file=stream or sys.stdout, flush=True)
    return verdict


def run_gate(
    hooks: Sequence[BaseHook],
    hook_type: HookType,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> dict[str, Any]:
    """执行一次门禁调用

    PostToolUse 从 stdin 解析事件；Stop 只把 stdin 读完丢弃，避免上游阻塞。
    """
    result = HookResult.allow()
    try:
        raw = read_stdin(stdin)
        event = parse_event(raw) if hook_type == HookType.POST_TOOL_USE else HookEvent()
        context = build_context(hook_type, event)

        registry = HookRegistry(list(hooks))
        result = registry.execute_single(hook_type, context)
    except Exception as e:
        logger.error(f"Gate error: {e}", exc_info=True)
        result = HookResult.allow()

    return emit_verdict(hook_type, result, stdout)


__all__ = [
    "build_context",
    "configure_logging",
    "emit_verdict",
    "read_stdin",
    "render_verdict",
    "run_gate",
]
