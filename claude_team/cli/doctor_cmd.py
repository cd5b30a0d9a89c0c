"""
claude-team doctor / gates - 环境自诊断

目标：在配置 hooks 之前，看清楚每个门禁的降级链在当前机器上会落到哪个工具。
只做展示，不影响任何门禁的结论。
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from claude_team.config import ConfigLoadError, GateConfig, load_config
from claude_team.hooks import (
    GitignoreHook,
    HookType,
    NewFileHook,
    FileContainsHook,
    default_post_tool_hooks,
)
from claude_team.hooks.lint_hooks import ToolChainHook

console = Console()


@dataclass(frozen=True)
class CheckResult:
    name: str
    ok: bool
    detail: str
    fix: Optional[str] = None


def resolve_chain(hook: ToolChainHook) -> Optional[str]:
    """降级链中第一个能在 PATH 上找到的候选工具"""
    for candidate in hook.candidates:
        if shutil.which(candidate.executable):
            return candidate.label
    return None


def collect_checks(config: GateConfig) -> list[CheckResult]:
    results: list[CheckResult] = []

    git = shutil.which("git")
    results.append(
        CheckResult(
            name="git",
            ok=git is not None,
            detail=git or "未找到",
            fix=None if git else "new-file 门禁将只使用修改时间判断",
        )
    )

    for hook in default_post_tool_hooks():
        if not isinstance(hook, ToolChainHook):
            results.append(CheckResult(name=hook.name, ok=True, detail="内置检查"))
            continue
        selected = resolve_chain(hook)
        labels = " → ".join(c.label for c in hook.candidates)
        results.append(
            CheckResult(
                name=hook.name,
                ok=selected is not None,
                detail=f"使用 {selected}（{labels}）" if selected else f"均未找到（{labels}）",
                fix=None if selected else "门禁将直接放行（fail-open）",
            )
        )

    results.append(
        CheckResult(
            name="timeout",
            ok=config.timeout_ms > 0,
            detail=f"{config.timeout_ms} ms",
            fix=None if config.timeout_ms > 0 else "设置 CLAUDE_TEAM_TIMEOUT_MS 为正整数",
        )
    )
    return results


def _render_results(results: list[CheckResult]) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("检查项", style="cyan", no_wrap=True)
    table.add_column("结果", width=6)
    table.add_column("详情", overflow="fold")
    table.add_column("说明", overflow="fold")

    for r in results:
        table.add_row(
            r.name,
            "[green]OK[/green]" if r.ok else "[yellow]MISS[/yellow]",
            r.detail,
            r.fix or "-",
        )

    console.print()
    console.print(table)


def doctor_command():
    """
    检查外部工具可用性，显示每个门禁实际会使用的工具。
    """
    console.print(
        Panel.fit(
            "[bold blue]Claude Team[/bold blue] - doctor 自诊断",
            border_style="blue",
        )
    )

    try:
        config = load_config()
    except ConfigLoadError as e:
        console.print(f"[red]配置文件错误:[/red] {e}")
        console.print("[yellow]门禁运行时会使用默认配置[/yellow]")
        config = GateConfig()

    _render_results(collect_checks(config))


def gates_command():
    """
    列出所有门禁及其 Hook 点位。
    """
    table = Table(title="门禁列表", show_header=True, header_style="bold")
    table.add_column("门禁", style="cyan", no_wrap=True)
    table.add_column("Hook 点位")
    table.add_column("扩展名 / 参数", overflow="fold")
    table.add_column("工具链", overflow="fold")

    for hook in default_post_tool_hooks():
        chain = " → ".join(c.label for c in hook.candidates) if isinstance(hook, ToolChainHook) else "内置"
        table.add_row(hook.name, hook.hook_type.value, " ".join(sorted(hook.extensions)), chain)

    for hook, params in (
        (GitignoreHook(), "--directory"),
        (NewFileHook(), "--directory --extension --max-age"),
        (FileContainsHook(), "--directory --extension --max-age --contains"),
    ):
        chain = "git status → mtime" if isinstance(hook, NewFileHook) else "-"
        table.add_row(hook.name, hook.hook_type.value, params, chain)

    table.add_row("post-tool", HookType.POST_TOOL_USE.value, "所有文件检查门禁", "第一个 block 生效")
    console.print(table)


__all__ = ["collect_checks", "doctor_command", "gates_command", "resolve_chain"]
