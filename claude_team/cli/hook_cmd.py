"""
Hook CLI Commands - 门禁入口

每个子命令是一次独立的门禁调用，在 .claude/settings.json 中这样配置：
- PostToolUse: claude-team hook ruff / ty / eslint / tsc / markdownlint / post-tool
- PostToolUse: claude-team hook gitignore --directory specs
- Stop: claude-team hook new-file --directory specs --extension .md
- Stop: claude-team hook file-contains --directory specs --contains '## Objective'

stdout 只输出一行 verdict JSON，退出码始终为 0。
"""

import logging
from typing import Optional

import click
import typer
from typer.core import TyperGroup

from claude_team.config import GateConfig, get_config
from claude_team.hooks import (
    EslintHook,
    FileContainsHook,
    GitignoreHook,
    HookResult,
    HookType,
    MarkdownLintHook,
    NewFileHook,
    RuffHook,
    TscHook,
    TyHook,
    configure_logging,
    default_post_tool_hooks,
    emit_verdict,
    run_gate,
)
from claude_team.hooks.emitter import read_stdin

logger = logging.getLogger(__name__)

STOP_GATES = frozenset({"new-file", "file-contains"})

# 未知参数当作多余参数忽略，settings.json 里的拼写错误不能让门禁失败
LENIENT_CONTEXT = {"allow_extra_args": True, "ignore_unknown_options": True}


class HookGroup(TyperGroup):
    """参数错误（缺少取值、未知门禁）也输出 fail-open verdict，退出码保持 0"""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            # 子命令解析出错时 invoked_subcommand 已经设置；未知门禁时为 None
            gate = ctx.invoked_subcommand or ""
            hook_type = HookType.STOP if gate in STOP_GATES else HookType.POST_TOOL_USE
            logger.warning(f"Invalid arguments for hook {gate or '?'}: {e.format_message()}")

            read_stdin()
            emit_verdict(hook_type, HookResult.allow(f"Invalid arguments ignored: {e.format_message()}"))
            return None


hook_app = typer.Typer(
    name="hook",
    help="运行单个门禁（供 Claude Code hooks 调用）",
    add_completion=False,
    cls=HookGroup,
    context_settings={"ignore_unknown_options": True},
)

DIRECTORY_HELP = "目标目录（可重复；Stop 门禁取最后一个）"
EXTENSION_HELP = "目标文件扩展名"
MAX_AGE_HELP = "新鲜文件的时间窗口（分钟）"


def _setup() -> GateConfig:
    config = get_config()
    configure_logging(config.log_level)
    return config


def parse_minutes(value: Optional[str], default: int) -> float:
    """解析 --max-age；非法值回退默认值，门禁不因参数错误退出"""
    if value is None:
        return default
    try:
        minutes = float(value)
    except ValueError:
        logger.warning(f"Invalid --max-age {value!r}, using {default}")
        return default
    if minutes < 0:
        logger.warning(f"Negative --max-age {value!r}, using {default}")
        return default
    return minutes


def _last(values: Optional[list[str]], default: str) -> str:
    return values[-1] if values else default


@hook_app.command(name="ruff", context_settings=LENIENT_CONTEXT)
def ruff_command():
    """Python lint（uvx ruff → ruff）"""
    config = _setup()
    run_gate([RuffHook(config)], HookType.POST_TOOL_USE)


@hook_app.command(name="ty", context_settings=LENIENT_CONTEXT)
def ty_command():
    """Python 类型检查（uvx ty）"""
    config = _setup()
    run_gate([TyHook(config)], HookType.POST_TOOL_USE)


@hook_app.command(name="eslint", context_settings=LENIENT_CONTEXT)
def eslint_command():
    """JS/TS lint（bunx biome → npx eslint）"""
    config = _setup()
    run_gate([EslintHook(config)], HookType.POST_TOOL_USE)


@hook_app.command(name="tsc", context_settings=LENIENT_CONTEXT)
def tsc_command():
    """TypeScript 类型检查（npx tsc --noEmit）"""
    config = _setup()
    run_gate([TscHook(config)], HookType.POST_TOOL_USE)


@hook_app.command(name="markdownlint", context_settings=LENIENT_CONTEXT)
def markdownlint_command():
    """Markdown 结构检查（内置）"""
    config = _setup()
    run_gate([MarkdownLintHook(config)], HookType.POST_TOOL_USE)


@hook_app.command(name="post-tool", context_settings=LENIENT_CONTEXT)
def post_tool_command():
    """按优先级运行所有文件检查门禁，第一个 block 生效"""
    _setup()
    run_gate(default_post_tool_hooks(), HookType.POST_TOOL_USE)


@hook_app.command(name="gitignore", context_settings=LENIENT_CONTEXT)
def gitignore_command(
    directory: Optional[list[str]] = typer.Option(
        None,
        "--directory",
        help="要加入 .gitignore 的目录（可重复，默认 specs）",
    ),
):
    """确保输出目录写在 .gitignore 中（总是放行）"""
    config = _setup()
    directories = directory or [config.directory]
    run_gate([GitignoreHook(directories, marker=config.gitignore_marker)], HookType.POST_TOOL_USE)


@hook_app.command(name="new-file", context_settings=LENIENT_CONTEXT)
def new_file_command(
    directory: Optional[list[str]] = typer.Option(None, "--directory", help=DIRECTORY_HELP),
    extension: Optional[str] = typer.Option(None, "--extension", help=EXTENSION_HELP),
    max_age: Optional[str] = typer.Option(None, "--max-age", help=MAX_AGE_HELP),
):
    """要求本回合在目标目录新建文件"""
    config = _setup()
    hook = NewFileHook(
        directory=_last(directory, config.directory),
        extension=extension or config.extension,
        max_age_minutes=parse_minutes(max_age, config.max_age_minutes),
    )
    run_gate([hook], HookType.STOP)


@hook_app.command(name="file-contains", context_settings=LENIENT_CONTEXT)
def file_contains_command(
    directory: Optional[list[str]] = typer.Option(None, "--directory", help=DIRECTORY_HELP),
    extension: Optional[str] = typer.Option(None, "--extension", help=EXTENSION_HELP),
    max_age: Optional[str] = typer.Option(None, "--max-age", help=MAX_AGE_HELP),
    contains: Optional[list[str]] = typer.Option(
        None,
        "--contains",
        help="必需的字面量片段（可重复，大小写敏感）",
    ),
):
    """要求最新的新文件包含所有必需片段"""
    config = _setup()
    hook = FileContainsHook(
        directory=_last(directory, config.directory),
        extension=extension or config.extension,
        max_age_minutes=parse_minutes(max_age, config.max_age_minutes),
        contains=contains or [],
    )
    run_gate([hook], HookType.STOP)


__all__ = ["HookGroup", "hook_app", "parse_minutes"]
