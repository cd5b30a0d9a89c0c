"""
Claude Team CLI - 命令行工具

提供主要命令：
- claude-team hook <gate>: 运行单个门禁（PostToolUse / Stop）
- claude-team gates: 列出所有门禁
- claude-team doctor: 检查外部工具可用性
"""

import typer

from claude_team.cli.doctor_cmd import doctor_command, gates_command
from claude_team.cli.hook_cmd import hook_app

app = typer.Typer(
    name="claude-team",
    help="Claude Team - agent 门禁\n\n拦截文件修改与回合结束，运行检查并输出 allow/block 结论。",
    add_completion=False,
    rich_markup_mode="rich",
)

# 注册子命令
app.command(name="gates", help="列出所有门禁")(gates_command)
app.command(name="doctor", help="检查外部工具可用性")(doctor_command)
app.add_typer(hook_app, name="hook", help="运行单个门禁（stdout 输出一行 JSON）")


def main():
    """CLI 入口点"""
    app()


if __name__ == "__main__":
    main()


__all__ = ["app", "main"]
