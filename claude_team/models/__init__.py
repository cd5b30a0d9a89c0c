"""Data models - 门禁输入输出数据模型"""

from claude_team.models.event import HookEvent, ToolInput, parse_event
from claude_team.models.verdict import PostToolVerdict, StopVerdict

__all__ = [
    "HookEvent",
    "ToolInput",
    "parse_event",
    "PostToolVerdict",
    "StopVerdict",
]
