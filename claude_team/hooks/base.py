"""
Claude Team Hook Framework - 基础抽象层

门禁（gate）框架的统一抽象，支持 2 个 Hook 点位：
1. PostToolUse - 文件写入/编辑之后，检查被修改的文件
2. Stop - 回合结束时，检查本回合应产出的文件

所有门禁内部只使用一种结果类型（allow | block(reason)），
最终由 emitter 按 Hook 点位渲染成对应的 JSON 形状。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class HookType(Enum):
    """Hook 类型枚举

    - PostToolUse: 工具调用后，输出 {} 或 {"decision": "block", ...}
    - Stop: 回合结束时，输出 {"result": "continue"|"block", ...}
    """
    POST_TOOL_USE = "PostToolUse"
    STOP = "Stop"


class HookDecision(Enum):
    """Hook 决策类型"""
    ALLOW = "allow"          # 放行
    BLOCK = "block"          # 阻止，agent 必须处理 reason


@dataclass
class HookContext:
    """Hook 执行上下文

    Attributes:
        hook_type: Hook 类型
        tool_name: 工具名称（PostToolUse 时有效）
        tool_input: 工具输入参数
        session_id: 会话 ID
        metadata: 额外元数据
    """
    hook_type: HookType
    tool_name: str | None = None
    tool_input: dict[str, Any] = field(default_factory=dict)
    session_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def file_path(self) -> str:
        """被操作文件路径，缺失时为空字符串"""
        value = self.tool_input.get("file_path")
        return value if isinstance(value, str) else ""


@dataclass
class HookResult:
    """Hook 执行结果

    Attributes:
        decision: 决策类型
        reason: 阻止原因（decision=BLOCK 时展示给 agent）
        message: 放行时附带的说明（Stop 的 continue 消息）
        metadata: 额外元数据（如实际执行的工具）
    """
    decision: HookDecision = HookDecision.ALLOW
    reason: str | None = None
    message: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def blocked(self) -> bool:
        return self.decision == HookDecision.BLOCK

    @classmethod
    def allow(cls, message: str | None = None) -> HookResult:
        """创建放行结果"""
        return cls(decision=HookDecision.ALLOW, message=message)

    @classmethod
    def block(cls, reason: str) -> HookResult:
        """创建阻止结果"""
        return cls(decision=HookDecision.BLOCK, reason=reason)


class BaseHook(ABC):
    """Hook 基类

    所有门禁必须继承此类并实现：
    - hook_type: 返回此 Hook 处理的类型
    - name: 门禁名称（CLI 子命令名，也用于日志）
    - execute(): 执行检查

    可选重写：
    - priority: 组合执行时的优先级（数字越小越先执行，默认 100）
    - should_run(): 适用性过滤，返回 False 时不会启动任何子进程
    """

    @property
    @abstractmethod
    def hook_type(self) -> HookType:
        """返回此 Hook 处理的类型"""

    @property
    @abstractmethod
    def name(self) -> str:
        """门禁名称"""

    @property
    def priority(self) -> int:
        """执行优先级，数字越小越先执行"""
        return 100

    def should_run(self, context: HookContext) -> bool:
        """判断是否应该执行此 Hook

        默认返回 True。子类可重写实现条件执行。
        """
        return True

    @abstractmethod
    def execute(self, context: HookContext) -> HookResult:
        """执行 Hook 逻辑

        Args:
            context: Hook 执行上下文

        Returns:
            Hook 执行结果
        """


__all__ = [
    "HookType",
    "HookDecision",
    "HookContext",
    "HookResult",
    "BaseHook",
]
