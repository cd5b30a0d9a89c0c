"""
Claude Team Hook Registry - Hook 注册中心

职责：
1. 管理一次门禁调用中参与的 Hook
2. 按类型和优先级执行 Hook（适用性过滤在执行前完成）
3. 合并多个 Hook 的结果，作为门禁边界把异常转成放行

用法：
    registry = HookRegistry()
    registry.register(RuffHook())
    registry.register(MarkdownLintHook())

    result = registry.execute_single(HookType.POST_TOOL_USE, context)
"""

from __future__ import annotations

import logging
from collections import defaultdict

from claude_team.hooks.base import (
    BaseHook,
    HookContext,
    HookDecision,
    HookResult,
    HookType,
)

logger = logging.getLogger(__name__)


class HookRegistry:
    """Hook 注册中心

    Hook 按优先级排序执行，数字越小越先执行。
    """

    def __init__(self, hooks: list[BaseHook] | None = None):
        self._hooks: dict[HookType, list[BaseHook]] = defaultdict(list)
        self._sorted: dict[HookType, bool] = defaultdict(lambda: True)
        for hook in hooks or []:
            self.register(hook)

    def register(self, hook: BaseHook) -> None:
        """注册 Hook"""
        hook_type = hook.hook_type
        self._hooks[hook_type].append(hook)
        self._sorted[hook_type] = False
        logger.debug(f"Registered hook: {hook.name} (type={hook_type.value}, priority={hook.priority})")

    def unregister(self, hook: BaseHook) -> bool:
        """注销 Hook

        Returns:
            是否成功注销
        """
        hook_type = hook.hook_type
        if hook in self._hooks[hook_type]:
            self._hooks[hook_type].remove(hook)
            logger.debug(f"Unregistered hook: {hook.name}")
            return True
        return False

    def get_hooks(self, hook_type: HookType) -> list[BaseHook]:
        """获取指定类型的所有 Hook（按优先级排序）"""
        if not self._sorted[hook_type]:
            self._hooks[hook_type].sort(key=lambda h: h.priority)
            self._sorted[hook_type] = True

        return list(self._hooks[hook_type])

    def get(self, name: str) -> BaseHook | None:
        """按名称查找 Hook"""
        for hooks in self._hooks.values():
            for hook in hooks:
                if hook.name == name:
                    return hook
        return None

    def names(self) -> list[str]:
        """所有已注册 Hook 的名称（按类型、优先级）"""
        return [hook.name for hook_type in HookType for hook in self.get_hooks(hook_type)]

    def execute(
        self,
        hook_type: HookType,
        context: HookContext,
        stop_on_block: bool = True
    ) -> list[HookResult]:
        """执行指定类型的所有 Hook

        Args:
            hook_type: Hook 类型
            context: 执行上下文
            stop_on_block: 遇到 BLOCK 决策时是否停止执行后续 Hook

        Returns:
            所有实际执行的 Hook 的结果列表
        """
        results: list[HookResult] = []

        for hook in self.get_hooks(hook_type):
            try:
                if not hook.should_run(context):
                    logger.debug(f"Hook {hook.name} skipped (should_run=False)")
                    continue

                result = hook.execute(context)
                results.append(result)

                logger.debug(
                    f"Hook {hook.name} executed: decision={result.decision.value}, "
                    f"reason={result.reason}"
                )

                if stop_on_block and result.decision == HookDecision.BLOCK:
                    logger.info(f"Hook chain stopped by {hook.name}")
                    break

            except Exception as e:
                # fail-open：门禁自身出错不能阻止 agent
                logger.error(f"Hook {hook.name} error: {e}", exc_info=True)
                results.append(HookResult(metadata={"error": str(e), "hook": hook.name}))

        return results

    def execute_single(
        self,
        hook_type: HookType,
        context: HookContext
    ) -> HookResult:
        """执行并合并所有 Hook 结果

        - 如果任何 Hook 返回 BLOCK，返回第一个 BLOCK
        - 否则返回最后一个带 message 的 ALLOW
        - 否则返回空 ALLOW
        """
        results = self.execute(hook_type, context, stop_on_block=True)

        for result in results:
            if result.decision == HookDecision.BLOCK:
                return result

        for result in reversed(results):
            if result.message:
                return result

        return HookResult.allow()

    def clear(self, hook_type: HookType | None = None) -> None:
        """清除已注册的 Hook"""
        if hook_type:
            self._hooks[hook_type].clear()
            self._sorted[hook_type] = True
        else:
            self._hooks.clear()
            self._sorted.clear()

    def stats(self) -> dict[str, int]:
        """获取统计信息

        Returns:
            {hook_type: count} 字典
        """
        return {ht.value: len(hooks) for ht, hooks in self._hooks.items() if hooks}


__all__ = [
    "HookRegistry",
]
