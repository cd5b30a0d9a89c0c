"""Hook event payload - stdin 上收到的事件数据模型"""

import json
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class ToolInput(BaseModel):
    """工具输入，只关心 file_path，其它字段原样保留"""

    model_config = ConfigDict(extra="allow")

    file_path: Optional[str] = None


class HookEvent(BaseModel):
    """PostToolUse / Stop 事件

    只读取一次，不做修改。未知字段原样保留。
    """

    model_config = ConfigDict(extra="allow")

    hook_event_name: Optional[str] = None
    session_id: Optional[str] = None
    tool_name: Optional[str] = None
    tool_input: ToolInput = Field(default_factory=ToolInput)

    def tool_input_dict(self) -> dict[str, Any]:
        return self.tool_input.model_dump(exclude_none=True)


def parse_event(raw: Optional[str]) -> HookEvent:
    """解析 stdin 内容

    空输入、非法 JSON、非对象 JSON、字段类型错误一律视为空事件，不抛异常。
    """
    if not raw or not raw.strip():
        return HookEvent()

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid hook input JSON: {e}")
        return HookEvent()

    if not isinstance(data, dict):
        logger.warning(f"Hook input is not a JSON object: {type(data).__name__}")
        return HookEvent()

    try:
        return HookEvent.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Hook input failed validation: {e.error_count()} error(s)")
        return HookEvent()
