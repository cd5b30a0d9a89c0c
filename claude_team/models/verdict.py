"""Verdict models - 门禁输出的两种 JSON 形状

- PostToolUse: {} 或 {"decision": "block", "reason": "..."}
- Stop: {"result": "continue", "message": "..."} 或 {"result": "block", "reason": "..."}
"""

from typing import Literal, Optional

from pydantic import BaseModel


class PostToolVerdict(BaseModel):
    """PostToolUse 输出；放行时所有字段为 None，序列化为 {}"""

    decision: Optional[Literal["block"]] = None
    reason: Optional[str] = None


class StopVerdict(BaseModel):
    """Stop 输出"""

    result: Literal["continue", "block"]
    message: Optional[str] = None
    reason: Optional[str] = None
