"""
Process Runner - 外部命令执行

执行外部检查工具并捕获退出码和输出：
- 可执行文件不存在时返回 exit_code=-1（"not found"），不抛异常
- 超时强制终止子进程，视为失败（exit_code=124），而不是 "not found"
- 输出完整捕获，截断由调用方负责；默认去掉首尾空白，git porcelain 这类
  按列解析的输出需要 strip=False 保留行首空格
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30_000
NOT_FOUND_EXIT_CODE = -1
TIMEOUT_EXIT_CODE = 124


@dataclass(frozen=True)
class CommandResult:
    """一次外部命令执行的结果"""
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def found(self) -> bool:
        """可执行文件是否存在（超时也算 found）"""
        return self.exit_code != NOT_FOUND_EXIT_CODE

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """优先 stdout，为空时回退 stderr"""
        return self.stdout or self.stderr


def _decode(value: Union[str, bytes, None]) -> str:
    # TimeoutExpired 携带的部分输出即使在 text 模式下也可能是 bytes
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _clean(value: str, strip: bool) -> str:
    return value.strip() if strip else value


def run_command(
    cmd: Sequence[str],
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    cwd: Optional[Path] = None,
    strip: bool = True,
) -> CommandResult:
    """执行外部命令

    Args:
        cmd: 可执行文件 + 参数
        timeout_ms: 墙钟超时（毫秒）
        cwd: 工作目录
        strip: 是否去掉输出首尾空白（需要逐行解析时传 False）

    Returns:
        CommandResult，永不抛出异常
    """
    argv = [str(part) for part in cmd]
    if not argv:
        return CommandResult(exit_code=NOT_FOUND_EXIT_CODE, stderr="Command not found")
    logger.debug(f"Running: {' '.join(argv)} (timeout={timeout_ms}ms)")

    try:
        proc = subprocess.run(
            argv,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout_ms / 1000,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired as e:
        logger.warning(f"Command timed out after {timeout_ms}ms: {argv[0]}")
        note = f"Command timed out after {timeout_ms}ms"
        partial = _clean(_decode(e.stderr), strip)
        return CommandResult(
            exit_code=TIMEOUT_EXIT_CODE,
            stdout=_clean(_decode(e.stdout), strip),
            stderr=f"{partial}\n{note}" if partial else note,
            timed_out=True,
        )
    except (OSError, ValueError) as e:
        logger.debug(f"Command not runnable: {argv[0]}: {e}")
        return CommandResult(exit_code=NOT_FOUND_EXIT_CODE, stderr="Command not found")

    return CommandResult(
        exit_code=proc.returncode,
        stdout=_clean(proc.stdout, strip),
        stderr=_clean(proc.stderr, strip),
    )


__all__ = [
    "CommandResult",
    "DEFAULT_TIMEOUT_MS",
    "NOT_FOUND_EXIT_CODE",
    "TIMEOUT_EXIT_CODE",
    "run_command",
]
