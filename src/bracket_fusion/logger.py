"""
统一的日志处理模块
规划、融合、批处理共用同一个日志接口，输出目标可以是控制台、队列或任意函数
"""
from typing import Optional, Any


LEVELS = ("DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR")


class Logger:
    """融合会话的日志处理器"""

    def __init__(self, log_target: Optional[Any] = None, session_id: Optional[str] = None, verbose: bool = False):
        """
        初始化日志处理器

        Args:
            log_target: 日志输出目标，可以是：
                       - None: 使用 print
                       - Queue 对象: 使用 queue.put()，发送 {'id', 'msg', 'level'} 字典
                       - Callable: 直接调用该函数 (CLI 传入 click.echo)
            session_id: 会话标识 (通常是包围曝光目录名)，用于批处理时区分日志来源
            verbose: 是否输出 DEBUG 级别日志
        """
        self.log_target = log_target
        self.session_id = session_id
        self.verbose = verbose

    def log(self, message: str, level: str = "INFO"):
        if level not in LEVELS:
            raise ValueError(f"Unknown log level: {level}")
        if level == "DEBUG" and not self.verbose:
            return

        if self.log_target is None:
            print(self._format_message(message))
        elif hasattr(self.log_target, 'put'):
            # 队列模式（多进程批处理）
            self.log_target.put({
                'id': self.session_id,
                'msg': message,
                'level': level
            })
        elif callable(self.log_target):
            self.log_target(self._format_message(message))
        else:
            print(self._format_message(message))

    def _format_message(self, message: str) -> str:
        if self.session_id:
            return f"[{self.session_id}] {message}"
        return message

    def debug(self, message: str):
        self.log(message, "DEBUG")

    def info(self, message: str):
        self.log(message, "INFO")

    def success(self, message: str):
        self.log(message, "SUCCESS")

    def warning(self, message: str):
        self.log(message, "WARNING")

    def error(self, message: str):
        self.log(message, "ERROR")


def create_logger(log_target: Optional[Any] = None, session_id: Optional[str] = None, verbose: bool = False) -> Logger:
    """
    工厂函数：创建日志处理器实例

    已经是 Logger 的目标原样返回，便于在各层之间直接传递
    """
    if isinstance(log_target, Logger):
        return log_target
    return Logger(log_target, session_id, verbose)
