"""
统一日志配置模块

使用方式:
=========

方式 1: 标准 Python 日志 (推荐)
    import logging
    logger = logging.getLogger(__name__)

方式 2: 使用 get_logger()
    from vehicle_controller.core.logging_config import get_logger
    logger = get_logger(__name__)

方式 3: 使用 ThrottledLogger (控制循环中频繁触发的告警)
    throttled = ThrottledLogger(logger, min_interval=5.0)
    throttled.warning("Invalid angle was given", key="invalid_angle")

独立运行时由应用调用一次:
    configure_logging(logging.INFO, control_loop_debug=True)

日志级别规范:
=============

DEBUG:   控制循环内部的数值 (误差、导数、投影)
INFO:    倒车判定、配置加载、会话重置
WARNING: 输入角度超出范围、配置警告、回调失败
ERROR:   配置错误
"""
import logging
import sys
import time
from typing import Optional, TextIO

# 默认日志格式
DEFAULT_FORMAT = '[%(name)s] %(levelname)s: %(message)s'
DEFAULT_LEVEL = logging.INFO

# 包根日志器名称
PACKAGE_LOGGER = 'vehicle_controller'

# 控制循环内部日志器 (DEBUG 数值输出)
CONTROL_LOOP_LOGGERS = (
    'vehicle_controller.tracker.differential_drive',
    'vehicle_controller.smoother.path_smoother',
)


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    获取包内日志器

    不以 vehicle_controller 开头的名称会挂到包根日志器下，
    使 configure_logging() 的设置同样生效。

    Args:
        name: 日志器名称，通常使用 __name__
        level: 日志级别，None 时继承包根日志器
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + '.'):
        name = f'{PACKAGE_LOGGER}.{name}'
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger


def configure_logging(level: int = DEFAULT_LEVEL,
                      format_str: str = DEFAULT_FORMAT,
                      stream: Optional[TextIO] = None,
                      control_loop_debug: bool = False) -> logging.Logger:
    """
    配置包根日志器

    只配置 vehicle_controller 日志器，不修改应用的根日志器。
    重复调用会替换之前添加的处理器。

    Args:
        level: 日志级别
        format_str: 日志格式字符串
        stream: 输出流，默认为 stdout
        control_loop_debug: 是否输出控制循环内部的 DEBUG 数值

    Returns:
        包根日志器
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if getattr(handler, '_vehicle_controller_handler', False):
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(format_str))
    handler._vehicle_controller_handler = True
    package_logger.addHandler(handler)
    package_logger.setLevel(level)

    loop_level = logging.DEBUG if control_loop_debug else logging.NOTSET
    for name in CONTROL_LOOP_LOGGERS:
        logging.getLogger(name).setLevel(loop_level)

    return package_logger


class ThrottledLogger:
    """
    节流日志器

    同一 key 的消息在 min_interval 秒内最多记录一次。
    未指定 key 的消息不节流。
    """

    def __init__(self, logger: logging.Logger, min_interval: float = 1.0):
        """
        Args:
            logger: 底层日志器
            min_interval: 同一 key 的最小日志间隔（秒）
        """
        self._logger = logger
        self._min_interval = min_interval
        self._last_log_times: dict = {}

    def _should_log(self, key: str) -> bool:
        current_time = time.monotonic()
        last_time = self._last_log_times.get(key)

        if last_time is None or current_time - last_time >= self._min_interval:
            self._last_log_times[key] = current_time
            return True
        return False

    def debug(self, msg: str, key: str = None, *args, **kwargs):
        if key is None or self._should_log(key):
            self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, key: str = None, *args, **kwargs):
        if key is None or self._should_log(key):
            self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, key: str = None, *args, **kwargs):
        if key is None or self._should_log(key):
            self._logger.warning(msg, *args, **kwargs)
