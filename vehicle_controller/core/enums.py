"""枚举定义"""
from enum import IntEnum


class PdProfileType(IntEnum):
    """PD 参数配置类型 (启动时选定，决定可调参数的结构)"""
    DEFAULT = 0      # PdParams
    ARGO = 1         # PdParamsArgo


class TraversalDirection(IntEnum):
    """路径通行方向"""
    FORWARD = 0
    REVERSE = 1
