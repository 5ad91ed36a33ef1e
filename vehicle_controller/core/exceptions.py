"""
自定义异常类

异常层次结构:
=============

VehicleControllerError (基类)
├── ConfigurationError
│   ├── ConfigValidationError
│   └── UnknownProfileError
└── ControllerRuntimeError
    ├── InvalidInputError
    └── DegenerateGeometryError

使用指南:
=========

1. 配置错误 (ConfigurationError)
   - 在启动或参数更新时抛出
   - 应该阻止系统启动 / 拒绝本次更新
   - 示例：未知的 PD 参数配置名、增益超出范围

2. 运行时错误 (ControllerRuntimeError)
   - 输入数据无法处理时直接抛给调用者
   - 示例：总弧长为 0 的路径、距离为 0 的比例控制

注意:
=====

- 角度超出范围之类的可容忍问题只记录警告，不抛出异常
- 没有任何操作会自动重试
"""


class VehicleControllerError(Exception):
    """控制器错误基类"""
    pass


# =============================================================================
# 配置错误
# =============================================================================

class ConfigurationError(VehicleControllerError):
    """配置错误基类"""
    pass


class ConfigValidationError(ConfigurationError):
    """
    配置验证错误

    当配置参数不满足验证规则时抛出。

    Attributes:
        errors: 错误列表，每个元素为 (key_path, error_message)
    """

    def __init__(self, message: str, errors: list = None):
        super().__init__(message)
        self.errors = errors or []


class UnknownProfileError(ConfigurationError):
    """
    未知的 PD 参数配置

    配置名无法识别时拒绝启动，不回退到默认配置。
    """

    def __init__(self, name: str, available: list = None):
        self.name = name
        self.available = list(available or [])
        super().__init__(
            f"Unknown PD parameter profile: {name!r}. "
            f"Available: {', '.join(self.available)}"
        )


# =============================================================================
# 运行时错误
# =============================================================================

class ControllerRuntimeError(VehicleControllerError):
    """
    控制器运行时错误基类

    注意：命名为 ControllerRuntimeError 以避免与内置 RuntimeError 冲突
    """
    pass


class InvalidInputError(ControllerRuntimeError):
    """输入数据无效 (点数不足、dt <= 0、四元数范数异常等)"""
    pass


class DegenerateGeometryError(ControllerRuntimeError):
    """
    退化几何错误

    零长度路径、零长度向量、比例控制中距离为 0 等会导致除零的情况。
    """
    pass


__all__ = [
    'VehicleControllerError',
    'ConfigurationError',
    'ConfigValidationError',
    'UnknownProfileError',
    'ControllerRuntimeError',
    'InvalidInputError',
    'DegenerateGeometryError',
]
