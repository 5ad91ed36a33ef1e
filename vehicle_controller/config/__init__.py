"""配置模块

提供统一的配置接口，支持：
- 默认配置 (DEFAULT_CONFIG)
- 配置验证 (validate_config)
- PD 增益配置 (PdParams / PdParamsArgo)
- YAML 配置加载 (load_config)
- 运行时参数存储 (ParameterStore)

配置文件结构:
- motion_config.py: 运动参数
- smoother_config.py: 路径平滑参数
- profiles.py: PD 增益配置
- validation.py: 配置验证逻辑
- loader.py: YAML 加载
- parameter_store.py: 线程安全的参数快照

使用示例:
    from vehicle_controller.config import load_config, ParameterStore

    config = load_config('robot.yaml')
    store = ParameterStore.from_config(config)
"""

from .default_config import (
    DEFAULT_CONFIG,
    CONFIG_VALIDATION_RULES,
    MOTION_CONFIG,
    SMOOTHER_CONFIG,
    validate_config,
    get_config_value,
)
from .validation import ValidationSeverity
from .profiles import PdParamsGains, PdParamsArgoGains, PROFILES, get_profile
from .loader import load_config, merge_config
from .parameter_store import MotionParameters, ControllerParameters, ParameterStore
from ..core.exceptions import ConfigValidationError, UnknownProfileError

__all__ = [
    'DEFAULT_CONFIG',
    'CONFIG_VALIDATION_RULES',
    'MOTION_CONFIG',
    'SMOOTHER_CONFIG',
    'validate_config',
    'get_config_value',
    'ValidationSeverity',
    'ConfigValidationError',
    'UnknownProfileError',
    'PdParamsGains',
    'PdParamsArgoGains',
    'PROFILES',
    'get_profile',
    'load_config',
    'merge_config',
    'MotionParameters',
    'ControllerParameters',
    'ParameterStore',
]
