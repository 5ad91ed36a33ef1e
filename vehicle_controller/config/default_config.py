"""默认配置

本模块合并所有配置子模块，提供统一的配置接口。

配置结构:
- motion_config.py: 运动参数 (速度/角速度上限、对称底盘、PD 配置名)
- smoother_config.py: 路径平滑参数
- profiles.py: PD 增益配置 (pd_gains 节只存放对所选配置默认值的覆盖)
- validation.py: 配置验证

使用示例:
    import copy
    from vehicle_controller.config import DEFAULT_CONFIG

    config = copy.deepcopy(DEFAULT_CONFIG)
    config['motion']['pd_params'] = 'PdParamsArgo'
"""
from typing import Dict, Any

from .motion_config import MOTION_CONFIG, MOTION_VALIDATION_RULES
from .smoother_config import SMOOTHER_CONFIG, SMOOTHER_VALIDATION_RULES
from .validation import (
    get_config_value,
    validate_full_config,
)


# =============================================================================
# 合并所有配置
# =============================================================================
DEFAULT_CONFIG: Dict[str, Any] = {
    'motion': MOTION_CONFIG.copy(),
    'pd_gains': {},
    'smoother': SMOOTHER_CONFIG.copy(),
}


# =============================================================================
# 合并所有验证规则
# =============================================================================
CONFIG_VALIDATION_RULES: Dict[str, tuple] = {}
CONFIG_VALIDATION_RULES.update(MOTION_VALIDATION_RULES)
CONFIG_VALIDATION_RULES.update(SMOOTHER_VALIDATION_RULES)


def validate_config(config: Dict[str, Any], raise_on_error: bool = True,
                    strict: bool = True) -> list:
    """
    验证配置参数 (范围 + 逻辑一致性)

    pd_gains 的范围依赖所选配置，由 ParameterStore.from_config() 验证。

    Returns:
        错误列表，每个元素为 (key_path, error_message, severity)

    Example:
        >>> config = copy.deepcopy(DEFAULT_CONFIG)
        >>> config['motion']['max_controller_speed'] = -1
        >>> errors = validate_config(config, raise_on_error=False)
    """
    return validate_full_config(config, CONFIG_VALIDATION_RULES, raise_on_error, strict)


__all__ = [
    'DEFAULT_CONFIG',
    'CONFIG_VALIDATION_RULES',
    'MOTION_CONFIG',
    'SMOOTHER_CONFIG',
    'validate_config',
    'get_config_value',
]
