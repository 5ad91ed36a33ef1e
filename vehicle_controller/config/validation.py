"""配置验证模块

提供配置参数的验证功能：
- 范围检查
- 类型检查
- 逻辑一致性检查
- 错误严重级别分类

错误严重级别:
- FATAL: 致命错误，必须阻止启动（如速度上限 <= 0、未知 PD 配置名）
- ERROR: 严重错误，默认阻止启动，可通过参数跳过
- WARNING: 警告，记录但不阻止启动
"""
from typing import Dict, Any, List, Tuple, Optional
from enum import Enum
import logging

from ..core.exceptions import ConfigValidationError
from .profiles import PROFILES

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    """验证错误严重级别"""
    FATAL = 'fatal'      # 致命错误，必须阻止启动
    ERROR = 'error'      # 严重错误，默认阻止启动
    WARNING = 'warning'  # 警告，记录但不阻止启动


def get_config_value(
    config: Dict[str, Any],
    key_path: str,
    default: Any = None,
    fallback_config: Optional[Dict[str, Any]] = None
) -> Any:
    """
    从配置字典中获取值，支持点分隔的路径

    Args:
        config: 配置字典
        key_path: 点分隔的键路径，如 'motion.max_controller_speed'
        default: 默认值
        fallback_config: 备选配置字典，当 config 中找不到时从此获取

    Returns:
        配置值或默认值

    Example:
        >>> config = {'motion': {'max_controller_speed': 0.5}}
        >>> get_config_value(config, 'motion.max_controller_speed')
        0.5
    """
    keys = key_path.split('.')
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            if fallback_config is not None:
                return get_config_value(fallback_config, key_path, default, None)
            return default
    return value


def validate_config(
    config: Dict[str, Any],
    validation_rules: Dict[str, Tuple],
    raise_on_error: bool = True
) -> List[Tuple[str, str]]:
    """
    验证配置参数范围

    Args:
        config: 配置字典
        validation_rules: 验证规则字典，格式为 {key_path: (min, max, description)}
        raise_on_error: 是否在发现错误时抛出异常

    Returns:
        错误列表，每个元素为 (key_path, error_message)

    Raises:
        ConfigValidationError: 当 raise_on_error=True 且发现错误时
    """
    errors = []

    for key_path, (min_val, max_val, description) in validation_rules.items():
        value = get_config_value(config, key_path)

        if value is None:
            continue  # 使用默认值，跳过验证

        # 类型检查
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            errors.append((key_path, f'{description} 类型错误，期望数值，实际为 {type(value).__name__}'))
            continue

        # 范围检查
        if min_val is not None and value < min_val:
            errors.append((key_path, f'{description} 值 {value} 小于最小值 {min_val}'))
        elif max_val is not None and value > max_val:
            errors.append((key_path, f'{description} 值 {value} 大于最大值 {max_val}'))

    if errors and raise_on_error:
        error_messages = '\n'.join([f'  - {key}: {msg}' for key, msg in errors])
        raise ConfigValidationError(f'配置验证失败:\n{error_messages}', errors)

    return errors


def validate_logical_consistency(config: Dict[str, Any]) -> List[Tuple[str, str, ValidationSeverity]]:
    """
    验证配置的逻辑一致性

    Args:
        config: 配置字典

    Returns:
        错误列表，每个元素为 (key_path, error_message, severity)
    """
    errors = []

    def _is_numeric(value) -> bool:
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    def add_error(key: str, msg: str, severity: ValidationSeverity = ValidationSeverity.ERROR):
        errors.append((key, msg, severity))

    # ==========================================================================
    # 致命错误 (FATAL 级别)
    # ==========================================================================

    # 速度/角速度上限必须大于 0，减速包络的斜率除以 max_controller_angular_rate
    limit_keys = [
        ('motion.max_controller_speed', '控制器最大线速度'),
        ('motion.max_controller_angular_rate', '控制器最大角速度'),
        ('motion.max_unlimited_speed', '绝对最大线速度'),
        ('motion.max_unlimited_angular_rate', '绝对最大角速度'),
    ]
    for key_path, description in limit_keys:
        value = get_config_value(config, key_path)
        if value is not None and _is_numeric(value) and value <= 0:
            add_error(key_path, f'{description} ({value}) 必须大于 0', ValidationSeverity.FATAL)

    # PD 参数配置名必须可识别
    pd_params = get_config_value(config, 'motion.pd_params')
    if pd_params is not None and pd_params not in PROFILES:
        add_error('motion.pd_params',
                  f'未知的 PD 参数配置 {pd_params!r}，可选: {", ".join(PROFILES)}',
                  ValidationSeverity.FATAL)

    # y_symmetric 必须为布尔值
    y_symmetric = get_config_value(config, 'motion.y_symmetric')
    if y_symmetric is not None and not isinstance(y_symmetric, bool):
        add_error('motion.y_symmetric',
                  f'y_symmetric 类型错误，期望 bool，实际为 {type(y_symmetric).__name__}',
                  ValidationSeverity.FATAL)

    # ==========================================================================
    # 严重错误 (ERROR 级别)
    # ==========================================================================

    v_ctrl = get_config_value(config, 'motion.max_controller_speed')
    v_abs = get_config_value(config, 'motion.max_unlimited_speed')
    if _is_numeric(v_ctrl) and _is_numeric(v_abs) and v_ctrl > v_abs:
        add_error('motion.max_controller_speed',
                  f'控制器最大线速度 ({v_ctrl}) 不应大于绝对最大线速度 ({v_abs})',
                  ValidationSeverity.ERROR)

    w_ctrl = get_config_value(config, 'motion.max_controller_angular_rate')
    w_abs = get_config_value(config, 'motion.max_unlimited_angular_rate')
    if _is_numeric(w_ctrl) and _is_numeric(w_abs) and w_ctrl > w_abs:
        add_error('motion.max_controller_angular_rate',
                  f'控制器最大角速度 ({w_ctrl}) 不应大于绝对最大角速度 ({w_abs})',
                  ValidationSeverity.ERROR)

    # pd_gains 中只能出现当前配置定义的字段
    pd_gains = get_config_value(config, 'pd_gains')
    profile = PROFILES.get(pd_params) if isinstance(pd_params, str) else None
    if isinstance(pd_gains, dict) and profile is not None:
        for key in pd_gains:
            if key not in profile.field_names():
                add_error(f'pd_gains.{key}',
                          f'{profile.PROFILE_NAME} 配置中没有参数 {key!r}',
                          ValidationSeverity.ERROR)

    # ==========================================================================
    # 警告 (WARNING 级别)
    # ==========================================================================

    commanded = get_config_value(config, 'motion.commanded_speed')
    if _is_numeric(commanded) and _is_numeric(v_abs) and abs(commanded) > v_abs:
        add_error('motion.commanded_speed',
                  f'默认期望速度 ({commanded}) 超过绝对最大线速度 ({v_abs})，输出会被限幅',
                  ValidationSeverity.WARNING)

    step = get_config_value(config, 'smoother.discretization')
    sigma = get_config_value(config, 'smoother.smoothness')
    if _is_numeric(step) and _is_numeric(sigma) and sigma < step / 2:
        add_error('smoother.smoothness',
                  f'高斯核带宽 ({sigma}) 远小于离散步长 ({step})，平滑几乎无效',
                  ValidationSeverity.WARNING)

    return errors


def validate_full_config(
    config: Dict[str, Any],
    validation_rules: Dict[str, Tuple],
    raise_on_error: bool = True,
    strict: bool = True
) -> List[Tuple[str, str, ValidationSeverity]]:
    """
    完整配置验证（包括范围检查和逻辑一致性检查）

    Args:
        config: 配置字典
        validation_rules: 验证规则字典
        raise_on_error: 是否在发现阻止启动的错误时抛出异常
        strict: True 时 FATAL 和 ERROR 都阻止启动，False 时只有 FATAL 阻止启动

    Returns:
        错误列表，每个元素为 (key_path, error_message, severity)

    Raises:
        ConfigValidationError: 当 raise_on_error=True 且发现阻止启动的错误时
    """
    range_errors = validate_config(config, validation_rules, raise_on_error=False)
    errors = [(key, msg, ValidationSeverity.ERROR) for key, msg in range_errors]
    errors.extend(validate_logical_consistency(config))

    fatal_errors = [(k, m, s) for k, m, s in errors if s == ValidationSeverity.FATAL]
    error_errors = [(k, m, s) for k, m, s in errors if s == ValidationSeverity.ERROR]
    warning_errors = [(k, m, s) for k, m, s in errors if s == ValidationSeverity.WARNING]

    for key, msg, _ in warning_errors:
        logger.warning(f"配置警告 [{key}]: {msg}")

    if not strict:
        for key, msg, _ in error_errors:
            logger.error(f"配置错误 [{key}]: {msg} (非严格模式，继续启动)")

    if raise_on_error:
        if fatal_errors:
            fatal_msgs = '\n'.join([f'  - [FATAL] {key}: {msg}' for key, msg, _ in fatal_errors])
            raise ConfigValidationError(f'配置存在致命错误，无法启动:\n{fatal_msgs}',
                                        [(k, m) for k, m, _ in fatal_errors])

        if error_errors and strict:
            error_msgs = '\n'.join([f'  - [ERROR] {key}: {msg}' for key, msg, _ in error_errors])
            raise ConfigValidationError(f'配置验证失败:\n{error_msgs}',
                                        [(k, m) for k, m, _ in error_errors])

    return errors
