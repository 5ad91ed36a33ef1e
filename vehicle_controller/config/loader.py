"""
配置加载器

启动时加载配置：
1. 深拷贝 DEFAULT_CONFIG 作为基础配置
2. 读取 YAML 文件 (或直接使用传入的字典)
3. 按 DEFAULT_CONFIG 的结构递归覆盖默认值
4. 检查 PD 参数配置名 (未知名称拒绝启动)
5. 配置验证

YAML 示例:

    motion:
      max_controller_speed: 0.6
      max_unlimited_speed: 1.2
      max_controller_angular_rate: 1.0
      max_unlimited_angular_rate: 2.0
      pd_params: PdParamsArgo
    pd_gains:
      kp_angle: 1.8
"""
from pathlib import Path
from typing import Any, Dict, Optional, Union
import copy
import logging

import yaml

from ..core.exceptions import ConfigurationError
from .default_config import DEFAULT_CONFIG, validate_config
from .profiles import get_profile

logger = logging.getLogger(__name__)


def _convert_param_type(value: Any, default: Any) -> Any:
    """
    按默认值类型转换参数

    YAML 可能把 1.0 写成 1，此时转换为 float；bool 和字符串保持原样。
    """
    if default is None or isinstance(default, bool) or isinstance(value, bool):
        return value
    if isinstance(default, float) and isinstance(value, int):
        return float(value)
    return value


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    递归合并配置，override 中的值覆盖 base

    返回新字典，不修改输入。
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_config(result[key], value)
        else:
            result[key] = _convert_param_type(copy.deepcopy(value), result.get(key))
    return result


def read_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """读取 YAML 配置文件，空文件返回空字典"""
    path = Path(path)
    try:
        with path.open('r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def load_config(source: Optional[Union[str, Path, Dict[str, Any]]] = None,
                validate: bool = True, strict: bool = True) -> Dict[str, Any]:
    """
    加载配置

    Args:
        source: YAML 文件路径、配置字典或 None (只使用默认配置)
        validate: 是否进行配置验证
        strict: 严格模式下 ERROR 级别错误也阻止启动

    Returns:
        合并后的配置字典

    Raises:
        UnknownProfileError: PD 参数配置名无法识别
        ConfigValidationError: 配置存在阻止启动的错误
        ConfigurationError: 文件无法读取或格式错误
    """
    if source is None:
        overrides = {}
    elif isinstance(source, dict):
        overrides = source
    else:
        overrides = read_yaml(source)

    config = merge_config(DEFAULT_CONFIG, overrides)

    # 未知配置名直接拒绝，不回退到默认配置
    profile = get_profile(config['motion']['pd_params'])

    if validate:
        validate_config(config, raise_on_error=True, strict=strict)

    motion = config['motion']
    logger.info(
        f"Loaded config: profile={profile.PROFILE_NAME}, "
        f"v_max={motion['max_controller_speed']}/{motion['max_unlimited_speed']}, "
        f"w_max={motion['max_controller_angular_rate']}/{motion['max_unlimited_angular_rate']}, "
        f"y_symmetric={motion['y_symmetric']}"
    )
    return config
