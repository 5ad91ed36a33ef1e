"""配置验证测试"""
import copy

import pytest

from vehicle_controller.config.default_config import (
    DEFAULT_CONFIG,
    CONFIG_VALIDATION_RULES,
    validate_config,
    get_config_value,
)
from vehicle_controller.config.validation import (
    ValidationSeverity,
    validate_logical_consistency,
    validate_config as validate_ranges,
)
from vehicle_controller.config.profiles import (
    PdParamsGains, PdParamsArgoGains, PROFILES, get_profile,
)
from vehicle_controller.core.enums import PdProfileType
from vehicle_controller.core.exceptions import ConfigValidationError, UnknownProfileError


def _config(**motion):
    config = copy.deepcopy(DEFAULT_CONFIG)
    config['motion'].update(motion)
    return config


def test_default_config_valid():
    """测试默认配置应该通过验证"""
    errors = validate_config(DEFAULT_CONFIG, raise_on_error=False)
    assert len(errors) == 0, f"Default config has errors: {errors}"


def test_validation_rules_cover_motion_and_smoother():
    assert 'motion.max_controller_speed' in CONFIG_VALIDATION_RULES
    assert 'smoother.discretization' in CONFIG_VALIDATION_RULES


def test_get_config_value():
    """测试点分隔路径取值"""
    assert get_config_value(DEFAULT_CONFIG, 'motion.max_controller_speed') == 0.5
    assert get_config_value(DEFAULT_CONFIG, 'motion.missing', 7) == 7
    assert get_config_value({}, 'smoother.smoothness', fallback_config=DEFAULT_CONFIG) == 0.125


def test_negative_speed_is_fatal():
    """测试速度上限 <= 0 为致命错误"""
    config = _config(max_controller_speed=0.0)
    errors = validate_logical_consistency(config)

    assert ('motion.max_controller_speed', ValidationSeverity.FATAL) in [(k, s) for k, _, s in errors]
    with pytest.raises(ConfigValidationError):
        validate_config(config, strict=False)


def test_out_of_range_value():
    """测试超出范围的值"""
    config = _config(max_unlimited_speed=50.0)
    errors = validate_ranges(config, CONFIG_VALIDATION_RULES, raise_on_error=False)

    assert any('max_unlimited_speed' in key for key, _ in errors)
    with pytest.raises(ConfigValidationError) as exc_info:
        validate_config(config)
    assert exc_info.value.errors


def test_non_numeric_value():
    """测试非数值类型"""
    config = _config(max_controller_speed='fast')
    errors = validate_ranges(config, CONFIG_VALIDATION_RULES, raise_on_error=False)
    assert any('max_controller_speed' in key for key, _ in errors)

    config = _config(max_controller_speed=True)
    errors = validate_ranges(config, CONFIG_VALIDATION_RULES, raise_on_error=False)
    assert any('max_controller_speed' in key for key, _ in errors)


def test_controller_limit_above_unlimited():
    """测试控制器上限大于绝对上限为 ERROR，非严格模式下允许启动"""
    config = _config(max_controller_speed=1.5, max_unlimited_speed=1.0)

    with pytest.raises(ConfigValidationError):
        validate_config(config)

    errors = validate_config(config, strict=False)
    assert ('motion.max_controller_speed', ValidationSeverity.ERROR) in [(k, s) for k, _, s in errors]


def test_unknown_profile_is_fatal():
    config = _config(pd_params='PdParamsFoo')
    errors = validate_logical_consistency(config)
    assert ('motion.pd_params', ValidationSeverity.FATAL) in [(k, s) for k, _, s in errors]


def test_y_symmetric_must_be_bool():
    config = _config(y_symmetric='yes')
    errors = validate_logical_consistency(config)
    assert ('motion.y_symmetric', ValidationSeverity.FATAL) in [(k, s) for k, _, s in errors]


def test_gain_key_not_in_profile():
    """测试 pd_gains 中出现配置未定义的字段"""
    config = _config()
    config['pd_gains'] = {'kp_angel': 1.0}
    errors = validate_logical_consistency(config)
    assert ('pd_gains.kp_angel', ValidationSeverity.ERROR) in [(k, s) for k, _, s in errors]


def test_warnings_do_not_block():
    """测试警告不阻止启动"""
    config = _config(commanded_speed=1.5)
    config['smoother'] = dict(config['smoother'], discretization=0.5, smoothness=0.1)

    errors = validate_config(config)

    severities = {k: s for k, _, s in errors}
    assert severities['motion.commanded_speed'] == ValidationSeverity.WARNING
    assert severities['smoother.smoothness'] == ValidationSeverity.WARNING


def test_profiles():
    """测试 PD 参数配置"""
    assert set(PROFILES) == {'PdParams', 'PdParamsArgo'}
    assert get_profile('PdParams') is PdParamsGains
    assert get_profile('PdParamsArgo').PROFILE_TYPE == PdProfileType.ARGO

    gains = PdParamsGains()
    assert gains.to_dict() == {
        'kp_angle': 2.0, 'kd_angle': 0.5, 'kp_position': 0.5,
        'kd_position': 0.0, 'speed_reduction_gain': 2.0,
    }
    assert PdParamsArgoGains.field_names() == PdParamsGains.field_names()
    assert PdParamsArgoGains.validation_rules()['pd_gains.kp_angle'][1] == 5.0


def test_unknown_profile_raises():
    """测试未知配置名不回退到默认配置"""
    with pytest.raises(UnknownProfileError) as exc_info:
        get_profile('Default')
    assert exc_info.value.name == 'Default'
    assert 'PdParams' in exc_info.value.available


def test_gains_are_immutable():
    """测试增益 dataclass 不可变，更新返回新实例"""
    gains = PdParamsGains()
    with pytest.raises(AttributeError):
        gains.kp_angle = 1.0

    updated = gains.with_updates({'kp_angle': 1})
    assert updated.kp_angle == 1.0
    assert gains.kp_angle == 2.0
    assert isinstance(PdParamsArgoGains().with_updates({'kd_angle': 0.1}), PdParamsArgoGains)
