"""参数存储测试"""
import copy
import threading

import pytest

from vehicle_controller.config.parameter_store import (
    ParameterStore, MotionParameters, ControllerParameters,
)
from vehicle_controller.config.profiles import PdParamsGains, PdParamsArgoGains
from vehicle_controller.config.default_config import DEFAULT_CONFIG
from vehicle_controller.core.exceptions import ConfigValidationError, UnknownProfileError


def test_default_store():
    """测试默认参数"""
    store = ParameterStore()
    params = store.get_snapshot()

    assert isinstance(params, ControllerParameters)
    assert params.profile_name == 'PdParams'
    assert params.gains == PdParamsGains()
    assert params.motion.max_controller_speed == 0.5
    assert not params.motion.is_y_symmetric()


def test_profile_mismatch():
    """测试增益类型与配置名不一致"""
    with pytest.raises(ConfigValidationError):
        ParameterStore(MotionParameters(pd_params='PdParams'), PdParamsArgoGains())


def test_constructor_rejects_zero_angular_rate():
    """测试直接构造时同样执行逻辑一致性检查"""
    with pytest.raises(ConfigValidationError) as exc_info:
        ParameterStore(MotionParameters(max_controller_angular_rate=0.0))

    keys = [key for key, _ in exc_info.value.errors]
    assert 'motion.max_controller_angular_rate' in keys


def test_constructor_rejects_inconsistent_motion():
    """测试控制器上限超过绝对上限、y_symmetric 非布尔值"""
    with pytest.raises(ConfigValidationError):
        ParameterStore(MotionParameters(max_controller_speed=1.5, max_unlimited_speed=1.0))
    with pytest.raises(ConfigValidationError):
        ParameterStore(MotionParameters(y_symmetric=1))


def test_constructor_rejects_out_of_range():
    """测试运动参数和增益的范围检查"""
    with pytest.raises(ConfigValidationError):
        ParameterStore(MotionParameters(max_unlimited_speed=50.0, max_controller_speed=0.5))
    with pytest.raises(ConfigValidationError):
        ParameterStore(gains=PdParamsGains(kp_angle=50.0))
    # PdParams 范围内的 8.0 超出 Argo 范围
    with pytest.raises(ConfigValidationError):
        ParameterStore(MotionParameters(pd_params='PdParamsArgo'), PdParamsArgoGains(kp_angle=8.0))


def test_constructor_accepts_commanded_speed_warning():
    """测试 WARNING 级问题不阻止构造"""
    store = ParameterStore(MotionParameters(commanded_speed=1.5))
    assert store.get_snapshot().motion.commanded_speed == 1.5


def test_from_config():
    config = copy.deepcopy(DEFAULT_CONFIG)
    config['motion']['pd_params'] = 'PdParamsArgo'
    config['pd_gains'] = {'kd_position': 0.2}

    store = ParameterStore.from_config(config)

    assert store.profile is PdParamsArgoGains
    assert store.get_snapshot().gains.kd_position == 0.2
    assert store.get_snapshot().gains.kp_angle == PdParamsArgoGains().kp_angle


def test_from_config_gain_out_of_range():
    """测试初始增益超出所选配置的范围"""
    config = copy.deepcopy(DEFAULT_CONFIG)
    config['motion']['pd_params'] = 'PdParamsArgo'
    # PdParams 允许 8.0，Argo 只允许到 5.0
    config['pd_gains'] = {'kp_angle': 8.0}

    with pytest.raises(ConfigValidationError):
        ParameterStore.from_config(config)


def test_from_config_unknown_profile():
    config = copy.deepcopy(DEFAULT_CONFIG)
    config['motion']['pd_params'] = 'unknown'

    with pytest.raises(UnknownProfileError):
        ParameterStore.from_config(config)


def test_apply_update():
    """测试调参更新生成新快照"""
    store = ParameterStore()
    before = store.get_snapshot()

    after = store.apply_update({'kp_angle': 3.0, 'speed_reduction_gain': 1})

    assert after.gains.kp_angle == 3.0
    assert after.gains.speed_reduction_gain == 1.0
    assert store.get_snapshot() is after
    # 旧快照不变
    assert before.gains.kp_angle == 2.0


def test_apply_update_rejects_unknown_key():
    """测试未知字段被拒绝，快照保持不变"""
    store = ParameterStore()
    before = store.get_snapshot()

    with pytest.raises(ConfigValidationError) as exc_info:
        store.apply_update({'kp_angle': 1.0, 'ki_angle': 0.1})

    assert exc_info.value.errors[0][0] == 'pd_gains.ki_angle'
    assert store.get_snapshot() is before


def test_apply_update_rejects_out_of_range():
    store = ParameterStore(MotionParameters(pd_params='PdParamsArgo'))
    before = store.get_snapshot()

    with pytest.raises(ConfigValidationError):
        store.apply_update({'kp_angle': 6.0})
    with pytest.raises(ConfigValidationError):
        store.apply_update({'kd_angle': -0.1})

    assert store.get_snapshot() is before


def test_update_motion():
    """测试运动参数更新"""
    store = ParameterStore()
    params = store.update_motion({'max_controller_speed': 0.8, 'y_symmetric': True})

    assert params.motion.max_controller_speed == 0.8
    assert params.motion.is_y_symmetric()
    assert params.gains == PdParamsGains()


def test_update_motion_rejects_inconsistent_limits():
    """测试控制器上限超过绝对上限被拒绝"""
    store = ParameterStore()
    before = store.get_snapshot()

    with pytest.raises(ConfigValidationError):
        store.update_motion({'max_controller_speed': 1.5})
    with pytest.raises(ConfigValidationError):
        store.update_motion({'pd_params': 'PdParamsArgo'})
    with pytest.raises(ConfigValidationError):
        store.update_motion({'max_speed': 1.0})

    assert store.get_snapshot() is before


def test_concurrent_updates_never_half_applied():
    """测试并发调参时读到的快照总是完整的"""
    store = ParameterStore()
    store.apply_update({'kp_angle': 0.0, 'kd_angle': 0.0})
    errors = []
    stop = threading.Event()

    def writer():
        for i in range(200):
            value = (i % 50) / 10.0
            store.apply_update({'kp_angle': value, 'kd_angle': value})
        stop.set()

    def reader():
        while not stop.is_set():
            gains = store.get_snapshot().gains
            if gains.kp_angle != gains.kd_angle:
                errors.append((gains.kp_angle, gains.kd_angle))

    threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10.0)

    assert not errors
    assert store.get_snapshot().gains.kp_angle == store.get_snapshot().gains.kd_angle
