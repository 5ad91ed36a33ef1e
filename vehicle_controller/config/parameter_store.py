"""
运行时参数存储

运动参数和 PD 增益被控制调用和调参通道共享：
- 控制调用在每个周期开始时通过 get_snapshot() 取一份不可变快照
- 调参通道通过 apply_update() / update_motion() 提交更新
- 更新先完整验证，再在锁内生成新快照并整体替换

因此控制调用永远不会读到更新了一半的参数。

使用示例:
    store = ParameterStore.from_config(load_config('robot.yaml'))
    params = store.get_snapshot()
    store.apply_update({'kp_angle': 1.8})
"""
from dataclasses import dataclass, asdict, replace, fields
from typing import Any, Dict, Optional, Type
import threading
import logging

from ..core.exceptions import ConfigValidationError
from .default_config import DEFAULT_CONFIG, validate_config
from .motion_config import MOTION_VALIDATION_RULES
from .profiles import PdParamsGains, get_profile
from .validation import (
    validate_config as validate_ranges,
    validate_logical_consistency,
    ValidationSeverity,
)

logger = logging.getLogger(__name__)


def _check_motion_consistency(motion: Dict[str, Any]) -> None:
    """逻辑一致性检查，FATAL / ERROR 级问题拒绝，WARNING 放行"""
    blocking = [(k, m) for k, m, s in validate_logical_consistency({'motion': motion})
                if s != ValidationSeverity.WARNING]
    if blocking:
        msgs = '\n'.join(f'  - {k}: {m}' for k, m in blocking)
        raise ConfigValidationError(f'运动参数被拒绝:\n{msgs}', blocking)


@dataclass(frozen=True)
class MotionParameters:
    """运动参数快照"""
    max_controller_speed: float = 0.5
    max_unlimited_speed: float = 1.0
    max_controller_angular_rate: float = 1.0
    max_unlimited_angular_rate: float = 2.0
    y_symmetric: bool = False
    commanded_speed: float = 0.5
    pd_params: str = 'PdParams'

    def is_y_symmetric(self) -> bool:
        return self.y_symmetric

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'MotionParameters':
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in names})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ControllerParameters:
    """控制器参数快照 (运动参数 + 当前配置的 PD 增益)"""
    motion: MotionParameters
    gains: PdParamsGains

    @property
    def profile_name(self) -> str:
        return self.gains.PROFILE_NAME


class ParameterStore:
    """
    线程安全的参数存储

    持有一份不可变的 ControllerParameters，所有更新都以整体替换的方式完成。
    PD 配置 (PdParams / PdParamsArgo) 在构造时确定，之后不可更改。
    """

    def __init__(self, motion: Optional[MotionParameters] = None,
                 gains: Optional[PdParamsGains] = None):
        motion = motion or MotionParameters()
        if gains is None:
            gains = get_profile(motion.pd_params)()
        elif gains.PROFILE_NAME != motion.pd_params:
            raise ConfigValidationError(
                f"Gain set {gains.PROFILE_NAME!r} does not match profile {motion.pd_params!r}",
                [('motion.pd_params', 'profile mismatch')])

        validate_ranges({'motion': motion.to_dict()}, MOTION_VALIDATION_RULES, raise_on_error=True)
        validate_ranges({'pd_gains': gains.to_dict()}, type(gains).validation_rules(), raise_on_error=True)
        _check_motion_consistency(motion.to_dict())

        self._lock = threading.Lock()
        self._snapshot = ControllerParameters(motion=motion, gains=gains)

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> 'ParameterStore':
        """
        从配置字典创建

        Raises:
            UnknownProfileError: 未知的 PD 配置名
            ConfigValidationError: 配置或初始增益无效
        """
        config = config if config is not None else DEFAULT_CONFIG
        motion_config = config.get('motion', DEFAULT_CONFIG['motion'])
        profile = get_profile(motion_config.get('pd_params', 'PdParams'))

        validate_config(config, raise_on_error=True)

        gain_overrides = config.get('pd_gains') or {}
        validate_ranges({'pd_gains': gain_overrides}, profile.validation_rules(),
                        raise_on_error=True)

        motion = MotionParameters.from_dict(motion_config)
        gains = profile.from_dict(gain_overrides)
        logger.info(f"Parameter store initialized with profile {profile.PROFILE_NAME}: {gains.to_dict()}")
        return cls(motion, gains)

    @property
    def profile(self) -> Type[PdParamsGains]:
        return type(self._snapshot.gains)

    def get_snapshot(self) -> ControllerParameters:
        """获取当前参数快照 (不可变，可在锁外使用)"""
        with self._lock:
            return self._snapshot

    def apply_update(self, update: Dict[str, Any]) -> ControllerParameters:
        """
        应用 PD 增益更新 (调参通道)

        Args:
            update: {字段名: 新值}，字段必须属于当前配置

        Returns:
            更新后的快照

        Raises:
            ConfigValidationError: 未知字段或超出范围，快照保持不变
        """
        profile = self.profile
        unknown = [k for k in update if k not in profile.field_names()]
        if unknown:
            errors = [(f'pd_gains.{k}', f'{profile.PROFILE_NAME} 配置中没有参数 {k!r}') for k in unknown]
            raise ConfigValidationError(
                f"Unknown gain(s) for profile {profile.PROFILE_NAME}: {', '.join(unknown)}", errors)

        validate_ranges({'pd_gains': update}, profile.validation_rules(), raise_on_error=True)

        with self._lock:
            self._snapshot = replace(self._snapshot, gains=self._snapshot.gains.with_updates(update))
            snapshot = self._snapshot

        logger.info(f"PD gains updated ({profile.PROFILE_NAME}): {update}")
        return snapshot

    def update_motion(self, update: Dict[str, Any]) -> ControllerParameters:
        """
        应用运动参数更新

        pd_params 不能在运行时更改。

        Raises:
            ConfigValidationError: 未知字段、超出范围或逻辑不一致，快照保持不变
        """
        names = {f.name for f in fields(MotionParameters)}
        unknown = [k for k in update if k not in names]
        if unknown:
            raise ConfigValidationError(
                f"Unknown motion parameter(s): {', '.join(unknown)}",
                [(f'motion.{k}', 'unknown parameter') for k in unknown])
        if 'pd_params' in update and update['pd_params'] != self.profile.PROFILE_NAME:
            raise ConfigValidationError(
                "PD parameter profile cannot be changed at runtime",
                [('motion.pd_params', 'profile is fixed at configuration time')])

        validate_ranges({'motion': update}, MOTION_VALIDATION_RULES, raise_on_error=True)

        with self._lock:
            candidate = {**self._snapshot.motion.to_dict(), **update}
            _check_motion_consistency(candidate)
            self._snapshot = replace(self._snapshot, motion=MotionParameters.from_dict(candidate))
            snapshot = self._snapshot

        logger.info(f"Motion parameters updated: {update}")
        return snapshot

