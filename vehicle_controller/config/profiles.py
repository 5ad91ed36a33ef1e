"""
PD 参数配置 (Profiles)

两种可调参数结构，启动时由 motion.pd_params 选定，之后不可切换：

- PdParams:     默认底盘
- PdParamsArgo: Argo 底盘，增益更保守，可调范围更窄

每种配置都是不可变 dataclass，运行时调参通过 ParameterStore 生成新实例。
"""
from dataclasses import dataclass, fields, asdict, replace
from typing import Any, ClassVar, Dict, List, Tuple, Type

from ..core.enums import PdProfileType
from ..core.exceptions import UnknownProfileError


@dataclass(frozen=True)
class PdParamsGains:
    """默认 PD 增益"""
    kp_angle: float = 2.0
    kd_angle: float = 0.5
    kp_position: float = 0.5
    kd_position: float = 0.0
    speed_reduction_gain: float = 2.0

    PROFILE_NAME: ClassVar[str] = 'PdParams'
    PROFILE_TYPE: ClassVar[PdProfileType] = PdProfileType.DEFAULT

    # 可调范围 {字段: (最小值, 最大值, 描述)}
    RANGES: ClassVar[Dict[str, Tuple[float, float, str]]] = {
        'kp_angle': (0.0, 10.0, '角度比例增益'),
        'kd_angle': (0.0, 5.0, '角度微分增益'),
        'kp_position': (0.0, 5.0, '位置比例增益'),
        'kd_position': (0.0, 5.0, '位置微分增益'),
        'speed_reduction_gain': (0.0, 10.0, '转向减速增益'),
    }

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def validation_rules(cls) -> Dict[str, Tuple[float, float, str]]:
        """生成 validate_config 使用的规则，键为 'pd_gains.<字段>'"""
        return {f'pd_gains.{name}': rule for name, rule in cls.RANGES.items()}

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'PdParamsGains':
        """从字典构造，未给出的字段使用默认值，忽略未知键"""
        known = {k: float(v) for k, v in values.items() if k in cls.field_names()}
        return cls(**known)

    def with_updates(self, update: Dict[str, Any]) -> 'PdParamsGains':
        return replace(self, **{k: float(v) for k, v in update.items()})

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class PdParamsArgoGains(PdParamsGains):
    """Argo 底盘 PD 增益"""
    kp_angle: float = 1.5
    kd_angle: float = 0.3
    kp_position: float = 0.4
    kd_position: float = 0.05
    speed_reduction_gain: float = 1.0

    PROFILE_NAME: ClassVar[str] = 'PdParamsArgo'
    PROFILE_TYPE: ClassVar[PdProfileType] = PdProfileType.ARGO

    RANGES: ClassVar[Dict[str, Tuple[float, float, str]]] = {
        'kp_angle': (0.0, 5.0, 'Argo 角度比例增益'),
        'kd_angle': (0.0, 2.0, 'Argo 角度微分增益'),
        'kp_position': (0.0, 3.0, 'Argo 位置比例增益'),
        'kd_position': (0.0, 2.0, 'Argo 位置微分增益'),
        'speed_reduction_gain': (0.0, 5.0, 'Argo 转向减速增益'),
    }


PROFILES: Dict[str, Type[PdParamsGains]] = {
    PdParamsGains.PROFILE_NAME: PdParamsGains,
    PdParamsArgoGains.PROFILE_NAME: PdParamsArgoGains,
}


def get_profile(name: str) -> Type[PdParamsGains]:
    """
    按名称获取 PD 参数配置类

    Raises:
        UnknownProfileError: 名称无法识别 (不回退到默认配置)
    """
    try:
        return PROFILES[name]
    except (KeyError, TypeError):
        raise UnknownProfileError(name, list(PROFILES.keys())) from None
