"""
差速底盘 PD 驱动控制器

把外部跟踪器给出的角度误差和位置误差转换为受限的速度命令 (linear.x, angular.z)。

限幅顺序 (limit_twist):
======================

1. 线速度、角速度先裁剪到绝对上限 (max_unlimited_*)
2. 根据 |角速度| 计算线速度包络:
   envelope = clip(v_max - v_max / w_max * |w| * speed_reduction_gain, 0, max_speed)
3. 线速度裁剪到 [-envelope, envelope]
4. 角速度直接裁剪到 [-max_angular_rate, max_angular_rate]，不受线速度影响

误差状态:
=========

上一周期的误差由控制器实例持有，不在实例之间共享。
开始跟踪新路径时必须调用 reset_session()，否则第一帧的微分项
会基于上一条路径的误差计算。
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Union
import logging
import math
import time

import numpy as np

from ..core.interfaces import IDriveController
from ..core.data_types import Twist, PdOutput, Header, rad_to_deg
from ..core.constants import (
    EPSILON, PROPORTIONAL_ANGULAR_GAIN, REVERSE_ANGULAR_GAIN_SCALE,
    ANGLE_RANGE_TOLERANCE, DIAGNOSTICS_FRAME_ID,
)
from ..core.exceptions import InvalidInputError, DegenerateGeometryError
from ..core.logging_config import ThrottledLogger
from ..config.loader import load_config
from ..config.parameter_store import ParameterStore, ControllerParameters
from ..config.profiles import PdParamsGains
from ..diagnostics.publisher import MessagePublisher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorState:
    """上一周期的误差"""
    angle_error: float = 0.0
    position_error: float = 0.0


@dataclass(frozen=True)
class PdTerms:
    """单周期 PD 计算结果 (限幅前)"""
    angle_error: float
    position_error: float
    d_angle: float
    d_position: float
    speed: float
    angular_rate: float


def fold_angle_error(angle_error: float) -> float:
    """
    对称底盘的角度折叠

    前后对称的底盘不需要掉头，把误差折叠到 [-π/2, π/2]。
    """
    if angle_error > math.pi / 2:
        return angle_error - math.pi
    if angle_error < -math.pi / 2:
        return angle_error + math.pi
    return angle_error


def compute_pd_terms(gains: PdParamsGains, state: Optional[ErrorState],
                     angle_error: float, position_error: float,
                     dt: float) -> Tuple[PdTerms, ErrorState]:
    """
    PD 控制律

    Args:
        gains: PD 增益
        state: 上一周期误差，None 表示会话第一帧 (微分项为 0)
        angle_error: 角度误差 (已折叠)
        position_error: 位置误差
        dt: 周期 (s)，必须 > 0

    Returns:
        (本周期 PD 结果, 新的误差状态)
    """
    if not dt > 0:
        raise InvalidInputError(f"dt must be positive, got {dt}")

    if state is None:
        state = ErrorState(angle_error, position_error)

    d_angle = (angle_error - state.angle_error) / dt
    d_position = (position_error - state.position_error) / dt

    speed = gains.kp_position * position_error + gains.kd_position * d_position
    angular_rate = gains.kp_angle * angle_error + gains.kd_angle * d_angle

    terms = PdTerms(angle_error=angle_error, position_error=position_error,
                    d_angle=d_angle, d_position=d_position,
                    speed=speed, angular_rate=angular_rate)
    return terms, ErrorState(angle_error, position_error)


class DifferentialDriveController(IDriveController):
    """
    差速底盘驱动控制器

    参数通过 ParameterStore 读取，每次控制调用开始时取一份快照，
    调参通道的更新不会在一次调用中途生效。

    使用示例:
        controller = DifferentialDriveController.configure('robot.yaml')
        controller.cmd_vel_publisher.add_callback(transport.send_twist)

        controller.reset_session()
        while tracking:
            controller.execute_pd_controlled_motion_command(e_angle, e_pos, dt)
        controller.stop()
    """

    def __init__(self, parameter_store: Optional[ParameterStore] = None,
                 cmd_vel_publisher: Optional[MessagePublisher] = None,
                 pdout_publisher: Optional[MessagePublisher] = None,
                 clock: Callable[[], float] = time.time):
        self.parameter_store = parameter_store or ParameterStore()
        self.cmd_vel_publisher = cmd_vel_publisher or MessagePublisher('cmd_vel_raw')
        self.pdout_publisher = pdout_publisher or MessagePublisher('pdout')
        self._clock = clock

        self._error_state: Optional[ErrorState] = None
        self._last_command: Optional[Twist] = None
        self._throttled = ThrottledLogger(logger, min_interval=1.0)

    @classmethod
    def configure(cls, config: Union[str, Dict[str, Any], None] = None,
                  **kwargs) -> 'DifferentialDriveController':
        """
        按启动配置创建控制器

        Args:
            config: YAML 路径、配置字典或 None (默认配置)

        Raises:
            UnknownProfileError: PD 参数配置名无法识别
            ConfigValidationError: 配置无效
        """
        store = ParameterStore.from_config(load_config(config))
        return cls(parameter_store=store, **kwargs)

    @property
    def params(self) -> ControllerParameters:
        return self.parameter_store.get_snapshot()

    @property
    def error_state(self) -> Optional[ErrorState]:
        return self._error_state

    @property
    def last_command(self) -> Optional[Twist]:
        return self._last_command

    # ==================== 生命周期 ====================

    def reset_session(self) -> None:
        """开始新路径时清除误差状态"""
        self._error_state = None
        logger.info("Control session reset")

    def reset(self) -> None:
        self.reset_session()

    def shutdown(self) -> None:
        self.cmd_vel_publisher.clear_callbacks()
        self.pdout_publisher.clear_callbacks()

    # ==================== 限幅 ====================

    def speed_envelope(self, angular_rate: float, max_speed: float,
                       params: Optional[ControllerParameters] = None) -> float:
        """转向减速包络: 允许的最大线速度随 |角速度| 线性下降"""
        params = params or self.params
        mp = params.motion
        slope = mp.max_controller_speed / mp.max_controller_angular_rate
        envelope = mp.max_controller_speed - slope * abs(angular_rate) * params.gains.speed_reduction_gain
        return min(max(0.0, envelope), max_speed)

    def limit_twist(self, cmd: Twist, max_speed: float, max_angular_rate: float,
                    params: Optional[ControllerParameters] = None) -> Twist:
        """
        速度命令限幅，返回新的 Twist，不修改输入

        Args:
            cmd: 原始速度命令
            max_speed: 线速度上限
            max_angular_rate: 角速度上限
            params: 参数快照，None 时读取当前快照
        """
        params = params or self.params
        mp = params.motion

        speed = float(np.clip(cmd.linear.x, -mp.max_unlimited_speed, mp.max_unlimited_speed))
        angular = float(np.clip(cmd.angular.z, -mp.max_unlimited_angular_rate,
                                mp.max_unlimited_angular_rate))

        envelope = self.speed_envelope(angular, max_speed, params)
        speed = float(np.clip(speed, -envelope, envelope))
        angular = float(np.clip(angular, -max_angular_rate, max_angular_rate))

        return Twist.from_speed(speed, angular)

    # ==================== 命令执行 ====================

    def _publish(self, cmd: Twist) -> Twist:
        self._last_command = cmd
        self.cmd_vel_publisher.publish(cmd.to_ros_msg())
        return cmd

    def execute_unlimited_twist(self, cmd: Twist) -> Twist:
        """只裁剪到绝对上限，不做包络限幅"""
        mp = self.params.motion
        limited = Twist.from_speed(
            float(np.clip(cmd.linear.x, -mp.max_unlimited_speed, mp.max_unlimited_speed)),
            float(np.clip(cmd.angular.z, -mp.max_unlimited_angular_rate, mp.max_unlimited_angular_rate)),
        )
        return self._publish(limited)

    def execute_twist(self, cmd: Twist) -> Twist:
        params = self.params
        limited = self.limit_twist(cmd, params.motion.max_controller_speed,
                                   params.motion.max_controller_angular_rate, params)
        return self._publish(limited)

    def stop(self) -> Twist:
        """发布零速度，不清除误差状态"""
        return self._publish(Twist())

    def execute_pd_controlled_motion_command(self, angle_error: float, position_error: float,
                                            dt: float,
                                            commanded_speed: Optional[float] = None) -> Twist:
        """
        PD 控制

        Args:
            angle_error: 角度误差 (rad)
            position_error: 位置误差 (m)，带符号
            dt: 距上一周期的时间 (s)
            commanded_speed: 期望速度，None 时使用 motion.commanded_speed

        Returns:
            发布的速度命令
        """
        params = self.params
        mp = params.motion
        if commanded_speed is None:
            commanded_speed = mp.commanded_speed

        if mp.is_y_symmetric():
            angle_error = fold_angle_error(angle_error)

        terms, new_state = compute_pd_terms(params.gains, self._error_state,
                                            angle_error, position_error, dt)

        speed = terms.speed
        if abs(speed) > abs(commanded_speed):
            speed = math.copysign(abs(commanded_speed), speed)

        raw = Twist.from_speed(speed, terms.angular_rate)
        limited = self.limit_twist(raw, mp.max_controller_speed,
                                   mp.max_controller_angular_rate, params)

        logger.debug(
            f"PD: e_angle={terms.angle_error:.3f}, de_angle={terms.d_angle:.3f}, "
            f"e_pos={terms.position_error:.3f}, de_pos={terms.d_position:.3f}, "
            f"v={speed:.3f}->{limited.speed:.3f}, w={terms.angular_rate:.3f}->{limited.angular_rate:.3f}"
        )

        self._publish(limited)
        self.pdout_publisher.publish(self._make_pd_output(dt, terms, raw, limited).to_ros_msg())

        self._error_state = new_state
        return limited

    def _make_pd_output(self, dt: float, terms: PdTerms, raw: Twist, limited: Twist) -> PdOutput:
        return PdOutput(
            header=Header(stamp=self._clock(), frame_id=DIAGNOSTICS_FRAME_ID),
            dt=dt,
            e_position=terms.position_error,
            e_angle=terms.angle_error,
            de_position_dt=terms.d_position,
            de_angle_dt=terms.d_angle,
            speed=raw.speed,
            z_twist=raw.angular_rate,
            z_twist_real=limited.angular_rate,
            z_twist_deg=rad_to_deg(raw.angular_rate),
            speed_real=limited.speed,
            z_twist_deg_real=rad_to_deg(limited.angular_rate),
        )

    def execute_motion_command(self, relative_angle: float, orientation_error: float,
                               distance: float, speed: float,
                               signed_carrot_distance: Optional[float] = None,
                               dt: Optional[float] = None) -> Twist:
        """
        跟踪器命令入口

        给出 dt 和 signed_carrot_distance 时走 PD 控制:
        relative_angle 作为角度误差，signed_carrot_distance 作为位置误差。
        两者都不给时走纯比例控制: 线速度取 speed，角速度按距离归一化。

        PD 控制下 relative_angle 超出 [-π-0.01, π+0.01] 时记录 WARNING 并照常使用该值。
        该告警经 ThrottledLogger 节流，每个控制器实例每秒最多一条，
        而不是每次调用都记录；间隔内的其余无效角度不产生日志。

        Args:
            relative_angle: 机器人朝向与目标点方向的夹角 (rad)
            orientation_error: 机器人朝向与路径切向的夹角 (rad)
            distance: 到目标点的距离 (m)，比例控制时必须 > 0
            speed: 期望速度，负值表示倒车
            signed_carrot_distance: 带符号的目标点距离 (m)
            dt: 周期 (s)

        Raises:
            InvalidInputError: dt 与 signed_carrot_distance 只给出其中一个
            DegenerateGeometryError: 比例控制时 distance <= 0
        """
        if (dt is None) != (signed_carrot_distance is None):
            raise InvalidInputError(
                "dt and signed_carrot_distance must be given together "
                f"(dt={dt}, signed_carrot_distance={signed_carrot_distance})")

        if dt is not None:
            if abs(relative_angle) > math.pi + ANGLE_RANGE_TOLERANCE:
                self._throttled.warning(
                    f"Invalid angle was given: {relative_angle:.3f} rad", key='invalid_angle')
            if abs(speed) < EPSILON:
                logger.info("commanded speed is 0")
                speed = 0.0
            return self.execute_pd_controlled_motion_command(
                relative_angle, signed_carrot_distance, dt, commanded_speed=speed)

        if distance <= EPSILON:
            raise DegenerateGeometryError(f"distance must be positive, got {distance}")

        if speed < 0:
            angular = orientation_error / distance * PROPORTIONAL_ANGULAR_GAIN * REVERSE_ANGULAR_GAIN_SCALE
        else:
            angular = relative_angle / distance * PROPORTIONAL_ANGULAR_GAIN

        params = self.params
        limited = self.limit_twist(Twist.from_speed(speed, angular),
                                   params.motion.max_controller_speed,
                                   params.motion.max_controller_angular_rate, params)
        return self._publish(limited)
