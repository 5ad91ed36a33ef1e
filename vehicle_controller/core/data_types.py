"""
数据类型定义

本模块定义了路径平滑器和驱动控制器使用的核心数据类型。

坐标系说明:
===========

- 路径点和平滑后的轨迹都在同一个世界坐标系下
- 机器人局部前进方向为 X 轴 (1, 0, 0)
- 四元数统一使用 (x, y, z, w) 顺序，与 geometry_msgs 和 scipy 一致

数据流:
   waypoints → PathSmoother3D → SmoothedPath
   误差 → DifferentialDriveController → Twist (+ PdOutput 诊断)
"""
from dataclasses import dataclass, field
from typing import Dict, Any
import math

import numpy as np

from .enums import TraversalDirection
from .constants import DIAGNOSTICS_FRAME_ID


@dataclass
class Header:
    """ROS Header 模拟"""
    stamp: float = 0.0  # 时间戳 (秒)
    frame_id: str = ""
    seq: int = 0


@dataclass
class Point3D:
    """3D 点"""
    x: float
    y: float
    z: float


@dataclass
class Vector3:
    """3D 向量 (兼容 geometry_msgs/Vector3)"""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class Quaternion:
    """四元数 (兼容 geometry_msgs/Quaternion)"""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


@dataclass
class Twist:
    """速度命令 (兼容 geometry_msgs/Twist)

    差速底盘只使用 linear.x (线速度) 和 angular.z (角速度)。
    """
    linear: Vector3 = field(default_factory=Vector3)
    angular: Vector3 = field(default_factory=Vector3)

    @classmethod
    def from_speed(cls, linear_x: float = 0.0, angular_z: float = 0.0) -> 'Twist':
        """由线速度和角速度构造"""
        return cls(linear=Vector3(x=float(linear_x)), angular=Vector3(z=float(angular_z)))

    @property
    def speed(self) -> float:
        return self.linear.x

    @property
    def angular_rate(self) -> float:
        return self.angular.z

    def to_ros_msg(self) -> Dict[str, Any]:
        """转换为 ROS 消息格式的字典"""
        return {
            'linear': {'x': self.linear.x, 'y': self.linear.y, 'z': self.linear.z},
            'angular': {'x': self.angular.x, 'y': self.angular.y, 'z': self.angular.z},
        }


@dataclass
class PdOutput:
    """PD 控制诊断数据

    每个 PD 控制周期生成一次，只用于记录，不反馈到控制中。
    *_real 字段为限幅后的实际输出。
    """
    header: Header = field(default_factory=lambda: Header(frame_id=DIAGNOSTICS_FRAME_ID))
    dt: float = 0.0
    e_position: float = 0.0
    e_angle: float = 0.0
    de_position_dt: float = 0.0
    de_angle_dt: float = 0.0
    speed: float = 0.0            # 原始线速度
    z_twist: float = 0.0          # 原始角速度 (rad/s)
    z_twist_real: float = 0.0     # 限幅后角速度 (rad/s)
    z_twist_deg: float = 0.0      # 原始角速度 (deg/s)
    speed_real: float = 0.0       # 限幅后线速度
    z_twist_deg_real: float = 0.0  # 限幅后角速度 (deg/s)

    def to_ros_msg(self) -> Dict[str, Any]:
        """转换为 ROS 消息格式的字典"""
        return {
            'header': {'stamp': self.header.stamp, 'frame_id': self.header.frame_id},
            'dt': self.dt,
            'e_position': self.e_position,
            'e_angle': self.e_angle,
            'de_position_dt': self.de_position_dt,
            'de_angle_dt': self.de_angle_dt,
            'speed': self.speed,
            'z_twist': self.z_twist,
            'z_twist_real': self.z_twist_real,
            'z_twist_deg': self.z_twist_deg,
            'speed_real': self.speed_real,
            'z_twist_deg_real': self.z_twist_deg_real,
        }


def rad_to_deg(value: float) -> float:
    return value / math.pi * 180.0


@dataclass
class SmoothedPath:
    """平滑后的路径

    Attributes:
        positions: 位置数组 [M, 3]
        orientations: 四元数数组 [M, 4]: (x, y, z, w)
        reverse: 是否倒车通行
    """
    positions: np.ndarray
    orientations: np.ndarray
    reverse: bool = False

    def __len__(self) -> int:
        return len(self.positions)

    @property
    def direction(self) -> TraversalDirection:
        return TraversalDirection.REVERSE if self.reverse else TraversalDirection.FORWARD

    def as_points(self) -> list:
        return [Point3D(float(p[0]), float(p[1]), float(p[2])) for p in self.positions]

    def as_quaternions(self) -> list:
        return [Quaternion(float(q[0]), float(q[1]), float(q[2]), float(q[3]))
                for q in self.orientations]
