"""接口定义"""
from abc import ABC, abstractmethod
from typing import Any, Optional

from .data_types import Twist, SmoothedPath


class ILifecycleComponent(ABC):
    """
    生命周期组件接口

    核心方法 (必须实现):
    - reset(): 重置内部状态，保留资源，可继续使用

    可选方法 (有默认实现):
    - shutdown(): 释放所有资源，对象不应再使用
    """

    @abstractmethod
    def reset(self) -> None:
        """
        重置组件内部状态

        Note:
            应该是幂等的：多次调用应该安全
        """
        pass

    def shutdown(self) -> None:
        """关闭组件并释放资源，默认实现为空"""
        pass


class IPathSmoother(ABC):
    """路径平滑器接口"""

    @abstractmethod
    def smooth(self, path: Any, start_orientation: Any, end_orientation: Any,
               forbid_reverse_path: bool = False) -> SmoothedPath:
        """
        平滑并重采样路径

        Args:
            path: 路径点 [N, 3]，N >= 2
            start_orientation: 起点姿态四元数 (x, y, z, w)
            end_orientation: 终点姿态四元数 (x, y, z, w)
            forbid_reverse_path: 本次调用禁止倒车

        Returns:
            SmoothedPath
        """
        pass


class IDriveController(ILifecycleComponent):
    """驱动控制器接口"""

    @abstractmethod
    def execute_twist(self, cmd: Twist) -> Twist:
        """限幅后发布速度命令"""
        pass

    @abstractmethod
    def execute_unlimited_twist(self, cmd: Twist) -> Twist:
        """只做绝对上限裁剪后发布速度命令"""
        pass

    @abstractmethod
    def execute_pd_controlled_motion_command(self, angle_error: float, position_error: float,
                                            dt: float,
                                            commanded_speed: Optional[float] = None) -> Twist:
        """PD 控制律"""
        pass

    @abstractmethod
    def stop(self) -> Twist:
        """发布零速度命令"""
        pass
