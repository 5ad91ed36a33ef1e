"""
差速车辆运动控制核心 (Vehicle Controller)

版本: v1.2.0

把稀疏路径点转换为平滑、带姿态的参考轨迹，并把跟踪误差转换为受限的速度命令。

特性:
- 路径平滑: 弧长重采样 + 高斯核回归，自动生成姿态四元数
- 倒车判定: 短路径且起终点姿态都背对路径时倒车通行
- PD 控制: 误差状态按实例隔离，新路径开始时显式重置
- 转向减速包络: 角速度越大允许的线速度越小
- 运行时调参: 线程安全的参数快照，更新整体替换
- 传输无关: 速度命令和诊断数据通过回调交给外部传输层

使用示例:
    from vehicle_controller import PathSmoother3D, DifferentialDriveController

    smoother = PathSmoother3D(allow_reverse_paths=True)
    path = smoother.smooth(waypoints, start_q, end_q)

    controller = DifferentialDriveController.configure('robot.yaml')
    controller.reset_session()
    cmd = controller.execute_pd_controlled_motion_command(e_angle, e_pos, dt)
"""

__version__ = "1.2.0"
__author__ = "Vehicle Controller Team"

from .config import DEFAULT_CONFIG, load_config, ParameterStore, get_config_value
from .core.enums import PdProfileType, TraversalDirection
from .core.data_types import (
    Header, Point3D, Vector3, Quaternion, Twist, PdOutput, SmoothedPath,
)
from .core.interfaces import ILifecycleComponent, IPathSmoother, IDriveController
from .core.exceptions import (
    VehicleControllerError, ConfigurationError, ConfigValidationError,
    UnknownProfileError, ControllerRuntimeError, InvalidInputError,
    DegenerateGeometryError,
)
from .smoother.path_smoother import PathSmoother3D
from .tracker.differential_drive import DifferentialDriveController
from .diagnostics.publisher import MessagePublisher

__all__ = [
    # 版本
    '__version__',
    # 主要组件
    'PathSmoother3D',
    'DifferentialDriveController',
    'MessagePublisher',
    # 配置
    'DEFAULT_CONFIG',
    'load_config',
    'ParameterStore',
    'get_config_value',
    # 枚举
    'PdProfileType',
    'TraversalDirection',
    # 数据类型
    'Header',
    'Point3D',
    'Vector3',
    'Quaternion',
    'Twist',
    'PdOutput',
    'SmoothedPath',
    # 接口
    'ILifecycleComponent',
    'IPathSmoother',
    'IDriveController',
    # 异常
    'VehicleControllerError',
    'ConfigurationError',
    'ConfigValidationError',
    'UnknownProfileError',
    'ControllerRuntimeError',
    'InvalidInputError',
    'DegenerateGeometryError',
]
