"""
通用常量定义

本模块定义了路径平滑器和驱动控制器共用的常量。

常量分类:
=========

1. 数值稳定性常量 (Numerical Stability)
   - 用于避免除零、零长度向量归一化等问题

2. 路径平滑常量 (Path Smoothing)
   - 离散步长、平滑带宽、倒车判定阈值

3. 控制律常量 (Control Law)
   - 比例控制的固定增益、角度有效范围容差

使用示例:
=========

    from vehicle_controller.core.constants import (
        EPSILON, MIN_SEGMENT_LENGTH,
    )

    if distance > EPSILON:
        rate = angle / distance
"""

# =============================================================================
# 数值稳定性常量 (Numerical Stability Constants)
# =============================================================================

# 通用小量阈值
# 用于一般的数值比较和避免除零
EPSILON = 1e-6

# 更严格的小量阈值
EPSILON_SMALL = 1e-9

# 最小线段长度
# 用于几何计算中判断点是否重合
# 选择依据: 1e-6 m = 1 微米，远小于任何实际测量精度
MIN_SEGMENT_LENGTH = 1e-6

# 最小路径总长度
# 总弧长低于此值的路径无法定义切向，直接拒绝
MIN_PATH_LENGTH = 1e-6

# 四元数范数平方的有效范围
# 超出范围的四元数认为是数据错误，而不是数值误差
QUATERNION_NORM_SQ_MIN = 0.25
QUATERNION_NORM_SQ_MAX = 4.0


# =============================================================================
# 路径平滑常量 (Path Smoothing Constants)
# =============================================================================

# 平滑路径离散步长 (沿弧长的采样间隔，m)
SMOOTHED_PATH_DISCRETIZATION = 0.05

# 高斯核带宽 (m)
PATH_SMOOTHNESS = 0.125

# 倒车判定的路径长度阈值 (m)
# 经验值，只对短路径启用倒车；未经重新整定不要修改
REVERSE_PATH_MAX_LENGTH = 1.5

# 机器人局部前进方向
LOCAL_ROBOT_DIRECTION = (1.0, 0.0, 0.0)


# =============================================================================
# 控制律常量 (Control Law Constants)
# =============================================================================

# 比例控制 (无 dt 版本) 的角速度增益
PROPORTIONAL_ANGULAR_GAIN = 1.5

# 倒车时航向误差增益的缩放系数
REVERSE_ANGULAR_GAIN_SCALE = 0.25

# 相对角有效范围容差 (rad)，超出 [-π-tol, π+tol] 时告警
ANGLE_RANGE_TOLERANCE = 1e-2

# 诊断消息坐标系
DIAGNOSTICS_FRAME_ID = 'world'


__all__ = [
    # 数值稳定性常量
    'EPSILON',
    'EPSILON_SMALL',
    'MIN_SEGMENT_LENGTH',
    'MIN_PATH_LENGTH',
    'QUATERNION_NORM_SQ_MIN',
    'QUATERNION_NORM_SQ_MAX',
    # 路径平滑常量
    'SMOOTHED_PATH_DISCRETIZATION',
    'PATH_SMOOTHNESS',
    'REVERSE_PATH_MAX_LENGTH',
    'LOCAL_ROBOT_DIRECTION',
    # 控制律常量
    'PROPORTIONAL_ANGULAR_GAIN',
    'REVERSE_ANGULAR_GAIN_SCALE',
    'ANGLE_RANGE_TOLERANCE',
    'DIAGNOSTICS_FRAME_ID',
]
