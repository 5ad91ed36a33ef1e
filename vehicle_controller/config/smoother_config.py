"""路径平滑配置

- discretization: 沿弧长的重采样步长 S (m)
- smoothness: 高斯核带宽 σ (m)
- allow_reverse_paths: 是否允许倒车判定

复杂度说明:
    平滑为全点对高斯核回归，采样点数 n ≈ 路径长度 / S，
    计算量和内存均为 O(n²)。长路径应相应增大 S。
"""
from ..core.constants import SMOOTHED_PATH_DISCRETIZATION, PATH_SMOOTHNESS

SMOOTHER_CONFIG = {
    'discretization': SMOOTHED_PATH_DISCRETIZATION,
    'smoothness': PATH_SMOOTHNESS,
    'allow_reverse_paths': True,
}

SMOOTHER_VALIDATION_RULES = {
    'smoother.discretization': (0.001, 1.0, '路径离散步长 (m)'),
    'smoother.smoothness': (0.001, 10.0, '高斯核带宽 (m)'),
}
