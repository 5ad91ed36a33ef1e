"""
路径平滑器

把稀疏路径点转换为沿弧长均匀离散、高斯平滑、带姿态的参考轨迹。

算法流程:
=========

1. 计算累积弧长表
2. 以弧长为"虚拟时间" t，按步长 S 线性插值重采样，末尾强制加入终点
3. 对内部采样点做全点对高斯核回归 (端点保持原始路径点不变)
4. (可选) 倒车判定: 短路径且机器人在起点和终点都背对路径方向
5. 用前向差分求切向，生成每个点的姿态四元数

复杂度:
=======

第 3 步构造 n×n 权重矩阵，n ≈ 路径长度 / S。
S = 0.05 m 时 20 m 路径约 400 个采样点，权重矩阵 160000 个元素。
长路径应相应增大 S。
"""
from typing import Any, Optional, Tuple
import logging

import numpy as np

from ..core.interfaces import IPathSmoother
from ..core.data_types import SmoothedPath
from ..core.constants import (
    SMOOTHED_PATH_DISCRETIZATION, PATH_SMOOTHNESS, REVERSE_PATH_MAX_LENGTH,
    LOCAL_ROBOT_DIRECTION, MIN_PATH_LENGTH, MIN_SEGMENT_LENGTH,
)
from ..core.exceptions import DegenerateGeometryError, InvalidInputError
from ..core.geometry import (
    as_position_array, as_quaternion, accumulated_distances,
    quaternion_from_two_vectors, rotate_vector,
)

logger = logging.getLogger(__name__)


class PathSmoother3D(IPathSmoother):
    """
    三维路径平滑器

    Args:
        allow_reverse_paths: 是否允许倒车判定 (为 False 时 reverse 恒为 False)
        discretization: 重采样步长 S (m)
        smoothness: 高斯核带宽 σ (m)

    使用示例:
        smoother = PathSmoother3D(allow_reverse_paths=True)
        result = smoother.smooth(waypoints, start_q, end_q)
        for position, orientation in zip(result.positions, result.orientations):
            ...
    """

    def __init__(self, allow_reverse_paths: bool,
                 discretization: float = SMOOTHED_PATH_DISCRETIZATION,
                 smoothness: float = PATH_SMOOTHNESS):
        if discretization <= 0:
            raise ValueError(f"discretization must be positive, got {discretization}")
        if smoothness <= 0:
            raise ValueError(f"smoothness must be positive, got {smoothness}")

        self.allow_reverse_paths = allow_reverse_paths
        self.discretization = float(discretization)
        self.smoothness = float(smoothness)
        self.local_robot_direction = np.array(LOCAL_ROBOT_DIRECTION, dtype=float)

    @classmethod
    def from_config(cls, config: dict) -> 'PathSmoother3D':
        """从配置字典的 smoother 节创建"""
        smoother_config = config.get('smoother', config)
        return cls(
            allow_reverse_paths=smoother_config.get('allow_reverse_paths', True),
            discretization=smoother_config.get('discretization', SMOOTHED_PATH_DISCRETIZATION),
            smoothness=smoother_config.get('smoothness', PATH_SMOOTHNESS),
        )

    def gaussian_weight(self, t0: float, t1: float) -> float:
        """高斯核权重 w(t0, t1) = exp(-(t0 - t1)² / (2σ²))"""
        return float(np.exp(-(t0 - t1) ** 2 / (2.0 * self.smoothness ** 2)))

    def compute_accumulated_distances(self, positions: Any) -> np.ndarray:
        return accumulated_distances(as_position_array(positions))

    def smooth(self, path: Any, start_orientation: Any, end_orientation: Any,
               forbid_reverse_path: bool = False) -> SmoothedPath:
        """
        平滑并重采样路径

        Args:
            path: 路径点 [N, 3]，N >= 2，不会被修改
            start_orientation: 起点姿态 (x, y, z, w)，原样作为第一个姿态输出
            end_orientation: 终点姿态 (x, y, z, w)，原样作为最后一个姿态输出
            forbid_reverse_path: 本次调用禁止倒车 (例如机器人离路径太远)

        Returns:
            SmoothedPath(positions, orientations, reverse)

        Raises:
            InvalidInputError: 点数不足或输入格式错误
            DegenerateGeometryError: 路径总弧长接近 0
        """
        positions = as_position_array(path)
        if len(positions) < 2:
            raise InvalidInputError(f"Path needs at least 2 points, got {len(positions)}")

        start_q = as_quaternion(start_orientation)
        end_q = as_quaternion(end_orientation)

        distances = accumulated_distances(positions)
        if distances[-1] <= MIN_PATH_LENGTH:
            raise DegenerateGeometryError(
                f"Path total length {distances[-1]:.3g} is too short to smooth")

        smoothed_positions = self.compute_smoothed_positions(distances, positions)

        reverse = False
        if self.allow_reverse_paths and not forbid_reverse_path:
            reverse = self.detect_reverse(distances[-1], smoothed_positions, start_q, end_q)

        smoothed_orientations = self.compute_smoothed_orientations(
            smoothed_positions, start_q, end_q, reverse)

        return SmoothedPath(positions=smoothed_positions,
                            orientations=smoothed_orientations,
                            reverse=reverse)

    def resample(self, distances: np.ndarray, positions: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        沿弧长按固定步长重采样

        t = k·S (k = 0, 1, ...) 且 t < 总弧长，游标单调前进；
        最后强制加入 (总弧长, 终点)。

        Returns:
            (samples, samples_x): 虚拟时间 [n]，插值位置 [n, 3]
        """
        total = distances[-1]
        samples = []
        samples_x = []

        segment = 0
        last_segment = len(distances) - 2
        k = 0
        t = 0.0
        while t < total:
            while segment < last_segment and t > distances[segment + 1]:
                segment += 1
            d0 = distances[segment]
            span = distances[segment + 1] - d0
            ratio = (t - d0) / span if span > MIN_SEGMENT_LENGTH else 0.0
            samples.append(t)
            samples_x.append(positions[segment] + (positions[segment + 1] - positions[segment]) * ratio)
            k += 1
            t = k * self.discretization

        samples.append(total)
        samples_x.append(positions[-1])
        return np.array(samples), np.array(samples_x)

    def compute_smoothed_positions(self, distances: np.ndarray, positions: np.ndarray) -> np.ndarray:
        """
        重采样后对内部点做高斯核回归

        p[i] = Σ_j w(t_i, t_j)·x[j] / Σ_j w(t_i, t_j)，j 遍历所有采样点；
        首末点直接取原始路径的首末点。
        """
        samples, samples_x = self.resample(distances, positions)

        diff = samples[:, np.newaxis] - samples[np.newaxis, :]
        weights = np.exp(-diff ** 2 / (2.0 * self.smoothness ** 2))
        smoothed = (weights @ samples_x) / weights.sum(axis=1)[:, np.newaxis]

        smoothed[0] = positions[0]
        smoothed[-1] = positions[-1]
        return smoothed

    def detect_reverse(self, total_distance: float, smoothed_positions: np.ndarray,
                       start_orientation: np.ndarray, end_orientation: np.ndarray) -> bool:
        """
        倒车判定 (经验规则)

        路径较短，且起点和终点处机器人朝向都与路径方向相反时倒车通行。
        全局坐标系取起点处坐标系，机器人前进方向为 (1, 0, 0)。
        """
        if len(smoothed_positions) < 2:
            return False

        dist_ok = bool(total_distance < REVERSE_PATH_MAX_LENGTH)

        start_vec = rotate_vector(start_orientation, self.local_robot_direction)
        start_projection = self._projection(smoothed_positions[0] - smoothed_positions[1], start_vec)

        end_vec = rotate_vector(end_orientation, self.local_robot_direction)
        end_projection = self._projection(smoothed_positions[-2] - smoothed_positions[-1], end_vec)

        start_ok = start_projection > 0
        end_ok = end_projection > 0
        reverse = dist_ok and start_ok and end_ok

        logger.debug(f"start projection = {start_projection:.3f}, end projection = {end_projection:.3f}, "
                     f"end_vec = {np.round(end_vec, 3).tolist()}")
        if reverse:
            logger.info(f"Reverse path: dist = {dist_ok}, start = {start_ok}, end = {end_ok}")
        return reverse

    @staticmethod
    def _projection(path_delta: np.ndarray, direction: np.ndarray) -> float:
        """单位化后的路径方向在机器人朝向上的投影，零长度返回 0"""
        delta_norm = np.linalg.norm(path_delta)
        direction_norm = np.linalg.norm(direction)
        if delta_norm < MIN_SEGMENT_LENGTH or direction_norm < MIN_SEGMENT_LENGTH:
            return 0.0
        return float(np.dot(path_delta / delta_norm, direction / direction_norm))

    def compute_smoothed_orientations(self, smoothed_positions: np.ndarray,
                                      start_orientation: np.ndarray, end_orientation: np.ndarray,
                                      reverse: bool) -> np.ndarray:
        """
        由前向差分生成姿态

        正向: canonical → p[i+1] - p[i]
        倒车: canonical → p[i] - p[i+1]
        首末姿态取调用者给定的值。
        """
        count = len(smoothed_positions)
        orientations = np.zeros((count, 4))
        previous: Optional[np.ndarray] = None
        for i in range(count):
            if i == 0:
                orientations[i] = start_orientation
            elif i == count - 1:
                orientations[i] = end_orientation
            else:
                delta = smoothed_positions[i + 1] - smoothed_positions[i]
                if reverse:
                    delta = -delta
                if np.linalg.norm(delta) < MIN_SEGMENT_LENGTH:
                    # 平滑点重合，沿用上一个姿态
                    orientations[i] = previous
                else:
                    orientations[i] = quaternion_from_two_vectors(self.local_robot_direction, delta)
            previous = orientations[i]
        return orientations
