"""
几何工具

路径平滑器和驱动控制器共用的向量、四元数和弧长计算。

四元数约定: (x, y, z, w)，与 scipy.spatial.transform.Rotation 一致。
"""
from typing import Any, Sequence

import numpy as np
from scipy.spatial.transform import Rotation

from .constants import (
    MIN_SEGMENT_LENGTH, EPSILON_SMALL,
    QUATERNION_NORM_SQ_MIN, QUATERNION_NORM_SQ_MAX,
)
from .data_types import Point3D, Vector3, Quaternion
from .exceptions import DegenerateGeometryError, InvalidInputError


def as_vector(value: Any) -> np.ndarray:
    """将 Point3D / Vector3 / 序列转换为 shape (3,) 的数组"""
    if isinstance(value, (Point3D, Vector3)):
        return np.array([value.x, value.y, value.z], dtype=float)
    vec = np.asarray(value, dtype=float)
    if vec.shape != (3,):
        raise InvalidInputError(f"Expected a 3D vector, got shape {vec.shape}")
    return vec


def as_position_array(path: Any) -> np.ndarray:
    """
    将路径转换为 shape (N, 3) 的数组

    支持 (N, 3) 数组、嵌套序列、Point3D/Vector3 列表。
    返回新数组，不修改输入。
    """
    if isinstance(path, np.ndarray):
        positions = np.array(path, dtype=float)
    else:
        positions = np.array([as_vector(p) for p in path], dtype=float)
    if positions.ndim != 2 or positions.shape[1] != 3:
        raise InvalidInputError(f"Path must have shape (N, 3), got {positions.shape}")
    if not np.all(np.isfinite(positions)):
        raise InvalidInputError("Path contains non-finite coordinates")
    return positions


def as_quaternion(value: Any) -> np.ndarray:
    """
    将 Quaternion / (x, y, z, w) 序列转换为数组

    不做归一化 (边界姿态需原样输出)，但拒绝范数明显异常的四元数。
    """
    if isinstance(value, Quaternion):
        q = np.array([value.x, value.y, value.z, value.w], dtype=float)
    else:
        q = np.asarray(value, dtype=float).copy()
    if q.shape != (4,):
        raise InvalidInputError(f"Quaternion must have 4 components (x, y, z, w), got shape {q.shape}")
    norm_sq = float(np.dot(q, q))
    if not (QUATERNION_NORM_SQ_MIN <= norm_sq <= QUATERNION_NORM_SQ_MAX):
        raise InvalidInputError(f"Invalid quaternion {q.tolist()}: squared norm {norm_sq:.4f}")
    return q


def normalized(vec: Sequence[float]) -> np.ndarray:
    """返回单位向量，零向量抛出 DegenerateGeometryError"""
    v = np.asarray(vec, dtype=float)
    norm = np.linalg.norm(v)
    if norm < MIN_SEGMENT_LENGTH:
        raise DegenerateGeometryError(f"Cannot normalize near-zero vector {v.tolist()}")
    return v / norm


def accumulated_distances(positions: np.ndarray) -> np.ndarray:
    """
    计算累积弧长表

    table[0] = 0, table[i] = table[i-1] + |p[i] - p[i-1]|，单调不减。
    """
    positions = np.asarray(positions, dtype=float)
    if len(positions) == 0:
        return np.zeros(0)
    segment_lengths = np.linalg.norm(np.diff(positions, axis=0), axis=1)
    return np.concatenate(([0.0], np.cumsum(segment_lengths)))


def quaternion_from_two_vectors(a: Sequence[float], b: Sequence[float]) -> np.ndarray:
    """
    计算把向量 a 旋转到向量 b 的最短弧旋转

    输入不要求单位长度。a 与 b 反向时，绕一个与 a 垂直的轴旋转 π。

    Returns:
        四元数 (x, y, z, w)
    """
    a = normalized(a)
    b = normalized(b)
    c = float(np.dot(a, b))

    if c < -1.0 + EPSILON_SMALL:
        # 反向: 旋转轴任取一个与 a 垂直的方向
        axis = np.cross(a, [1.0, 0.0, 0.0])
        if np.linalg.norm(axis) < MIN_SEGMENT_LENGTH:
            axis = np.cross(a, [0.0, 1.0, 0.0])
        axis = normalized(axis)
        return np.array([axis[0], axis[1], axis[2], 0.0])

    axis = np.cross(a, b)
    s = np.sqrt((1.0 + c) * 2.0)
    q = np.array([axis[0] / s, axis[1] / s, axis[2] / s, 0.5 * s])
    return q / np.linalg.norm(q)


def rotate_vector(q: Sequence[float], vec: Sequence[float]) -> np.ndarray:
    """用四元数 q (x, y, z, w) 旋转向量"""
    return Rotation.from_quat(np.asarray(q, dtype=float)).apply(np.asarray(vec, dtype=float))


__all__ = [
    'as_vector',
    'as_position_array',
    'as_quaternion',
    'normalized',
    'accumulated_distances',
    'quaternion_from_two_vectors',
    'rotate_vector',
]
