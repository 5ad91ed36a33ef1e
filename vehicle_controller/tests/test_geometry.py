"""几何工具测试"""
import math

import numpy as np
import pytest

from vehicle_controller.core.geometry import (
    as_position_array, as_quaternion, normalized, accumulated_distances,
    quaternion_from_two_vectors, rotate_vector,
)
from vehicle_controller.core.data_types import Point3D, Quaternion
from vehicle_controller.core.exceptions import DegenerateGeometryError, InvalidInputError


def test_accumulated_distances():
    """测试累积弧长表"""
    positions = np.array([[0.0, 0.0, 0.0], [3.0, 4.0, 0.0], [3.0, 4.0, 0.0], [3.0, 4.0, 2.0]])
    table = accumulated_distances(positions)

    np.testing.assert_allclose(table, [0.0, 5.0, 5.0, 7.0])
    assert np.all(np.diff(table) >= 0)


def test_as_position_array_accepts_points():
    """测试 Point3D 列表转换"""
    path = [Point3D(0, 0, 0), Point3D(1, 2, 3)]
    positions = as_position_array(path)

    assert positions.shape == (2, 3)
    np.testing.assert_allclose(positions[1], [1, 2, 3])


def test_as_position_array_does_not_alias_input():
    """测试返回数组是副本"""
    path = np.zeros((3, 3))
    positions = as_position_array(path)
    positions[0, 0] = 5.0

    assert path[0, 0] == 0.0


def test_as_position_array_rejects_bad_shape():
    with pytest.raises(InvalidInputError):
        as_position_array(np.zeros((3, 2)))
    with pytest.raises(InvalidInputError):
        as_position_array([[0.0, 0.0, np.nan], [1.0, 0.0, 0.0]])


def test_as_quaternion():
    """测试四元数转换不做归一化"""
    q = as_quaternion(Quaternion(0.0, 0.0, 0.0, 1.0))
    np.testing.assert_allclose(q, [0, 0, 0, 1])

    q = as_quaternion((0.0, 0.0, 0.0, 1.1))
    assert q[3] == pytest.approx(1.1)

    with pytest.raises(InvalidInputError):
        as_quaternion((0.0, 0.0, 0.0, 0.0))
    with pytest.raises(InvalidInputError):
        as_quaternion((0.0, 0.0, 1.0))


def test_normalized_zero_vector():
    """测试零向量归一化抛出异常"""
    with pytest.raises(DegenerateGeometryError):
        normalized([0.0, 0.0, 0.0])


def test_quaternion_identity():
    """测试同向向量得到单位四元数"""
    q = quaternion_from_two_vectors([1, 0, 0], [2, 0, 0])
    np.testing.assert_allclose(q, [0, 0, 0, 1], atol=1e-12)


def test_quaternion_rotates_a_onto_b():
    """测试最短弧旋转把 a 转到 b 的方向"""
    cases = [
        ([1, 0, 0], [0, 1, 0]),
        ([1, 0, 0], [1, 1, 0]),
        ([1, 0, 0], [0.3, -0.2, 0.9]),
        ([0, 0, 1], [1, 0, 0]),
    ]
    for a, b in cases:
        q = quaternion_from_two_vectors(a, b)
        assert np.linalg.norm(q) == pytest.approx(1.0)
        rotated = rotate_vector(q, normalized(a))
        np.testing.assert_allclose(rotated, normalized(b), atol=1e-9)


def test_quaternion_yaw_90():
    """测试 x 轴转到 y 轴是绕 z 轴 90 度"""
    q = quaternion_from_two_vectors([1, 0, 0], [0, 1, 0])
    np.testing.assert_allclose(q, [0, 0, math.sin(math.pi / 4), math.cos(math.pi / 4)], atol=1e-12)
    np.testing.assert_allclose(rotate_vector(q, [1, 0, 0]), [0, 1, 0], atol=1e-12)


def test_quaternion_antiparallel():
    """测试反向向量绕垂直轴旋转 π"""
    q = quaternion_from_two_vectors([1, 0, 0], [-1, 0, 0])

    assert q[3] == pytest.approx(0.0)
    np.testing.assert_allclose(rotate_vector(q, [1, 0, 0]), [-1, 0, 0], atol=1e-9)

    q = quaternion_from_two_vectors([0, 1, 0], [0, -3, 0])
    np.testing.assert_allclose(rotate_vector(q, [0, 1, 0]), [0, -1, 0], atol=1e-9)


def test_quaternion_zero_input():
    with pytest.raises(DegenerateGeometryError):
        quaternion_from_two_vectors([1, 0, 0], [0, 0, 0])



def test_core_exports_resolve():
    """测试 core 子模块 __all__ 中的名字都存在"""
    from vehicle_controller.core import constants, geometry

    for module in (constants, geometry):
        missing = [name for name in module.__all__ if not hasattr(module, name)]
        assert not missing, f"{module.__name__}: {missing}"
    assert geometry.__all__ == [
        'as_vector', 'as_position_array', 'as_quaternion', 'normalized',
        'accumulated_distances', 'quaternion_from_two_vectors', 'rotate_vector',
    ]
