#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Vehicle Controller 安装脚本

安装方法:
    # 可编辑安装 (推荐开发时使用)
    pip install -e .

    # 安装测试依赖
    pip install -e .[test]
"""

from setuptools import setup, find_packages

setup(
    name='vehicle-controller',
    version='1.2.0',
    author='Vehicle Controller Team',
    description='差速车辆路径平滑与 PD 驱动控制核心',

    # 自动查找包
    packages=find_packages(include=['vehicle_controller', 'vehicle_controller.*']),

    # 依赖
    install_requires=[
        'numpy>=1.20.0',
        'scipy>=1.7.0',
        'PyYAML>=5.4.0',
    ],
    extras_require={
        'test': ['pytest>=6.0'],
    },

    # Python 版本要求
    python_requires='>=3.8',

    include_package_data=True,
    zip_safe=False,
)
