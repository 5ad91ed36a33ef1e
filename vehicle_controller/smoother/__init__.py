"""路径平滑模块"""
from .path_smoother import PathSmoother3D

__all__ = ['PathSmoother3D']
