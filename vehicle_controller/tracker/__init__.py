"""驱动控制模块"""
from .differential_drive import (
    DifferentialDriveController,
    ErrorState,
    PdTerms,
    fold_angle_error,
    compute_pd_terms,
)

__all__ = [
    'DifferentialDriveController',
    'ErrorState',
    'PdTerms',
    'fold_angle_error',
    'compute_pd_terms',
]
