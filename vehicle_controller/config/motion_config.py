"""运动参数配置

差速底盘的速度/角速度上限和运行模式：
- max_controller_*: 控制器输出的常规上限 (同时决定减速包络的斜率)
- max_unlimited_*: 任何情况下都不能超过的绝对上限
- y_symmetric: 底盘前后对称，允许把角度误差折叠到 [-π/2, π/2]
- commanded_speed: 未显式给出期望速度时使用的默认值
- pd_params: PD 参数配置名，启动时选定 ('PdParams' 或 'PdParamsArgo')
"""

MOTION_CONFIG = {
    # 控制器速度上限
    'max_controller_speed': 0.5,          # 控制器最大线速度 (m/s)
    'max_controller_angular_rate': 1.0,   # 控制器最大角速度 (rad/s)

    # 绝对上限
    'max_unlimited_speed': 1.0,           # 绝对最大线速度 (m/s)
    'max_unlimited_angular_rate': 2.0,    # 绝对最大角速度 (rad/s)

    # 运行模式
    'y_symmetric': False,                 # 底盘前后对称
    'commanded_speed': 0.5,               # 默认期望速度 (m/s)
    'pd_params': 'PdParams',              # PD 参数配置名
}

# 运动参数验证规则
MOTION_VALIDATION_RULES = {
    'motion.max_controller_speed': (0.0, 20.0, '控制器最大线速度 (m/s)'),
    'motion.max_controller_angular_rate': (0.0, 20.0, '控制器最大角速度 (rad/s)'),
    'motion.max_unlimited_speed': (0.0, 20.0, '绝对最大线速度 (m/s)'),
    'motion.max_unlimited_angular_rate': (0.0, 20.0, '绝对最大角速度 (rad/s)'),
    'motion.commanded_speed': (-20.0, 20.0, '默认期望速度 (m/s)'),
}
