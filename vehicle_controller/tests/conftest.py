"""
pytest 配置

未安装本包时，把项目根目录加入 sys.path，使测试可以直接运行。
"""
import os
import sys

# 添加项目路径
_project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)
