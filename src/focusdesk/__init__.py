"""FocusDesk -- 个人任务管理与专注计时"""

__version__ = "0.1.0"
