"""FocusDesk 异常体系

所有异常都以非阻塞提示的形式报告给用户，不会中断 collection 或计时器。
"""


class FocusDeskError(Exception):
    """FocusDesk 基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 系统在该错误后是否仍可继续使用
        """
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable


class TaskValidationError(FocusDeskError):
    """任务字段校验失败（如标题为空）"""


class TaskNotFoundError(FocusDeskError):
    """操作的 task_id 不存在"""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with id {task_id} does not exist")
        self.task_id = task_id


class PersistenceError(FocusDeskError):
    """远端存储调用失败

    本地的乐观更新不会因此回滚，也不会自动重试。
    """

    def __init__(self, action: str, original_error: Exception) -> None:
        """
        Args:
            action: 失败的存储操作（create/update/delete/list）
            original_error: 原始异常
        """
        super().__init__(f"{action} failed: {original_error}", recoverable=True)
        self.action = action
        self.original_error = original_error
