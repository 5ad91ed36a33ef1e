"""
消息发布器

控制器通过回调把速度命令和 PD 诊断数据交给外部传输层。
本模块不进行任何 ROS 发布，保持核心库与传输无关。

职责说明：
- MessagePublisher: 维护回调列表，把消息字典分发给所有回调
- 速度命令通道和诊断通道各使用一个实例

注意：
- 回调异常不会传播到控制循环
- 连续失败超过 5 次的回调会被自动移除
"""
from typing import Dict, Any, Optional, Callable, List
import logging
import threading

logger = logging.getLogger(__name__)


class MessagePublisher:
    """
    回调式消息发布器

    使用示例:
        cmd_vel = MessagePublisher('cmd_vel_raw')
        cmd_vel.add_callback(transport.send_twist)
        cmd_vel.publish(twist.to_ros_msg())
    """

    def __init__(self, channel: str = '', max_failures: int = 5):
        """
        Args:
            channel: 通道名，仅用于日志
            max_failures: 回调连续失败超过此次数后被移除
        """
        self.channel = channel

        # 回调函数（线程安全）
        self._callbacks: List[Callable[[Dict[str, Any]], None]] = []
        self._callbacks_lock = threading.Lock()

        # 回调失败计数
        self._callback_fail_counts: Dict[int, int] = {}
        self._callback_max_failures = max_failures

        # 发布历史
        self._last_published: Optional[Dict[str, Any]] = None
        self._publish_count = 0

    def add_callback(self, callback: Callable[[Dict[str, Any]], None]) -> None:
        """添加回调函数（线程安全），签名为 callback(msg: Dict[str, Any]) -> None"""
        with self._callbacks_lock:
            if callback not in self._callbacks:
                self._callbacks.append(callback)
                self._callback_fail_counts[id(callback)] = 0

    def remove_callback(self, callback: Callable[[Dict[str, Any]], None]) -> None:
        """移除回调函数（线程安全）"""
        with self._callbacks_lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)
                self._callback_fail_counts.pop(id(callback), None)

    def clear_callbacks(self) -> None:
        """清除所有回调函数（线程安全）"""
        with self._callbacks_lock:
            self._callbacks.clear()
            self._callback_fail_counts.clear()

    @property
    def callback_count(self) -> int:
        with self._callbacks_lock:
            return len(self._callbacks)

    @property
    def publish_count(self) -> int:
        return self._publish_count

    def publish(self, msg: Dict[str, Any]) -> None:
        """
        发布消息

        Args:
            msg: 消息字典 (Twist.to_ros_msg() / PdOutput.to_ros_msg())
        """
        self._last_published = msg
        self._publish_count += 1

        # 调用所有回调（线程安全：复制列表后迭代）
        with self._callbacks_lock:
            callbacks_copy = list(self._callbacks)

        callbacks_to_remove = []
        for callback in callbacks_copy:
            try:
                callback(msg)
                with self._callbacks_lock:
                    self._callback_fail_counts[id(callback)] = 0
            except Exception as e:
                callback_id = id(callback)
                with self._callbacks_lock:
                    fail_count = self._callback_fail_counts.get(callback_id, 0) + 1
                    self._callback_fail_counts[callback_id] = fail_count

                if fail_count >= self._callback_max_failures:
                    logger.warning(
                        f"[{self.channel}] Callback {callback} failed {fail_count} times "
                        f"consecutively, removing it. Last error: {e}"
                    )
                    callbacks_to_remove.append(callback)
                elif fail_count == 1:
                    logger.warning(f"[{self.channel}] Callback error: {e}")
                else:
                    logger.debug(f"[{self.channel}] Callback error (fail #{fail_count}): {e}")

        if callbacks_to_remove:
            with self._callbacks_lock:
                for callback in callbacks_to_remove:
                    if callback in self._callbacks:
                        self._callbacks.remove(callback)
                        self._callback_fail_counts.pop(id(callback), None)

    def get_last_published(self) -> Optional[Dict[str, Any]]:
        """获取最后发布的消息"""
        return self._last_published
