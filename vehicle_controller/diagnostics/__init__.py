"""消息发布模块"""
from .publisher import MessagePublisher

__all__ = ['MessagePublisher']
