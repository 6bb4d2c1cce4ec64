# Django 启动时加载 Celery app，shared_task 才会绑定到它
from .celery import app as celery_app

__all__ = ('celery_app',)
