# Celery instance is defined in ledger_project/celery.py
# It points the task queue at Django settings
# celery_app is the single task queue app for the whole project
from .celery import celery_app

# 'from ledger_project import *' only exports celery_app
__all__ = ("celery_app",)

""" Worker start: "celery -A ledger_project worker -l info"
    -A ledger_project imports this module, which exposes celery_app,
    which in turn autodiscovers ledger_core.tasks. """
