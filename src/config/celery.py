"""
Celery configuration for the commerce lifecycle engine.

DJANGO_SETTINGS_MODULE is set before the app is created so Celery reads
the Django settings (``CELERY_`` prefix).
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("commerce_lifecycle")

# Read configuration from Django settings with the CELERY_ prefix
app.config_from_object("django.conf:settings", namespace="CELERY")

# Discover tasks.py in every installed app
app.autodiscover_tasks()
