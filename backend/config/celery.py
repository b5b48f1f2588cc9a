"""
Celery configuration for the BOM service.
"""

import os

from celery import Celery

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('bom')

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Task modules live outside Django apps, so list them explicitly.
app.autodiscover_tasks(['application'], related_name='tasks.bom_tasks')

# Configure task routes
app.conf.task_routes = {
    'application.tasks.bom_tasks.*': {'queue': 'bom'},
}
