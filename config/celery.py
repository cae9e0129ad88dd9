"""
WareTrack — Celery Application

Worker and beat entry point. Task modules are discovered from each
installed app's tasks.py.

@file config/celery.py
"""

import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.development')

app = Celery('waretrack')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
