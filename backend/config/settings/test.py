"""
Test settings for the BOM service.

In-memory SQLite, eager Celery, no throttling.
"""

from .base import *

DEBUG = False

ALLOWED_HOSTS = ['*']

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []
REST_FRAMEWORK['DEFAULT_THROTTLE_RATES'] = {}

CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

LOGGING['handlers']['file'] = {'class': 'logging.NullHandler'}
for name in ('domain', 'application', 'infrastructure', 'presentation'):
    LOGGING['loggers'][name]['handlers'] = ['file']
    LOGGING['loggers'][name]['propagate'] = True
