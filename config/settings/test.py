"""
Django test settings for task_tracker project.

In-memory SQLite, fast hashing, synchronous django-q2 and no WhatsApp token.
"""

from .base import *

DEBUG = False

ALLOWED_HOSTS = ['testserver', 'localhost']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

Q_CLUSTER = {
    **Q_CLUSTER,
    'sync': True,
}

WHATSAPP_AUTH_TOKEN = ''

SITE_URL = 'http://testserver'
