"""
Django base settings for task_tracker project.
Shared settings between development, production and test.

WhatsApp notifier and scheduled job settings are read from the environment.
"""

from pathlib import Path
from decouple import config, Csv

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = config('SECRET_KEY', default='django-insecure-change-me-in-production')

# Application definition
DJANGO_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
]

THIRD_PARTY_APPS = [
    'django_htmx',
    'django_filters',
    'django_q',
]

LOCAL_APPS = [
    'apps.accounts',
    'apps.attendance',
    'apps.tasks',
    'apps.reports',
    'apps.notifications',
]

INSTALLED_APPS = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
    'django_htmx.middleware.HtmxMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [BASE_DIR / 'templates'],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
                'apps.tasks.context_processors.task_counts',
                'apps.tasks.context_processors.user_permissions',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'


# =============================================================================
# AUTHENTICATION - Custom User Model
# =============================================================================
AUTH_USER_MODEL = 'accounts.User'

AUTHENTICATION_BACKENDS = [
    'apps.accounts.backends.EmailAuthBackend',
]

LOGIN_URL = 'accounts:login'
LOGIN_REDIRECT_URL = 'tasks:task_list'
LOGOUT_REDIRECT_URL = 'accounts:login'


# =============================================================================
# PASSWORD VALIDATION
# =============================================================================
AUTH_PASSWORD_VALIDATORS = [
    {
        'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
        'OPTIONS': {
            'min_length': 8,
        }
    },
    {
        'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator',
    },
]

# Password hashing - use Argon2 as primary
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.Argon2PasswordHasher',
    'django.contrib.auth.hashers.PBKDF2PasswordHasher',
    'django.contrib.auth.hashers.PBKDF2SHA1PasswordHasher',
]


# =============================================================================
# INTERNATIONALIZATION & TIMEZONE
# =============================================================================
LANGUAGE_CODE = 'en-us'

# Organization timezone: "today" for jobs, KPI and Red Zone is the IST day
TIME_ZONE = 'Asia/Kolkata'

USE_I18N = True

USE_TZ = True

DATE_FORMAT = 'j M Y'
TIME_FORMAT = 'g:i A'
DATETIME_FORMAT = 'j M Y, g:i A'
SHORT_DATE_FORMAT = 'd/m/Y'
SHORT_DATETIME_FORMAT = 'd/m/Y g:i A'


# =============================================================================
# STATIC FILES
# =============================================================================
STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'


# =============================================================================
# SESSION SETTINGS
# =============================================================================
SESSION_ENGINE = 'django.contrib.sessions.backends.db'
SESSION_COOKIE_AGE = config('SESSION_ABSOLUTE_TIMEOUT_HOURS', default=12, cast=int) * 3600
SESSION_SAVE_EVERY_REQUEST = True
SESSION_EXPIRE_AT_BROWSER_CLOSE = False


# Site URL for links in outbound messages
SITE_URL = config('SITE_URL', default='http://localhost:8000')


# =============================================================================
# WHATSAPP NOTIFIER (11za template API)
# =============================================================================
# Sending is disabled while WHATSAPP_AUTH_TOKEN is empty.
WHATSAPP_API_URL = config(
    'WHATSAPP_API_URL',
    default='https://app.11za.in/apis/template/sendTemplate'
)
WHATSAPP_ORIGIN_WEBSITE = config('WHATSAPP_ORIGIN_WEBSITE', default='https://whiterock.co.in/')
WHATSAPP_AUTH_TOKEN = config('WHATSAPP_AUTH_TOKEN', default='')
WHATSAPP_TEMPLATE_TASK_ASSIGNED = config('WHATSAPP_TEMPLATE_TASK_ASSIGNED', default='task_assigned')
WHATSAPP_TEMPLATE_DAILY_REMINDER = config(
    'WHATSAPP_TEMPLATE_DAILY_REMINDER',
    default='daily_tasks_reminder'
)
WHATSAPP_TIMEOUT_SECONDS = config('WHATSAPP_TIMEOUT_SECONDS', default=30, cast=int)


# =============================================================================
# DJANGO-Q2 SETTINGS (Scheduled Jobs)
# =============================================================================
# Cron expressions are evaluated in TIME_ZONE (IST).
RECURRING_TASKS_CRON = config('RECURRING_TASKS_CRON', default='30 4 * * *')
DAILY_REMINDER_CRON = config('DAILY_REMINDER_CRON', default='0 8 * * *')

Q_CLUSTER = {
    'name': 'task_tracker',
    'workers': 2,
    'recycle': 500,
    'timeout': 120,
    'retry': 180,
    'compress': True,
    'save_limit': 250,
    'queue_limit': 500,
    'cpu_affinity': 1,
    'label': 'Django Q2',
    'orm': 'default',
}


# =============================================================================
# DEFAULT PRIMARY KEY FIELD TYPE
# =============================================================================
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

ALLOWED_HOSTS = config('ALLOWED_HOSTS', default='localhost,127.0.0.1', cast=Csv())
