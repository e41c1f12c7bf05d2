"""
Django settings for the dormitory service.

Everything environment-specific is read from environment variables; the
defaults give a working local setup on SQLite.
"""

from pathlib import Path
from decimal import Decimal, InvalidOperation
import os
from datetime import timedelta

import dj_database_url

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name, default=False):
    return os.environ.get(name, str(default)).lower() in ('1', 'true', 'yes')


def _env_int(name, default):
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


# =============================================================================
# CORE SETTINGS
# =============================================================================

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-change-this-in-production-12345')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = _env_bool('DJANGO_DEBUG', True)

ALLOWED_HOSTS = ['localhost', '127.0.0.1', 'testserver']

# Add custom domains
custom_hosts = os.environ.get('DJANGO_ALLOWED_HOSTS', '')
if custom_hosts:
    ALLOWED_HOSTS.extend(h.strip() for h in custom_hosts.split(',') if h.strip())


# =============================================================================
# APPLICATIONS
# =============================================================================

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'rest_framework',
    'rest_framework_simplejwt',
    'common',  # Health checks, logging, scheduler
    'users',  # Custom User model (Administrator/Student)
    'dormitories',  # Room registry
    'applications',  # Room applications
    'occupancy',  # Accepted applications
    'payments',  # Monthly payments
    'audit',  # Audit Logging
    'reports',  # Statistics
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'common.logging_config.RequestIDMiddleware',  # Request ID generation (must be early)
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'dorm_service.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'dorm_service.wsgi.application'


# =============================================================================
# DATABASE
# =============================================================================

# DATABASE_URL selects PostgreSQL in deployment; SQLite otherwise
DATABASES = {
    'default': dj_database_url.config(
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
        conn_max_age=600,
        conn_health_checks=True,
    )
}


# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {
        'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator',
    },
    {
        'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator',
    },
]


# Internationalization
LANGUAGE_CODE = 'en-us'

TIME_ZONE = os.environ.get('DJANGO_TIME_ZONE', 'Europe/Belgrade')

USE_I18N = False
USE_TZ = True


# Static files
STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Cache Configuration (locmem; used by the health checks)
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'dorm-service',
        'TIMEOUT': 300,
    }
}

# Logging Configuration with Request ID Support
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'filters': {
        'request_id': {
            '()': 'common.logging_config.RequestIDFilter',
        },
    },
    'formatters': {
        'verbose': {
            'format': '[{request_id}] {levelname} {asctime} {module} {message}',
            'style': '{',
        },
        'simple': {
            'format': '[{request_id}] {levelname} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'level': 'INFO',
            'class': 'logging.StreamHandler',
            'formatter': 'verbose' if not DEBUG else 'simple',
            'filters': ['request_id'],
        },
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',  # Only warnings and errors
            'propagate': False,
        },
        'django.request': {
            'handlers': ['console'],
            'level': 'ERROR',
            'propagate': False,
        },
        'django.server': {
            'handlers': ['console'],
            'level': 'INFO',
            'propagate': False,
        },
    },
    'root': {
        'handlers': ['console'],
        'level': os.environ.get('DJANGO_LOG_LEVEL', 'INFO'),
    },
}

# Custom User Model
AUTH_USER_MODEL = 'users.User'


# =============================================================================
# DJANGO REST FRAMEWORK
# =============================================================================

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'rest_framework_simplejwt.authentication.JWTAuthentication',
        'rest_framework.authentication.SessionAuthentication',
    ),
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_PAGINATION_CLASS': 'rest_framework.pagination.PageNumberPagination',
    'PAGE_SIZE': 20,
    'EXCEPTION_HANDLER': 'api.exceptions.domain_exception_handler',
}

# Simple JWT Settings
SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(hours=1),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=7),
    'ROTATE_REFRESH_TOKENS': True,
    'UPDATE_LAST_LOGIN': True,
    'ALGORITHM': 'HS256',
    'SIGNING_KEY': SECRET_KEY,
    'AUTH_HEADER_TYPES': ('Bearer',),
    'AUTH_HEADER_NAME': 'HTTP_AUTHORIZATION',
    'USER_ID_FIELD': 'id',
    'USER_ID_CLAIM': 'user_id',
}


# =============================================================================
# DORMITORY SERVICE
# =============================================================================

# Room-status endpoint consulted before deleting an account
ROOM_STATUS_SERVICE_URL = os.environ.get('ROOM_STATUS_SERVICE_URL', 'http://localhost:8000')
ROOM_STATUS_TIMEOUT = _env_int('ROOM_STATUS_TIMEOUT', 5)

# Billing defaults for the first payment created on approval.
# Invalid environment values fall back to the defaults.
DORM_PAYMENTS = {
    'DEFAULT_AMOUNT': '100.00',
    'DEFAULT_DUE_DAY': 15,
    'AUTO_CREATE_ON_APPROVAL': _env_bool('PAYMENT_AUTO_CREATE', True),
}

try:
    _amount = Decimal(os.environ.get('PAYMENT_DEFAULT_AMOUNT', DORM_PAYMENTS['DEFAULT_AMOUNT']))
    if _amount.is_finite() and _amount > 0:
        DORM_PAYMENTS['DEFAULT_AMOUNT'] = str(_amount)
except InvalidOperation:
    pass

_due_day = _env_int('PAYMENT_DEFAULT_DUE_DAY', DORM_PAYMENTS['DEFAULT_DUE_DAY'])
if 1 <= _due_day <= 31:
    DORM_PAYMENTS['DEFAULT_DUE_DAY'] = _due_day

# In-process APScheduler for the daily overdue sweep (use cron otherwise)
ENABLE_BACKGROUND_SCHEDULER = _env_bool('ENABLE_BACKGROUND_SCHEDULER', False)
OVERDUE_SWEEP_HOUR = _env_int('OVERDUE_SWEEP_HOUR', 1)
