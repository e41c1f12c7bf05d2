"""
Health Check Endpoints for the dormitory service

Provides endpoints for:
- Liveness checks (is the app running?)
- Readiness checks (can the app serve requests?)
- Deep health checks (database latency, cache, schema)
"""

import time
import logging
from django.http import JsonResponse
from django.db import connection, DatabaseError
from django.core.cache import cache
from django.views.decorators.http import require_GET
from django.views.decorators.csrf import csrf_exempt

logger = logging.getLogger(__name__)

VERSION = '1.0.0'


def _check_database():
    """Round-trip a trivial query; returns latency in ms"""
    start = time.time()
    with connection.cursor() as cursor:
        cursor.execute('SELECT 1')
        cursor.fetchone()
    return round((time.time() - start) * 1000, 2)


def _check_cache(key):
    """Write, read back and delete a cache key; returns latency in ms or None"""
    start = time.time()
    cache.set(key, 'ok', 10)
    ok = cache.get(key) == 'ok'
    cache.delete(key)
    return round((time.time() - start) * 1000, 2) if ok else None


@csrf_exempt
@require_GET
def health_check(request):
    """
    Basic health check - returns 200 if app is running.
    Used by load balancers and container orchestration.
    """
    return JsonResponse({
        'status': 'healthy',
        'timestamp': time.time(),
    })


@csrf_exempt
@require_GET
def readiness_check(request):
    """
    Readiness check - verifies the database and cache are reachable.
    """
    checks = {'database': False, 'cache': False}
    errors = []

    try:
        _check_database()
        checks['database'] = True
    except DatabaseError as e:
        errors.append(f'Database: {e}')
        logger.error(f'Readiness check - Database error: {e}')

    if _check_cache('health_check_test') is not None:
        checks['cache'] = True
    else:
        errors.append('Cache: Failed to read/write')

    ready = all(checks.values())
    return JsonResponse({
        'status': 'ready' if ready else 'not_ready',
        'timestamp': time.time(),
        'checks': checks,
        'errors': errors or None,
    }, status=200 if ready else 503)


@csrf_exempt
@require_GET
def deep_health_check(request):
    """
    Deep health check - latency figures plus a count over the core tables,
    which also proves the schema is migrated.
    """
    from django.contrib.auth import get_user_model
    from applications.models import Application
    from dormitories.models import Room
    from occupancy.models import AcceptedApplication

    checks = {
        'database': {'status': False, 'latency_ms': None},
        'cache': {'status': False, 'latency_ms': None},
        'models': {'status': False, 'details': {}},
    }
    errors = []

    try:
        checks['database'] = {'status': True, 'latency_ms': _check_database()}
    except DatabaseError as e:
        errors.append(f'Database: {e}')
        logger.error(f'Deep health check - Database error: {e}')

    cache_latency = _check_cache('deep_health_check_test')
    if cache_latency is not None:
        checks['cache'] = {'status': True, 'latency_ms': cache_latency}
    else:
        errors.append('Cache: Read/write failed')

    try:
        checks['models'] = {'status': True, 'details': {
            'users': get_user_model().objects.count(),
            'rooms': Room.objects.count(),
            'applications': Application.objects.count(),
            'accepted_applications': AcceptedApplication.objects.count(),
        }}
    except DatabaseError as e:
        errors.append(f'Models: {e}')
        logger.error(f'Deep health check - Model error: {e}')

    healthy = checks['database']['status'] and checks['cache']['status']
    return JsonResponse({
        'status': 'healthy' if healthy else 'unhealthy',
        'timestamp': time.time(),
        'checks': checks,
        'errors': errors or None,
        'version': VERSION,
    }, status=200 if healthy else 503)


def get_health_urls():
    """
    Returns URL patterns for health endpoints.
    Add to your urls.py:
        from common.health import get_health_urls
        urlpatterns += get_health_urls()
    """
    from django.urls import path

    return [
        path('health/', health_check, name='health_check'),
        path('health/ready/', readiness_check, name='readiness_check'),
        path('health/deep/', deep_health_check, name='deep_health_check'),
    ]
