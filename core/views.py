import time

from django.conf import settings
from django.core.cache import cache
from django.db import connections
from django.db.utils import OperationalError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .cache import query_key


class HealthCheckView(APIView):
    """
    Public health endpoint for uptime checks.
    Reports database and query-cache reachability plus check latency.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, *args, **kwargs):
        start = time.monotonic()

        try:
            connections["default"].cursor()
            db_ok = True
        except OperationalError:
            db_ok = False

        health_key = query_key("health")
        try:
            cache.set(health_key, "ok", 5)
            cache_ok = cache.get(health_key) == "ok"
        except Exception:
            cache_ok = False

        return Response(
            {
                "status": "ok" if db_ok and cache_ok else "degraded",
                "db": db_ok,
                "cache": cache_ok,
                "env": getattr(settings, "ENV", "unknown"),
                "latency_ms": int((time.monotonic() - start) * 1000),
            }
        )
