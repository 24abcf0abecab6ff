import logging
from datetime import datetime, timezone

from django.db import DatabaseError, connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def liveness(request):
    return JsonResponse({"ok": True})


def readiness(request):
    try:
        with connection.cursor() as cur:
            cur.execute("SELECT 1")
            cur.fetchone()
    except DatabaseError as e:
        logger.error("Banco de dados indisponível no readiness: %s", e)
        return JsonResponse({"ok": False, "error": str(e)}, status=503)
    return JsonResponse({"ok": True})


def time_now(request):
    now = datetime.now(timezone.utc).astimezone()
    return JsonResponse({"now": now.isoformat()})
