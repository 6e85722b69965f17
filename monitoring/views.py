# monitoring/views.py
import psutil
from django.core.cache import cache
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import ApiError, ApiUnavailable
from core.services import ApiClient


class HealthCheckView(APIView):
    permission_classes = []
    authentication_classes = []

    def get(self, request):
        health_status = {"status": "healthy", "components": {}}

        self._check_cache(health_status)
        self._check_api(health_status)
        self._check_system_resources(health_status)

        if any(
            comp.get("status") == "unhealthy"
            for comp in health_status["components"].values()
        ):
            health_status["status"] = "unhealthy"
            return Response(health_status, status=503)

        return Response(health_status)

    def _check_cache(self, health_status):
        try:
            cache.set("health_check", "ok", 1)
            result = cache.get("health_check")
            if result != "ok":
                raise ValueError("Cache test failed")
            health_status["components"]["cache"] = {
                "status": "healthy",
                "message": "Working properly",
            }
        except Exception as e:
            health_status["components"]["cache"] = {
                "status": "unhealthy",
                "error": str(e),
            }

    def _check_api(self, health_status):
        client = ApiClient()
        try:
            with client:
                client.get('/boards/')
        except ApiUnavailable as e:
            health_status["components"]["api"] = {
                "status": "unhealthy",
                "url": client.base_url,
                "error": e.message,
            }
            return
        except ApiError as e:
            # Answered, if not with data
            health_status["components"]["api"] = {
                "status": "healthy",
                "url": client.base_url,
                "message": f"Reachable ({e.status_code})",
            }
            return

        health_status["components"]["api"] = {
            "status": "healthy",
            "url": client.base_url,
            "message": "Reachable",
        }

    def _check_system_resources(self, health_status):
        try:
            memory = psutil.virtual_memory()
            cpu_usage = psutil.cpu_percent(interval=None)

            memory_threshold = 90
            cpu_threshold = 90

            memory_status = {
                "total": self._format_bytes(memory.total),
                "available": self._format_bytes(memory.available),
                "percent_used": memory.percent,
                "status": "healthy" if memory.percent < memory_threshold else "warning",
            }

            cpu_status = {
                "percent_used": cpu_usage,
                "status": "healthy" if cpu_usage < cpu_threshold else "warning",
            }

            health_status["components"]["system"] = {
                "status": "healthy"
                if (
                    memory_status["status"] == "healthy"
                    and cpu_status["status"] == "healthy"
                )
                else "warning",
                "memory": memory_status,
                "cpu": cpu_status,
            }
        except Exception as e:
            health_status["components"]["system"] = {
                "status": "unhealthy",
                "error": str(e),
            }

    def _format_bytes(self, size):
        for unit in ["B", "KB", "MB", "GB", "TB"]:
            if size < 1024:
                return f"{size:.2f}{unit}"
            size /= 1024
        return f"{size:.2f}PB"
