from django.urls import path

from modules.core.views import health_check, service_info

urlpatterns = [
    path("health", health_check, name="health_check"),
    path("info", service_info, name="service_info"),
]
