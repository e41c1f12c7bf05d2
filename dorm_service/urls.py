"""
URL configuration for the dormitory service.
"""
from django.contrib import admin
from django.urls import path, include

# Import health check URLs
from common.health import get_health_urls

admin.site.site_header = "Dormitory Administration"
admin.site.site_title = "Dormitory Admin"
admin.site.index_title = "Rooms, applications and payments"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('api.urls')),  # API routes
]

# Add health check endpoints (for load balancers, monitoring)
urlpatterns += get_health_urls()
