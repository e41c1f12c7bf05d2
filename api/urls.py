"""
API URLs for the dormitory service
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from applications.views import ApplicationViewSet
from dormitories.views import DormitoryViewSet, RoomViewSet
from occupancy.views import OccupancyViewSet, RoomStatusView
from payments.views import PaymentViewSet
from users.views import UserViewSet

# Create router
router = DefaultRouter()
router.register(r'applications', ApplicationViewSet, basename='application')
router.register(r'occupancy', OccupancyViewSet, basename='occupancy')
router.register(r'payments', PaymentViewSet, basename='payment')
router.register(r'dormitories', DormitoryViewSet, basename='dormitory')
router.register(r'rooms', RoomViewSet, basename='room')
router.register(r'users', UserViewSet, basename='user')

urlpatterns = [
    # JWT Authentication
    path('auth/login/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # Unauthenticated service-to-service lookup
    path(
        'internal/users/<str:user_id>/room-status',
        RoomStatusView.as_view(),
        name='room_status',
    ),

    # Audit logs
    path('audit/', include('audit.urls')),

    # Reports
    path('reports/', include('reports.urls')),

    # API routes
    path('', include(router.urls)),
]
