"""
API v1 URL Configuration.

All API endpoints for version 1.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .views.bom import BOMDocumentViewSet

# Create router
router = DefaultRouter()

# BOM
router.register(r'boms', BOMDocumentViewSet, basename='boms')

app_name = 'api_v1'

urlpatterns = [
    path('auth/token/', TokenObtainPairView.as_view(), name='token-obtain'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    path('', include(router.urls)),
]
