from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import ConsumoViewSet

router = DefaultRouter()
router.register(r'', ConsumoViewSet, basename='consumo')

urlpatterns = [
    path("", include(router.urls)),
]
