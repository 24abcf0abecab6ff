# cadastros/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from cadastros.views.cadastros_views import (
    ClienteViewSet,
    PrescritorViewSet,
    VendedorViewSet,
)

router = DefaultRouter()
router.register(r"clientes", ClienteViewSet, basename="cliente")
router.register(r"vendedores", VendedorViewSet, basename="vendedor")
router.register(r"prescritores", PrescritorViewSet, basename="prescritor")

urlpatterns = [
    path("", include(router.urls)),
]
