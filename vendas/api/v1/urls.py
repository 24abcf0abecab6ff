# vendas/api/v1/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from vendas.api.v1.views import BaixaViewSet, VendaViewSet

router = DefaultRouter()
router.register(r"vendas", VendaViewSet, basename="venda")
router.register(r"baixas", BaixaViewSet, basename="baixa")

urlpatterns = [
    path("", include(router.urls)),
]
