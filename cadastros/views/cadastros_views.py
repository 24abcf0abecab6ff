# cadastros/views/cadastros_views.py

from rest_framework import filters, permissions, viewsets

from cadastros.models import Cliente, Prescritor, Vendedor
from cadastros.serializers.cadastros_serializers import (
    ClienteSerializer,
    PrescritorSerializer,
    VendedorSerializer,
)


class ClienteViewSet(viewsets.ModelViewSet):
    serializer_class = ClienteSerializer
    permission_classes = [permissions.IsAuthenticated]
    queryset = Cliente.objects.all()
    filter_backends = [filters.SearchFilter]
    search_fields = ["nome", "cpf"]


class VendedorViewSet(viewsets.ModelViewSet):
    serializer_class = VendedorSerializer
    permission_classes = [permissions.IsAuthenticated]
    queryset = Vendedor.objects.all()
    filter_backends = [filters.SearchFilter]
    search_fields = ["nome"]


class PrescritorViewSet(viewsets.ModelViewSet):
    """
    CRUD de prescritores. A busca cobre nome e número de registro no conselho.
    """

    serializer_class = PrescritorSerializer
    permission_classes = [permissions.IsAuthenticated]
    queryset = Prescritor.objects.all()
    filter_backends = [filters.SearchFilter]
    search_fields = ["nome", "numero_registro"]
