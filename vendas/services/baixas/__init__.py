# vendas/services/baixas/__init__.py
