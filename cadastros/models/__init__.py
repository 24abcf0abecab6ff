from .cadastros_models import Cliente, Prescritor, Vendedor

__all__ = ["Cliente", "Prescritor", "Vendedor"]
