# commons/exceptions.py


class BusinessError(Exception):
    """
    Erro de regra de negócio.

    `code` é estável e pode ser usado pela camada HTTP e pelos testes;
    `message` é o texto legível exibido ao usuário.
    """

    code = "ERRO_NEGOCIO"

    def __init__(self, message: str, code: str | None = None):
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message
