# vendas/services/exceptions.py

from commons.exceptions import BusinessError


class VendaServiceError(BusinessError):
    """
    Erro genérico do módulo de vendas/baixas.
    Base para erros específicos.
    """

    code = "ERRO_VENDA"


class RegistroNaoEncontradoError(VendaServiceError):
    code = "NAO_ENCONTRADO"


class ValorInvalidoError(VendaServiceError):
    """
    Valor de baixa nulo, negativo ou não numérico.
    """

    code = "VALOR_INVALIDO"


class DadosVendaInvalidosError(VendaServiceError):
    code = "DADOS_VENDA_INVALIDOS"


class VendaFechadaError(VendaServiceError):
    """
    Tentativa de alterar o livro de baixas de uma venda FECHADA.
    """

    code = "VENDA_FECHADA"


class VendaCanceladaError(VendaFechadaError):
    """
    Venda CANCELADA também congela o livro de baixas.
    """

    code = "VENDA_CANCELADA"


class BaixaExcedeSaldoError(VendaServiceError):
    """
    A baixa faria o total baixado ultrapassar o valor do cliente.
    """

    code = "BAIXA_EXCEDE_SALDO"

    def __init__(self, message: str, excedente=None, saldo_disponivel=None):
        self.excedente = excedente
        self.saldo_disponivel = saldo_disponivel
        super().__init__(message)


class VendaJaQuitadaError(VendaServiceError):
    code = "VENDA_JA_QUITADA"


class VendaNaoElegivelFechamentoError(VendaServiceError):
    code = "NAO_ELEGIVEL_FECHAMENTO"


class VendaNaoElegivelCancelamentoError(VendaServiceError):
    code = "NAO_ELEGIVEL_CANCELAMENTO"


class TransicaoInvalidaError(VendaServiceError):
    code = "TRANSICAO_DE_ESTADO_INVALIDA"
