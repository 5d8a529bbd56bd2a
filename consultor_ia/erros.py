"""
Erros do Consultor IA
"""


class ErroConsultor(Exception):
    """Falha ao obter resposta do provider de IA"""
