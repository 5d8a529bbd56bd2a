"""
Configurações da Calculadora de Remuneração
Simulador financeiro para estúdios de Pilates
"""

import logging
import os

# Configurações do sistema
APP_NAME = "Studio Finance"
APP_VERSION = "1.4.0"
APP_SUBTITLE = "Capacidade, Faturamento e Modelos de Contratação | CLT x PJ x RPA"

# 52 semanas / 12 meses
WEEKS_PER_MONTH = 4.33

# Persistência
TABELA_SIMULACOES = "financial_simulations"

# Consultor IA
CONSULTOR_PROVIDER = os.environ.get("CONSULTOR_PROVIDER", "ollama")
CONSULTOR_MODELO = os.environ.get("CONSULTOR_MODELO") or None
ANTHROPIC_API_KEY = os.environ.get("ANTHROPIC_API_KEY")
OLLAMA_BASE_URL = os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")

# Cores do tema
COLORS = {
    "primary": "#1a365d",      # Azul escuro
    "secondary": "#2c5282",    # Azul médio
    "accent": "#38a169",       # Verde
    "warning": "#d69e2e",      # Amarelo
    "danger": "#c53030",       # Vermelho
    "success": "#38a169",      # Verde
    "background": "#f7fafc",   # Cinza claro
    "text": "#1a202c",         # Quase preto
    "muted": "#718096",        # Cinza
}


def configurar_logging(nivel: int = logging.INFO):
    """Configura o logging da aplicação (uma vez por processo)"""
    logging.basicConfig(
        level=nivel,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# Formatação de valores
def _nao_numerico(value) -> bool:
    return value is None or (isinstance(value, float) and value != value)


def format_currency(value, prefix="R$ "):
    """Formata valor como moeda brasileira"""
    if _nao_numerico(value):
        return "-"
    try:
        return f"{prefix}{value:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    except (TypeError, ValueError):
        return "-"


def format_percent(value, decimals=1):
    """Formata percentual já na escala 0-100"""
    if _nao_numerico(value):
        return "-"
    try:
        return f"{value:,.{decimals}f}%".replace(",", "X").replace(".", ",").replace("X", ".")
    except (TypeError, ValueError):
        return "-"


def format_number(value, decimals=0):
    """Formata número com separador de milhar"""
    if _nao_numerico(value):
        return "-"
    try:
        return f"{value:,.{decimals}f}".replace(",", "X").replace(".", ",").replace("X", ".")
    except (TypeError, ValueError):
        return "-"
