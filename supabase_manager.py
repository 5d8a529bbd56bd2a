"""
Supabase Manager - Studio Finance
Gerencia simulações financeiras salvas no Supabase (PostgreSQL)
"""

import logging
import os
from typing import Any, Dict, List, Optional

import streamlit as st
from supabase import Client, create_client

from config import TABELA_SIMULACOES
from motor_calculo import Simulacao

logger = logging.getLogger(__name__)

# ============================================
# CONEXÃO COM SUPABASE
# ============================================

_supabase_client = None


def _credenciais() -> Optional[tuple]:
    """Lê url/key de .streamlit/secrets.toml ou das variáveis de ambiente"""
    try:
        return st.secrets["supabase"]["url"], st.secrets["supabase"]["key"]
    except Exception:
        url = os.environ.get("SUPABASE_URL")
        key = os.environ.get("SUPABASE_KEY")
        if url and key:
            return url, key
    return None


def get_supabase() -> Optional[Client]:
    """
    Retorna cliente Supabase configurado.
    Reutiliza a mesma conexão durante o processo.
    """
    global _supabase_client

    if _supabase_client is not None:
        return _supabase_client

    credenciais = _credenciais()
    if not credenciais:
        logger.warning("Credenciais do Supabase não configuradas")
        return None

    try:
        _supabase_client = create_client(*credenciais)
        return _supabase_client
    except Exception as e:
        logger.error("Erro ao conectar com Supabase: %s", e)
        return None


# ============================================
# CLASSE PRINCIPAL
# ============================================

class SimulacaoManager:
    """
    Repositório de simulações financeiras.

    Cada registro guarda user_id, title e o payload completo
    (inputs, financialModel, results, metrics, aiAnalysis) na coluna content.
    """

    def __init__(self, client: Optional[Client] = None, tabela: str = TABELA_SIMULACOES):
        """
        Args:
            client: cliente Supabase (usa get_supabase() se omitido)
            tabela: nome da tabela de simulações
        """
        self.supabase = client if client is not None else get_supabase()
        self.tabela = tabela

    def save_simulation(self, user_id: str, title: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Salva uma simulação.

        Returns:
            {"success": True, "id": ...} ou {"success": False, "error": ...}
        """
        if not self.supabase:
            return {"success": False, "error": "Supabase não configurado"}

        try:
            response = self.supabase.table(self.tabela).insert({
                "user_id": user_id,
                "title": title,
                "content": payload,
            }).execute()
        except Exception as e:
            logger.error("Erro ao salvar simulação: %s", e)
            return {"success": False, "error": str(e) or "Erro inesperado ao salvar."}

        if not response.data:
            return {"success": False, "error": "Nenhum registro retornado pelo banco"}

        return {"success": True, "id": response.data[0]["id"]}

    def fetch_simulations(self) -> List[Dict[str, Any]]:
        """Lista simulações, mais recentes primeiro"""
        if not self.supabase:
            return []

        try:
            response = self.supabase.table(self.tabela).select("*").order(
                "created_at", desc=True
            ).execute()
        except Exception as e:
            logger.error("Erro ao listar simulações: %s", e)
            return []

        # Formato do banco -> formato da aplicação
        return [
            {
                "id": item["id"],
                "createdAt": item.get("created_at"),
                "title": item.get("title", ""),
                **(item.get("content") or {}),
            }
            for item in response.data or []
        ]

    def delete_simulation(self, simulation_id: str) -> Dict[str, Any]:
        """Exclui uma simulação pelo id"""
        if not self.supabase:
            return {"success": False, "error": "Supabase não configurado"}

        try:
            self.supabase.table(self.tabela).delete().eq("id", simulation_id).execute()
            return {"success": True}
        except Exception as e:
            logger.error("Erro ao excluir simulação %s: %s", simulation_id, e)
            return {"success": False, "error": str(e)}

    # ============================================
    # CONVENIÊNCIA (objetos de domínio)
    # ============================================

    def salvar(self, user_id: str, title: str, simulacao: Simulacao) -> Dict[str, Any]:
        """Salva um objeto Simulacao"""
        resultado = self.save_simulation(user_id, title, simulacao.to_dict())
        if resultado["success"]:
            simulacao.id = resultado["id"]
            simulacao.title = title
        return resultado

    def listar(self) -> List[Simulacao]:
        """Simulações salvas como objetos Simulacao"""
        simulacoes = []
        for registro in self.fetch_simulations():
            try:
                simulacoes.append(Simulacao.from_dict(registro))
            except (TypeError, ValueError) as e:
                logger.warning("Simulação %s ignorada (formato inválido): %s", registro.get("id"), e)
        return simulacoes
