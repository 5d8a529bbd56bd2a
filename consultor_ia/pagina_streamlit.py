"""
Seção Streamlit - Consultor Financeiro IA
==========================================

Análise da simulação e chat com o consultor.
"""

import streamlit as st

from motor_calculo import Simulacao
from .consultor import ConsultorFinanceiro
from .erros import ErroConsultor
from .providers import MODELOS_RECOMENDADOS, OllamaProvider


def render_status_consultor(consultor: ConsultorFinanceiro) -> bool:
    """Renderiza status do provider. Retorna True se pronto."""
    status = consultor.verificar_status()

    if status["pronto"]:
        st.success(f"✅ **{status['provider']} pronto**")
        return True

    st.error(f"❌ **{status['provider']} não está pronto**")
    if status["mensagem"]:
        st.warning(status["mensagem"])

    if isinstance(consultor.provider, OllamaProvider):
        with st.expander("🎯 Modelos Recomendados"):
            for modelo, info in MODELOS_RECOMENDADOS.items():
                st.markdown(
                    f"**{info['nome']}** (`{modelo}`) - RAM: {info['ram']} | "
                    f"Qualidade: {info['qualidade']} | {info.get('descricao', '')}"
                )

    return False


def render_analise(consultor: ConsultorFinanceiro, simulacao: Simulacao):
    """
    Botão de análise IA. O HTML gerado fica em simulacao.ai_analysis
    e em st.session_state.ai_analysis (para ser salvo junto).
    """
    st.markdown("### 🤖 Análise do Consultor")

    if not simulacao.results:
        st.info("Informe os dados do profissional para gerar a análise.")
        return

    if st.button("✨ Gerar Análise com IA", use_container_width=True):
        with st.spinner("🤔 Analisando cenários..."):
            try:
                st.session_state.ai_analysis = consultor.analisar_simulacao(simulacao)
            except ErroConsultor as e:
                st.error(f"❌ Erro na IA: {e}")

    simulacao.ai_analysis = st.session_state.get("ai_analysis", "")
    if simulacao.ai_analysis:
        st.markdown(simulacao.ai_analysis, unsafe_allow_html=True)


def render_chat(consultor: ConsultorFinanceiro, simulacao: Simulacao):
    """Renderiza interface de chat sobre a simulação atual."""
    st.markdown("### 💬 Pergunte ao Consultor")

    if "chat_messages" not in st.session_state:
        st.session_state.chat_messages = []

    consultor.simulacao = simulacao

    for msg in st.session_state.chat_messages:
        autor = "👤 Você" if msg["role"] == "user" else "🤖 Consultor"
        st.markdown(f"**{autor}:** {msg['content']}")
        st.markdown("---")

    col1, col2 = st.columns([5, 1])

    with col1:
        pergunta = st.text_input(
            "Faça uma pergunta:",
            placeholder="Ex: Vale mais a pena contratar como PJ ou CLT?",
            key="chat_input",
            label_visibility="collapsed"
        )

    with col2:
        enviar = st.button("📤 Enviar", use_container_width=True)

    if enviar and pergunta:
        with st.spinner("🤔 Analisando..."):
            try:
                resposta = consultor.perguntar(pergunta)
            except ErroConsultor as e:
                st.error(f"❌ Erro: {e}")
            else:
                st.session_state.chat_messages.append({"role": "user", "content": pergunta})
                st.session_state.chat_messages.append({"role": "assistant", "content": resposta})
                st.rerun()

    if st.session_state.chat_messages:
        if st.button("🗑️ Limpar Conversa"):
            st.session_state.chat_messages = []
            consultor.limpar_historico()
            st.rerun()
