"""
Studio Finance - Calculadora de Remuneração
Interface Streamlit: capacidade, faturamento e comparação CLT x PJ x RPA

Executar:
    streamlit run app.py
"""

from dataclasses import fields
from datetime import datetime

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from config import (
    APP_NAME, APP_SUBTITLE, APP_VERSION, COLORS,
    configurar_logging, format_currency, format_percent
)
from consultor_ia import criar_consultor_padrao
from consultor_ia.pagina_streamlit import render_analise, render_chat, render_status_consultor
from modules.pdf_report import gerar_relatorio_simulacao
from motor_calculo import CalculatorInputs, FinancialModel, InvalidInputError, Simulacao, simular
from supabase_manager import SimulacaoManager

configurar_logging()

st.set_page_config(page_title=APP_NAME, page_icon="🧘", layout="wide")

# ============================================
# FORMULÁRIO
# ============================================

ROTULOS_INPUTS = {
    "monthly_price_per_client": "Mensalidade Média (R$)",
    "occupancy_rate": "Taxa de Ocupação Geral (%)",
    "hours_per_day": "Horas Funcionamento/Dia",
    "clients_per_hour": "Alunos por Hora (Capacidade)",
    "working_days_per_month": "Dias Úteis / Mês",
    "sessions_per_week_per_client": "Sessões/Semana por Aluno",
    "professional_hours_per_week": "Horas Semanais do Profissional",
    "professional_clients_per_hour": "Alunos/Hora deste Profissional",
    "professional_occupancy_rate": "% Ocupação Esperada (Meta)",
    "salary_revenue_percentage": "% Repasse (Comissão)",
    "base_salary": "Salário Fixo Base (R$)",
    "iss_percentage": "ISS (%)",
    "pj_simples_percentage": "Simples Nacional do PJ (%)",
    "other_charges_percentage": "Outros Encargos (%)",
}

ROTULOS_MODELO = {
    "payroll": "Folha (Max)",
    "operating_costs": "Custos Oper.",
    "reserves": "Reservas/Lucro",
    "working_capital": "Capital Giro",
}

GRUPOS_INPUTS = {
    "🏢 Estúdio": [
        "monthly_price_per_client", "occupancy_rate", "hours_per_day",
        "clients_per_hour", "working_days_per_month", "sessions_per_week_per_client",
    ],
    "🧘 Profissional": [
        "professional_hours_per_week", "professional_clients_per_hour",
        "professional_occupancy_rate", "salary_revenue_percentage",
    ],
    "📋 Impostos": ["iss_percentage", "pj_simples_percentage", "other_charges_percentage"],
}


def _valor_widget(valor):
    """number_input exige float em todos os argumentos"""
    return valor if isinstance(valor, bool) else float(valor)


def _chaves_formulario():
    """Chaves dos widgets do formulário (in_* e fm_*)"""
    return [f"in_{f.name}" for f in fields(CalculatorInputs)] + \
           [f"fm_{f.name}" for f in fields(FinancialModel)]


def _inicializar_estado():
    """Valores padrão do formulário na primeira execução"""
    padrao_inputs = CalculatorInputs()
    for f in fields(CalculatorInputs):
        st.session_state.setdefault(f"salvo_in_{f.name}", _valor_widget(getattr(padrao_inputs, f.name)))

    padrao_modelo = FinancialModel()
    for f in fields(FinancialModel):
        st.session_state.setdefault(f"salvo_fm_{f.name}", _valor_widget(getattr(padrao_modelo, f.name)))

    st.session_state.setdefault("ai_analysis", "")
    st.session_state.setdefault("mostrar_historico", False)


def _restaurar_formulario():
    # Streamlit descarta o estado de widgets não desenhados (ex: tela de histórico)
    for chave in _chaves_formulario():
        if chave not in st.session_state:
            st.session_state[chave] = st.session_state[f"salvo_{chave}"]


def _guardar_formulario():
    for chave in _chaves_formulario():
        st.session_state[f"salvo_{chave}"] = st.session_state[chave]


def _carregar_no_formulario(sim: Simulacao):
    """Copia uma simulação salva para os campos do formulário"""
    for f in fields(CalculatorInputs):
        valor = _valor_widget(getattr(sim.inputs, f.name))
        st.session_state[f"salvo_in_{f.name}"] = st.session_state[f"in_{f.name}"] = valor
    for f in fields(FinancialModel):
        valor = _valor_widget(getattr(sim.financial_model, f.name))
        st.session_state[f"salvo_fm_{f.name}"] = st.session_state[f"fm_{f.name}"] = valor
    st.session_state.ai_analysis = sim.ai_analysis
    st.session_state.mostrar_historico = False


def render_formulario():
    """Sidebar com parâmetros. Retorna (inputs, modelo)."""
    _restaurar_formulario()

    with st.sidebar:
        st.markdown(f"## 🧮 {APP_NAME}")
        st.caption(f"v{APP_VERSION}")

        for titulo, campos in GRUPOS_INPUTS.items():
            st.markdown(f"### {titulo}")
            for campo in campos:
                st.number_input(ROTULOS_INPUTS[campo], min_value=0.0, key=f"in_{campo}")

            if titulo == "🧘 Profissional":
                st.checkbox("Usar salário proposto (% da receita)", key="in_use_proposed_salary")
                st.number_input(ROTULOS_INPUTS["base_salary"], min_value=0.0, key="in_base_salary",
                                disabled=st.session_state.in_use_proposed_salary)

        st.markdown("### 📊 Distribuição do Faturamento (%)")
        for campo, rotulo in ROTULOS_MODELO.items():
            st.number_input(rotulo, min_value=0.0, max_value=100.0, key=f"fm_{campo}")

    _guardar_formulario()

    inputs = CalculatorInputs(**{
        f.name: st.session_state[f"in_{f.name}"] for f in fields(CalculatorInputs)
    })
    modelo = FinancialModel(**{
        f.name: st.session_state[f"fm_{f.name}"] for f in fields(FinancialModel)
    })
    return inputs, modelo


# ============================================
# RESULTADOS
# ============================================

def render_metricas(sim: Simulacao):
    m = sim.metrics
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Faturamento Projetado", format_currency(m.target_revenue))
    col2.metric("Capacidade Máxima", f"{m.max_capacity} alunos")
    col3.metric("Faturamento Potencial", format_currency(m.potential_revenue))
    col4.metric("Receita do Profissional", format_currency(m.professional_revenue))

    if not sim.financial_model.is_balanced:
        st.warning(f"⚠️ A distribuição do faturamento soma {format_percent(sim.financial_model.total)} "
                   "(o ideal é 100%).")


def tabela_resultados(sim: Simulacao) -> pd.DataFrame:
    """Tabela de cenários na ordem CLT, PJ, RPA"""
    return pd.DataFrame([
        {
            "Modelo": r.scenario_name,
            "Custo Total (Estúdio)": format_currency(r.cost_to_studio),
            "Líquido (Profissional)": format_currency(r.net_for_professional),
            "Margem Contrib.": format_currency(r.contribution_margin),
            "Viabilidade": "✅ Viável" if r.is_viable else "⚠️ Risco",
        }
        for r in sim.results
    ])


def grafico_resultados(sim: Simulacao) -> go.Figure:
    nomes = [r.sigla for r in sim.results]
    fig = go.Figure()
    fig.add_trace(go.Bar(name="Custo Estúdio", x=nomes,
                         y=[r.cost_to_studio for r in sim.results], marker_color=COLORS["danger"]))
    fig.add_trace(go.Bar(name="Líquido Prof.", x=nomes,
                         y=[r.net_for_professional for r in sim.results], marker_color=COLORS["success"]))
    fig.add_hline(y=sim.financial_model.payroll_budget(sim.metrics.target_revenue),
                  line_dash="dash", line_color=COLORS["primary"],
                  annotation_text="Orçamento de folha")
    fig.update_layout(barmode="group", height=350, margin=dict(t=30, b=10),
                      yaxis_title="R$ / mês", plot_bgcolor="white")
    return fig


def render_resultados(sim: Simulacao):
    st.markdown("### 💼 Modelos de Contratação")
    if not sim.results:
        st.info("O profissional não gera receita com os parâmetros informados.")
        return

    st.dataframe(tabela_resultados(sim), use_container_width=True, hide_index=True)
    st.plotly_chart(grafico_resultados(sim), use_container_width=True)


# ============================================
# HISTÓRICO
# ============================================

def render_historico(manager: SimulacaoManager):
    st.markdown("## 🗂️ Simulações Salvas")
    if st.button("⬅️ Voltar"):
        st.session_state.mostrar_historico = False
        st.rerun()

    simulacoes = manager.listar()
    if not simulacoes:
        st.info("Nenhuma simulação salva.")
        return

    for sim in simulacoes:
        with st.container(border=True):
            col1, col2, col3 = st.columns([4, 1, 1])
            criado = (sim.created_at or "")[:10]
            col1.markdown(f"**{sim.title}**  \n{criado} | "
                          f"Faturamento {format_currency(sim.metrics.target_revenue)}")
            if col2.button("📂 Abrir", key=f"abrir_{sim.id}"):
                _carregar_no_formulario(sim)
                st.rerun()
            if col3.button("🗑️ Excluir", key=f"excluir_{sim.id}"):
                resultado = manager.delete_simulation(sim.id)
                if resultado["success"]:
                    st.rerun()
                else:
                    st.error(f"Erro ao excluir simulação: {resultado.get('error')}")


def render_acoes(sim: Simulacao, manager: SimulacaoManager):
    st.markdown("### 💾 Salvar e Exportar")
    col1, col2 = st.columns(2)

    with col1:
        user_id = st.session_state.get("user_id")
        titulo = st.text_input("Nome da simulação",
                               value=f"Simulação {datetime.now().strftime('%d/%m/%Y')}")
        if st.button("💾 Salvar Simulação", disabled=not user_id, use_container_width=True):
            resultado = manager.salvar(user_id, titulo, sim)
            if resultado["success"]:
                st.success("Simulação salva com sucesso!")
            else:
                st.error(f"Erro ao salvar: {resultado.get('error')}")
        if not user_id:
            st.caption("Faça login para salvar simulações.")

    with col2:
        nome_estudio = st.text_input("Nome do estúdio (relatório)", value="Seu Studio")
        if sim.results:
            st.download_button(
                "📄 Baixar PDF",
                data=gerar_relatorio_simulacao(sim, nome_estudio=nome_estudio),
                file_name=f"Relatorio_Financeiro_{datetime.now().strftime('%Y-%m-%d')}.pdf",
                mime="application/pdf",
                use_container_width=True,
            )


# ============================================
# PÁGINA
# ============================================

def main():
    _inicializar_estado()

    if "simulacao_manager" not in st.session_state:
        st.session_state.simulacao_manager = SimulacaoManager()
    manager = st.session_state.simulacao_manager

    st.title(f"🧮 {APP_NAME}")
    st.caption(APP_SUBTITLE)

    if st.session_state.mostrar_historico:
        render_historico(manager)
        return

    if st.button("🗂️ Histórico"):
        st.session_state.mostrar_historico = True
        st.rerun()

    inputs, modelo = render_formulario()

    try:
        sim = simular(inputs, modelo)
    except InvalidInputError as e:
        st.error(f"❌ {e}")
        return

    sim.ai_analysis = st.session_state.ai_analysis

    render_metricas(sim)
    render_resultados(sim)

    if "consultor" not in st.session_state:
        try:
            st.session_state.consultor = criar_consultor_padrao()
        except ValueError as e:
            st.warning(f"Consultor IA desativado: {e}")
            st.session_state.consultor = None
    consultor = st.session_state.consultor
    if consultor is None:
        render_acoes(sim, manager)
        return

    with st.expander("🤖 Consultor IA", expanded=bool(sim.ai_analysis)):
        if render_status_consultor(consultor):
            render_analise(consultor, sim)
            render_chat(consultor, sim)

    render_acoes(sim, manager)


if __name__ == "__main__":
    main()
