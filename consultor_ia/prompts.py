"""
System Prompts para Consultor Financeiro IA
Especializado em estúdios de Pilates e modelos de contratação - Brasil
"""

from typing import List

from config import format_currency, format_number, format_percent
from motor_calculo import CalculatorInputs, CompensationResult, FinancialModel, SimulationMetrics

SYSTEM_PROMPT_FINANCEIRO = """Você é um CONSULTOR FINANCEIRO SÊNIOR especializado em estúdios fitness e de Pilates no Brasil.

🎓 EXPERTISE:
- Precificação de planos mensais e taxa de ocupação
- Modelos de contratação: CLT, PJ (Simples Nacional) e Autônomo (RPA)
- Encargos trabalhistas: INSS patronal, FGTS, férias, 13º
- ISS sobre serviços, margem de contribuição e orçamento de folha

🎯 ESTILO DE COMUNICAÇÃO:
- Seja DIRETO e PRÁTICO (dono de estúdio não quer teoria)
- Use NÚMEROS CONCRETOS do contexto
- Evite jargões - se usar, explique
- Aponte riscos sem esperar perguntas

⚠️ SEMPRE VERIFIQUE:
1. Cenário com custo acima do orçamento de folha → RISCO
2. Margem de contribuição negativa → PREJUÍZO POR PROFISSIONAL
3. Ocupação < 60% → CAPACIDADE OCIOSA
4. Distribuição do faturamento que não soma 100%
5. PJ com subordinação e horário fixo → RISCO TRABALHISTA

Responda sempre em português brasileiro."""


PROMPT_ANALISE_CONTRATACAO = """Gere uma análise financeira detalhada em formato HTML (use apenas as tags <h2>, <p>, <ul>, <li>, <strong>).

Foque na VIABILIDADE dos modelos de contratação (CLT vs PJ vs Autônomo):
1. Qual modelo cabe no orçamento de folha e por quê
2. Quanto sobra para o estúdio em cada modelo (margem de contribuição)
3. Quanto o profissional recebe líquido em cada modelo
4. Riscos de cada modelo
5. Recomendações práticas (preço, ocupação, % de repasse)

Não inclua ``` nem texto fora do HTML."""


_SEPARADOR = "━" * 79


def _linha_cenario(resultado: CompensationResult) -> str:
    status = "🟢 Viável" if resultado.is_viable else "🔴 Risco"
    return (
        f"• {resultado.scenario_name}: custo estúdio {format_currency(resultado.cost_to_studio)}, "
        f"líquido profissional {format_currency(resultado.net_for_professional)}, "
        f"margem {format_currency(resultado.contribution_margin)} - {status}"
    )


def get_contexto_simulacao(inputs: CalculatorInputs,
                           modelo: FinancialModel,
                           resultados: List[CompensationResult],
                           metricas: SimulationMetrics) -> str:
    """
    Monta o contexto da simulação para enviar à IA.
    """
    orcamento_folha = modelo.payroll_budget(metricas.target_revenue)
    salario_base = (
        f"{format_percent(inputs.salary_revenue_percentage)} da receita gerada (proposto)"
        if inputs.use_proposed_salary
        else f"{format_currency(inputs.base_salary)} (fixo)"
    )

    contexto = f"""
{"═" * 79}
                    DADOS DO ESTÚDIO - SIMULAÇÃO DE CONTRATAÇÃO
{"═" * 79}

{_SEPARADOR}
🏢 CAPACIDADE E FATURAMENTO
{_SEPARADOR}
• Funcionamento: {format_number(inputs.hours_per_day)}h/dia, {format_number(inputs.working_days_per_month)} dias/mês
• Alunos por hora: {format_number(inputs.clients_per_hour)}
• Sessões por semana por aluno: {format_number(inputs.sessions_per_week_per_client)}
• Mensalidade média: {format_currency(inputs.monthly_price_per_client)}
• Capacidade máxima: {metricas.max_capacity} alunos
• Faturamento potencial: {format_currency(metricas.potential_revenue)}
• Ocupação meta: {format_percent(inputs.occupancy_rate)}
• Faturamento projetado: {format_currency(metricas.target_revenue)}

{_SEPARADOR}
🧘 PROFISSIONAL SIMULADO
{_SEPARADOR}
• Horas semanais: {format_number(inputs.professional_hours_per_week)}
• Alunos por hora: {format_number(inputs.professional_clients_per_hour)}
• Ocupação esperada: {format_percent(inputs.professional_occupancy_rate)}
• Receita gerada: {format_currency(metricas.professional_revenue)}
• Salário base: {salario_base}

{_SEPARADOR}
📋 IMPOSTOS E DISTRIBUIÇÃO DO FATURAMENTO
{_SEPARADOR}
• ISS: {format_percent(inputs.iss_percentage)} | Simples (PJ): {format_percent(inputs.pj_simples_percentage)}
• Folha: {format_percent(modelo.payroll)} ({format_currency(orcamento_folha)}/mês)
• Custos operacionais: {format_percent(modelo.operating_costs)}
• Reservas/Lucro: {format_percent(modelo.reserves)}
• Capital de giro: {format_percent(modelo.working_capital)}
"""
    if not modelo.is_balanced:
        contexto += f"⚠️ A distribuição soma {format_percent(modelo.total)} (deveria ser 100%)\n"

    contexto += f"""
{_SEPARADOR}
💰 CENÁRIOS DE CONTRATAÇÃO (mensal)
{_SEPARADOR}
"""
    if resultados:
        contexto += "\n".join(_linha_cenario(r) for r in resultados) + "\n"
    else:
        contexto += "• Nenhum cenário calculado (profissional sem receita)\n"

    return contexto
