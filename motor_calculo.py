"""
Motor de Cálculo - Studio Finance
Capacidade do estúdio, receita do profissional e cenários de contratação (CLT, PJ, RPA)

Todas as funções são puras: recebem os parâmetros do formulário, validam e
devolvem objetos novos. Percentuais são sempre informados na escala 0-100.
"""

import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, NewType, Optional, Tuple

from config import WEEKS_PER_MONTH

Money = NewType("Money", float)
Percentage = NewType("Percentage", float)   # 0-100
Count = NewType("Count", float)


# ============================================
# ERROS DE ENTRADA
# ============================================

class InvalidInputError(ValueError):
    """Parâmetro fora do domínio aceito pela calculadora"""

    def __init__(self, campo: str, valor: Any, motivo: str):
        self.campo = campo
        self.valor = valor
        self.motivo = motivo
        super().__init__(f"Entrada inválida em '{campo}': {valor!r} ({motivo})")


def _validar_numero(campo: str, valor: Any):
    if isinstance(valor, bool) or not isinstance(valor, (int, float)):
        raise InvalidInputError(campo, valor, "valor não numérico")
    if not math.isfinite(valor):
        raise InvalidInputError(campo, valor, "valor não finito")


def _validar_nao_negativo(campo: str, valor: Any):
    _validar_numero(campo, valor)
    if valor < 0:
        raise InvalidInputError(campo, valor, "não pode ser negativo")


def _validar_positivo(campo: str, valor: Any):
    _validar_numero(campo, valor)
    if valor <= 0:
        raise InvalidInputError(campo, valor, "deve ser maior que zero")


def _validar_percentual(campo: str, valor: Any):
    _validar_numero(campo, valor)
    if valor < 0 or valor > 100:
        raise InvalidInputError(campo, valor, "percentual deve estar entre 0 e 100")


def _validar_calculado(campo: str, valor: float):
    """Produtos de entradas finitas ainda podem estourar (inf) ou virar NaN (inf x 0)"""
    if not math.isfinite(valor):
        raise InvalidInputError(campo, valor, "resultado do cálculo não finito")


def _para_camel(nome: str) -> str:
    """hours_per_day -> hoursPerDay (formato gravado pelo app web)"""
    partes = nome.split("_")
    return partes[0] + "".join(p.title() for p in partes[1:])


def _carregar_campos(cls, dados: Dict) -> Dict:
    """Lê campos do dataclass aceitando chaves camelCase ou snake_case"""
    valores = {}
    for f in fields(cls):
        if f.name in dados:
            valores[f.name] = dados[f.name]
        elif _para_camel(f.name) in dados:
            valores[f.name] = dados[_para_camel(f.name)]
    return valores


def _exportar_campos(obj) -> Dict:
    return {_para_camel(f.name): getattr(obj, f.name) for f in fields(obj)}


# ============================================
# ESTRUTURAS DE DADOS
# ============================================

@dataclass
class CalculatorInputs:
    """Parâmetros do estúdio e do profissional simulado"""
    # Estúdio
    hours_per_day: Count = 8
    clients_per_hour: Count = 4
    working_days_per_month: Count = 22
    occupancy_rate: Percentage = 70
    monthly_price_per_client: Money = 350
    sessions_per_week_per_client: Count = 2

    # Profissional
    professional_hours_per_week: Count = 20
    professional_clients_per_hour: Count = 4
    professional_occupancy_rate: Percentage = 70

    # Remuneração
    salary_revenue_percentage: Percentage = 30
    base_salary: Money = 2000
    use_proposed_salary: bool = True

    # Impostos
    iss_percentage: Percentage = 5
    pj_simples_percentage: Percentage = 6
    other_charges_percentage: Percentage = 0

    def validar_estudio(self):
        """Campos usados no cálculo de capacidade"""
        _validar_nao_negativo("hours_per_day", self.hours_per_day)
        _validar_nao_negativo("clients_per_hour", self.clients_per_hour)
        _validar_nao_negativo("working_days_per_month", self.working_days_per_month)
        _validar_percentual("occupancy_rate", self.occupancy_rate)
        _validar_nao_negativo("monthly_price_per_client", self.monthly_price_per_client)
        _validar_positivo("sessions_per_week_per_client", self.sessions_per_week_per_client)

    def validar_profissional(self):
        """Campos usados na receita do profissional"""
        _validar_nao_negativo("professional_hours_per_week", self.professional_hours_per_week)
        _validar_nao_negativo("professional_clients_per_hour", self.professional_clients_per_hour)
        _validar_percentual("professional_occupancy_rate", self.professional_occupancy_rate)
        _validar_nao_negativo("monthly_price_per_client", self.monthly_price_per_client)
        _validar_positivo("sessions_per_week_per_client", self.sessions_per_week_per_client)

    def validar(self):
        """Valida todos os campos do formulário"""
        self.validar_estudio()
        self.validar_profissional()
        _validar_percentual("salary_revenue_percentage", self.salary_revenue_percentage)
        _validar_nao_negativo("base_salary", self.base_salary)
        _validar_percentual("iss_percentage", self.iss_percentage)
        _validar_percentual("pj_simples_percentage", self.pj_simples_percentage)
        _validar_percentual("other_charges_percentage", self.other_charges_percentage)

    def to_dict(self) -> Dict:
        return _exportar_campos(self)

    @classmethod
    def from_dict(cls, dados: Dict) -> 'CalculatorInputs':
        return cls(**_carregar_campos(cls, dados or {}))


@dataclass
class FinancialModel:
    """Distribuição ideal do faturamento (percentuais 0-100)"""
    payroll: Percentage = 40
    operating_costs: Percentage = 30
    reserves: Percentage = 20
    working_capital: Percentage = 10

    @property
    def total(self) -> float:
        return self.payroll + self.operating_costs + self.reserves + self.working_capital

    @property
    def is_balanced(self) -> bool:
        """True quando as fatias somam 100%"""
        return abs(self.total - 100) < 1e-9

    def validar(self):
        for f in fields(self):
            _validar_percentual(f.name, getattr(self, f.name))

    def payroll_budget(self, receita: Money) -> float:
        """Teto da folha para uma receita"""
        return receita * (self.payroll / 100)

    def distribuir(self, receita: Money) -> Dict[str, float]:
        """Valor de cada fatia do modelo sobre uma receita"""
        return {f.name: receita * (getattr(self, f.name) / 100) for f in fields(self)}

    def to_dict(self) -> Dict:
        return _exportar_campos(self)

    @classmethod
    def from_dict(cls, dados: Dict) -> 'FinancialModel':
        return cls(**_carregar_campos(cls, dados or {}))


@dataclass(frozen=True)
class CompensationResult:
    """Resultado de um cenário de contratação"""
    scenario_name: str
    gross_revenue: float
    tax_deduction: float
    net_revenue: float
    professional_cost: float
    gross_for_professional: float
    taxes_professional: float
    net_for_professional: float
    cost_to_studio: float
    contribution_margin: float
    is_viable: bool

    @property
    def sigla(self) -> str:
        """Primeiro termo do nome (CLT, PJ, Autônomo)"""
        return self.scenario_name.split(" ")[0]

    def to_dict(self) -> Dict:
        return _exportar_campos(self)

    @classmethod
    def from_dict(cls, dados: Dict) -> 'CompensationResult':
        return cls(**_carregar_campos(cls, dados))


@dataclass(frozen=True)
class StudioMetrics:
    """Capacidade e faturamento do estúdio"""
    max_capacity: int
    potential_revenue: float
    target_revenue: float


@dataclass(frozen=True)
class EmploymentModelRates:
    """
    Fatores de um modelo de contratação.

    cost_factor multiplica o salário para obter o custo do estúdio.
    net_factor multiplica o salário para obter o líquido do profissional;
    None indica que o líquido sai do percentual do Simples (PJ).
    """
    scenario_name: str
    cost_factor: float
    net_factor: Optional[float]
    checks_payroll_budget: bool = True


@dataclass(frozen=True)
class EmploymentRates:
    """Os três modelos comparados, sempre na ordem CLT, PJ, RPA"""
    # Encargos CLT ~70% (INSS patronal, FGTS, férias, 13º); desconto médio 15%
    clt: EmploymentModelRates = EmploymentModelRates("CLT (Carteira Assinada)", 1.70, 0.85, True)
    # Estúdio paga a nota cheia; profissional recolhe o Simples
    pj: EmploymentModelRates = EmploymentModelRates("PJ (Prestador de Serviço)", 1.0, None, False)
    # INSS patronal 20%; retenção INSS + IRRF estimada em 25%
    rpa: EmploymentModelRates = EmploymentModelRates("Autônomo (RPA)", 1.20, 0.75, True)

    def em_ordem(self) -> Tuple[EmploymentModelRates, EmploymentModelRates, EmploymentModelRates]:
        return (self.clt, self.pj, self.rpa)


DEFAULT_EMPLOYMENT_RATES = EmploymentRates()


@dataclass(frozen=True)
class CompensationParams:
    """Parâmetros do motor de cenários"""
    professional_revenue: Money
    use_proposed_salary: bool
    base_salary: Money
    salary_revenue_percentage: Percentage
    iss_percentage: Percentage
    pj_simples_percentage: Percentage
    other_charges_percentage: Percentage
    total_revenue: Money
    payroll_percentage: Percentage

    def validar(self):
        _validar_nao_negativo("professional_revenue", self.professional_revenue)
        if not isinstance(self.use_proposed_salary, bool):
            raise InvalidInputError("use_proposed_salary", self.use_proposed_salary, "deve ser booleano")
        _validar_nao_negativo("base_salary", self.base_salary)
        _validar_percentual("salary_revenue_percentage", self.salary_revenue_percentage)
        _validar_percentual("iss_percentage", self.iss_percentage)
        _validar_percentual("pj_simples_percentage", self.pj_simples_percentage)
        _validar_percentual("other_charges_percentage", self.other_charges_percentage)
        _validar_nao_negativo("total_revenue", self.total_revenue)
        _validar_percentual("payroll_percentage", self.payroll_percentage)

    @property
    def salary_to_use(self) -> float:
        """Salário base de todos os cenários"""
        if self.use_proposed_salary:
            return calculate_proposed_salary(self.professional_revenue, self.salary_revenue_percentage)
        return self.base_salary

    @classmethod
    def from_inputs(cls,
                    inputs: CalculatorInputs,
                    professional_revenue: Money,
                    total_revenue: Money,
                    payroll_percentage: Percentage) -> 'CompensationParams':
        return cls(
            professional_revenue=professional_revenue,
            use_proposed_salary=inputs.use_proposed_salary,
            base_salary=inputs.base_salary,
            salary_revenue_percentage=inputs.salary_revenue_percentage,
            iss_percentage=inputs.iss_percentage,
            pj_simples_percentage=inputs.pj_simples_percentage,
            other_charges_percentage=inputs.other_charges_percentage,
            total_revenue=total_revenue,
            payroll_percentage=payroll_percentage,
        )


@dataclass(frozen=True)
class SimulationMetrics:
    """Métricas exibidas no resumo da simulação"""
    target_revenue: float = 0.0
    potential_revenue: float = 0.0
    max_capacity: int = 0
    professional_revenue: float = 0.0

    def to_dict(self) -> Dict:
        return _exportar_campos(self)

    @classmethod
    def from_dict(cls, dados: Dict) -> 'SimulationMetrics':
        return cls(**_carregar_campos(cls, dados or {}))


@dataclass
class Simulacao:
    """Simulação completa: entradas, modelo, métricas, cenários e análise IA"""
    inputs: CalculatorInputs
    financial_model: FinancialModel
    metrics: SimulationMetrics
    results: List[CompensationResult] = field(default_factory=list)
    ai_analysis: str = ""

    # Metadados do registro salvo
    id: Optional[str] = None
    title: str = ""
    created_at: Optional[str] = None

    def to_dict(self) -> Dict:
        """Payload gravado na coluna content"""
        return {
            "inputs": self.inputs.to_dict(),
            "financialModel": self.financial_model.to_dict(),
            "results": [r.to_dict() for r in self.results],
            "metrics": self.metrics.to_dict(),
            "aiAnalysis": self.ai_analysis or "",
        }

    @classmethod
    def from_dict(cls, registro: Dict) -> 'Simulacao':
        """Reconstrói a simulação sem recalcular (resultados gravados são mantidos)"""
        return cls(
            inputs=CalculatorInputs.from_dict(registro.get("inputs")),
            financial_model=FinancialModel.from_dict(registro.get("financialModel")),
            metrics=SimulationMetrics.from_dict(registro.get("metrics")),
            results=[CompensationResult.from_dict(r) for r in registro.get("results") or []],
            ai_analysis=registro.get("aiAnalysis") or "",
            id=registro.get("id"),
            title=registro.get("title") or "",
            created_at=registro.get("createdAt"),
        )


# ============================================
# CAPACIDADE DO ESTÚDIO
# ============================================

def compute_studio_metrics(inputs: CalculatorInputs) -> StudioMetrics:
    """
    Capacidade máxima de alunos e faturamento do estúdio.

    Ex: 8h x 3 alunos/h x 22 dias = 528 sessões/mês; com 2 sessões/semana
    cada aluno consome 8,66 sessões/mês -> 60 alunos.
    """
    inputs.validar_estudio()

    max_sessions_per_day = inputs.hours_per_day * inputs.clients_per_hour
    max_sessions_per_month = max_sessions_per_day * inputs.working_days_per_month

    avg_sessions_per_month_per_client = inputs.sessions_per_week_per_client * WEEKS_PER_MONTH
    sessions_ratio = max_sessions_per_month / avg_sessions_per_month_per_client
    _validar_calculado("hours_per_day", sessions_ratio)
    # Arredonda para baixo: nunca prometer vaga que não existe
    max_capacity = math.floor(sessions_ratio)

    potential_revenue = max_capacity * float(inputs.monthly_price_per_client)
    _validar_calculado("monthly_price_per_client", potential_revenue)
    target_revenue = potential_revenue * (inputs.occupancy_rate / 100)

    return StudioMetrics(
        max_capacity=max_capacity,
        potential_revenue=potential_revenue,
        target_revenue=target_revenue,
    )


# ============================================
# RECEITA DO PROFISSIONAL
# ============================================

def compute_professional_revenue(inputs: CalculatorInputs) -> float:
    """Receita mensal gerada por um profissional para o estúdio"""
    inputs.validar_profissional()

    # Aulas que o profissional dá no mês
    weekly_slots = inputs.professional_hours_per_week * inputs.professional_clients_per_hour
    monthly_slots = weekly_slots * WEEKS_PER_MONTH

    occupied_slots = monthly_slots * (inputs.professional_occupancy_rate / 100)

    # Preço médio por aula = Mensalidade / (Sessões/Semana * 4.33)
    price_per_session = inputs.monthly_price_per_client / (inputs.sessions_per_week_per_client * WEEKS_PER_MONTH)

    revenue = occupied_slots * price_per_session
    _validar_calculado("professional_hours_per_week", revenue)
    return revenue


# ============================================
# CENÁRIOS DE CONTRATAÇÃO
# ============================================

def calculate_proposed_salary(professional_revenue: Money, percentage: Percentage) -> float:
    """Salário proposto como % da receita gerada pelo profissional"""
    return professional_revenue * (percentage / 100)


def compute_compensation(params: CompensationParams,
                         rates: EmploymentRates = DEFAULT_EMPLOYMENT_RATES) -> List[CompensationResult]:
    """
    Compara custo para o estúdio e líquido do profissional em CLT, PJ e RPA.

    Receita, ISS e margem partem da receita do profissional; o custo muda
    conforme o modelo. CLT e RPA são viáveis somente se o custo cabe no
    orçamento de folha (payroll_percentage da receita total). PJ é sempre
    viável, pois não gera compromisso fixo de folha.

    Returns:
        Lista com exatamente 3 resultados, na ordem CLT, PJ, RPA
    """
    params.validar()

    salary_to_use = params.salary_to_use
    revenue = params.professional_revenue

    # Imposto sobre a nota do estúdio
    tax_deduction = revenue * (params.iss_percentage / 100)
    net_revenue = revenue * (1 - params.iss_percentage / 100)

    payroll_budget = params.total_revenue * (params.payroll_percentage / 100)

    results = []
    for taxa in rates.em_ordem():
        cost = salary_to_use * taxa.cost_factor
        _validar_calculado("base_salary", cost)

        if taxa.net_factor is None:
            taxes_professional = salary_to_use * (params.pj_simples_percentage / 100)
            net_for_professional = salary_to_use * (1 - params.pj_simples_percentage / 100)
        else:
            net_for_professional = salary_to_use * taxa.net_factor
            taxes_professional = salary_to_use - net_for_professional  # Retido na fonte

        is_viable = cost < payroll_budget if taxa.checks_payroll_budget else True

        results.append(CompensationResult(
            scenario_name=taxa.scenario_name,
            gross_revenue=revenue,
            tax_deduction=tax_deduction,
            net_revenue=net_revenue,
            professional_cost=cost,
            gross_for_professional=salary_to_use,
            taxes_professional=taxes_professional,
            net_for_professional=net_for_professional,
            cost_to_studio=cost,
            contribution_margin=net_revenue - cost,
            is_viable=is_viable,
        ))

    return results


# ============================================
# SIMULAÇÃO COMPLETA
# ============================================

def simular(inputs: CalculatorInputs,
            modelo: FinancialModel,
            rates: EmploymentRates = DEFAULT_EMPLOYMENT_RATES) -> Simulacao:
    """
    Roda capacidade, receita do profissional e cenários.

    Sem receita do profissional não há cenários a comparar e a lista de
    resultados fica vazia.
    """
    inputs.validar()
    modelo.validar()

    studio = compute_studio_metrics(inputs)
    professional_revenue = compute_professional_revenue(inputs)

    metrics = SimulationMetrics(
        target_revenue=studio.target_revenue,
        potential_revenue=studio.potential_revenue,
        max_capacity=studio.max_capacity,
        professional_revenue=professional_revenue,
    )

    results = []
    if professional_revenue > 0:
        params = CompensationParams.from_inputs(
            inputs,
            professional_revenue=professional_revenue,
            total_revenue=studio.target_revenue,
            payroll_percentage=modelo.payroll,
        )
        results = compute_compensation(params, rates)

    return Simulacao(inputs=inputs, financial_model=modelo, metrics=metrics, results=results)
