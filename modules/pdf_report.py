"""
Módulo de Geração de Relatório PDF - Studio Finance
Análise financeira da simulação: capacidade, faturamento e modelos de contratação
"""

import html
import re
from datetime import datetime
from io import BytesIO
from typing import Dict, Iterator, List
from xml.sax.saxutils import escape

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.pdfgen import canvas
from reportlab.platypus import (
    HRFlowable, Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
)

from config import APP_NAME, WEEKS_PER_MONTH, format_currency, format_percent
from motor_calculo import Simulacao


# ============================================================================
# CORES DO TEMA
# ============================================================================

CORES = {
    'primaria': colors.HexColor('#1a365d'),
    'primaria_clara': colors.HexColor('#3182ce'),
    'verde': colors.HexColor('#38a169'),
    'vermelho': colors.HexColor('#e53e3e'),
    'laranja': colors.HexColor('#dd6b20'),
    'texto': colors.HexColor('#2d3748'),
    'texto_claro': colors.HexColor('#718096'),
    'fundo_dica': colors.HexColor('#ebf8ff'),
    'fundo_alerta': colors.HexColor('#fffaf0'),
    'fundo_sucesso': colors.HexColor('#f0fff4'),
    'fundo_cinza': colors.HexColor('#f7fafc'),
    'linha': colors.HexColor('#e2e8f0'),
}

NOMES_MODELO = {
    'payroll': 'Folha (máx.)',
    'operating_costs': 'Custos Operacionais',
    'reserves': 'Reservas/Lucro',
    'working_capital': 'Capital de Giro',
}


def criar_estilos():
    """Cria estilos personalizados"""
    styles = getSampleStyleSheet()

    styles.add(ParagraphStyle(
        name='TituloRelatorio', fontSize=24, textColor=CORES['primaria'],
        fontName='Helvetica-Bold', leading=28, spaceAfter=4
    ))

    styles.add(ParagraphStyle(
        name='SubtituloRelatorio', fontSize=13, textColor=CORES['primaria_clara'],
        fontName='Helvetica-Bold', spaceAfter=2
    ))

    styles.add(ParagraphStyle(
        name='TituloSecao', fontSize=14, textColor=CORES['primaria'],
        fontName='Helvetica-Bold', spaceBefore=15, spaceAfter=8
    ))

    styles.add(ParagraphStyle(
        name='Subtitulo', fontSize=11, textColor=CORES['texto_claro'],
        fontName='Helvetica-Bold', spaceBefore=10, spaceAfter=5
    ))

    styles.add(ParagraphStyle(
        name='Texto', fontSize=10, textColor=CORES['texto'],
        fontName='Helvetica', leading=14, spaceAfter=6, alignment=TA_JUSTIFY
    ))

    styles.add(ParagraphStyle(
        name='KPINumero', fontSize=15, textColor=CORES['primaria'],
        alignment=TA_CENTER, fontName='Helvetica-Bold'
    ))

    styles.add(ParagraphStyle(
        name='KPILabel', fontSize=8, textColor=CORES['texto_claro'],
        alignment=TA_CENTER, fontName='Helvetica'
    ))

    styles.add(ParagraphStyle(
        name='Rodape', fontSize=8, textColor=CORES['texto_claro'],
        alignment=TA_CENTER, fontName='Helvetica'
    ))

    return styles


def linha_sep(cor=None, espessura=1):
    return HRFlowable(width="100%", thickness=espessura, color=cor or CORES['linha'],
                      spaceBefore=6, spaceAfter=6)


# ============================================================================
# COMPONENTES VISUAIS
# ============================================================================

def criar_box_explicativo(titulo: str, texto: str, tipo: str = "info") -> Table:
    """Box com explicação - tipo: 'info', 'alerta', 'sucesso'"""
    cores_tipo = {
        'info': (CORES['fundo_dica'], CORES['primaria_clara']),
        'alerta': (CORES['fundo_alerta'], CORES['laranja']),
        'sucesso': (CORES['fundo_sucesso'], CORES['verde']),
    }

    cor_fundo, cor_texto = cores_tipo.get(tipo, cores_tipo['info'])

    dados = [[Paragraph(f"<b>{titulo}</b><br/><br/>{texto}", ParagraphStyle(
        'BoxTexto', fontSize=9, textColor=cor_texto,
        fontName='Helvetica', leading=13, leftIndent=5, rightIndent=5
    ))]]

    tabela = Table(dados, colWidths=[17*cm])
    tabela.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, -1), cor_fundo),
        ('BOX', (0, 0), (-1, -1), 1, cor_texto),
        ('TOPPADDING', (0, 0), (-1, -1), 10),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 10),
        ('LEFTPADDING', (0, 0), (-1, -1), 10),
        ('RIGHTPADDING', (0, 0), (-1, -1), 10),
    ]))

    return tabela


def criar_card_kpi(valor: str, label: str, styles) -> Table:
    tabela = Table([
        [Paragraph(valor, styles['KPINumero'])],
        [Paragraph(label, styles['KPILabel'])],
    ], colWidths=[4*cm])
    tabela.setStyle(TableStyle([
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('BACKGROUND', (0, 0), (-1, -1), CORES['fundo_cinza']),
        ('BOX', (0, 0), (-1, -1), 1, CORES['linha']),
        ('TOPPADDING', (0, 0), (-1, 0), 10),
        ('BOTTOMPADDING', (0, -1), (-1, -1), 8),
    ]))
    return tabela


def criar_linha_kpis(kpis: List[Dict], styles) -> Table:
    cards = [criar_card_kpi(k['valor'], k['label'], styles) for k in kpis]

    tabela = Table([cards], colWidths=[4.3*cm] * len(kpis))
    tabela.setStyle(TableStyle([
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
    ]))
    return tabela


def criar_tabela_simples(dados: List[List], larguras: List[float],
                         cores_texto: Dict[tuple, colors.Color] = None) -> Table:
    """Tabela formatada; cores_texto mapeia (coluna, linha) -> cor"""
    tabela = Table(dados, colWidths=larguras)

    estilo = [
        ('BACKGROUND', (0, 0), (-1, 0), CORES['primaria']),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
        ('ALIGN', (0, 0), (0, -1), 'LEFT'),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('GRID', (0, 0), (-1, -1), 0.5, CORES['linha']),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, CORES['fundo_cinza']]),
        ('TOPPADDING', (0, 0), (-1, -1), 6),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
    ]

    for celula, cor in (cores_texto or {}).items():
        estilo.append(('TEXTCOLOR', celula, celula, cor))

    tabela.setStyle(TableStyle(estilo))
    return tabela


# ============================================================================
# GRÁFICOS
# ============================================================================

def criar_grafico_cenarios(simulacao: Simulacao) -> BytesIO:
    """Barras: custo para o estúdio x líquido do profissional, por cenário"""
    resultados = simulacao.results
    nomes = [r.sigla for r in resultados]
    custos = [r.cost_to_studio for r in resultados]
    liquidos = [r.net_for_professional for r in resultados]

    fig, ax = plt.subplots(figsize=(10, 4.5))
    x = np.arange(len(nomes))
    largura = 0.35

    ax.bar(x - largura/2, custos, largura, label='Custo Estúdio', color='#ef4444')
    ax.bar(x + largura/2, liquidos, largura, label='Líquido Prof.', color='#10b981')

    orcamento = simulacao.financial_model.payroll_budget(simulacao.metrics.target_revenue)
    ax.axhline(orcamento, color='#1a365d', linestyle='--', linewidth=1.5,
               label=f'Orçamento de folha ({format_currency(orcamento)})')

    ax.set_xticks(x)
    ax.set_xticklabels(nomes, fontsize=11)
    ax.set_ylabel('R$ / mês')
    ax.spines['top'].set_visible(False)
    ax.spines['right'].set_visible(False)
    ax.legend(fontsize=9)
    ax.set_title('Custo x Líquido por Modelo de Contratação', fontsize=12, fontweight='bold')

    plt.tight_layout()

    buffer = BytesIO()
    plt.savefig(buffer, format='png', dpi=150, bbox_inches='tight', facecolor='white')
    buffer.seek(0)
    plt.close(fig)

    return buffer


# ============================================================================
# TEXTO DA ANÁLISE IA
# ============================================================================

def _html_para_paragrafos(conteudo: str, styles) -> Iterator[Paragraph]:
    """Converte o HTML simples da IA (h2, p, ul, li, strong) em parágrafos"""
    blocos = re.split(r"(<h2[^>]*>.*?</h2>)", conteudo, flags=re.S | re.I)
    for bloco in blocos:
        titulo = re.match(r"<h2[^>]*>(.*?)</h2>", bloco, flags=re.S | re.I)
        if titulo:
            texto = escape(html.unescape(re.sub(r"<[^>]+>", "", titulo.group(1)))).strip()
            if texto:
                yield Paragraph(texto, styles['Subtitulo'])
            continue

        texto = re.sub(r"<li[^>]*>\s*", "\n• ", bloco, flags=re.I)
        texto = re.sub(r"</?(p|ul|ol|br)[^>]*>", "\n", texto, flags=re.I)
        texto = html.unescape(re.sub(r"<[^>]+>", "", texto))
        for linha in texto.split("\n"):
            if linha.strip():
                yield Paragraph(escape(linha.strip()), styles['Texto'])


# ============================================================================
# CANVAS COM NUMERAÇÃO
# ============================================================================

class NumberedCanvas(canvas.Canvas):
    def __init__(self, *args, nome_estudio="", **kwargs):
        self.nome_estudio = nome_estudio
        canvas.Canvas.__init__(self, *args, **kwargs)
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        num_pages = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self.draw_page_elements(num_pages)
            canvas.Canvas.showPage(self)
        canvas.Canvas.save(self)

    def draw_page_elements(self, page_count):
        self.setFont("Helvetica", 8)
        self.setFillColor(CORES['texto_claro'])
        self.setStrokeColor(CORES['linha'])

        self.drawString(1.5*cm, 1.2*cm, f"{APP_NAME} - {self.nome_estudio}")
        self.drawCentredString(A4[0]/2, 1.2*cm, datetime.now().strftime("%d/%m/%Y"))
        self.drawRightString(A4[0] - 1.5*cm, 1.2*cm, f"Página {self._pageNumber} de {page_count}")
        self.line(1.5*cm, 1.5*cm, A4[0] - 1.5*cm, 1.5*cm)


# ============================================================================
# GERAÇÃO DO RELATÓRIO
# ============================================================================

def gerar_relatorio_simulacao(simulacao: Simulacao,
                              nome_estudio: str = "Seu Studio",
                              observacoes: str = "") -> BytesIO:
    """Gera o relatório PDF da simulação

    Args:
        simulacao: Simulacao calculada (ou carregada do histórico)
        nome_estudio: Nome exibido no cabeçalho
        observacoes: Texto livre adicionado ao final
    """
    buffer = BytesIO()

    doc = SimpleDocTemplate(
        buffer, pagesize=A4,
        rightMargin=1.5*cm, leftMargin=1.5*cm,
        topMargin=1.5*cm, bottomMargin=2*cm
    )

    styles = criar_estilos()
    story = []

    metricas = simulacao.metrics
    modelo = simulacao.financial_model
    inputs = simulacao.inputs

    # Cabeçalho
    story.append(Paragraph("Análise Financeira", styles['TituloRelatorio']))
    story.append(Paragraph(escape(nome_estudio), styles['SubtituloRelatorio']))
    if simulacao.title:
        story.append(Paragraph(escape(simulacao.title), styles['Subtitulo']))
    story.append(Paragraph(f"Data: {datetime.now().strftime('%d/%m/%Y')}", styles['Rodape']))
    story.append(linha_sep(CORES['primaria'], 2))

    # Resumo
    story.append(Paragraph("Resumo do Estúdio", styles['TituloSecao']))
    story.append(criar_linha_kpis([
        {'valor': format_currency(metricas.target_revenue), 'label': 'Faturamento Projetado'},
        {'valor': f"{metricas.max_capacity} alunos", 'label': 'Capacidade Máxima'},
        {'valor': format_currency(metricas.potential_revenue), 'label': 'Faturamento Potencial'},
        {'valor': format_currency(metricas.professional_revenue), 'label': 'Receita do Profissional'},
    ], styles))
    story.append(Spacer(1, 0.4*cm))
    story.append(criar_box_explicativo(
        "Como ler estes números",
        f"Com {inputs.sessions_per_week_per_client} sessões por semana, cada aluno ocupa "
        f"{inputs.sessions_per_week_per_client * WEEKS_PER_MONTH:.2f} sessões por mês. O faturamento projetado "
        f"considera {format_percent(inputs.occupancy_rate)} de ocupação sobre a capacidade máxima."
    ))

    # Cenários
    story.append(Paragraph("Modelos de Contratação", styles['TituloSecao']))
    if simulacao.results:
        dados = [['Modelo', 'Custo Estúdio', 'Líquido Prof.', 'Margem Contrib.', 'Viabilidade']]
        cores_texto = {}
        for linha, r in enumerate(simulacao.results, start=1):
            dados.append([
                r.scenario_name,
                format_currency(r.cost_to_studio),
                format_currency(r.net_for_professional),
                format_currency(r.contribution_margin),
                'Viável' if r.is_viable else 'Risco',
            ])
            cores_texto[(4, linha)] = CORES['verde'] if r.is_viable else CORES['vermelho']

        story.append(criar_tabela_simples(dados, [5.2*cm, 3*cm, 3*cm, 3*cm, 2.8*cm], cores_texto))
        story.append(Spacer(1, 0.4*cm))
        story.append(Image(criar_grafico_cenarios(simulacao), width=17*cm, height=7.6*cm))

        inviaveis = [r.sigla for r in simulacao.results if not r.is_viable]
        if inviaveis:
            story.append(criar_box_explicativo(
                "Atenção ao orçamento de folha",
                f"{', '.join(inviaveis)} ultrapassa(m) {format_percent(modelo.payroll)} do faturamento projetado "
                f"({format_currency(modelo.payroll_budget(metricas.target_revenue))}/mês).",
                tipo="alerta"
            ))
    else:
        story.append(Paragraph("Nenhum cenário calculado: o profissional não gera receita "
                               "com os parâmetros informados.", styles['Texto']))

    # Distribuição do faturamento
    story.append(Paragraph("Distribuição Ideal do Faturamento", styles['TituloSecao']))
    dados = [['Destino', '% do Faturamento', 'Valor Mensal']]
    for chave, valor in modelo.distribuir(metricas.target_revenue).items():
        dados.append([NOMES_MODELO[chave], format_percent(getattr(modelo, chave)), format_currency(valor)])
    story.append(criar_tabela_simples(dados, [7*cm, 4*cm, 6*cm]))
    if not modelo.is_balanced:
        story.append(Spacer(1, 0.3*cm))
        story.append(criar_box_explicativo(
            "Distribuição incompleta",
            f"As fatias somam {format_percent(modelo.total)}; o ideal é 100%.",
            tipo="alerta"
        ))

    # Análise IA
    if simulacao.ai_analysis:
        story.append(Paragraph("Análise do Consultor", styles['TituloSecao']))
        story.extend(_html_para_paragrafos(simulacao.ai_analysis, styles))

    if observacoes:
        story.append(Spacer(1, 0.3*cm))
        story.append(Paragraph("<b>Observações:</b>", styles['Subtitulo']))
        story.append(Paragraph(escape(observacoes), styles['Texto']))

    # Disclaimer
    story.append(Spacer(1, 0.8*cm))
    story.append(linha_sep())
    story.append(Paragraph(
        "<i>Estimativas com fatores médios de encargos e retenções. "
        "Confirme os valores com sua contabilidade antes de contratar.</i>",
        styles['Rodape']
    ))

    def make_canvas(filename, **kwargs):
        return NumberedCanvas(filename, nome_estudio=nome_estudio, **kwargs)

    doc.build(story, canvasmaker=make_canvas)

    buffer.seek(0)
    return buffer
