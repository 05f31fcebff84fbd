"""
Utilitários para visualização e relatórios do PipePlanner
"""

import html
import json
import logging
from pathlib import Path
from typing import List, Optional

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle
import numpy as np
import pandas as pd

from .config import REPORT_BASE_NAME, USABLE_OFFCUT_MIN_LENGTH, VISUALIZATION_BASE_NAME
from .models import CuttingPattern, OptimizationReport

logger = logging.getLogger(__name__)


def usable_offcuts(report: OptimizationReport) -> List[CuttingPattern]:
    """Planos cuja sobra é grande o bastante para ser reaproveitada"""
    return [p for p in report.patterns if p.waste >= USABLE_OFFCUT_MIN_LENGTH]


class PatternVisualizer:
    """Classe para visualização dos planos de corte"""

    def __init__(self, report: OptimizationReport):
        """
        Inicializa o visualizador

        Args:
            report: Relatório da otimização
        """
        self.report = report
        self.colors = plt.cm.Set3(np.linspace(0, 1, 12))

    def plot_patterns(self, save_path: Optional[str] = None, show: bool = True) -> None:
        """Plota uma barra horizontal por plano de corte"""
        patterns = self.report.patterns
        if not patterns:
            logger.info("Nenhum plano de corte para visualizar")
            return

        bar_length = self.report.stock.length
        fig, axes = plt.subplots(len(patterns), 1, figsize=(12, 1.6 * len(patterns) + 1), squeeze=False)

        for ax, pattern in zip(axes[:, 0], patterns):
            ax.set_xlim(0, bar_length)
            ax.set_ylim(-0.5, 0.5)
            ax.set_yticks([])
            ax.set_title(f"Barra {pattern.bar_index} - Eficiência: {pattern.efficiency:.1f}%", fontsize=10)

            for j, segment in enumerate(pattern.segments):
                if segment.is_waste:
                    rect = Rectangle((segment.position, -0.25), segment.length, 0.5,
                                     facecolor='white', edgecolor='red', hatch='//', linewidth=1)
                    label = f"Sobra\n{segment.length:.3f}m"
                else:
                    rect = Rectangle((segment.position, -0.25), segment.length, 0.5,
                                     facecolor=self.colors[j % len(self.colors)], edgecolor='black', linewidth=1)
                    label = f"{segment.length:.3f}m"
                ax.add_patch(rect)
                ax.text(segment.position + segment.length / 2, 0, label,
                        ha='center', va='center', fontsize=7)

        axes[-1, 0].set_xlabel("Posição (m)")
        fig.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')

        if show:
            plt.show()
        else:
            plt.close(fig)

    def create_summary_chart(self, save_path: Optional[str] = None, show: bool = True) -> None:
        """Cria gráfico de resumo da otimização"""
        fig, (ax1, ax2, ax3) = plt.subplots(1, 3, figsize=(16, 5))

        labels = [str(p.bar_index) for p in self.report.patterns]
        efficiencies = [p.efficiency for p in self.report.patterns]
        waste_values = [p.waste for p in self.report.patterns]

        # Eficiência por barra
        bars = ax1.bar(labels, efficiencies, color='skyblue', edgecolor='navy')
        ax1.set_title('Eficiência por Barra')
        ax1.set_xlabel('Barra')
        ax1.set_ylabel('Eficiência (%)')
        ax1.set_ylim(0, 105)
        for bar, eff in zip(bars, efficiencies):
            ax1.text(bar.get_x() + bar.get_width() / 2., bar.get_height() + 1,
                     f'{eff:.1f}%', ha='center', va='bottom', fontsize=8)

        # Distribuição do desperdício
        if sum(waste_values) > 0:
            ax2.pie(waste_values, labels=labels, autopct='%1.1f%%', startangle=90)
        else:
            ax2.axis('off')
            ax2.text(0.5, 0.5, 'Sem desperdício', ha='center', va='center')
        ax2.set_title('Distribuição do Desperdício')

        metrics = self.report.metrics
        ax3.axis('off')
        summary_text = (
            "RESUMO DA OTIMIZAÇÃO\n\n"
            f"Trabalho: {self.report.job_name}\n"
            f"Eficiência Total: {metrics.efficiency:.1f}%\n"
            f"Desperdício Total: {metrics.waste_total:.3f} m\n"
            f"Barras Utilizadas: {metrics.stock_used} de {metrics.stock_total}\n"
            f"Peças Alocadas: {self.report.placed_count} de {self.report.requested_count}\n"
            f"Tempo de Processamento: {self.report.processing_time:.1f} ms"
        )
        ax3.text(0.05, 0.95, summary_text, transform=ax3.transAxes, fontsize=11,
                 verticalalignment='top', fontfamily='monospace',
                 bbox=dict(boxstyle="round,pad=0.5", facecolor='lightblue', alpha=0.8))

        fig.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')

        if show:
            plt.show()
        else:
            plt.close(fig)


class PatternReporter:
    """Classe para geração de relatórios"""

    def __init__(self, report: OptimizationReport):
        self.report = report

    def patterns_frame(self) -> pd.DataFrame:
        """Tabela com uma linha por plano de corte"""
        rows = [{
            'Barra': p.bar_index,
            'Peças': len(p.pieces),
            'Comprimento_Usado': p.used_length,
            'Sobra': p.waste,
            'Eficiência': p.efficiency,
        } for p in self.report.patterns]
        return pd.DataFrame(rows, columns=['Barra', 'Peças', 'Comprimento_Usado', 'Sobra', 'Eficiência'])

    def segments_frame(self) -> pd.DataFrame:
        """Tabela com uma linha por trecho (peças e sobras)"""
        rows = [{
            'Barra': p.bar_index,
            'Ordem': j,
            'Posição': s.position,
            'Comprimento': s.length,
            'Sobra': s.is_waste,
        } for p in self.report.patterns for j, s in enumerate(p.segments, 1)]
        return pd.DataFrame(rows, columns=['Barra', 'Ordem', 'Posição', 'Comprimento', 'Sobra'])

    def generate_text_report(self) -> str:
        """Gera relatório em formato texto"""
        metrics = self.report.metrics
        stock = self.report.stock

        report = []
        report.append("=" * 60)
        report.append("RELATÓRIO DE OTIMIZAÇÃO DE CORTES")
        report.append("=" * 60)
        report.append("")

        report.append("RESUMO GERAL:")
        report.append(f"  • Trabalho: {self.report.job_name}")
        report.append(f"  • Barra: {stock.length:.3f} m, corte de {stock.kerf_width:.1f} mm")
        report.append(f"  • Eficiência Total: {metrics.efficiency:.1f}%")
        report.append(f"  • Desperdício Total: {metrics.waste_total:.3f} m")
        report.append(f"  • Barras Utilizadas: {metrics.stock_used} de {metrics.stock_total}")
        report.append(f"  • Peças Alocadas: {self.report.placed_count} de {self.report.requested_count}")
        report.append(f"  • Tempo de Processamento: {self.report.processing_time:.1f} ms")

        if self.report.unplaced_count:
            report.append(f"  ! {self.report.unplaced_count} peça(s) não couberam no estoque disponível")

        report.append("")
        report.append("PLANOS DE CORTE:")
        report.append("-" * 40)

        for pattern in self.report.patterns:
            report.append(f"\nBarra {pattern.bar_index}:")
            report.append(f"   • Eficiência: {pattern.efficiency:.1f}%")
            report.append(f"   • Sobra: {pattern.waste:.3f} m")
            for j, segment in enumerate(pattern.pieces, 1):
                report.append(f"     {j}. {segment.length:.3f} m (pos: {segment.position:.3f} m)")

        offcuts = usable_offcuts(self.report)
        if offcuts:
            report.append("\nRETALHOS UTILIZÁVEIS:")
            report.append("-" * 30)
            for pattern in offcuts:
                report.append(f"  • {pattern.waste:.3f} m (Barra {pattern.bar_index})")

        report.append("\n" + "=" * 60)

        return "\n".join(report)

    def generate_csv_report(self, file_path: str) -> None:
        """Gera ``<base>_padroes.csv`` e ``<base>_segmentos.csv``"""
        self.patterns_frame().to_csv(f"{file_path}_padroes.csv", index=False, encoding='utf-8')
        self.segments_frame().to_csv(f"{file_path}_segmentos.csv", index=False, encoding='utf-8')

    def generate_json_report(self, file_path: str) -> None:
        """Gera relatório em formato JSON"""
        report_data = self.report.model_dump(mode='json', by_alias=True)

        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(report_data, f, indent=2, ensure_ascii=False)

    def generate_html_report(self, file_path: str) -> str:
        """Gera relatório em formato HTML"""
        metrics = self.report.metrics
        job_name = html.escape(self.report.job_name)

        content = f"""
        <!DOCTYPE html>
        <html lang="pt-BR">
        <head>
            <meta charset="UTF-8">
            <title>Relatório de Otimização - PipePlanner</title>
            <style>
                body {{ font-family: Arial, sans-serif; margin: 20px; }}
                .header {{ background-color: #2c3e50; color: white; padding: 20px; text-align: center; }}
                .summary {{ background-color: #ecf0f1; padding: 15px; margin: 20px 0; border-radius: 5px; }}
                .metric {{ display: inline-block; margin: 10px; padding: 10px; background-color: white; border-radius: 5px; }}
                .metric-value {{ font-size: 24px; font-weight: bold; color: #2c3e50; }}
                .metric-label {{ font-size: 12px; color: #7f8c8d; }}
                .warning {{ background-color: #fff3cd; padding: 10px; border-radius: 5px; }}
                .bar {{ display: flex; height: 28px; border: 1px solid #333; margin: 4px 0 16px 0; }}
                .bar > div {{ flex: none; box-sizing: border-box; overflow: hidden; }}
                .piece {{ background-color: #3498db; border-right: 2px solid #fff; color: white; font-size: 11px; text-align: center; }}
                .waste {{ background-color: #e74c3c; opacity: 0.5; font-size: 11px; text-align: center; }}
            </style>
        </head>
        <body>
            <div class="header">
                <h1>PipePlanner - Relatório de Otimização</h1>
                <p>{job_name}</p>
            </div>

            <div class="summary">
                <h2>Resumo Geral</h2>
                <div class="metric">
                    <div class="metric-value">{metrics.efficiency:.1f}%</div>
                    <div class="metric-label">Eficiência Total</div>
                </div>
                <div class="metric">
                    <div class="metric-value">{metrics.waste_total:.3f}m</div>
                    <div class="metric-label">Desperdício Total</div>
                </div>
                <div class="metric">
                    <div class="metric-value">{metrics.stock_used}/{metrics.stock_total}</div>
                    <div class="metric-label">Barras Utilizadas</div>
                </div>
            </div>
        """

        if self.report.unplaced_count:
            content += f"""
            <p class="warning">{self.report.unplaced_count} peça(s) não couberam no estoque disponível.</p>
            """

        content += "<h2>Planos de Corte</h2>"

        bar_length = self.report.stock.length
        for pattern in self.report.patterns:
            content += f"<h3>Barra {pattern.bar_index} - {pattern.efficiency:.1f}%</h3><div class=\"bar\">"
            previous_end = 0.0
            for segment in pattern.segments:
                # Espaço do kerf antes do trecho
                gap = max(segment.position - previous_end, 0.0) / bar_length * 100
                width = segment.length / bar_length * 100
                css_class = "waste" if segment.is_waste else "piece"
                content += (
                    f"<div class=\"{css_class}\" style=\"margin-left: {gap:.2f}%; width: {width:.2f}%\">"
                    f"{segment.length:.2f}</div>"
                )
                previous_end = segment.end
            content += "</div>"

        content += """
            <div style="text-align: center; margin-top: 40px; color: #7f8c8d;">
                <p>Relatório gerado pelo PipePlanner</p>
                <p>Data: """ + str(pd.Timestamp.now().strftime("%d/%m/%Y %H:%M:%S")) + """</p>
            </div>
        </body>
        </html>
        """

        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(content)

        return content


def export_report(report: OptimizationReport, output_dir: str, formats: Optional[List[str]] = None) -> List[Path]:
    """
    Exporta o relatório em múltiplos formatos

    Args:
        report: Relatório da otimização
        output_dir: Diretório de saída
        formats: Lista de formatos (txt, csv, json, html)

    Returns:
        Arquivos gerados
    """
    if formats is None:
        formats = ["txt", "csv", "json", "html"]

    output = Path(output_dir)
    output.mkdir(parents=True, exist_ok=True)

    reporter = PatternReporter(report)
    base_path = output / REPORT_BASE_NAME

    if "txt" in formats:
        with open(f"{base_path}.txt", 'w', encoding='utf-8') as f:
            f.write(reporter.generate_text_report())

    if "csv" in formats:
        reporter.generate_csv_report(str(base_path))

    if "json" in formats:
        reporter.generate_json_report(f"{base_path}.json")

    if "html" in formats:
        reporter.generate_html_report(f"{base_path}.html")

    logger.info("Relatórios exportados para: %s", output_dir)
    return sorted(output.glob(f"{REPORT_BASE_NAME}*"))


def create_visualization(report: OptimizationReport, output_dir: str, show: bool = False) -> List[Path]:
    """
    Cria visualizações do relatório

    Args:
        report: Relatório da otimização
        output_dir: Diretório de saída
        show: Se deve mostrar os gráficos
    """
    output = Path(output_dir)
    output.mkdir(parents=True, exist_ok=True)

    visualizer = PatternVisualizer(report)
    base_path = output / VISUALIZATION_BASE_NAME

    visualizer.plot_patterns(f"{base_path}_barras.png", show=show)
    visualizer.create_summary_chart(f"{base_path}_resumo.png", show=show)

    return sorted(output.glob(f"{VISUALIZATION_BASE_NAME}*.png"))
