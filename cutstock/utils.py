"""
Utilitários para visualização e relatórios do CutStock
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .models import AdvancedOptimizationResult, Cut

logger = logging.getLogger(__name__)


class CutStockVisualizer:
    """Classe para visualização dos resultados de otimização"""

    def __init__(self, result: AdvancedOptimizationResult):
        """
        Inicializa o visualizador

        Args:
            result: Resultado da otimização
        """
        self.result = result
        self.colors = plt.cm.Set3(np.linspace(0, 1, 12))

    def plot_cuts(self, save_path: Optional[str] = None, show: bool = True) -> None:
        """Plota a disposição das peças em cada barra"""
        if not self.result.cuts:
            logger.warning("Nenhum corte para visualizar")
            return

        cuts = self.result.cuts
        fig, axes = plt.subplots(len(cuts), 1, figsize=(12, 1.6 * len(cuts) + 1), squeeze=False)

        for ax, cut in zip(axes[:, 0], cuts):
            ax.set_xlim(0, cut.stock_length)
            ax.set_ylim(0, 1)
            ax.set_yticks([])
            ax.set_title(f"{cut.id} - {cut.stock_length:g}mm - {cut.plan_label} "
                         f"(eficiência {cut.efficiency:.1f}%)", fontsize=9)

            # Margem inicial
            first = cut.segments[0].position if cut.segments else 0
            ax.axvspan(0, first, color='lightgray', alpha=0.6)

            for j, segment in enumerate(cut.segments):
                color = self.colors[j % len(self.colors)]
                ax.barh(0.5, segment.length, left=segment.position, height=0.6,
                        color=color, edgecolor='black')
                ax.text(segment.position + segment.length / 2, 0.5, f"{segment.length:g}",
                        ha='center', va='center', fontsize=7)

            # Sobra
            if cut.remaining_length > 0:
                ax.axvspan(cut.stock_length - cut.remaining_length, cut.stock_length,
                           alpha=0.3, color='red', label=f'Sobra: {cut.remaining_length:.1f}mm')
                ax.legend(loc='upper right', fontsize=7)

        axes[-1, 0].set_xlabel("Posição (mm)")
        plt.tight_layout()
        self._finish(fig, save_path, show)

    def create_summary_chart(self, save_path: Optional[str] = None, show: bool = True) -> None:
        """Cria gráfico de resumo da otimização"""
        fig, ((ax1, ax2), (ax3, ax4)) = plt.subplots(2, 2, figsize=(14, 9))

        names = [cut.id for cut in self.result.cuts]
        efficiencies = [cut.efficiency for cut in self.result.cuts]

        # Eficiência por barra
        ax1.bar(names, efficiencies, color='skyblue', edgecolor='navy')
        ax1.set_title('Eficiência por Barra')
        ax1.set_ylabel('Eficiência (%)')
        ax1.set_ylim(0, 100)
        ax1.tick_params(axis='x', labelrotation=45)

        # Categorias de sobra
        distribution = self.result.waste_distribution
        categories = ['minimal', 'small', 'medium', 'large', 'excessive']
        ax2.bar(categories, [getattr(distribution, c) for c in categories], color='salmon')
        ax2.set_title('Categorias de Sobra')
        ax2.set_ylabel('Barras')

        # Custos
        breakdown = self.result.cost_breakdown
        cost_labels = ['material', 'corte', 'preparação', 'sobra', 'tempo', 'energia']
        cost_values = [breakdown.material_cost, breakdown.cutting_cost, breakdown.setup_cost,
                       breakdown.waste_cost, breakdown.time_cost, breakdown.energy_cost]
        ax3.barh(cost_labels, cost_values, color='khaki')
        ax3.set_title('Composição do Custo')

        ax4.axis('off')
        summary_text = (
            "RESUMO DA OTIMIZAÇÃO\n\n"
            f"Caminho: {self.result.algorithm.value}\n"
            f"Eficiência: {self.result.efficiency:.2f}% ({self.result.efficiency_category})\n"
            f"Sobra total: {self.result.total_waste:.1f} mm\n"
            f"Barras: {self.result.stock_count}\n"
            f"Custo total: {self.result.total_cost:.2f}\n"
            f"Confiança: {self.result.confidence:.0f}\n"
            f"Tempo: {self.result.execution_time_ms:.1f} ms"
        )
        ax4.text(0.05, 0.95, summary_text, transform=ax4.transAxes, fontsize=11,
                 verticalalignment='top', fontfamily='monospace',
                 bbox=dict(boxstyle="round,pad=0.5", facecolor='lightblue', alpha=0.8))

        plt.tight_layout()
        self._finish(fig, save_path, show)

    @staticmethod
    def _finish(fig, save_path: Optional[str], show: bool) -> None:
        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')
        if show:
            plt.show()
        plt.close(fig)


class CutStockReporter:
    """Classe para geração de relatórios"""

    def __init__(self, result: AdvancedOptimizationResult):
        self.result = result

    def generate_text_report(self) -> str:
        """Gera relatório em formato texto"""
        result = self.result
        report = []
        report.append("=" * 60)
        report.append("RELATÓRIO DE OTIMIZAÇÃO DE CORTES")
        report.append("=" * 60)
        report.append("")

        report.append("RESUMO GERAL:")
        report.append(f"  • Caminho: {result.algorithm.value}")
        report.append(f"  • Eficiência Total: {result.efficiency:.2f}% ({result.efficiency_category})")
        report.append(f"  • Sobra Total: {result.total_waste:.1f} mm ({result.waste_percentage:.2f}%)")
        report.append(f"  • Barras Utilizadas: {result.stock_count}")
        report.append(f"  • Segmentos: {result.total_segments}")
        report.append(f"  • Custo Total: {result.total_cost:.2f} ({result.cost_per_meter:.2f}/m)")
        report.append(f"  • Tempo Estimado: {result.total_time:.0f} min")
        report.append(f"  • Tempo de Processamento: {result.execution_time_ms:.1f} ms")
        report.append("")

        report.append("RESUMO POR ESTOQUE:")
        report.append("-" * 40)
        for summary in result.stock_summary:
            report.append(f"  {summary.stock_length:g}mm: {summary.cut_count} barras, "
                          f"sobra média {summary.avg_waste:.1f}mm, eficiência {summary.efficiency:.1f}%")
            for usage in summary.patterns:
                report.append(f"     {usage.count}× {usage.pattern}")

        report.append("\nDETALHES POR BARRA:")
        report.append("-" * 40)
        for cut in result.cuts:
            report.append(f"\n{cut.id} ({cut.stock_length:g}mm): {cut.plan_label}")
            report.append(f"   • Sobra: {cut.remaining_length:.1f} mm ({cut.waste_category.value}"
                          f"{', reaproveitável' if cut.is_reclaimable else ''})")
            for segment in cut.segments:
                report.append(f"     {segment.sequence_number + 1}. {segment.length:g}mm "
                              f"(pos: {segment.position:g}mm) {segment.work_order_id}")

        if result.validation.warnings:
            report.append("\nAVISOS:")
            for warning in result.validation.warnings:
                report.append(f"  • {warning}")

        report.append("\n" + "=" * 60)
        return "\n".join(report)

    def cuts_frame(self) -> pd.DataFrame:
        return pd.DataFrame([
            {
                'Barra': cut.id,
                'Estoque': cut.stock_length,
                'Plano': cut.plan_label,
                'Segmentos': cut.segment_count,
                'Usado': cut.used_length,
                'Sobra': cut.remaining_length,
                'Categoria': cut.waste_category.value,
                'Reaproveitável': cut.is_reclaimable,
                'Eficiência': cut.efficiency,
            }
            for cut in self.result.cuts
        ])

    def segments_frame(self) -> pd.DataFrame:
        return pd.DataFrame([
            {
                'Barra': cut.id,
                'Ordem': segment.sequence_number,
                'Comprimento': segment.length,
                'Início': segment.position,
                'Fim': segment.end_position,
                'Ordem_Servico': segment.work_order_id,
                'Perfil': segment.profile_type,
            }
            for cut in self.result.cuts
            for segment in cut.segments
        ])

    def stock_summary_frame(self) -> pd.DataFrame:
        return pd.DataFrame([
            {
                'Estoque': summary.stock_length,
                'Barras': summary.cut_count,
                'Sobra_Media': summary.avg_waste,
                'Sobra_Total': summary.total_waste,
                'Eficiência': summary.efficiency,
            }
            for summary in self.result.stock_summary
        ])

    def generate_csv_report(self, file_path: str) -> List[str]:
        """Gera relatórios CSV (barras, segmentos, estoques) e devolve os caminhos"""
        written = []
        for suffix, frame in (("barras", self.cuts_frame()),
                              ("segmentos", self.segments_frame()),
                              ("estoques", self.stock_summary_frame())):
            path = f"{file_path}_{suffix}.csv"
            frame.to_csv(path, index=False, encoding='utf-8')
            written.append(path)
        return written

    def generate_json_report(self, file_path: str) -> None:
        """Gera relatório em formato JSON"""
        report_data = self.result.model_dump(mode='json')

        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(report_data, f, indent=2, ensure_ascii=False)


def export_result(result: AdvancedOptimizationResult, output_dir: str, formats: List[str] = None) -> None:
    """
    Exporta resultado em múltiplos formatos

    Args:
        result: Resultado da otimização
        output_dir: Diretório de saída
        formats: Lista de formatos (txt, csv, json)
    """
    if formats is None:
        formats = ["txt", "csv", "json"]

    Path(output_dir).mkdir(parents=True, exist_ok=True)

    reporter = CutStockReporter(result)
    base_path = Path(output_dir) / "relatorio_cutstock"

    if "txt" in formats:
        with open(f"{base_path}.txt", 'w', encoding='utf-8') as f:
            f.write(reporter.generate_text_report())

    if "csv" in formats:
        reporter.generate_csv_report(str(base_path))

    if "json" in formats:
        reporter.generate_json_report(f"{base_path}.json")

    logger.info(f"Relatórios exportados para: {output_dir}")


def create_visualization(result: AdvancedOptimizationResult, output_dir: str, show: bool = False) -> None:
    """
    Cria visualizações do resultado

    Args:
        result: Resultado da otimização
        output_dir: Diretório de saída
        show: Se deve mostrar os gráficos
    """
    Path(output_dir).mkdir(parents=True, exist_ok=True)

    visualizer = CutStockVisualizer(result)
    base_path = Path(output_dir) / "visualizacao_cutstock"

    visualizer.plot_cuts(f"{base_path}_barras.png", show=show)
    visualizer.create_summary_chart(f"{base_path}_resumo.png", show=show)
