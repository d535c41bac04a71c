#!/usr/bin/env python3
"""
Script principal para executar o sistema CutStock
"""

import sys
import os
import argparse
import logging
from pathlib import Path

# Adicionar o diretório atual ao path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from cutstock import CuttingOptimizer, CutStockError
from cutstock.config import load_settings
from cutstock.models import CostModel, EnhancedConstraints, OptimizationItem
from cutstock.utils import export_result, create_visualization


def create_sample_data():
    """Cria dados de exemplo para demonstração"""

    items = [
        OptimizationItem(profile_type="KASA", length=918, quantity=4, work_order_id="OS-1001"),
        OptimizationItem(profile_type="KASA", length=687, quantity=3, work_order_id="OS-1001"),
        OptimizationItem(profile_type="KANAT", length=1200, quantity=10, work_order_id="OS-1002"),
        OptimizationItem(profile_type="KANAT", length=800, quantity=15, work_order_id="OS-1003"),
        OptimizationItem(profile_type="KANAT", length=600, quantity=20, work_order_id="OS-1003"),
    ]
    stock_lengths = [6100, 6500, 7300]
    constraints = EnhancedConstraints(kerf_width=3.5, start_safety=2, end_safety=2, min_scrap_length=75)

    return items, stock_lengths, constraints


def run_demo():
    """Executa demonstração do sistema"""

    print("🔧 CutStock - Demonstração do Sistema")
    print("=" * 60)

    items, stock_lengths, constraints = create_sample_data()
    optimizer = CuttingOptimizer(settings=load_settings())

    print(f"✓ Espessura de corte: {constraints.kerf_width}mm")
    print(f"✓ Estoques disponíveis: {', '.join(str(s) for s in stock_lengths)}mm")
    print(f"✓ {len(items)} tipos de peças definidos")

    print("\n🔄 Executando otimização...")
    result = optimizer.optimize_items(items, stock_lengths, constraints, cost_model=CostModel())

    print("\n✅ Otimização concluída!")
    print(f"🧭 Caminho: {result.algorithm.value}")
    print(f"📊 Eficiência: {result.efficiency:.1f}% ({result.efficiency_category})")
    print(f"🗑️  Sobra: {result.total_waste:.1f}mm")
    print(f"📦 Barras utilizadas: {result.stock_count}")
    print(f"💰 Custo total: {result.total_cost:.2f}")
    print(f"⚡ Tempo de processamento: {result.execution_time_ms:.1f}ms")

    print("\n📋 Resumo das barras:")
    for summary in result.stock_summary:
        for usage in summary.patterns:
            print(f"  {usage.count}× {summary.stock_length:g}mm: {usage.pattern}")

    reclaimable = [cut for cut in result.cuts if cut.is_reclaimable]
    if reclaimable:
        print(f"\n♻️  Sobras reaproveitáveis: {len(reclaimable)}")
        for cut in reclaimable[:3]:
            print(f"     • {cut.remaining_length:.1f}mm ({cut.id})")
        if len(reclaimable) > 3:
            print(f"     • ... e mais {len(reclaimable) - 3} sobras")

    return result


def run_tests():
    """Executa os testes do sistema"""

    print("🧪 Executando testes do CutStock...")

    import unittest

    loader = unittest.TestLoader()
    start_dir = Path(__file__).parent / 'tests'
    suite = loader.discover(str(start_dir), pattern='test_*.py', top_level_dir=str(Path(__file__).parent))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    if result.wasSuccessful():
        print("\n✅ Todos os testes passaram!")
        return True
    print(f"\n❌ {len(result.failures) + len(result.errors)} testes falharam")
    return False


def main():
    """Função principal"""

    parser = argparse.ArgumentParser(
        description="CutStock - Otimizador de Cortes Lineares",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exemplos de uso:
  python run.py demo                    # Executa demonstração
  python run.py test                    # Executa testes
  python run.py demo --export results   # Executa demo e exporta resultados
        """
    )

    parser.add_argument(
        'command',
        choices=['demo', 'test'],
        help='Comando a executar'
    )

    parser.add_argument(
        '--export',
        metavar='DIR',
        help='Diretório para exportar resultados'
    )

    parser.add_argument(
        '--visualization',
        action='store_true',
        help='Criar visualizações dos resultados'
    )

    parser.add_argument(
        '--log-level',
        default=os.getenv('CUTSTOCK_LOG_LEVEL', 'WARNING'),
        help='Nível de log (DEBUG, INFO, WARNING, ...)'
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        if args.command == 'demo':
            result = run_demo()

            if args.export:
                print(f"\n📁 Exportando resultados para: {args.export}")
                export_result(result, args.export)

                if args.visualization:
                    print("🎨 Criando visualizações...")
                    create_visualization(result, args.export)

                print("✅ Exportação concluída!")

        elif args.command == 'test':
            success = run_tests()
            sys.exit(0 if success else 1)

    except KeyboardInterrupt:
        print("\n\n👋 Sistema interrompido pelo usuário")
    except CutStockError as e:
        print(f"\n❌ Erro: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
