#!/usr/bin/env python3
"""
Script principal para executar o sistema PipePlanner
"""

import argparse
import logging
import sys
from pathlib import Path

from pipeplanner import PipePlanner, PlacementMode, Requirement
from pipeplanner.config import API_HOST, API_PORT, LOG_LEVEL
from pipeplanner.utils import create_visualization, export_report

logger = logging.getLogger("pipeplanner.run")


def create_sample_data():
    """Cria dados de exemplo para demonstração"""
    requirements = [
        Requirement(length=2.2, quantity=3),
        Requirement(length=1.5, quantity=5),
        Requirement(length=0.75, quantity=8),
    ]
    return 6.0, requirements, 10


def run_demo(mode: str = PlacementMode.STOP_ON_FIRST_FAILURE.value):
    """Executa demonstração do sistema"""

    print("PipePlanner - Demonstração do Sistema")
    print("=" * 60)

    length, requirements, max_count = create_sample_data()
    planner = PipePlanner(kerf_width=3.0)

    print(f"✓ Planejador configurado com espessura de corte: {planner.kerf_width}mm")
    print(f"✓ Barra de {length}m, até {max_count} barras")
    print(f"✓ {len(requirements)} medidas de peças definidas")

    print("\nExecutando otimização...")
    report = planner.optimize_pipes(
        length=length,
        requirements=requirements,
        max_count=max_count,
        job_name="Demonstração",
        mode=mode
    )

    if not report.success:
        print(f"❌ Falha na otimização: {report.metadata.get('error', 'Erro desconhecido')}")
        return None

    metrics = report.metrics
    print(f"\n✅ Otimização concluída!")
    print(f"Eficiência: {metrics.efficiency:.1f}%")
    print(f"Desperdício: {metrics.waste_total:.3f}m")
    print(f"Barras utilizadas: {metrics.stock_used} de {metrics.stock_total}")
    print(f"Tempo de processamento: {report.processing_time:.1f}ms")

    if report.unplaced_count:
        print(f"⚠️  {report.unplaced_count} peça(s) não couberam no estoque")

    print(f"\nResumo dos cortes:")
    for pattern in report.patterns:
        pieces = ", ".join(f"{s.length:g}" for s in pattern.pieces)
        print(f"  {pattern.bar_index}. [{pieces}] sobra {pattern.waste:.3f}m, eficiência {pattern.efficiency:.1f}%")

    return report


def run_api_server():
    """Inicia o servidor da API"""
    import uvicorn

    print("Iniciando servidor da API PipePlanner...")
    print(f"✓ Documentação da API: http://localhost:{API_PORT}/docs")
    print("\nPressione Ctrl+C para parar o servidor")

    uvicorn.run(
        "main:app",
        host=API_HOST,
        port=API_PORT,
        reload=True,
        log_level=LOG_LEVEL
    )


def run_tests():
    """Executa os testes do sistema"""
    import unittest

    print("Executando testes do PipePlanner...")

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
        description="PipePlanner - Sistema de Otimização de Cortes de Tubos",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exemplos de uso:
  python run.py demo                    # Executa demonstração
  python run.py demo --mode continue    # Continua tentando peças menores
  python run.py api                     # Inicia servidor da API
  python run.py test                    # Executa testes
  python run.py demo --export results   # Executa demo e exporta resultados
        """
    )

    parser.add_argument(
        'command',
        choices=['demo', 'api', 'test'],
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
        '--mode',
        choices=[m.value for m in PlacementMode],
        default=PlacementMode.STOP_ON_FIRST_FAILURE.value,
        help='Política quando uma peça não cabe no estoque'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Exibir logs de depuração'
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        if args.command == 'demo':
            report = run_demo(args.mode)

            if report and args.export:
                print(f"\nExportando resultados para: {args.export}")
                export_report(report, args.export)

                if args.visualization:
                    print("Criando visualizações...")
                    create_visualization(report, args.export)

                print("✅ Exportação concluída!")

        elif args.command == 'api':
            run_api_server()

        elif args.command == 'test':
            success = run_tests()
            sys.exit(0 if success else 1)

    except KeyboardInterrupt:
        print("\n\nSistema interrompido pelo usuário")
    except Exception:
        logger.exception("Erro ao executar o comando %s", args.command)
        sys.exit(1)


if __name__ == "__main__":
    main()
