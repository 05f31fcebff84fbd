"""
Núcleo do sistema PipePlanner com o algoritmo de otimização de cortes
"""

import logging
import time
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .config import DEFAULT_KERF_WIDTH_MM, DEFAULT_JOB_NAME
from .models import (
    CuttingPattern, Metrics, OptimizationOutcome, OptimizationReport,
    OptimizationRequest, PlacementMode, Requirement, Segment, StockBarSpec
)

logger = logging.getLogger(__name__)


class PlanningError(Exception):
    """Erro de uso do planejador (parâmetros fora do contrato)"""


def expand_requirements(requirements: Iterable[Requirement]) -> List[float]:
    """Expande (comprimento, quantidade) em uma lista plana de peças"""
    pieces = []
    for requirement in requirements:
        for _ in range(requirement.quantity):
            pieces.append(requirement.length)
    return pieces


def _open_bin(piece: float, bar_length: float) -> Dict[str, Any]:
    """Abre uma nova barra com a peça no início (primeiro corte sem kerf)"""
    return {
        "pieces": [piece],
        "remaining": bar_length - piece,
        "segments": [Segment(length=piece, position=0.0, is_waste=False)],
    }


def _place_in_open_bin(bins: List[Dict[str, Any]], piece: float, bar_length: float, kerf_width: float) -> bool:
    """Coloca a peça na primeira barra aberta onde ela cabe (First Fit)"""
    for bin_ in bins:
        kerf_needed = kerf_width if bin_["pieces"] else 0.0

        if bin_["remaining"] >= piece + kerf_needed:
            position = (bar_length - bin_["remaining"]) + kerf_needed

            bin_["pieces"].append(piece)
            bin_["remaining"] -= piece + kerf_needed
            bin_["segments"].append(Segment(length=piece, position=position, is_waste=False))
            return True

    return False


def _finalize_bin(bin_: Dict[str, Any], bar_index: int, bar_length: float) -> CuttingPattern:
    """Fecha a barra: acrescenta a sobra no final e calcula o aproveitamento"""
    segments = list(bin_["segments"])
    remaining = bin_["remaining"]

    if remaining > 0:
        segments.append(Segment(length=remaining, position=segments[-1].end, is_waste=True))

    efficiency = (bar_length - remaining) / bar_length * 100

    return CuttingPattern(
        bar_index=bar_index,
        efficiency=efficiency,
        waste=remaining,
        segments=tuple(segments),
    )


def optimize(
    stock: StockBarSpec,
    requirements: Sequence[Requirement],
    mode: PlacementMode = PlacementMode.STOP_ON_FIRST_FAILURE,
) -> OptimizationOutcome:
    """
    First Fit Decreasing (FFD) com desconto da espessura do corte

    As peças são ordenadas da maior para a menor (ordenação estável) e cada
    uma vai para a primeira barra aberta com espaço suficiente. Uma nova barra
    só é aberta quando nenhuma serve e o limite ``max_count`` ainda não foi
    atingido.

    Quando uma peça não cabe em lugar nenhum:
      - ``STOP_ON_FIRST_FAILURE``: o empacotamento para ali e todas as peças
        restantes contam como não alocadas;
      - ``CONTINUE``: a peça é descartada e as menores continuam sendo tentadas.

    Peças maiores que a barra nunca são colocadas e só entram na contagem de
    não alocadas, em qualquer modo.

    Args:
        stock: Barra de estoque (comprimento em m, kerf em mm)
        requirements: Peças necessárias
        mode: Política quando uma peça não cabe

    Returns:
        Planos de corte e a contagem de peças não alocadas
    """
    bar_length = stock.length
    kerf_width = stock.kerf_width_m

    pieces = sorted(expand_requirements(requirements), reverse=True)
    logger.debug("Otimizando %d peças em até %d barras de %.3fm", len(pieces), stock.max_count, bar_length)

    bins: List[Dict[str, Any]] = []
    unplaced = 0

    for index, piece in enumerate(pieces):
        if _place_in_open_bin(bins, piece, bar_length, kerf_width):
            continue

        # Peça maior que a barra nunca é colocada; não conta como falta de estoque
        if piece > bar_length:
            unplaced += 1
            continue

        if len(bins) < stock.max_count:
            bins.append(_open_bin(piece, bar_length))
            continue

        if mode == PlacementMode.STOP_ON_FIRST_FAILURE:
            unplaced += len(pieces) - index
            break

        unplaced += 1

    patterns = tuple(
        _finalize_bin(bin_, bar_index, bar_length)
        for bar_index, bin_ in enumerate(bins, 1)
    )

    return OptimizationOutcome(
        patterns=patterns,
        requested_count=len(pieces),
        unplaced_count=unplaced,
    )


def calculate_metrics(stock: StockBarSpec, patterns: Sequence[CuttingPattern]) -> Metrics:
    """
    Calcula as métricas gerais a partir dos planos de corte

    Sem nenhum plano o aproveitamento é 0% e ``has_patterns`` é falso.
    """
    stock_used = len(patterns)
    waste_total = sum(pattern.waste for pattern in patterns)

    if stock_used == 0:
        return Metrics(
            efficiency=0.0,
            stock_used=0,
            stock_total=stock.max_count,
            waste_total=0.0,
            has_patterns=False,
        )

    total_used_length = sum(stock.length - pattern.waste for pattern in patterns)
    total_stock_length = stock_used * stock.length
    efficiency = total_used_length / total_stock_length * 100

    return Metrics(
        efficiency=efficiency,
        stock_used=stock_used,
        stock_total=stock.max_count,
        waste_total=waste_total,
    )


RequirementLike = Union[Requirement, Tuple[float, int], Dict[str, Any]]


class PipePlanner:
    """
    Planejador de cortes de tubos
    """

    def __init__(self, kerf_width: float = DEFAULT_KERF_WIDTH_MM):
        """
        Inicializa o planejador de cortes

        Args:
            kerf_width: Espessura do corte padrão em mm
        """
        self.kerf_width = kerf_width

    def optimize(self, request: OptimizationRequest) -> OptimizationReport:
        """
        Executa a otimização e agrega as métricas

        Args:
            request: Requisição de otimização

        Returns:
            Relatório completo; ``success`` falso em caso de erro inesperado
        """
        start_time = time.time()

        try:
            outcome = optimize(request.stock, request.requirements, request.mode)
            metrics = calculate_metrics(request.stock, outcome.patterns)

            if not outcome.fulfilled:
                logger.warning(
                    "Não foi possível alocar %d de %d peças em %s: limite de %d barras",
                    outcome.unplaced_count, outcome.requested_count,
                    request.job_name, request.stock.max_count
                )

            return OptimizationReport(
                success=True,
                job_name=request.job_name,
                stock=request.stock,
                patterns=list(outcome.patterns),
                metrics=metrics,
                requested_count=outcome.requested_count,
                unplaced_count=outcome.unplaced_count,
                mode=request.mode,
                processing_time=(time.time() - start_time) * 1000,
                metadata={"algorithm": "first_fit_decreasing"},
            )

        except Exception as e:
            logger.exception("Falha na otimização de %s", request.job_name)
            return OptimizationReport(
                success=False,
                job_name=request.job_name,
                stock=request.stock,
                patterns=[],
                metrics=calculate_metrics(request.stock, []),
                mode=request.mode,
                processing_time=(time.time() - start_time) * 1000,
                metadata={"error": str(e)},
            )

    def optimize_pipes(
        self,
        length: float,
        requirements: Iterable[RequirementLike],
        max_count: int,
        kerf_width: Optional[float] = None,
        job_name: str = DEFAULT_JOB_NAME,
        mode: Union[PlacementMode, str] = PlacementMode.STOP_ON_FIRST_FAILURE,
    ) -> OptimizationReport:
        """Método de conveniência que monta a requisição a partir de valores simples"""
        try:
            mode = PlacementMode(mode)
        except ValueError:
            raise PlanningError(f"Modo de empacotamento desconhecido: {mode}") from None

        stock = StockBarSpec(
            length=length,
            kerf_width=self.kerf_width if kerf_width is None else kerf_width,
            max_count=max_count,
        )
        request = OptimizationRequest(
            stock=stock,
            requirements=[self._coerce_requirement(r) for r in requirements],
            job_name=job_name,
            mode=mode,
        )
        return self.optimize(request)

    @staticmethod
    def _coerce_requirement(requirement: RequirementLike) -> Requirement:
        """Aceita Requirement, dict ou tupla (comprimento, quantidade)"""
        if isinstance(requirement, Requirement):
            return requirement
        if isinstance(requirement, dict):
            return Requirement(**requirement)
        length, quantity = requirement
        return Requirement(length=length, quantity=quantity)
