"""
Modelos de dados para o sistema PipePlanner
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .config import DEFAULT_JOB_NAME, MIN_PIECE_LENGTH, MM_PER_METER


class PlacementMode(str, Enum):
    """Política de empacotamento quando uma peça não cabe em nenhuma barra"""
    STOP_ON_FIRST_FAILURE = "stop_on_first_failure"   # Interrompe na primeira peça sem lugar
    CONTINUE = "continue"                             # Continua tentando peças menores


class FrozenModel(BaseModel):
    """Base imutável com aliases camelCase para a fronteira HTTP"""
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class StockBarSpec(FrozenModel):
    """Representa o tubo/barra de estoque disponível"""
    length: float = Field(..., gt=0, description="Comprimento útil de uma barra (m)")
    kerf_width: float = Field(0.0, ge=0, description="Espessura do corte da serra (mm)")
    max_count: int = Field(..., ge=1, description="Quantidade máxima de barras disponíveis")
    diameter: Optional[float] = Field(None, ge=0, description="Diâmetro do tubo (mm) - apenas informativo")

    @property
    def kerf_width_m(self) -> float:
        """Espessura do corte convertida para metros"""
        return self.kerf_width / MM_PER_METER

    @property
    def total_length(self) -> float:
        """Comprimento total disponível em estoque"""
        return self.length * self.max_count


class Requirement(FrozenModel):
    """Representa uma medida de peça a ser cortada"""
    length: float = Field(..., ge=MIN_PIECE_LENGTH, description="Comprimento da peça (m)")
    quantity: int = Field(..., ge=1, description="Quantidade necessária")

    @property
    def total_length(self) -> float:
        """Comprimento total necessário"""
        return self.length * self.quantity


class Segment(FrozenModel):
    """Trecho contínuo dentro de uma barra (peça ou sobra)"""
    length: float = Field(..., description="Comprimento do trecho (m)")
    position: float = Field(..., description="Posição a partir do início da barra (m)")
    is_waste: bool = Field(False, description="Se o trecho é sobra/desperdício")

    @property
    def end(self) -> float:
        """Posição final do trecho"""
        return self.position + self.length


class CuttingPattern(FrozenModel):
    """Plano de corte de uma barra física"""
    bar_index: int = Field(..., ge=1, description="Índice da barra (1-based, ordem de abertura)")
    efficiency: float = Field(..., description="Aproveitamento percentual da barra")
    waste: float = Field(..., description="Sobra no final da barra (m)")
    segments: Tuple[Segment, ...] = Field(..., description="Trechos da esquerda para a direita")

    @property
    def pieces(self) -> List[Segment]:
        """Trechos que são peças (sem a sobra)"""
        return [segment for segment in self.segments if not segment.is_waste]

    @property
    def used_length(self) -> float:
        """Soma dos comprimentos das peças cortadas"""
        return sum(segment.length for segment in self.pieces)


class Metrics(FrozenModel):
    """Métricas agregadas de um conjunto de planos de corte"""
    efficiency: float = Field(..., description="Aproveitamento percentual total")
    stock_used: int = Field(..., description="Barras efetivamente utilizadas")
    stock_total: int = Field(..., description="Barras disponíveis (limite informado)")
    waste_total: float = Field(..., description="Desperdício total (m)")
    has_patterns: bool = Field(True, description="Falso quando não há nenhum plano de corte")


class OptimizationOutcome(FrozenModel):
    """Resultado puro do otimizador: planos e peças que não couberam"""
    patterns: Tuple[CuttingPattern, ...] = Field(..., description="Planos de corte")
    requested_count: int = Field(..., description="Peças solicitadas")
    unplaced_count: int = Field(0, description="Peças que não puderam ser alocadas")

    @property
    def placed_count(self) -> int:
        """Peças efetivamente alocadas"""
        return self.requested_count - self.unplaced_count

    @property
    def fulfilled(self) -> bool:
        """Se todas as peças solicitadas foram alocadas"""
        return self.unplaced_count == 0


class OptimizationRequest(BaseModel):
    """Requisição para otimização"""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    stock: StockBarSpec = Field(..., description="Barra de estoque")
    requirements: List[Requirement] = Field(..., description="Lista de peças a cortar")
    job_name: str = Field(DEFAULT_JOB_NAME, description="Nome do trabalho")
    mode: PlacementMode = Field(PlacementMode.STOP_ON_FIRST_FAILURE, description="Política de empacotamento")


class OptimizationReport(BaseModel):
    """Resultado completo da otimização"""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    success: bool = Field(..., description="Se a otimização foi bem-sucedida")
    job_name: str = Field(DEFAULT_JOB_NAME, description="Nome do trabalho")
    stock: StockBarSpec = Field(..., description="Barra de estoque utilizada")
    patterns: List[CuttingPattern] = Field(default_factory=list, description="Planos de corte")
    metrics: Metrics = Field(..., description="Métricas agregadas")
    requested_count: int = Field(0, description="Peças solicitadas")
    unplaced_count: int = Field(0, description="Peças que não puderam ser alocadas")
    mode: PlacementMode = Field(PlacementMode.STOP_ON_FIRST_FAILURE, description="Política de empacotamento")
    processing_time: float = Field(0.0, description="Tempo de processamento (ms)")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Metadados adicionais")

    @property
    def placed_count(self) -> int:
        """Peças efetivamente alocadas"""
        return self.requested_count - self.unplaced_count


class PatternRecord(FrozenModel):
    """Registro plano de um plano de corte para persistência"""
    job_id: int = Field(..., description="ID do trabalho")
    bar_index: int = Field(..., description="Índice da barra")
    efficiency: float = Field(..., description="Aproveitamento percentual")
    waste: float = Field(..., description="Sobra (m)")


class SegmentRecord(FrozenModel):
    """Registro plano de um trecho; is_waste codificado como 0/1"""
    pattern_id: int = Field(..., description="ID (1-based) do plano de corte")
    length: float = Field(..., description="Comprimento (m)")
    position: float = Field(..., description="Posição (m)")
    is_waste: int = Field(0, ge=0, le=1, description="0 = peça, 1 = sobra")
