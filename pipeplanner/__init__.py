"""
PipePlanner - Sistema de Otimização de Cortes de Tubos

Calcula planos de corte para barras de estoque a partir das medidas e
quantidades necessárias, descontando a espessura do corte da serra, e
resume o aproveitamento do material.
"""

from .core import PipePlanner, PlanningError, calculate_metrics, expand_requirements, optimize
from .models import (
    CuttingPattern, Metrics, OptimizationOutcome, OptimizationReport, OptimizationRequest,
    PatternRecord, PlacementMode, Requirement, Segment, SegmentRecord, StockBarSpec
)
from .records import create_records, patterns_from_records

__version__ = "1.0.0"
__author__ = "PipePlanner Team"

__all__ = [
    "PipePlanner",
    "PlanningError",
    "optimize",
    "calculate_metrics",
    "expand_requirements",
    "create_records",
    "patterns_from_records",
    "StockBarSpec",
    "Requirement",
    "Segment",
    "CuttingPattern",
    "Metrics",
    "OptimizationOutcome",
    "OptimizationRequest",
    "OptimizationReport",
    "PatternRecord",
    "SegmentRecord",
    "PlacementMode",
]
