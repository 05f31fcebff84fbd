"""
Conversão dos planos de corte para registros planos de persistência

A camada de armazenamento guarda ``is_waste`` como inteiro (0/1); dentro do
PipePlanner ele é sempre um booleano.
"""

from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

from .models import CuttingPattern, PatternRecord, Segment, SegmentRecord


def create_records(
    job_id: int, patterns: Sequence[CuttingPattern]
) -> Tuple[List[PatternRecord], List[SegmentRecord]]:
    """
    Converte planos de corte em registros de plano e de trecho

    Args:
        job_id: ID do trabalho ao qual os planos pertencem
        patterns: Planos de corte

    Returns:
        (registros de plano, registros de trecho); ``pattern_id`` é a posição
        1-based do plano na lista
    """
    pattern_records = []
    segment_records = []

    for pattern_id, pattern in enumerate(patterns, 1):
        pattern_records.append(PatternRecord(
            job_id=job_id,
            bar_index=pattern.bar_index,
            efficiency=pattern.efficiency,
            waste=pattern.waste,
        ))

        for segment in pattern.segments:
            segment_records.append(SegmentRecord(
                pattern_id=pattern_id,
                length=segment.length,
                position=segment.position,
                is_waste=1 if segment.is_waste else 0,
            ))

    return pattern_records, segment_records


def patterns_from_records(
    pattern_records: Sequence[PatternRecord], segment_records: Sequence[SegmentRecord]
) -> List[CuttingPattern]:
    """Reconstrói os planos de corte a partir dos registros persistidos"""
    segments_by_pattern: Dict[int, List[Segment]] = defaultdict(list)
    for record in segment_records:
        segments_by_pattern[record.pattern_id].append(Segment(
            length=record.length,
            position=record.position,
            is_waste=bool(record.is_waste),
        ))

    patterns = []
    for pattern_id, record in enumerate(pattern_records, 1):
        segments = sorted(segments_by_pattern[pattern_id], key=lambda s: (s.position, s.is_waste))
        patterns.append(CuttingPattern(
            bar_index=record.bar_index,
            efficiency=record.efficiency,
            waste=record.waste,
            segments=tuple(segments),
        ))

    return patterns
