"""
Servidor FastAPI principal para o PipePlanner
"""

import tempfile
from pathlib import Path
from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
import uvicorn

from pipeplanner import PipePlanner, __version__, calculate_metrics, create_records
from pipeplanner.config import API_HOST, API_PORT, LOG_LEVEL
from pipeplanner.models import (
    CuttingPattern, Metrics, OptimizationReport, OptimizationRequest,
    PatternRecord, SegmentRecord, StockBarSpec
)
from pipeplanner.utils import PatternReporter


REPORT_FORMATS = ["txt", "csv", "json", "html"]

# Configuração do FastAPI
app = FastAPI(
    title="PipePlanner API",
    description="API para otimização de cortes de tubos",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configuração de CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Instância global do PipePlanner
pipe_planner = PipePlanner()


class MetricsRequest(BaseModel):
    """Planos de corte já calculados para recálculo das métricas"""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    stock: StockBarSpec
    patterns: List[CuttingPattern] = Field(default_factory=list)


class RecordsRequest(BaseModel):
    """Planos de corte a converter em registros de persistência"""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    job_id: int
    patterns: List[CuttingPattern]


class RecordsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    patterns: List[PatternRecord]
    segments: List[SegmentRecord]


@app.get("/")
async def root():
    """Página inicial da API - redireciona para documentação"""
    return {
        "message": "PipePlanner API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health")
async def health_check():
    """Verificação de saúde da API"""
    return {
        "status": "healthy",
        "service": "PipePlanner API",
        "version": __version__
    }


@app.post("/optimize", response_model=OptimizationReport)
async def optimize(request: OptimizationRequest):
    """
    Otimização do corte de tubos

    Args:
        request: Requisição de otimização (já validada pelo pydantic)

    Returns:
        Planos de corte, métricas e quantidade de peças não alocadas
    """
    report = pipe_planner.optimize(request)

    if not report.success:
        raise HTTPException(
            status_code=500,
            detail=f"Falha na otimização: {report.metadata.get('error', 'Erro desconhecido')}"
        )

    return report


@app.post("/metrics", response_model=Metrics)
async def metrics(request: MetricsRequest):
    """Recalcula as métricas a partir de planos de corte existentes"""
    return calculate_metrics(request.stock, request.patterns)


@app.post("/records", response_model=RecordsResponse)
async def records(request: RecordsRequest):
    """Converte planos de corte em registros planos (is_waste como 0/1)"""
    pattern_records, segment_records = create_records(request.job_id, request.patterns)
    return RecordsResponse(patterns=pattern_records, segments=segment_records)


@app.post("/report/generate")
async def generate_report(report: OptimizationReport, format: str = "all"):
    """
    Gera relatórios em diferentes formatos

    Args:
        report: Relatório da otimização
        format: Formato do relatório (txt, csv, json, html, all)

    Returns:
        Relatório no formato solicitado
    """
    formats = REPORT_FORMATS if format == "all" else [format]
    unknown = [f for f in formats if f not in REPORT_FORMATS]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Formato desconhecido: {', '.join(unknown)}")

    reporter = PatternReporter(report)
    results = {}

    with tempfile.TemporaryDirectory() as temp_dir:
        if "txt" in formats:
            results["txt"] = reporter.generate_text_report()

        if "json" in formats:
            results["json"] = report.model_dump(mode="json", by_alias=True)

        if "csv" in formats:
            base_path = Path(temp_dir) / "report"
            reporter.generate_csv_report(str(base_path))

            csv_data = {}
            for csv_file in sorted(Path(temp_dir).glob("*.csv")):
                csv_data[csv_file.stem] = csv_file.read_text(encoding="utf-8")
            results["csv"] = csv_data

        if "html" in formats:
            results["html"] = reporter.generate_html_report(str(Path(temp_dir) / "report.html"))

    return {
        "formats_generated": formats,
        "results": results
    }


@app.get("/examples")
async def get_example():
    """Retorna exemplo de dados para otimização"""
    return {
        "stock": {
            "length": 6.0,
            "kerfWidth": 3.0,
            "maxCount": 10,
            "diameter": 50.0
        },
        "requirements": [
            {"length": 1.5, "quantity": 5},
            {"length": 2.2, "quantity": 3}
        ],
        "jobName": "Corrimão da escada",
        "mode": "stop_on_first_failure"
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=API_HOST,
        port=API_PORT,
        reload=True,
        log_level=LOG_LEVEL
    )
