"""
Configurações e constantes do PipePlanner
"""

import os

# Conversão da espessura do corte (mm) para metros
MM_PER_METER = 1000.0

# Espessura de corte padrão da serra (mm)
DEFAULT_KERF_WIDTH_MM = 3.0

# Menor peça aceita na validação de entrada (m)
MIN_PIECE_LENGTH = 0.01

DEFAULT_JOB_NAME = "Untitled Job"

# Sobras a partir deste comprimento (m) são destacadas como retalhos utilizáveis nos relatórios
USABLE_OFFCUT_MIN_LENGTH = 0.5

# Nomes base dos arquivos exportados
REPORT_BASE_NAME = "relatorio_pipeplanner"
VISUALIZATION_BASE_NAME = "visualizacao_pipeplanner"

# Servidor da API
API_HOST = os.environ.get("PIPEPLANNER_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("PIPEPLANNER_PORT", "8000"))
LOG_LEVEL = os.environ.get("PIPEPLANNER_LOG_LEVEL", "info")
