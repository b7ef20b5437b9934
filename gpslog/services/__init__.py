"""
Services package - Ingest orchestration and output paths.
"""

from .ingest_service import IngestService, IngestStats
from .paths import PathContext, render_path

__all__ = ['IngestService', 'IngestStats', 'PathContext', 'render_path']
