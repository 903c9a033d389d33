"""
Data Pipeline Module
===================
Attempt ingestion, sample generation and payload validation.
"""

from .loader import AttemptLoader
from .models import Attempt
from .sample import generate_sample_batch, write_csv
from .validator import PayloadValidator

__all__ = [
    'Attempt',
    'AttemptLoader',
    'PayloadValidator',
    'generate_sample_batch',
    'write_csv'
]
