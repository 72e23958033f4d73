"""
Pydantic Models

Data contracts for analysis results:
- NestedConstituent, ChildConstituent, Constituent (tree nodes)
- AnalysisResult (one sentence's tree)
- SentenceRecord (original + translation + analysis)
"""

from .analysis_models import (
    NestedConstituent,
    ChildConstituent,
    Constituent,
    AnalysisResult,
    SentenceRecord
)

__all__ = [
    'NestedConstituent',
    'ChildConstituent',
    'Constituent',
    'AnalysisResult',
    'SentenceRecord'
]
