"""
Simulation package - Pipeline and runners.

Contains:
- Pipeline driving one byte stream through coder, channel and decoder
- Batch runner for channel sweeps
"""

from .pipeline import Pipeline, PipelineConfig, PipelineResult, ChannelContractError
from .runner import BatchRunner, RunConfig, RunFailure, summarize

__all__ = [
    'Pipeline',
    'PipelineConfig',
    'PipelineResult',
    'ChannelContractError',
    'BatchRunner',
    'RunConfig',
    'RunFailure',
    'summarize'
]
