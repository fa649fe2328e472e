"""
Orchestration module for the HSE inspection client.
"""

from hse_client.orchestration.state import PipelineStage, PipelineState
from hse_client.orchestration.pipeline import InspectionPipeline

__all__ = [
    "InspectionPipeline",
    "PipelineStage",
    "PipelineState",
]
