"""
Pipeline module - Stage orchestration and reports.
"""
from .report_pipeline import ClusterReport, PipelineReport, ReportPipeline, pipeline_lock

__all__ = [
    "ClusterReport",
    "PipelineReport",
    "ReportPipeline",
    "pipeline_lock",
]
