"""Use cases."""

from edgepurge.application.use_cases.purge_pipeline import PurgePipeline

__all__ = ["PurgePipeline"]
