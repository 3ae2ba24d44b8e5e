"""readtime_agent package

Public importable API for programmatic usage. Prefer importing the
high-level helpers from the package root::

	from readtime_agent import run_pipeline, collect_inputs, ResourceKind

Use ``asyncio.run`` (or `run_pipeline_sync`) to call the pipeline from
synchronous code.
"""

from .models import PipelineResult, ReadingResource, ResourceKind
from .errors import AnalysisError, ExtractionError, ReaderError, ValidationError
from .config import ReaderConfig
from .validator import new_resource, validate
from .extractor import extract
from .estimator import analyse, estimate
from .pipeline import collect_inputs, run_pipeline, run_pipeline_sync

__all__ = [
	"PipelineResult",
	"ReadingResource",
	"ResourceKind",
	"ReaderError",
	"ValidationError",
	"ExtractionError",
	"AnalysisError",
	"ReaderConfig",
	"new_resource",
	"validate",
	"extract",
	"analyse",
	"estimate",
	"collect_inputs",
	"run_pipeline",
	"run_pipeline_sync",
]

__version__ = "0.1.0"
