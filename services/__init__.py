from .errors import PipelineError
from .settings import Settings, load_settings

__all__ = ["PipelineError", "Settings", "load_settings"]
