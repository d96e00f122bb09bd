from .loader import load_config, load_config_with_overrides
from .schema import PipelineConfig, GOSourceVersions, OntologySettings

__all__ = [
    "load_config",
    "load_config_with_overrides",
    "PipelineConfig",
    "GOSourceVersions",
    "OntologySettings",
]
