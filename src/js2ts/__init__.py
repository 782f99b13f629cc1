"""js2ts - TypeScript type inference for JavaScript sources."""

__version__ = "0.1.0"

from js2ts.config import Settings, get_settings, load_config
from js2ts.inference import TypeInferenceEngine, TypeInferrer

__all__ = [
    "get_settings",
    "load_config",
    "Settings",
    "TypeInferenceEngine",
    "TypeInferrer",
]
