"""Front-end asset pipeline: SCSS to CSS via libsass, JavaScript bundling via esbuild."""

from .config import PackrConfig, load_config
from .pipeline import clean, packr, run_build, watch

__version__ = "1.0.9"

__all__ = ["PackrConfig", "load_config", "clean", "packr", "run_build", "watch", "__version__"]
