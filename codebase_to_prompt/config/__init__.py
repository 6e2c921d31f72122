from .settings import BundleConfig, FilterConfig, OutputFormat

__all__ = ["BundleConfig", "FilterConfig", "OutputFormat"]
