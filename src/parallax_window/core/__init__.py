from .pipeline import ParallaxPipeline
from .runner import FrameRunner

__all__ = ["FrameRunner", "ParallaxPipeline"]
