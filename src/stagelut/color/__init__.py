from .correction import CorrectionResult, DomainExcursions, LutCorrector, correct_lut
from .lut3d import DEFAULT_LUT_SIZE, Lut3D, LutShapeError, grid_coordinates, grid_points
from .pipeline import IdentityPipeline, PipelineInvertibilityError, PipelineModel, StagePipeline, build_pipeline
from .srgb import to_display, to_linear

__all__ = [
    "CorrectionResult",
    "DomainExcursions",
    "LutCorrector",
    "correct_lut",
    "DEFAULT_LUT_SIZE",
    "Lut3D",
    "LutShapeError",
    "grid_coordinates",
    "grid_points",
    "IdentityPipeline",
    "PipelineInvertibilityError",
    "PipelineModel",
    "StagePipeline",
    "build_pipeline",
    "to_display",
    "to_linear",
]
