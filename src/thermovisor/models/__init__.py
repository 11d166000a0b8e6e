from .models import (
    DegenerateImageError,
    DistributionStatistics,
    EmptyRegionError,
    FitResult,
    FittingOptions,
    InvalidGeometryError,
    OptimizerFailureError,
    ThermalAnalysisError,
    ThermovisorConfig,
    UnsupportedShapeError,
)

__all__ = [
    "DegenerateImageError",
    "DistributionStatistics",
    "EmptyRegionError",
    "FitResult",
    "FittingOptions",
    "InvalidGeometryError",
    "OptimizerFailureError",
    "ThermalAnalysisError",
    "ThermovisorConfig",
    "UnsupportedShapeError",
]
