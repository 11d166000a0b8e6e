from .centred_obj import (
    CentredObj,
    CircleObj,
    RectangleObj,
    SquareObj,
    cent_to_flag,
    copyobj,
    draw_roi,
    fill_im,
    fill_im_external,
    mean_within_mask,
    obj_from_vect,
    set_within,
    std_within_mask,
    values_within,
)
from .filter_image import (
    FilteredImage,
    external_flag_from_marker,
    filter_image,
    filter_image_by_marker,
    filter_image_inplace,
    filtered_mean,
    filtered_std,
    full_image_flag,
    reduced_image,
    reduced_image_flag,
)
from .fit_centred_obj import (
    fit_all,
    fit_all_patterns,
    fit_centred_obj,
    fit_centred_obj_to_filtered,
    image_discr,
    image_fill_discr,
)
from .line_distribution import (
    along_line_distribution,
    along_line_distribution_xiaolin_wu,
    along_mask_line_distribution,
    line_points_to_along_length,
    points_within_line,
    sample_along_angle,
    within_mask_line_points_distribution,
)
from .marker_image import count_separate_patterns, marker_image
from .models.models import (
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
from .radial_distribution import (
    aggregate_statistics,
    angular_distribution_statistics,
    radial_distribution,
    radial_distribution_statistics,
    radial_sweep,
)
from .rescaled_image import RescaledImage
from .utils.io import find_temperature_files, read_temperature_file
from .utils.math import student_coefficient

__all__ = [
    "CentredObj",
    "CircleObj",
    "DegenerateImageError",
    "DistributionStatistics",
    "EmptyRegionError",
    "FilteredImage",
    "FitResult",
    "FittingOptions",
    "InvalidGeometryError",
    "OptimizerFailureError",
    "RectangleObj",
    "RescaledImage",
    "SquareObj",
    "ThermalAnalysisError",
    "ThermovisorConfig",
    "UnsupportedShapeError",
    "aggregate_statistics",
    "along_line_distribution",
    "along_line_distribution_xiaolin_wu",
    "along_mask_line_distribution",
    "angular_distribution_statistics",
    "cent_to_flag",
    "copyobj",
    "count_separate_patterns",
    "draw_roi",
    "external_flag_from_marker",
    "fill_im",
    "fill_im_external",
    "filter_image",
    "filter_image_by_marker",
    "filter_image_inplace",
    "filtered_mean",
    "filtered_std",
    "find_temperature_files",
    "fit_all",
    "fit_all_patterns",
    "fit_centred_obj",
    "fit_centred_obj_to_filtered",
    "full_image_flag",
    "image_discr",
    "image_fill_discr",
    "line_points_to_along_length",
    "marker_image",
    "mean_within_mask",
    "obj_from_vect",
    "points_within_line",
    "radial_distribution",
    "radial_distribution_statistics",
    "radial_sweep",
    "read_temperature_file",
    "reduced_image",
    "reduced_image_flag",
    "sample_along_angle",
    "set_within",
    "std_within_mask",
    "student_coefficient",
    "values_within",
    "within_mask_line_points_distribution",
]
