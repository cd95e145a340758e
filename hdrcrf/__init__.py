"""hdrcrf: camera response recovery for HDR reconstruction.

Recovers per-channel camera response curves and sample log irradiances from
bracketed LDR exposures with the Debevec–Malik least-squares method.
"""

from hdrcrf.core.config import HDRCRFConfig, WeightingScheme
from hdrcrf.core.errors import (
    DegenerateInputError,
    HDRCRFError,
    InvalidInputError,
    SingularSystemError,
)
from hdrcrf.core.exposure import ExposureSet
from hdrcrf.core.pipeline import ChannelPipeline, RecoveryResult, recover_response
from hdrcrf.radiance import assemble_radiance_map
from hdrcrf.response import ResponseResult, ResponseSolver, weight_table
from hdrcrf.sampling import PixelSampler, SampleSet

__all__ = [
    "ChannelPipeline",
    "DegenerateInputError",
    "ExposureSet",
    "HDRCRFConfig",
    "HDRCRFError",
    "InvalidInputError",
    "PixelSampler",
    "RecoveryResult",
    "ResponseResult",
    "ResponseSolver",
    "SampleSet",
    "SingularSystemError",
    "WeightingScheme",
    "assemble_radiance_map",
    "recover_response",
    "weight_table",
]

try:  # Optional PyTorch backend
    from hdrcrf.torch import TorchResponseSolver, recover_response_torch  # type: ignore

    __all__.extend(["TorchResponseSolver", "recover_response_torch"])
except ImportError:  # pragma: no cover - torch not installed
    TorchResponseSolver = None  # type: ignore
    recover_response_torch = None  # type: ignore

__version__ = "1.0.0"
