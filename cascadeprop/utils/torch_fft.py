"""PyTorch-backed spectral transform.

Requires PyTorch. Import explicitly:
    from cascadeprop.utils.torch_fft import TorchFFT
"""

import numpy as np
import torch

from .fourier import SpectralTransform

__all__ = ["TorchFFT"]


class TorchFFT(SpectralTransform):
    """Forward DFT computed with torch.fft on any PyTorch device.

    Fields are moved to the device as complex128 and the spectrum is
    returned as a NumPy array, so the engine never sees tensors.

    Args:
        device: PyTorch device ("cpu", "cuda", "cuda:0", etc.).

    Example:
        >>> from cascadeprop import CascadedPropagation
        >>> sim = CascadedPropagation(transform=TorchFFT(device="cuda"))
    """

    def __init__(self, device: str = "cpu") -> None:
        self.device = device

    def forward(self, field: np.ndarray) -> np.ndarray:
        field_tensor = torch.from_numpy(np.ascontiguousarray(field, dtype=np.complex128))
        spectrum = torch.fft.fft2(field_tensor.to(self.device), dim=(-2, -1))
        return spectrum.cpu().numpy()
