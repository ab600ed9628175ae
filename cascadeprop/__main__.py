"""Command line entry point.

Usage:
    python -m cascadeprop eye.xml retina.bmp --bits 24 --container retina.ohc
"""

import argparse
import logging
import sys
from typing import Optional, Sequence

from .core.errors import CascadePropError
from .simulator import CascadedPropagation
from .utils.fourier import NumpyFFT, ScipyFFT, SpectralTransform

logger = logging.getLogger("cascadeprop")


def _make_transform(backend: str, device: str) -> SpectralTransform:
    if backend == "scipy":
        return ScipyFFT()
    if backend == "torch":
        from .utils.torch_fft import TorchFFT

        return TorchFFT(device=device)
    return NumpyFFT()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cascadeprop",
        description="Propagate an SLM wavefield to the retina and save the intensity image.",
    )
    parser.add_argument("config", help="XML configuration file")
    parser.add_argument("output", help="Output bitmap (.bmp)")
    parser.add_argument("--bits", type=int, default=None,
                        help="Bits per pixel of the output (default: 8 per channel)")
    parser.add_argument("--container", default=None,
                        help="Also save the retina wavefield to this container (.ohc)")
    parser.add_argument("--backend", choices=("numpy", "scipy", "torch"), default="numpy",
                        help="Spectral transform backend")
    parser.add_argument("--device", default="cpu", help="Device for the torch backend")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    sim = CascadedPropagation(transform=_make_transform(args.backend, args.device))
    try:
        sim.configure(args.config)
        sim.propagate()
        bits = args.bits if args.bits is not None else 8 * sim.num_colors
        sim.save(args.output, bits_per_pixel=bits)
        if args.container:
            sim.save_container(args.container)
    except CascadePropError as exc:
        logger.error("%s", exc)
        return 1
    finally:
        sim.release()

    return 0


if __name__ == "__main__":
    sys.exit(main())
