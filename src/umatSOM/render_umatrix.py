## Script to render the U-matrix of a trained SOM lattice to an SVG file

import argparse
import os
import sys

import h5py as h5
import numpy as np

from .errors import UMatrixError
from .umatrix import DEFAULT_RADIUS, UMatrixConfig, render_umatrix_svg


def load_codebook(path: str, dataset: str = "lattice") -> np.ndarray:
    """Load the node weights of a trained lattice.

    Args:
        path (str): .npy file (as saved by np.save) or .h5/.hdf5 file
        dataset (str, optional): name of the dataset inside an HDF5 file. Defaults to "lattice".

    Returns:
        np.ndarray: N x f array of node weights
    """
    extension = os.path.splitext(path)[1].lower()
    if extension not in (".npy", ".h5", ".hdf5"):
        raise ValueError(f"unsupported lattice file type: {path}")

    try:
        if extension == ".npy":
            return np.load(path)
        with h5.File(path, "r") as f5:
            return f5[dataset][()]
    except OSError as err:
        raise ValueError(f"could not read lattice file {path}: {err}") from err
    except KeyError as err:
        raise ValueError(f"no dataset {dataset!r} in {path}") from err


def parse_args(argv=None):
    """CLI argument parser for render_umatrix.py script."""
    parser = argparse.ArgumentParser(description="Render the U-matrix of a SOM as SVG")
    parser.add_argument(
        "--lattice_path",
        type=str,
        dest="lattice_path",
        required=True,
        help="Path to file containing lattice values (.npy or .h5)",
    )
    parser.add_argument(
        "--dataset",
        type=str,
        dest="dataset",
        default="lattice",
        help="Name of the lattice dataset in an HDF5 file",
    )
    parser.add_argument(
        "--rows", type=int, dest="rows", required=True, help="Number of rows of the map"
    )
    parser.add_argument(
        "--cols",
        type=int,
        dest="cols",
        required=True,
        help="Number of columns of the map",
    )
    parser.add_argument(
        "--topology",
        type=str,
        dest="topology",
        default="rectangle",
        choices=["rectangle", "hexagon"],
        help="Shape of the map units",
    )
    parser.add_argument(
        "--title", type=str, dest="title", default="U-Matrix", help="Document title"
    )
    parser.add_argument(
        "--output",
        type=str,
        dest="output",
        default=None,
        help="Output SVG file, stdout if not given",
    )
    parser.add_argument(
        "--scale",
        type=float,
        dest="scale",
        default=20.0,
        help="Canvas units per grid unit",
    )
    parser.add_argument(
        "--offset", type=float, dest="offset", default=10.0, help="Canvas margin"
    )
    parser.add_argument(
        "--radius",
        type=float,
        dest="radius",
        default=DEFAULT_RADIUS,
        help="Grid distance below which two units are neighbors",
    )
    parser.add_argument(
        "--isolated",
        type=str,
        dest="isolated",
        default="max",
        choices=["max", "raise"],
        help="Units without neighbors are drawn black (max) or rejected (raise)",
    )

    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    try:
        codebook = load_codebook(args.lattice_path, args.dataset)
        print(
            f"Lattice loaded from {args.lattice_path}, shape {codebook.shape}",
            file=sys.stderr,
            flush=True,
        )

        config = UMatrixConfig(
            scale=args.scale,
            offset=args.offset,
            radius=args.radius,
            isolated_policy=args.isolated,
        )
        sink = args.output if args.output is not None else sys.stdout
        render_umatrix_svg(
            codebook,
            (args.rows, args.cols),
            args.topology,
            args.title,
            sink,
            config=config,
            verbose=True,
        )
    except (UMatrixError, ValueError) as err:
        sys.exit(f"render_umatrix: {err}")

    if args.output is not None:
        print(f"U-matrix saved to {args.output}", file=sys.stderr, flush=True)


if __name__ == "__main__":
    main()
