#!/usr/bin/env python3
from __future__ import annotations

import argparse
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from secretforge.core.rng import assert_csprng_ready, secure_random_bytes, uniform_random_index


class _Rejected(Exception):
    pass


def _single_byte_source(value: int):
    served = []

    def source(length: int) -> bytes:
        if served:
            raise _Rejected()
        served.append(length)
        return bytes([value]) * length

    return source


def sampler_tally(n: int) -> list[int]:
    """Feed every possible byte into the sampler once and count accepted outcomes."""
    if not 2 <= n <= 256:
        raise ValueError("n must be within [2, 256] for exhaustive byte enumeration")
    counts = [0] * n
    for value in range(256):
        try:
            idx = uniform_random_index(_single_byte_source(value), n)
        except _Rejected:
            continue
        counts[idx] += 1
    return counts


def _run_sampler_check(max_n: int) -> int:
    checked = 0
    for n in range(2, max_n + 1):
        counts = sampler_tally(n)
        expected = 256 // n
        if any(count != expected for count in counts):
            raise RuntimeError(f"sampler bias detected for n={n}: counts range {min(counts)}..{max(counts)}")
        checked += 1
    return checked


def _run_probe(*, samples: int, chunk_bytes: int, min_unique_ratio: float) -> tuple[float, int]:
    assert_csprng_ready()

    if samples <= 0:
        raise ValueError("samples must be > 0")
    if chunk_bytes <= 0:
        raise ValueError("chunk-bytes must be > 0")
    if not (0.0 < min_unique_ratio <= 1.0):
        raise ValueError("min-unique-ratio must be within (0, 1]")

    unique_blocks: set[bytes] = set()
    for _ in range(samples):
        unique_blocks.add(secure_random_bytes(chunk_bytes))

    unique_ratio = len(unique_blocks) / samples
    if unique_ratio < min_unique_ratio:
        raise RuntimeError(
            f"RNG health probe failed: unique ratio {unique_ratio:.6f} below threshold {min_unique_ratio:.6f}"
        )
    return unique_ratio, samples - len(unique_blocks)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Local sanity probe for the OS CSPRNG and the rejection sampler. "
            "This is a sanity check, not a cryptographic certification."
        )
    )
    parser.add_argument("--samples", type=int, default=4096, help="Number of random blocks to sample (default: 4096).")
    parser.add_argument("--chunk-bytes", type=int, default=32, help="Bytes per sampled block (default: 32).")
    parser.add_argument(
        "--min-unique-ratio",
        type=float,
        default=0.999,
        help="Minimum required unique block ratio (default: 0.999).",
    )
    parser.add_argument(
        "--max-n",
        type=int,
        default=256,
        help="Largest range size for the exhaustive sampler check (default: 256).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        checked = _run_sampler_check(args.max_n)
        unique_ratio, collisions = _run_probe(
            samples=args.samples,
            chunk_bytes=args.chunk_bytes,
            min_unique_ratio=args.min_unique_ratio,
        )
    except (OSError, RuntimeError, ValueError) as exc:
        print(f"[rng] probe failed: {exc}", file=sys.stderr)
        return 1

    print(f"[rng] sampler ranges checked={checked}")
    print(f"[rng] samples={args.samples} chunk_bytes={args.chunk_bytes}")
    print(f"[rng] unique_ratio={unique_ratio:.6f} collisions={collisions}")
    print("[rng] probe ok")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
