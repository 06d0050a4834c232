#!/usr/bin/env python3
from typing import Optional

import click

from logconf import configure_logging
from radix import hex_to_bytes
from xorutil import find_single_char_xor_candidate, rank_single_xor_decryptions

"""
Detect single-character XOR

One of the 60-character strings in this file has been encrypted by single-character XOR.

Find it.

(Your code from #3 should help.)
"""


@click.command()
@click.argument("path", default="data/s1c04.txt", type=click.Path(exists=True, dir_okay=False))
@click.option("--top", "-n", type=click.IntRange(min=1), default=None,
              help="Print the n best decryptions across all lines instead of just the winner")
@click.option("--verbose", "-v", is_flag=True)
def main(path: str, top: Optional[int], verbose: bool):
    """Find the single-byte XOR encrypted line in a file of hex-encoded lines."""
    configure_logging(verbose)
    with open(path, "r") as f:
        lines = f.readlines()

    try:
        if top is not None:
            ciphertexts = [hex_to_bytes(line.strip()) for line in lines if line.strip()]
            click.echo(f"Top {top} results")
            for result in rank_single_xor_decryptions(ciphertexts)[:top]:
                click.echo(repr(result))
            return
        best = find_single_char_xor_candidate(lines)
    except ValueError as e:
        raise click.ClickException(f"{path}: {e}")

    if best is None:
        raise click.ClickException(f"{path}: no candidate lines")
    index, result = best
    click.echo(f"Line {index + 1}, key {result.key:#04x}: {result.plaintext!r}")


if __name__ == "__main__":
    main()
