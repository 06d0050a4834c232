#!/usr/bin/env python3
from typing import Optional

import click

from logconf import configure_logging
from xorutil import MAX_KEY_LENGTH, decrypt_repeating_key_xor_base64

"""
Break repeating-key XOR
It is officially on, now.

This challenge isn't conceptually hard, but it involves actual error-prone coding. The other challenges in this set are there to bring you up to speed. This one is there to qualify you. If you can do this one, you're probably just fine up to Set 6.

There's a file here. It's been base64'd after being encrypted with repeating-key XOR.

Decrypt it.

Here's how:

    Let KEYSIZE be the guessed length of the key; try values from 2 to (say) 40.
    Write a function to compute the edit distance/Hamming distance between two strings. The Hamming distance is just the number of differing bits. The distance between:

    this is a test

    and

    wokka wokka!!!

    is 37. Make sure your code agrees before you proceed.
    For each KEYSIZE, take the first KEYSIZE worth of bytes, and the second KEYSIZE worth of bytes, and find the edit distance between them. Normalize this result by dividing by KEYSIZE.
    The KEYSIZE with the smallest normalized edit distance is probably the key. You could proceed perhaps with the smallest 2-3 KEYSIZE values. Or take 4 KEYSIZE blocks instead of 2 and average the distances.
    Now that you probably know the KEYSIZE: break the ciphertext into blocks of KEYSIZE length.
    Now transpose the blocks: make a block that is the first byte of every block, and a block that is the second byte of every block, and so on.
    Solve each block as if it was single-character XOR. You already have code to do this.
    For each block, the single-byte XOR key that produces the best looking histogram is the repeating-key XOR key byte for that block. Put them together and you have the key.

This code is going to turn out to be surprisingly useful later on. Breaking repeating-key XOR ("Vigenere") statistically is obviously an academic exercise, a "Crypto 101" thing. But more people "know how" to break it than can actually break it, and a similar technique breaks something much more important.
No, that's not a mistake.

We get more tech support questions for this challenge than any of the other ones. We promise, there aren't any blatant errors in this text. In particular: the "wokka wokka!!!" edit distance really is 37.
"""


@click.command()
@click.argument("path", default="data/s1c06.txt", type=click.Path(exists=True, dir_okay=False))
@click.option("--key-length", "-k", type=click.IntRange(min=1), default=None,
              help="Skip key length guessing and use this length")
@click.option("--max-key-length", type=click.IntRange(min=1), default=MAX_KEY_LENGTH, show_default=True,
              help="Longest key length to try when guessing")
@click.option("--blocks", "-b", type=click.IntRange(min=2), default=None,
              help="Compare only the first n blocks per key length when guessing (default: all)")
@click.option("--workers", "-w", type=click.IntRange(min=1), default=None,
              help="Solve the transposed columns on a thread pool")
@click.option("--verbose", "-v", is_flag=True)
def main(path: str, key_length: Optional[int], max_key_length: int, blocks: Optional[int],
         workers: Optional[int], verbose: bool):
    """Recover the key and plaintext of a base64 repeating-key XOR ciphertext file."""
    configure_logging(verbose)
    with open(path, "r") as f:
        text = f.read()

    try:
        result = decrypt_repeating_key_xor_base64(text,
                                                  key_length=key_length,
                                                  max_key_length=max_key_length,
                                                  max_blocks=blocks,
                                                  max_workers=workers)
    except ValueError as e:
        raise click.ClickException(f"{path}: {e}")

    if result.key_length_estimate is not None:
        click.echo(f"Keysize: {result.key_length_estimate.key_length}")
    click.echo(f"Key: {result.key!r}")
    click.echo(result.plaintext.decode("ascii", errors="replace"))


if __name__ == "__main__":
    main()
