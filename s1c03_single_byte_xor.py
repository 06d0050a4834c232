#!/usr/bin/env python3
import click

from logconf import configure_logging
from radix import hex_to_bytes
from xorutil import break_single_xor_cipher

"""
Single-byte XOR cipher

The hex encoded string:

1b37373331363f78151b7f2b783431333d78397828372d363c78373e783a393b3736

... has been XOR'd against a single character. Find the key, decrypt the message.

You can do this by hand. But don't: write code to do it for you.

How? Devise some method for "scoring" a piece of English plaintext. Character frequency is a good metric. Evaluate
each output and choose the one with the best score.
"""


@click.command()
@click.argument("ciphertext", default="1b37373331363f78151b7f2b783431333d78397828372d363c78373e783a393b3736")
@click.option("--verbose", "-v", is_flag=True)
def main(ciphertext: str, verbose: bool):
    """Break a hex-encoded single-byte XOR CIPHERTEXT."""
    configure_logging(verbose)
    try:
        ciphertext_bytes = hex_to_bytes(ciphertext)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="CIPHERTEXT")
    result = break_single_xor_cipher(ciphertext_bytes)
    click.echo(f"Key: {result.key:#04x} ({chr(result.key)!r})")
    click.echo(f"Plaintext: {result.plaintext!r}")


if __name__ == "__main__":
    main()
