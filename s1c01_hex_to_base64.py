#!/usr/bin/env python3
import click

from logconf import configure_logging
from radix import b642hex, hex2b64

"""
Convert hex to base64

The string:

49276d206b696c6c696e6720796f757220627261696e206c696b65206120706f69736f6e6f7573206d757368726f6f6d

Should produce:

SSdtIGtpbGxpbmcgeW91ciBicmFpbiBsaWtlIGEgcG9pc29ub3VzIG11c2hyb29t

So go ahead and make that happen. You'll need to use this code for the rest of the exercises.

Cryptopals Rule

Always operate on raw bytes, never on encoded strings. Only use hex and base64 for pretty-printing.
"""

CHALLENGE_INPUT = "49276d206b696c6c696e6720796f757220627261696e206c696b65206120706f69736f6e6f7573206d757368726f6f6d"


@click.command()
@click.argument("text", default=CHALLENGE_INPUT)
@click.option("--decode", "-d", is_flag=True, help="Convert base64 to hex instead")
@click.option("--verbose", "-v", is_flag=True)
def main(text: str, decode: bool, verbose: bool):
    """Convert TEXT from hex to base64 (or back with --decode)."""
    configure_logging(verbose)
    try:
        click.echo(b642hex(text) if decode else hex2b64(text))
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="TEXT")


if __name__ == "__main__":
    main()
