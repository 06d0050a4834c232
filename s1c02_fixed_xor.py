#!/usr/bin/env python3
import click

from logconf import configure_logging
from xorutil import fixed_xor_hex

"""
Fixed XOR

Write a function that takes two equal-length buffers and produces their XOR combination.

If your function works properly, then when you feed it the string:

1c0111001f010100061a024b53535009181c

... after hex decoding, and when XOR'd against:

686974207468652062756c6c277320657965

... should produce:

746865206b696420646f6e277420706c6179
"""


@click.command()
@click.argument("arg1", default="1c0111001f010100061a024b53535009181c")
@click.argument("arg2", default="686974207468652062756c6c277320657965")
@click.option("--verbose", "-v", is_flag=True)
def main(arg1: str, arg2: str, verbose: bool):
    """XOR two equal-length hex buffers and print the result as hex."""
    configure_logging(verbose)
    try:
        click.echo(fixed_xor_hex(arg1, arg2))
    except ValueError as e:
        raise click.ClickException(str(e))


if __name__ == "__main__":
    main()
