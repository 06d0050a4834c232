#!/usr/bin/env python3
import click

from logconf import configure_logging
from xorutil import encrypt_repeating_key_xor_hex

"""
Implement repeating-key XOR

Here is the opening stanza of an important work of the English language:

Burning 'em, if you ain't quick and nimble
I go crazy when I hear a cymbal

Encrypt it, under the key "ICE", using repeating-key XOR.

In repeating-key XOR, you'll sequentially apply each byte of the key; the first byte of plaintext will be XOR'd
against I, the next C, the next E, then I again for the 4th byte, and so on.

It should come out to:

0b3637272a2b2e63622c2e69692a23693a2a3c6324202d623d63343c2a26226324272765272a282b2f20430a652e2c652a3124333a653e2b2027630c692b20283165286326302e27282f
"""

STANZA = "Burning 'em, if you ain't quick and nimble\nI go crazy when I hear a cymbal"


@click.command()
@click.option("--plaintext", "-p", default=STANZA, help="ASCII text to encrypt")
@click.option("--key", "-k", default="ICE", help="ASCII key")
@click.option("--verbose", "-v", is_flag=True)
def main(plaintext: str, key: str, verbose: bool):
    """Encrypt plaintext under a repeating key and print the ciphertext as hex."""
    configure_logging(verbose)
    try:
        click.echo(encrypt_repeating_key_xor_hex(plaintext, key))
    except ValueError as e:
        raise click.ClickException(str(e))


if __name__ == "__main__":
    main()
