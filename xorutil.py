import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from itertools import cycle, zip_longest
from typing import Callable, Generator, Iterable, List, Optional, Tuple

from radix import base64_to_bytes, bytes_to_hex, hex_to_bytes

log = logging.getLogger(__name__)

MAX_KEY_LENGTH = 40


class LengthMismatchError(ValueError):
    pass


class InsufficientDataError(ValueError):
    pass


def fixed_xor(b1: bytes, b2: bytes) -> bytes:
    """
    Take two bytes arguments of equal length, return their XOR

    >>> arg1 = bytes.fromhex('1c0111001f010100061a024b53535009181c')
    >>> arg2 = bytes.fromhex('686974207468652062756c6c277320657965')
    >>> fixed_xor(arg1, arg2).hex()
    '746865206b696420646f6e277420706c6179'

    >>> fixed_xor(b"AAAA", b"AAA")
    Traceback (most recent call last):
    xorutil.LengthMismatchError: Arguments are of different length (4 != 3)
    """
    if len(b1) != len(b2):
        raise LengthMismatchError(f"Arguments are of different length ({len(b1)} != {len(b2)})")
    return bytes(a ^ b for a, b in zip(b1, b2))


def fixed_xor_hex(h1: str, h2: str) -> str:
    """
    Hex in, hex out version of fixed_xor

    >>> fixed_xor_hex('1c0111001f010100061a024b53535009181c', '686974207468652062756c6c277320657965')
    '746865206b696420646f6e277420706c6179'
    """
    return bytes_to_hex(fixed_xor(hex_to_bytes(h1), hex_to_bytes(h2)))


def repeating_key_xor(plaintext: bytes, key: bytes) -> bytes:
    """
    Cycle the key, XOR plaintext with it, and return ciphertext

    >>> plaintext = b"Burning 'em, if you ain't quick and nimble\\nI go crazy when I hear a cymbal"
    >>> repeating_key_xor(plaintext, b"ICE").hex()
    '0b3637272a2b2e63622c2e69692a23693a2a3c6324202d623d63343c2a26226324272765272a282b2f20430a652e2c652a3124333a653e2b2027630c692b20283165286326302e27282f'

    >>> repeating_key_xor(b"AAAA", b"")
    Traceback (most recent call last):
    ValueError: key must be non-zero length
    """
    if not key:
        raise ValueError("key must be non-zero length")
    return bytes(a ^ b for a, b in zip(plaintext, cycle(key)))


def encrypt_repeating_key_xor_hex(plaintext: str, key: str) -> str:
    """
    Encrypt ASCII plaintext under an ASCII repeating key and return hex ciphertext

    >>> encrypt_repeating_key_xor_hex("Burning 'em", "ICE")
    '0b3637272a2b2e63622c2e'
    """
    return bytes_to_hex(repeating_key_xor(plaintext.encode("ascii"), key.encode("ascii")))


# https://pi.math.cornell.edu/~mec/2003-2004/cryptography/subs/frequencies.html
en_char_frequencies = {'E': 0.1202, 'T': 0.091, 'A': 0.0812, 'O': 0.0768, 'I': 0.0731, 'N': 0.0695, 'S': 0.0628,
                       'R': 0.0602, 'H': 0.0592, 'D': 0.0432, 'L': 0.0398, 'U': 0.0288, 'C': 0.0271, 'M': 0.0261,
                       'F': 0.023, 'Y': 0.0211, 'W': 0.0209, 'G': 0.0203, 'P': 0.0182, 'B': 0.0149, 'V': 0.0111,
                       'K': 0.0069, 'X': 0.0017, 'Q': 0.0011, 'J': 0.001, 'Z': 0.0008}

# Roughly one character in seven or eight of English prose is a space
SPACE_FREQUENCY = 0.13

# Upper case letters count for less, so a case-flipped decryption scores below the original
UPPERCASE_WEIGHT = 0.5


def _build_byte_weights() -> List[float]:
    weights = [0.0] * 256
    for c, frequency in en_char_frequencies.items():
        weights[ord(c.upper())] = frequency * UPPERCASE_WEIGHT
        weights[ord(c.lower())] = frequency
    weights[ord(" ")] = SPACE_FREQUENCY
    return weights


_byte_weights = _build_byte_weights()


def score_english_text_by_frequency(text: bytes) -> float:
    """
    Give a score for how English-like text is. Each lower case letter contributes its English frequency, an upper
    case letter UPPERCASE_WEIGHT times that, a space contributes SPACE_FREQUENCY, and everything else (digits,
    punctuation, non-printable and non-ASCII bytes) contributes nothing. Higher score means more English-like input.
    Never negative

    >>> score_english_text_by_frequency(b"")
    0.0
    >>> score_english_text_by_frequency(b"\\x00\\x01~") == 0
    True
    >>> score_english_text_by_frequency(b"hello world") > score_english_text_by_frequency(b"HELLO\\x00WORLD")
    True
    >>> score_english_text_by_frequency(b"Supercalafragilistic") > score_english_text_by_frequency(b"sUPERCALAFRAGILISTIC")
    True
    """
    return sum((_byte_weights[b] for b in text), 0.0)


@dataclass
class ScoredDecryptionResult:
    plaintext: bytes
    ciphertext: bytes
    key: int
    score: float

    def __repr__(self):
        return f"ScoredDecryptionResult(plaintext={self.plaintext}, ciphertext={self.ciphertext}, key={self.key:#04x}, score={self.score:.2f})"


def single_xor_decryptions(ciphertext: bytes,
                           scoring_function: Callable = score_english_text_by_frequency
                           ) -> Generator[ScoredDecryptionResult, None, None]:
    """
    Yield a scored decryption of ciphertext under every single-byte key, in ascending key order

    >>> [r.plaintext for r in single_xor_decryptions(b"AB")][:3]
    [b'AB', b'@C', b'C@']
    """
    for k in range(256):
        plaintext = repeating_key_xor(ciphertext, bytes([k]))
        yield ScoredDecryptionResult(plaintext=plaintext,
                                     ciphertext=ciphertext,
                                     key=k,
                                     score=scoring_function(plaintext))


def break_single_xor_cipher(ciphertext: bytes,
                            scoring_function: Callable = score_english_text_by_frequency) -> ScoredDecryptionResult:
    """
    Use character frequency analysis to brute-force a single-byte XOR ciphertext

    Return the best ScoredDecryptionResult according to scoring_function. If several keys score equally, the
    lowest key wins

    >>> ciphertext = bytes.fromhex("1b37373331363f78151b7f2b783431333d78397828372d363c78373e783a393b3736")
    >>> result = break_single_xor_cipher(ciphertext)
    >>> chr(result.key), result.plaintext
    ('X', b"Cooking MC's like a pound of bacon")

    >>> break_single_xor_cipher(b"")
    ScoredDecryptionResult(plaintext=b'', ciphertext=b'', key=0x00, score=0.00)
    """
    if not ciphertext:
        return ScoredDecryptionResult(plaintext=b"", ciphertext=b"", key=0, score=0.0)
    # max() keeps the first of several equal maxima
    return max(single_xor_decryptions(ciphertext, scoring_function), key=lambda x: x.score)


def rank_single_xor_decryptions(ciphertexts: Iterable[bytes],
                                scoring_function: Callable = score_english_text_by_frequency
                                ) -> List[ScoredDecryptionResult]:
    """
    Return every single-byte XOR decryption of every ciphertext, best first

    >>> ciphertext = bytes.fromhex("1b37373331363f78151b7f2b783431333d78397828372d363c78373e783a393b3736")
    >>> len(rank_single_xor_decryptions([ciphertext, ciphertext]))
    512
    >>> rank_single_xor_decryptions([ciphertext])[0].key == ord("X")
    True
    """
    decryptions: List[ScoredDecryptionResult] = []
    for ciphertext in ciphertexts:
        decryptions.extend(single_xor_decryptions(ciphertext, scoring_function))
    return sorted(decryptions, key=lambda x: x.score, reverse=True)


def find_single_char_xor_candidate(hex_lines: Iterable[str],
                                   scoring_function: Callable = score_english_text_by_frequency
                                   ) -> Optional[Tuple[int, ScoredDecryptionResult]]:
    """
    Break every hex-encoded line with single-byte XOR and return (line index, best decryption) for the line whose
    best decryption scores highest. Blank lines are skipped but still counted. The earliest line wins ties.
    Returns None if there are no lines

    >>> lines = ["00ff00ff", "1b37373331363f78151b7f2b783431333d78397828372d363c78373e783a393b3736", ""]
    >>> index, result = find_single_char_xor_candidate(lines)
    >>> index, result.plaintext
    (1, b"Cooking MC's like a pound of bacon")
    """
    best: Optional[Tuple[int, ScoredDecryptionResult]] = None
    for i, line in enumerate(hex_lines):
        line = line.strip()
        if not line:
            continue
        result = break_single_xor_cipher(hex_to_bytes(line), scoring_function)
        if best is None or result.score > best[1].score:
            best = (i, result)
    if best is not None:
        log.debug("Line %d wins with key %#04x, score %.2f", best[0], best[1].key, best[1].score)
    return best


def detect_single_char_xor(hex_lines: Iterable[str],
                           scoring_function: Callable = score_english_text_by_frequency) -> bytes:
    """
    Given hex-encoded candidate ciphertexts, exactly one of which is single-byte XOR encrypted English, return the
    plaintext of the one that decrypts most plausibly. Returns b"" if there are no candidates

    >>> detect_single_char_xor([])
    b''
    """
    best = find_single_char_xor_candidate(hex_lines, scoring_function)
    if best is None:
        return b""
    return best[1].plaintext


def hamming_distance(b1: bytes, b2: bytes) -> int:
    """
    Return the number of bits that must be changed in b1 to get b2

    >>> hamming_distance(b"HELLO", b"JELLO")
    1
    >>> hamming_distance(b"AAAAA", b"JJJJA")
    12
    >>> hamming_distance(b"this is a test", b"wokka wokka!!!")
    37
    >>> hamming_distance(b"AAAA", b"AAA")
    Traceback (most recent call last):
    xorutil.LengthMismatchError: Inputs are of different length (4 != 3)
    """
    if len(b1) != len(b2):
        raise LengthMismatchError(f"Inputs are of different length ({len(b1)} != {len(b2)})")
    return sum(bin(a ^ b).count("1") for a, b in zip(b1, b2))


@dataclass(frozen=True)
class KeyLengthEstimate:
    key_length: int
    distance: float


def normalized_block_distance(ciphertext: bytes, key_length: int, max_blocks: Optional[int] = None) -> float:
    """
    Mean hamming distance between adjacent full key_length sized blocks, divided by key_length

    Only the first max_blocks full blocks are used if max_blocks is given. max_blocks=2 compares just the first two
    blocks

    >>> normalized_block_distance(b"AAAAAAAA", 2)
    0.0
    >>> normalized_block_distance(b"ABAB", 1)
    2.0
    """
    num_blocks = len(ciphertext) // key_length
    if max_blocks is not None:
        num_blocks = min(num_blocks, max_blocks)
    if num_blocks < 2:
        raise InsufficientDataError(f"Need at least two {key_length}-byte blocks, have {len(ciphertext)} bytes")
    total = 0
    for i in range(num_blocks - 1):
        a = ciphertext[i * key_length:(i + 1) * key_length]
        b = ciphertext[(i + 1) * key_length:(i + 2) * key_length]
        total += hamming_distance(a, b)
    return total / (num_blocks - 1) / key_length


def key_length_distances(ciphertext: bytes,
                         max_key_length: int = MAX_KEY_LENGTH,
                         max_blocks: Optional[int] = None) -> List[KeyLengthEstimate]:
    """
    Return the normalized block distance of every candidate key length from 1 up to max_key_length

    Key lengths that don't leave two full blocks are not candidates. Raises InsufficientDataError if no key length
    is a candidate

    >>> [e.key_length for e in key_length_distances(b"ABCDE")]
    [1, 2]
    >>> key_length_distances(b"A")
    Traceback (most recent call last):
    xorutil.InsufficientDataError: Need at least 2 bytes of ciphertext to guess a key length, have 1
    """
    longest = min(max_key_length, len(ciphertext) // 2)
    if longest < 1:
        raise InsufficientDataError(
            f"Need at least 2 bytes of ciphertext to guess a key length, have {len(ciphertext)}")
    if longest < max_key_length:
        log.debug("Ciphertext of %d bytes only supports key lengths up to %d", len(ciphertext), longest)
    return [KeyLengthEstimate(k, normalized_block_distance(ciphertext, k, max_blocks))
            for k in range(1, longest + 1)]


def guess_repeating_xor_key_length(ciphertext: bytes,
                                   max_key_length: int = MAX_KEY_LENGTH,
                                   max_blocks: Optional[int] = None) -> KeyLengthEstimate:
    """
    Given a ciphertext which is the result of applying repeating XOR with an unknown key of unknown length, guess
    the length of the key as the one whose blocks are closest together by normalized hamming distance. Blocks lined
    up with the key cancel it out, leaving the distance between plaintext bytes, which for English is lower than
    between random bytes

    The shortest key length wins ties

    >>> plaintext = b"Now that the party is jumping, all the cool kids are on the dance floor. " * 4
    >>> guess_repeating_xor_key_length(repeating_key_xor(plaintext, b"\\x1fK\\x90")).key_length % 3
    0
    """
    estimates = key_length_distances(ciphertext, max_key_length, max_blocks)
    best = estimates[0]
    for estimate in estimates[1:]:
        if estimate.distance < best.distance:
            best = estimate
    log.debug("Guessed key length %d (normalized distance %.3f)", best.key_length, best.distance)
    return best


def transpose_blocks(ciphertext: bytes, key_length: int) -> List[bytes]:
    """
    Break ciphertext into key_length sized blocks and transpose them, so that column i holds byte i of every
    block. A short final block only contributes to the leading columns

    >>> transpose_blocks(b"ABCDEFG", 3)
    [b'ADG', b'BE', b'CF']
    """
    if key_length < 1:
        raise ValueError("key_length must be at least 1")
    return [ciphertext[i::key_length] for i in range(key_length)]


def untranspose_blocks(columns: List[bytes]) -> bytes:
    """
    Inverse of transpose_blocks

    >>> untranspose_blocks([b'ADG', b'BE', b'CF'])
    b'ABCDEFG'
    """
    # zip_longest fills the short tail with None, which can never collide with a real byte
    return bytes(b for block in zip_longest(*columns) for b in block if b is not None)


def collapse_key_period(key: bytes) -> bytes:
    """
    Return the shortest key which, repeated, gives key

    A ciphertext encrypted under a key is equally well decrypted by that key repeated, and a key length guess can
    land on a multiple of the true length

    >>> collapse_key_period(b"ICEICEICE")
    b'ICE'
    >>> collapse_key_period(b"ICEICEIC")
    b'ICEICEIC'
    """
    for period in range(1, len(key)):
        if len(key) % period == 0 and key[:period] * (len(key) // period) == key:
            return key[:period]
    return key


def break_repeating_key_xor(ciphertext: bytes,
                            key_length: Optional[int] = None,
                            max_key_length: int = MAX_KEY_LENGTH,
                            max_blocks: Optional[int] = None,
                            max_workers: Optional[int] = None,
                            scoring_function: Callable = score_english_text_by_frequency) -> bytes:
    """
    Return the best-guess key for a ciphertext which has been encrypted using repeating key XOR

    @param ciphertext: The encrypted ciphertext
    @param key_length: (Optional) the key length, if known. If unknown, inter-block hamming distance will be used to
        derive it
    @param max_key_length: Longest key length to consider when guessing
    @param max_blocks: (Optional) number of blocks to compare per candidate key length when guessing
    @param max_workers: (Optional) solve the transposed columns on a thread pool of this size

    >>> plaintext = b"Now that the party is jumping, all the cool kids are on the dance floor. " * 4
    >>> break_repeating_key_xor(repeating_key_xor(plaintext, b"ICE"), key_length=3)
    b'ICE'
    """
    if key_length is None:
        key_length = guess_repeating_xor_key_length(ciphertext, max_key_length, max_blocks).key_length

    columns = transpose_blocks(ciphertext, key_length)

    def solve(column: bytes) -> int:
        return break_single_xor_cipher(column, scoring_function).key

    if max_workers is None:
        key = [solve(column) for column in columns]
    else:
        # map() yields in submission order, so columns stay in key order
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            key = list(executor.map(solve, columns))

    log.debug("Column keys: %s", bytes(key).hex())
    return collapse_key_period(bytes(key))


@dataclass
class RepeatingKeyXorResult:
    key: bytes
    plaintext: bytes
    key_length_estimate: Optional[KeyLengthEstimate] = None


def decrypt_repeating_key_xor(ciphertext: bytes,
                              key_length: Optional[int] = None,
                              max_key_length: int = MAX_KEY_LENGTH,
                              max_blocks: Optional[int] = None,
                              max_workers: Optional[int] = None,
                              scoring_function: Callable = score_english_text_by_frequency) -> RepeatingKeyXorResult:
    """
    Recover the key of a repeating key XOR ciphertext and decrypt it

    >>> plaintext = b"Now that the party is jumping, all the cool kids are on the dance floor. " * 4
    >>> result = decrypt_repeating_key_xor(repeating_key_xor(plaintext, b"ICE"), key_length=3)
    >>> result.key, result.plaintext == plaintext
    (b'ICE', True)
    """
    if not ciphertext:
        raise InsufficientDataError("ciphertext must be non-zero length")

    estimate = None
    if key_length is None:
        estimate = guess_repeating_xor_key_length(ciphertext, max_key_length, max_blocks)
        key_length = estimate.key_length

    key = break_repeating_key_xor(ciphertext,
                                  key_length=key_length,
                                  max_workers=max_workers,
                                  scoring_function=scoring_function)
    return RepeatingKeyXorResult(key=key,
                                 plaintext=repeating_key_xor(ciphertext, key),
                                 key_length_estimate=estimate)


def normalize_base64_ciphertext(text: str) -> bytes:
    """
    Strip formatting whitespace (e.g. line wrapping) from base64 text and decode it

    >>> normalize_base64_ciphertext("TWFu\\nTWFu\\n")
    b'ManMan'
    """
    return base64_to_bytes("".join(text.split()))


def decrypt_repeating_key_xor_base64(text: str, **kwargs) -> RepeatingKeyXorResult:
    """
    decrypt_repeating_key_xor for a (possibly line-wrapped) base64 ciphertext. Keyword arguments are passed through
    """
    return decrypt_repeating_key_xor(normalize_base64_ciphertext(text), **kwargs)
