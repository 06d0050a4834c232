import base64
import random

import pytest
from hypothesis import given, strategies as st

from radix import bytes_to_base64, bytes_to_hex
from xorutil import (
    InsufficientDataError,
    LengthMismatchError,
    break_repeating_key_xor,
    break_single_xor_cipher,
    collapse_key_period,
    decrypt_repeating_key_xor,
    decrypt_repeating_key_xor_base64,
    detect_single_char_xor,
    find_single_char_xor_candidate,
    fixed_xor,
    guess_repeating_xor_key_length,
    key_length_distances,
    normalized_block_distance,
    repeating_key_xor,
    score_english_text_by_frequency,
    single_xor_decryptions,
    transpose_blocks,
    untranspose_blocks,
)

LYRICS = """\
I'm back and I'm ringin' the bell
A rockin' on the mike while the fly girls yell
In ecstasy in the back of me
Well that's my DJ Deshay cuttin' all them Z's
Hittin' hard and the girlies goin' crazy
Vanilla's on the mike, man I'm not lazy.
I'm lettin' my drug kick in
It controls my mouth and I begin
To just let it flow, let my concepts go
My posse's to the side yellin', Go Vanilla Go!
Smooth 'cause that's the way I will be
And if you don't give a damn, then
Why you starin' at me
So get off 'cause I control the stage
There's no dissin' allowed
I'm in my own phase
The girlies sa y they love me and that is ok
And I can dance better than any kid n' play
Stage 2 -- Yea the one ya' wanna listen to
It's off my head so let the beat play through
So I can funk it up and make it sound good
1-2-3 Yo -- Knock on some wood
For good luck, I like my rhymes atrocious
Supercalafragilisticexpialidocious
I'm an effect and that you can bet
I can take a fly girl and make her wet.
I'm like Samson -- Samson to Delilah
There's no denyin', You can try to hang
But you'll keep tryin' to get my style
Over and over, practice makes perfect
But not if you're a loafer.
You'll get nowhere, no place, no time, no girls
Soon -- Oh my God, homebody, you probably eat
Spaghetti with a spoon! Come on and say it!
VIP. Vanilla Ice yep, yep, I'm comin' hard like a rhino
Intoxicating so you stagger like a wino
So punks stop trying and girl stop cryin'
Vanilla Ice is sellin' and you people are buyin'
'Cause why the freaks are jockin' like Crazy Glue
Movin' and groovin' trying to sing along
All through the ghetto groovin' this here song
Now you're amazed by the VIP posse.
Steppin' so hard like a German Nazi
Startled by the bases hittin' ground
There's no trippin' on mine, I'm just gettin' down
Sparkamatic, I'm hangin' tight like a fanatic
You trapped me once and I thought that
You might have it
So step down and lend me your ear
'89 in my time! You, '90 is my year.
You're weakenin' fast, YO! and I can tell it
Your body's gettin' hot, so, so I can smell it
So don't be mad and don't be sad
'Cause the lyrics belong to ICE, You can call me Dad
You're pitchin' a fit, so step back and endure
Let the witch doctor, Ice, do the dance to cure
So come up close and don't be square
You wanna battle me -- Anytime, anywhere
You thought that I was weak, Boy, you're dead wrong
So come on, everybody and sing this song
Say -- Play that funky music Say, go white boy, go white boy go
play that funky music Go white boy, go white boy, go
Lay down and boogie and play that funky music till you die.
Play that funky music Come on, Come on, let me hear
Play that funky music white boy you say it, say it
Play that funky music A little louder now
Play that funky music, white boy Come on, Come on, Come on
Play that funky music
""".encode()

TERMINATOR_KEY = b"Terminator X: Bring the noise"


@given(st.binary(), st.data())
def test_fixed_xor_is_self_inverse(a, data):
    b = data.draw(st.binary(min_size=len(a), max_size=len(a)))
    assert fixed_xor(fixed_xor(a, b), b) == a


def test_fixed_xor_rejects_unequal_lengths():
    with pytest.raises(LengthMismatchError):
        fixed_xor(b"abc", b"ab")


@given(st.binary(), st.binary(min_size=1, max_size=40))
def test_repeating_key_xor_round_trip(plaintext, key):
    assert repeating_key_xor(repeating_key_xor(plaintext, key), key) == plaintext


@pytest.mark.parametrize("line", LYRICS.splitlines()[:8])
def test_single_byte_true_plaintext_beats_every_other_key(line):
    key = 0x5a
    ciphertext = repeating_key_xor(line, bytes([key]))
    scores = {r.key: r.score for r in single_xor_decryptions(ciphertext)}
    assert all(scores[key] > score for k, score in scores.items() if k != key)
    result = break_single_xor_cipher(ciphertext)
    assert (result.key, result.plaintext) == (key, line)


def test_single_byte_ties_go_to_lowest_key():
    # A flat scorer makes all 256 keys tie
    result = break_single_xor_cipher(b"\x80\x81", scoring_function=lambda text: 0.0)
    assert result.key == 0
    assert result.score == 0.0


def test_single_byte_text_without_spaces_keeps_its_case():
    plaintext = b"Supercalafragilisticexpialidocious"
    result = break_single_xor_cipher(repeating_key_xor(plaintext, b"\x7a"))
    assert (result.key, result.plaintext) == (0x7a, plaintext)


def test_scores_are_never_negative():
    assert score_english_text_by_frequency(bytes(range(256))) >= 0


def _noise_corpus(seed, num_lines=300, line_length=30):
    rng = random.Random(seed)
    return [bytes_to_hex(bytes(rng.randrange(256) for _ in range(line_length))) for _ in range(num_lines)]


def test_detect_single_char_xor_finds_the_english_line():
    plaintext = b"Now that the party is jumping\n"
    lines = _noise_corpus(seed=4)
    lines.insert(171, bytes_to_hex(repeating_key_xor(plaintext, b"5")))
    assert detect_single_char_xor(lines) == plaintext
    index, result = find_single_char_xor_candidate(lines)
    assert index == 171
    assert result.key == ord("5")


def test_detect_single_char_xor_first_line_wins_ties():
    line = bytes_to_hex(repeating_key_xor(b"the same line twice", b"k"))
    index, _ = find_single_char_xor_candidate(["", line, line])
    assert index == 1


def test_transpose_then_untranspose_is_identity():
    ciphertext = repeating_key_xor(LYRICS, TERMINATOR_KEY)
    for key_length in (1, 7, 29, 40):
        columns = transpose_blocks(ciphertext, key_length)
        assert len(columns) == key_length
        assert sum(map(len, columns)) == len(ciphertext)
        assert untranspose_blocks(columns) == ciphertext


def test_key_length_distance_is_lowest_at_true_key_length():
    ciphertext = repeating_key_xor(LYRICS, TERMINATOR_KEY)
    distances = {e.key_length: e.distance for e in key_length_distances(ciphertext)}
    assert set(distances) == set(range(1, 41))
    assert all(distances[29] < d for k, d in distances.items() if k != 29)
    assert guess_repeating_xor_key_length(ciphertext).key_length == 29


def test_key_length_search_shrinks_for_short_ciphertext():
    distances = key_length_distances(b"x" * 11)
    assert [e.key_length for e in distances] == [1, 2, 3, 4, 5]


def test_key_length_needs_two_bytes():
    with pytest.raises(InsufficientDataError):
        guess_repeating_xor_key_length(b"x")
    with pytest.raises(InsufficientDataError):
        decrypt_repeating_key_xor(b"")


def test_decrypt_recovers_key_and_plaintext():
    ciphertext = repeating_key_xor(LYRICS, TERMINATOR_KEY)
    result = decrypt_repeating_key_xor(ciphertext)
    assert result.key == TERMINATOR_KEY
    assert result.plaintext == LYRICS
    assert result.key_length_estimate.key_length == len(TERMINATOR_KEY)


def test_decrypt_from_wrapped_base64():
    ciphertext = repeating_key_xor(LYRICS, TERMINATOR_KEY)
    encoded = bytes_to_base64(ciphertext)
    wrapped = "\n".join(encoded[i:i + 60] for i in range(0, len(encoded), 60)) + "\n"
    result = decrypt_repeating_key_xor_base64(wrapped)
    assert (result.key, result.plaintext) == (TERMINATOR_KEY, LYRICS)


def test_short_key_is_collapsed_to_its_period():
    ciphertext = repeating_key_xor(LYRICS, b"ICE")
    result = decrypt_repeating_key_xor(ciphertext)
    assert result.key == b"ICE"
    assert result.plaintext == LYRICS


def test_threaded_columns_match_sequential():
    ciphertext = repeating_key_xor(LYRICS, TERMINATOR_KEY)
    assert break_repeating_key_xor(ciphertext, key_length=29, max_workers=4) == TERMINATOR_KEY


def test_collapse_key_period():
    assert collapse_key_period(b"abab") == b"ab"
    assert collapse_key_period(b"aaaa") == b"a"
    assert collapse_key_period(b"abc") == b"abc"
    assert collapse_key_period(b"") == b""


def test_base64_output_matches_stdlib_for_engine_input():
    ciphertext = repeating_key_xor(LYRICS, TERMINATOR_KEY)
    assert bytes_to_base64(ciphertext, pad=True) == base64.b64encode(ciphertext).decode()


def test_max_blocks_compares_only_the_leading_blocks():
    ciphertext = b"AAAB\xff\xff"
    # "AA" vs "AB" differ by 2 bits, "AB" vs "\xff\xff" by 12
    assert normalized_block_distance(ciphertext, 2, max_blocks=2) == 1.0
    assert normalized_block_distance(ciphertext, 2) == 3.5
    distances = key_length_distances(ciphertext, max_blocks=2)
    assert distances[1].key_length == 2
    assert distances[1].distance == 1.0


def test_engine_uses_the_given_scoring_function():
    ciphertext = repeating_key_xor(LYRICS, TERMINATOR_KEY)
    # A flat scorer leaves every column on key 0
    result = decrypt_repeating_key_xor(ciphertext, key_length=29, scoring_function=lambda text: 0.0)
    assert result.key == b"\x00"
    assert result.plaintext == ciphertext

    result = decrypt_repeating_key_xor_base64(bytes_to_base64(ciphertext), scoring_function=lambda text: 0.0)
    assert result.key == b"\x00"
