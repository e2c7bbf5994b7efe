"""Golden vectors for the real GPT-2 vocabulary (downloaded on first use)."""

import pytest

from tokbudget.cli import format_tokens

pytestmark = pytest.mark.network


GOLDEN = [
    ("", "[]"),
    ("Hello, world.", "[15496, 11, 995, 13]"),
    (
        "Many words map to one token, but some don't: indivisible.\n\n"
        "Unicode characters like emojis may be split into many tokens containing "
        "the underlying bytes: 🤚🏾\n\n"
        "Sequences of characters commonly found next to each other may be grouped "
        "together: 1234567890",
        "[7085, 2456, 3975, 284, 530, 11241, 11, 475, 617, 836, 470, 25, 773, 452, "
        "12843, 13, 628, 3118, 291, 1098, 3435, 588, 795, 13210, 271, 743, 307, 6626, "
        "656, 867, 16326, 7268, 262, 10238, 9881, 25, 12520, 97, 248, 8582, 237, 122, "
        "628, 44015, 3007, 286, 3435, 8811, 1043, 1306, 284, 1123, 584, 743, 307, "
        "32824, 1978, 25, 17031, 2231, 30924, 3829]",
    ),
    (
        "A helpful rule of thumb is that one token generally corresponds to ~4 "
        "characters of text for common English text. This translates to roughly ¾ "
        "of a word (so 100 tokens ~= 75 words).",
        "[32, 7613, 3896, 286, 15683, 318, 326, 530, 11241, 4143, 24866, 284, 5299, "
        "19, 3435, 286, 2420, 329, 2219, 3594, 2420, 13, 770, 23677, 284, 7323, 1587, "
        "122, 286, 257, 1573, 357, 568, 1802, 16326, 5299, 28, 5441, 2456, 737]",
    ),
]


@pytest.mark.parametrize("text, expected", GOLDEN)
def test_golden_vectors(gpt2, text, expected):
    tokens = gpt2.encode(text)
    assert format_tokens(tokens) == expected
    assert gpt2.decode(tokens) == text
    assert gpt2.token_count(text) == len(tokens)


def test_vocabulary_size(gpt2):
    assert gpt2.vocab_size() == 50257
    assert len(gpt2.merges) == 50000


def test_blank_line_is_one_token(gpt2):
    assert gpt2.encode("\n\n") == [628]


@pytest.mark.parametrize(
    "text",
    [
        "The quick brown fox jumps over the lazy dog.",
        "I'm sure you'll see they've done it, haven't they?",
        "def f(x):\n    return x + 1\n",
        "naïve café, 東京, Привет!",
    ],
)
def test_agrees_with_tiktoken(gpt2, text):
    tiktoken = pytest.importorskip("tiktoken")
    try:
        reference = tiktoken.get_encoding("gpt2")
    except Exception as e:
        pytest.skip(f"gpt2 encoding unavailable: {e}")
    assert gpt2.encode(text) == reference.encode(text)
