import pytest

from serialbridge.bit_buffer import CyclicBitBuffer
from serialbridge.buffer import BufferOverflowError

_QUERIES = {"read", "peek", "read_words", "unread_words", "writable", "is_full", "__len__"}


def _run(buf, steps):
    outputs = []
    for name, *args in steps:
        result = getattr(buf, name)(*args)
        if name in _QUERIES:
            outputs.append(result)
    return outputs


SCENARIOS = [
    pytest.param(
        (32, 8),
        [("write_words", [0xAA, 0xFF, 0x01]), ("read_words", 3), ("__len__",)],
        [[0xAA, 0xFF, 0x01], 0],
        id="words_round_trip",
    ),
    pytest.param(
        (16, 8),
        [("write_words", [0x55]), ("read", 8)],
        [[1, 0, 1, 0, 1, 0, 1, 0]],
        id="word_split_lsb_first",
    ),
    pytest.param(
        (12, 8),
        [
            ("write_words", [0xAB]),
            ("read_words", 1),
            ("write_words", [0x5C]),
            ("__len__",),
            ("read_words", 1),
            ("__len__",),
        ],
        [[0xAB], 8, [0x5C], 0],
        id="wrap_with_partial_last_word",
    ),
    pytest.param(
        (8, 8),
        [
            ("write_words", [0xFF]),
            ("read_words", 1),
            ("write_words", [0x00]),
            ("read_words", 1),
        ],
        [[0xFF], [0x00]],
        id="overwritten_bits_cleared",
    ),
    pytest.param(
        (24, 8),
        [("write", [1] * 10), ("unread_words",), ("skip", 10), ("unread_words",)],
        [1, 0],
        id="unread_words_whole_only",
    ),
    pytest.param(
        (16, 8),
        [("write_words", [0x12]), ("clear",), ("__len__",), ("writable",)],
        [0, 16],
        id="clear",
    ),
    pytest.param(
        (40, 16),
        [("write_words", [0xBEEF, 0x1234]), ("unread_words",), ("read_words", 2)],
        [2, [0xBEEF, 0x1234]],
        id="wider_words",
    ),
    pytest.param(
        (8,),
        [("write", [0, 1, 1]), ("peek", 3), ("peek", 3), ("__len__",)],
        [[0, 1, 1], [0, 1, 1], 3],
        id="peek_does_not_consume",
    ),
]


@pytest.mark.parametrize("args, steps, expected", SCENARIOS)
def test_scenarios(args, steps, expected):
    assert _run(CyclicBitBuffer(*args), steps) == expected


def test_bits_stored_least_significant_first():
    buf = CyclicBitBuffer(8, 8)
    buf.write([1, 0, 1])
    assert buf.raw_words == (5,)
    assert buf.peek(3) == [1, 0, 1]


def test_full_buffer():
    buf = CyclicBitBuffer(12, 8)
    buf.write([1] * 12)
    assert buf.is_full()
    assert buf.writable() == 0
    assert len(buf) == buf.capacity


ERRORS = [
    pytest.param(
        (12, 8), [("write", [1] * 12)], ("write", [0]), BufferOverflowError,
        [("__len__",)], [12], id="write_when_full",
    ),
    pytest.param(
        (12, 8), [], ("write_words", [1, 2]), BufferOverflowError,
        [("__len__",)], [0], id="write_words_overflow",
    ),
    pytest.param(
        (16, 8), [("write_words", [7])], ("read_words", 2), BufferOverflowError,
        [("read_words", 1)], [[7]], id="read_words_overflow",
    ),
    pytest.param(
        (16, 4), [], ("write_words", [16]), ValueError,
        [("__len__",)], [0], id="word_too_large",
    ),
    pytest.param(
        (16, 4), [], ("write_words", [-1]), ValueError,
        [("__len__",)], [0], id="word_negative",
    ),
    pytest.param(
        (8,), [], ("write", [2]), ValueError,
        [("__len__",)], [0], id="non_bit_element",
    ),
]


@pytest.mark.parametrize("args, setup, failing, error, followup, expected", ERRORS)
def test_errors_leave_contents_intact(args, setup, failing, error, followup, expected):
    buf = CyclicBitBuffer(*args)
    _run(buf, setup)
    with pytest.raises(error):
        _run(buf, [failing])
    assert _run(buf, followup) == expected


@pytest.mark.parametrize("size, word_bits", [(0, 8), (8, 0), (-1, 8)])
def test_invalid_construction(size, word_bits):
    with pytest.raises(ValueError):
        CyclicBitBuffer(size, word_bits)