import math

import pytest

from apaas_client.exceptions import ApplicationError, BatchPartialFailureError
from apaas_client.utils.chunking import chunked, run_chunked


@pytest.mark.parametrize("length", [0, 1, 99, 100, 101, 250, 1000])
def test_chunks_reconstruct_the_input(length):
    items = list(range(length))

    chunks = list(chunked(items))

    assert len(chunks) == math.ceil(length / 100)
    assert all(1 <= len(chunk) <= 100 for chunk in chunks)
    assert [x for chunk in chunks for x in chunk] == items


def test_custom_chunk_size():
    assert list(chunked("abcdefg", 3)) == [["a", "b", "c"], ["d", "e", "f"], ["g"]]


def test_invalid_chunk_size():
    with pytest.raises(ValueError):
        list(chunked([1, 2], 0))


async def test_chunks_are_sent_sequentially_in_order():
    sent = []
    in_flight = 0

    async def send_chunk(chunk):
        nonlocal in_flight
        in_flight += 1
        assert in_flight == 1
        sent.append(chunk)
        in_flight -= 1
        return len(chunk)

    results = await run_chunked(list(range(230)), send_chunk)

    assert results == [100, 100, 30]
    assert sent[0][0] == 0 and sent[2][-1] == 229


async def test_empty_input_sends_nothing():
    async def send_chunk(chunk):
        raise AssertionError("no chunk expected")

    assert await run_chunked([], send_chunk) == []


async def test_first_chunk_failure_propagates_unchanged():
    error = ApplicationError("k_ec_1", "rejected")

    async def send_chunk(chunk):
        raise error

    with pytest.raises(ApplicationError) as exc_info:
        await run_chunked(list(range(150)), send_chunk)
    assert exc_info.value is error


async def test_later_failure_stops_remaining_chunks():
    sent = []

    async def send_chunk(chunk):
        sent.append(chunk)
        if len(sent) == 3:
            raise ApplicationError("k_ec_1", "rejected")
        return {"chunk": len(sent)}

    with pytest.raises(BatchPartialFailureError) as exc_info:
        await run_chunked(list(range(500)), send_chunk)

    error = exc_info.value
    assert len(sent) == 3
    assert error.failed_chunk == 3
    assert error.total_chunks == 5
    assert error.completed_results == [{"chunk": 1}, {"chunk": 2}]
    assert isinstance(error.__cause__, ApplicationError)

