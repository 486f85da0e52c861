import httpx
import pytest

from pairlist.config import ProducerConfig
from pairlist.manager import PairListManager
from pairlist.models import MarketInfo
from pairlist.producer import FatalHttpError, ProducerClient, RateLimitedError, TransientHttpError
from pairlist.producer.ratelimit import TokenBucket


def build_client(transport: httpx.BaseTransport, *, max_retries: int = 3) -> ProducerClient:
    config = ProducerConfig(
        base_url="http://producer.local",
        timeout_s=1,
        max_retries=max_retries,
        backoff_base_s=0,
        backoff_max_s=0,
        max_rps=1000,
    )
    return ProducerClient(config, transport=transport, rate_limiter=TokenBucket(rate_per_sec=1000))


def test_plain_list_response() -> None:
    seen_paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen_paths.append(request.url.path)
        return httpx.Response(200, json=["BTC/USDT", "ETH/USDT"])

    with build_client(httpx.MockTransport(handler)) as client:
        assert client.get_pairs() == ["BTC/USDT", "ETH/USDT"]

    assert seen_paths == ["/api/v1/pairlist"]


def test_envelope_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"pairs": ["SOL/USDT"], "length": 1})

    assert build_client(httpx.MockTransport(handler)).get_pairs() == ["SOL/USDT"]


def test_rate_limit_retries_then_success() -> None:
    responses = [
        httpx.Response(429, json={"msg": "rate limit"}),
        httpx.Response(429, json={"msg": "rate limit"}),
        httpx.Response(200, json=["BTC/USDT"]),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.pop(0)

    client = build_client(httpx.MockTransport(handler))

    assert client.get_pairs() == ["BTC/USDT"]
    assert client.metrics.http_retries_total["rate_limited"] == 2
    assert client.metrics.http_requests_total["429"] == 2
    assert client.metrics.http_requests_total["200"] == 1


def test_rate_limit_exhausted() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429)

    with pytest.raises(RateLimitedError):
        build_client(httpx.MockTransport(handler), max_retries=1).get_pairs()


def test_server_error_retries_then_success() -> None:
    responses = [
        httpx.Response(503, json={"msg": "unavailable"}),
        httpx.Response(200, json=["ETH/USDT"]),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.pop(0)

    client = build_client(httpx.MockTransport(handler))

    assert client.get_pairs() == ["ETH/USDT"]
    assert client.metrics.http_retries_total["server_error"] == 1


def test_fatal_error_no_retry() -> None:
    call_count = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal call_count
        call_count += 1
        return httpx.Response(404, json={"msg": "not found"})

    with pytest.raises(FatalHttpError) as exc_info:
        build_client(httpx.MockTransport(handler)).get_pairs()

    assert call_count == 1
    assert exc_info.value.status_code == 404


def test_timeout_retries_then_fails() -> None:
    call_count = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal call_count
        call_count += 1
        raise httpx.ReadTimeout("timeout", request=request)

    client = build_client(httpx.MockTransport(handler), max_retries=1)

    with pytest.raises(TransientHttpError):
        client.get_pairs()

    assert call_count == 2
    assert client.metrics.http_retries_total["timeout"] == 1


def test_non_pair_payload_is_fatal() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"pairs": [1, 2]})

    with pytest.raises(FatalHttpError):
        build_client(httpx.MockTransport(handler)).get_pairs()


def test_client_as_remote_provider() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"pairlist": ["REMOTE/USDT"]})

    client = build_client(httpx.MockTransport(handler))
    manager = PairListManager(
        market_provider=lambda: [MarketInfo(symbol="LOCAL/USDT")],
        remote_provider=client.get_pairs,
    )
    manager.load_from_config({"pairlist_filters": [{"method": "ProducerPairList"}]})

    assert manager.refresh() == ["REMOTE/USDT"]
