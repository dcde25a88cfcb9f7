from starlette.requests import Request

from contactgate.deps.client import client_identity


def _request(forwarded=None, peer=("203.0.113.7", 50000)) -> Request:
    headers = []
    if forwarded is not None:
        headers.append((b"x-forwarded-for", forwarded.encode()))
    return Request({"type": "http", "headers": headers, "client": peer})


def test_forwarded_header_ignored_without_trusted_proxies():
    assert client_identity(_request("198.51.100.1")) == "203.0.113.7"


def test_single_proxy_uses_rightmost_entry():
    req = _request("10.0.0.66, 198.51.100.1")

    assert client_identity(req, trusted_proxy_hops=1) == "198.51.100.1"


def test_two_proxies_skip_the_inner_hop():
    req = _request("10.0.0.66, 198.51.100.1, 172.16.0.2")

    assert client_identity(req, trusted_proxy_hops=2) == "198.51.100.1"


def test_short_chain_falls_back_to_peer():
    assert client_identity(_request("198.51.100.1"), trusted_proxy_hops=2) == "203.0.113.7"
    assert client_identity(_request(), trusted_proxy_hops=1) == "203.0.113.7"


def test_missing_peer_is_unknown():
    assert client_identity(_request(peer=None)) == "unknown"
