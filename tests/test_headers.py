from core.headers import HeaderBuilder


def test_strips_connection_scoped_headers():
    headers = {
        "host": "proxy.local",
        "connection": "keep-alive",
        "content-length": "12",
        "content-type": "application/scim+json",
        "accept": "application/scim+json",
    }
    upstream = HeaderBuilder().build_upstream_headers(headers)
    assert upstream == {"content-type": "application/scim+json", "accept": "application/scim+json"}


def test_strips_request_framing_and_hop_by_hop_headers():
    headers = {
        "transfer-encoding": "chunked",
        "te": "trailers",
        "keep-alive": "timeout=5",
        "upgrade": "h2c",
        "proxy-authorization": "Basic abc",
        "content-type": "application/scim+json",
    }
    upstream = HeaderBuilder().build_upstream_headers(headers)
    assert upstream == {"content-type": "application/scim+json"}


def test_caller_authorization_passes_through_without_token():
    upstream = HeaderBuilder().build_upstream_headers({"authorization": "Bearer caller"})
    assert upstream == {"authorization": "Bearer caller"}


def test_configured_token_overrides_caller_authorization():
    upstream = HeaderBuilder("upstream-secret").build_upstream_headers(
        {"Authorization": "Bearer caller", "accept": "*/*"}
    )
    assert upstream == {"accept": "*/*", "Authorization": "Bearer upstream-secret"}


def test_response_headers_drop_hop_by_hop_only():
    relayed = HeaderBuilder().build_response_headers(
        [
            ("content-type", "application/scim+json"),
            ("transfer-encoding", "chunked"),
            ("Connection", "close"),
            ("etag", 'W/"1"'),
            ("set-cookie", "a=1"),
            ("set-cookie", "b=2"),
        ]
    )
    assert relayed == [
        ("content-type", "application/scim+json"),
        ("etag", 'W/"1"'),
        ("set-cookie", "a=1"),
        ("set-cookie", "b=2"),
    ]
