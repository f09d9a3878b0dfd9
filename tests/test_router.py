from hearthweb.router import WELCOME_PAGE, Router


def test_default_root_route():
    router = Router()
    result = router.handle_request("/", {}, "")
    assert result == WELCOME_PAGE
    assert result.startswith("<html>") and result.endswith("</html>")


def test_unknown_path_returns_none():
    router = Router()
    assert router.handle_request("/nowhere", {}, "") is None
    assert "/nowhere" not in router


def test_added_route_receives_headers_and_body():
    router = Router()
    seen = []

    def handler(headers, body):
        seen.append((dict(headers), body))
        return body.upper()

    router.add_route("/echo", handler)
    result = router.handle_request("/echo", {"X-Id": "1"}, "abc")
    assert result == "ABC"
    assert seen == [({"X-Id": "1"}, "abc")]


def test_route_is_replaced():
    router = Router()
    router.add_route("/a", lambda headers, body: "first")
    router.add_route("/a", lambda headers, body: "second")
    assert router.handle_request("/a") == "second"


def test_missing_headers_become_empty_mapping():
    router = Router()
    router.add_route("/count", lambda headers, body: str(len(headers)))
    assert router.handle_request("/count") == "0"


def test_match_is_exact():
    router = Router()
    router.add_route("/items", lambda headers, body: "items")
    assert router.handle_request("/items/") is None
    assert router.handle_request("/items") == "items"
    assert "/items" in router