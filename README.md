# hearthweb

Building blocks for a small threaded HTTP/1.x server, written with the
standard library alone.

## Install

```
pip install .
pip install ".[test]"   # with pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `hearthweb.status` | `HttpStatus` (an `IntEnum`), `status_message(code)` returning the reason phrase or `"Unknown Status"`, and the predicates `is_informational`, `is_successful`, `is_redirection`, `is_client_error`, `is_server_error` |
| `hearthweb.logger` | Thread-safe `Logger` with `Level` filtering (`TRACE` to `FATAL`, default `INFO`). It writes to a console stream (standard output unless `set_stream` is used) and to an optional file opened in append mode by `set_log_file`. `get_logger()` returns the shared instance. |
| `hearthweb.color` | `Color`, `Background`, `Style`; `AnsiColorHandler` and `NullColorHandler`; `ColorOutput`, which picks the ANSI handler when `TERM` is set and is neither `dumb` nor `unknown`; `get_color_output()` and `colorize(text, color, background=None, style=None)` |
| `hearthweb.compression` | zlib `compress` (bytes or UTF-8 text), `decompress` and `decompress_to_string`; failures raise `CompressionError` |
| `hearthweb.config` | `Config`, a JSON document with flat `get`/`set` and dotted-path `get_nested`/`set_nested`. A value of a different type from the default yields the default. `load_from_file` raises `ConfigError` for unreadable files or invalid JSON. |
| `hearthweb.http_parser` | `parse_request` (returns a `RawRequest` of method, path, headers, body; handles `Content-Length` and chunked bodies; raises `HttpParseError`), `split_query`, `build_response`, `build_chunked_response` |
| `hearthweb.router` | `Router` mapping exact paths to handlers `handler(headers, body) -> str`; `/` serves a welcome page |
| `hearthweb.connection_manager` | `ConnectionManager`, which runs one handler thread per connection, enforces total and per-IP limits, expires idle connections and reports `connection_stats()`; the abstract `Socket` interface |
| `hearthweb.memory_pool` | `MemoryPool`, which reuses objects made by a factory, and `MultiLevelMemoryPool`, which reuses `bytearray` buffers in power-of-two size classes |
| `hearthweb.thread_pool` | `ThreadPool`, where `enqueue` returns a `concurrent.futures.Future` and `shutdown` finishes queued tasks before it returns |

## Example

```python
from hearthweb.http_parser import build_response, parse_request, split_query
from hearthweb.router import Router
from hearthweb.status import HttpStatus

raw = "GET /?name=web HTTP/1.1\r\nHost: localhost\r\n\r\n"
method, target, headers, body = parse_request(raw)
path, params = split_query(target)

content = Router().handle_request(path, headers, body)
status = HttpStatus.OK if content is not None else HttpStatus.NOT_FOUND
print(build_response(status, content or "", {}, "text/html"))
```

Logging goes through one shared logger:

```python
from hearthweb.logger import Level, get_logger

log = get_logger()
log.set_level(Level.DEBUG)
log.set_log_file("server.log")
log.info("listening")
```

Work can be handed to a thread pool, which returns a future:

```python
from hearthweb.thread_pool import ThreadPool

with ThreadPool(4) as pool:
    future = pool.enqueue(sum, [1, 2, 3])
    print(future.result())
```

Configuration reads typed values with defaults:

```python
from hearthweb.config import Config

config = Config({"server": {"port": 8080}})
config.get_nested("server.port", 80)   # 8080
config.set_nested("server.tls.enabled", True)
```

## What it does not do

hearthweb provides parts, not a running server. It does not open or listen
on network sockets, does not provide TLS, and has no command-line program:
you accept connections yourself and pass them, with a handler, to
`ConnectionManager.add_connection`, which only needs objects with a
`close()` method.

## Tests

```
pytest
```