# logmancer

logmancer opens log files of any size and lets you page through them, follow
them as they grow and filter them with a regular expression, without reading
the whole file into memory. The file is memory-mapped and its lines are
indexed by background threads, so the first lines can be read right away while
indexing continues.

It can be used in three ways:

- as a terminal pager (`logmancer-tui`),
- as an HTTP JSON API server (`logmancer-server`),
- as a Python library (`logmancer.reader.LogReader`,
  `logmancer.registry.LogRegistry`).

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Terminal pager

```
logmancer-tui /var/log/syslog
```

The pager uses the standard `curses` module. The header shows the file name,
whether follow mode is on, the number of indexed lines and, while indexing is
still running, the percentage indexed.

| Key                | Action                       |
|--------------------|------------------------------|
| `q`                | quit                         |
| `f` / `F`          | toggle follow mode           |
| `g`                | go to the first line         |
| `G`                | go to the end of the file    |
| Up / Down          | move one line                |
| PageUp / PageDown  | move one page                |

With follow mode on and the view at the end of the file, the file is reloaded
on each refresh so that new lines appear. Debug output is appended to
`logmancer.log` in the current directory.

## API server

```
logmancer-server [--port PORT] [path]
```

The server listens on `127.0.0.1`, port 3000 unless `--port` says otherwise.
The optional `path` (or the `LOGMANCER_INITIAL_FILE` environment variable)
names a file to open at start-up; if it cannot be opened the server starts
anyway. All endpoints live under `/api`:

| Method | Path                          | Parameters                              |
|--------|-------------------------------|-----------------------------------------|
| GET    | `/api/file_info`              | `file_id`                               |
| GET    | `/api/read-page`              | `file_id`, `start_line`, `max_lines`    |
| GET    | `/api/tail`                   | `file_id`, `max_lines`, `follow` (`true`/`false`) |
| POST   | `/api/apply-filter`           | JSON `{"file_id": ..., "filter": ...}`  |
| GET    | `/api/read-filter-page`       | `file_id`, `start_line`, `max_lines`    |
| POST   | `/api/upload-file`            | multipart field `file`                  |
| GET    | `/api/server-browser/status`  | none                                    |
| POST   | `/api/server-browser/list`    | JSON `{"path": ...}`                    |
| POST   | `/api/server-browser/open`    | JSON `{"path": ...}`                    |

Opening a file (by upload or through the server browser) answers `201` with
`{"file_id": ...}`; that UUID names the file in every other request. Unknown
ids answer `404` with `"File not opened"`. Uploads are stored in the system
temporary directory; empty uploads are refused.

Environment variables:

- `LOGMANCER_SERVER_FILE_ROOT`: a directory the server browser may show.
  Paths sent to the browser endpoints are resolved inside it; absolute paths,
  `..` components and symlinks leading out of it are refused with an error
  body `{"code": ..., "message": ...}`. Only UTF-8 text files without NUL
  bytes can be opened. Without this variable the browser endpoints answer
  `403`.
- `LOGMANCER_LOG_FILE`: write the server's own log to this file instead of
  standard error.
- `LOGMANCER_INITIAL_FILE`: a file to open at start-up.

The API application can also be built in code with
`logmancer.server.api_routes(registry, server_file_root)` and mounted in
another `aiohttp` application.

## Library use

```python
from logmancer.reader import LogReader

reader = LogReader("/var/log/app.log")

info = reader.file_info()
page = reader.read_page(0, 50)
for line in page.lines:
    print(line.number, line.text)

last = reader.tail(20, False)

reader.filter("ERROR|WARN")
matches = reader.read_filter(0, 10)
print(matches.total_lines, "matching lines so far")
recent = reader.tail_filter(10, False)
```

Line numbers in results are 1-based positions in the file, for filtered pages
too. `indexing_progress` runs from 0.0 to 1.0. `read_page` near the end of the
index shifts the page back so that it stays full. `PageResult` objects compare
equal when they start at the same line and see the same total.

Several files can be kept open at once:

```python
from logmancer.registry import LogRegistry

registry = LogRegistry()
file_id = registry.open_file("/var/log/app.log")
reader = registry.get_reader(file_id)  # None for unknown or malformed ids
```

Lines longer than 10 KiB are cut at that length when read. Bytes that are not
valid UTF-8 are replaced when read, and such lines never match a filter. If a
file shrinks while open, the background indexer stops with
`logmancer.file_ops.FileChangedError` instead of re-reading it.

The package also carries the geometry and key-handling rules a graphical
viewer would need: `logmancer.scrolling` (virtual scrollbar sizes),
`logmancer.keys` (pane keys, focus and mouse-wheel steps),
`logmancer.panes` and `logmancer.spotlight` (line revealing, query-string
flags, filtering of browser entries).

## What it does not do

- There is no browser user interface: the server answers JSON only and serves
  no pages, scripts or styles.
- There is no Python client for the HTTP API; use any HTTP library against
  the endpoints above.