# docserve

`docserve` holds the core logic of a documentation hosting service, one
that builds and serves API documentation for published packages. It gives
a web front end and a build worker the pieces they need, in plain Python:
version parsing and matching, release ordering, feature-flag ordering,
Markdown rendering, page rewriting, build-queue priorities and
consistency checks between a database and a registry index.

## What is inside

| Module | Purpose |
| --- | --- |
| `docserve.rustc_version` | `parse_rustc_version` and `parse_rustc_date` read compiler version strings. `get_correct_docsrs_style_file` picks the stylesheet that matches the documentation layout of that compiler. |
| `docserve.sized_buffer` | `SizedBuffer`, a writable byte buffer that refuses writes past a fixed limit and raises `SizeLimitReached` (an `OSError`). |
| `docserve.fsutil` | `copy_dir_all` copies a directory tree recursively. `remove_tempdirs` deletes directories whose names start with `docsrs-docs` that a crashed build left behind in the temporary directory. |
| `docserve.cargo_metadata` | `CargoMetadata`, `Package`, `Target` and `Dependency` read `cargo metadata` JSON and find the root package, its library target and its normalised name. `CargoMetadata.load` runs `cargo metadata` itself and raises `CargoMetadataError` on failure. |
| `docserve.priorities` | `get_crate_priority`, `set_crate_priority` and `remove_crate_priority` manage build-queue priorities stored as SQL `LIKE` patterns in a `crate_priorities` table. |
| `docserve.consistency` | Compares the crates and releases in the database with those in the registry index: `Data`, `Crate`, `Diff`, `DiffKind`, `diff_maps`, `load_from_db`, `load_from_index`, `find_inconsistencies` and `run_check`. |
| `docserve.versionreq` | `Version` and `VersionReq`: semantic version parsing, ordering and requirement matching. |
| `docserve.releases` | `Release`, with `releases_from_rows`, `sort_releases`, `latest_release` and `last_successful_build`. |
| `docserve.metadata` | `MetaData` for page headers, and `duration_to_str` for relative times such as "3 hours ago". |
| `docserve.features` | `Feature`, plus ordering of feature flags so that the default feature tree comes first (`order_features_and_count_default_len`). |
| `docserve.rewrite` | `rewrite_page` injects head content, a top bar, a body prelude and vendored CSS into a generated documentation page. It raises `RewriteError` when a single piece of markup exceeds the memory limit. |
| `docserve.webutil` | `render_markdown` renders CommonMark with tables, strikethrough, superscript, autolinks and task lists, escaping raw HTML. `redirect_base` builds the `scheme://host[:port]` prefix for redirects. |
| `docserve.details` | `CrateDetails` and `RepositoryMetadata`, the data behind a package's overview page, built from a database row with `CrateDetails.from_row`. |

## Examples

Parse a compiler version string:

```python
from docserve.rustc_version import parse_rustc_version, get_correct_docsrs_style_file

parse_rustc_version("rustc 1.10.0-nightly (57ef01513 2016-05-23)")
# '20160523-1.10.0-nightly-57ef01513'

get_correct_docsrs_style_file("docsrs 0.2.0 (ba9ae23 2022-05-26)")
# 'rustdoc-2021-12-05.css'
```

A string without a date in parentheses raises `ValueError`.

Limit how much data is collected:

```python
from docserve.sized_buffer import SizedBuffer, SizeLimitReached

buffer = SizedBuffer(1024)
buffer.write(b"\0" * 1000)
try:
    buffer.write(b"\0" * 500)
except SizeLimitReached:
    pass
len(buffer)  # 1000; the rejected chunk was discarded
```

Match versions against requirements:

```python
from docserve.versionreq import Version, VersionReq

VersionReq.parse("^1.2").matches(Version.parse("1.4.0"))        # True
VersionReq.parse("*").matches(Version.parse("1.0.0-alpha"))     # False: pre-releases need an explicit pre-release comparator
```

Build-queue priorities, with any DB-API connection using the `qmark`
parameter style:

```python
import sqlite3
from docserve.priorities import get_crate_priority, set_crate_priority, remove_crate_priority

conn = sqlite3.connect(":memory:")
conn.execute("CREATE TABLE crate_priorities (pattern TEXT, priority INTEGER)")
set_crate_priority(conn, "docsrs-%", -100)
get_crate_priority(conn, "docsrs-database")   # -100
get_crate_priority(conn, "docsrs")            # 0, the default
remove_crate_priority(conn, "docsrs-%")       # -100
```

Find differences between the database and the index:

```python
from docserve.consistency import load_from_index, find_inconsistencies

db = load_from_index([("foo", ["0.1.0", "0.2.0"])])
index = load_from_index([("foo", ["0.1.0"]), ("bar", ["1.0.0"])])
list(find_inconsistencies(db, index))
# ['Crate in index not in db: bar', 'Release in db not in index: foo 0.2.0']
```

`run_check(conn, index_crates)` does the same with data loaded from a
database connection and prints the messages. Only a dry run is supported;
`dry_run=False` raises `ValueError`.

Order feature flags:

```python
from docserve.features import Feature, order_features_and_count_default_len

features, default_len = order_features_and_count_default_len(
    [Feature("default", ["a"]), Feature("a"), Feature("b")]
)
# features: default, a, b; default_len == 2
```

Relative times:

```python
from datetime import datetime, timezone
from docserve.metadata import duration_to_str

duration_to_str(
    datetime(2024, 1, 1, tzinfo=timezone.utc),
    now=datetime(2024, 1, 1, 3, tzinfo=timezone.utc),
)
# '3 hours ago'
```

## What it does not do

`docserve` is a library, not a service. It has no web server, no request
routing, no HTTP handlers or error pages, no templates, no build worker
loop and no command-line program. It does not create database schemas:
the functions that take a connection expect the tables they query to
exist. Resolving a requested version against a crate's releases and
producing security headers for responses are left to the application
that uses it.

## Requirements

- Python 3.10 or newer
- `markdown-it-py`, for Markdown rendering

The test suite uses `pytest`, available through the `test` extra.