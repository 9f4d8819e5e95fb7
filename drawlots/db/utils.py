from pathlib import Path


def resolve_sqlite_url(url: str, project_root: Path) -> str:
    """Resolve ``sqlite[+driver]:///./relative/path`` to an absolute path URL.

    In-memory and absolute SQLite URLs and other backends are returned as is.
    """
    scheme, sep, path = url.partition(":///")
    if not sep or not scheme.startswith("sqlite") or not path.startswith("./"):
        return url
    return f"{scheme}:///{(project_root / path[2:]).resolve()}"
