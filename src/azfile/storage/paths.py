"""Mapping between caller paths and absolute share paths."""


class PathResolver:
    """Joins caller paths onto a fixed working directory.

        The working directory is normalized to start and end with a slash, e.g.
        ``data`` becomes ``/data/``. Share paths have no leading slash, so with a
        working directory of ``/data/`` the caller path ``a/b.txt`` maps to
        ``data/a/b.txt``. A trailing slash on the caller path is kept since it
        marks a directory prefix when listing.
    """

    def __init__(self, work_dir: str = "/"):
        stripped = (work_dir or "").strip("/")
        self._prefix = f"{stripped}/" if stripped else ""
        self.work_dir = f"/{self._prefix}"

    def abs_path(self, path: str) -> str:
        return self._prefix + path.lstrip("/")

    def rel_path(self, abs_path: str) -> str:
        if self._prefix and abs_path.startswith(self._prefix):
            return abs_path[len(self._prefix):]
        return abs_path

    def __repr__(self):
        return f"PathResolver({self.work_dir!r})"
