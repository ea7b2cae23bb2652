"""Step-by-step tracing of Python's import resolution.

`trace_import` answers "what would `import a.b.c` do, and why?" without
executing the target. It replays the import system's search:

1. the sys.modules cache,
2. the parent package (submodules are searched on the parent's __path__),
3. each finder on sys.meta_path in order,
4. for the path-based finder, each path entry: the path importer cache, the
   path hooks that build a path entry finder, and that finder's verdict,
5. namespace package portions when no regular module or package is found.

The path-based finder is replayed rather than called so the trace can show
its inner steps; the replay reads sys.path_importer_cache but never writes to
it. Other meta path finders are called through their public find_spec.
"""

from __future__ import annotations

import importlib.machinery
import logging
import os
import sys
from dataclasses import dataclass, field
from importlib.machinery import ModuleSpec
from typing import Any, Optional, Sequence

logger = logging.getLogger(__name__)

NAMESPACE_LOADER = "namespace"


@dataclass
class TraceStep:
    kind: str  # cache | parent | meta-path | path-entry | path-hook | entry-finder | namespace
    subject: str
    outcome: str  # hit | miss | blocked | declined | found | portion | accepted | skipped | error | ...
    detail: str = ""
    depth: int = 0


@dataclass
class ImportTrace:
    fullname: str
    steps: list[TraceStep] = field(default_factory=list)
    spec: Optional[ModuleSpec] = None
    search_path: Optional[list[str]] = None
    from_cache: bool = False
    parent: Optional[ImportTrace] = None

    def add(self, kind: str, subject: str, outcome: str, detail: str = "", depth: int = 0) -> TraceStep:
        step = TraceStep(kind, subject, outcome, detail, depth)
        self.steps.append(step)
        logger.debug("%s: %s %s %s %s", self.fullname, kind, subject, outcome, detail)
        return step

    @property
    def found(self) -> bool:
        return self.from_cache or self.spec is not None

    @property
    def is_namespace(self) -> bool:
        return self.spec is not None and self.spec.loader is None and self.spec.submodule_search_locations is not None

    @property
    def is_package(self) -> bool:
        return self.spec is not None and self.spec.submodule_search_locations is not None

    @property
    def loader_name(self) -> Optional[str]:
        if self.spec is None:
            return None
        if self.spec.loader is None:
            return NAMESPACE_LOADER if self.is_namespace else None
        if type(self.spec.loader).__name__ == "NamespaceLoader":
            return NAMESPACE_LOADER
        return describe(self.spec.loader)

    @property
    def origin(self) -> Optional[str]:
        return self.spec.origin if self.spec is not None else None


def describe(obj: Any) -> str:
    """Short name for a finder, hook or loader (classes and closures by name)."""
    if isinstance(obj, type):
        return obj.__name__
    name = getattr(obj, "__name__", None)
    if name and callable(obj) and not hasattr(obj, "find_spec"):
        return name
    return type(obj).__name__


def _is_path_finder(finder: Any) -> bool:
    return isinstance(finder, type) and issubclass(finder, importlib.machinery.PathFinder)


def trace_import(
    fullname: str,
    path: Optional[Sequence[str]] = None,
    use_cache: bool = True,
) -> ImportTrace:
    """Trace how `fullname` would be resolved.

    `path` replaces sys.path for a top-level name when the path-based finder
    walks its entries; submodules always use their parent's search path.
    With use_cache=False, modules already in sys.modules are searched for as
    if they had never been imported.
    """
    if not fullname or fullname.startswith(".") or fullname.endswith(".") or ".." in fullname:
        raise ValueError(f"Not an absolute module name: {fullname!r}")

    trace = ImportTrace(fullname)

    if use_cache and fullname in sys.modules:
        module = sys.modules[fullname]
        if module is None:
            trace.add("cache", "sys.modules", "blocked", "entry is None; import raises ModuleNotFoundError")
            return trace
        trace.from_cache = True
        trace.spec = getattr(module, "__spec__", None)
        trace.add("cache", "sys.modules", "hit", "module already imported; no finders consulted")
        return trace
    trace.add("cache", "sys.modules", "miss" if use_cache else "skipped")

    parent_name, _, _ = fullname.rpartition(".")
    search_path: Optional[list[str]] = None
    if parent_name:
        search_path = _parent_search_path(trace, parent_name, path, use_cache)
        if search_path is None:
            return trace
    entries = search_path if search_path is not None else list(path if path is not None else sys.path)
    # Entries actually walked; other finders still see None for a top-level name
    trace.search_path = entries
    _offer_to_meta_path(trace, search_path, entries)
    return trace


def _parent_search_path(
    trace: ImportTrace,
    parent_name: str,
    path: Optional[Sequence[str]],
    use_cache: bool,
) -> Optional[list[str]]:
    """Return the parent's submodule search locations, or None if unusable."""
    parent_module = sys.modules.get(parent_name) if use_cache else None
    if parent_module is not None:
        parent_path = getattr(parent_module, "__path__", None)
        if parent_path is None:
            trace.add("parent", parent_name, "not-a-package", "imported module has no __path__")
            return None
        trace.add("parent", parent_name, "hit", "already imported; searching its __path__")
        return list(parent_path)

    parent = trace_import(parent_name, path=path, use_cache=use_cache)
    trace.parent = parent
    if not parent.found:
        trace.add("parent", parent_name, "missing", "parent package cannot be found")
        return None
    locations = parent.spec.submodule_search_locations if parent.spec is not None else None
    if locations is None:
        trace.add("parent", parent_name, "not-a-package", "found, but it is a plain module")
        return None
    trace.add("parent", parent_name, "found", f"via {parent.loader_name}; searching its locations")
    return list(locations)


def _offer_to_meta_path(trace: ImportTrace, search_path: Optional[list[str]], entries: list[str]) -> None:
    for finder in list(sys.meta_path):
        name = describe(finder)
        if _is_path_finder(finder):
            spec = _walk_path_entries(trace, entries)
            if spec is not None:
                trace.spec = spec
                return
            continue

        find_spec = getattr(finder, "find_spec", None)
        if find_spec is None:
            trace.add("meta-path", name, "skipped", "finder has no find_spec")
            continue
        try:
            spec = find_spec(trace.fullname, search_path, None)
        except Exception as ex:
            trace.add("meta-path", name, "error", f"{type(ex).__name__}: {ex}")
            continue
        if spec is None:
            trace.add("meta-path", name, "declined")
            continue
        trace.add("meta-path", name, "found", f"loader {describe(spec.loader)}" if spec.loader else "")
        trace.spec = spec
        return


def _walk_path_entries(trace: ImportTrace, entries: list[str]) -> Optional[ModuleSpec]:
    """Replay PathFinder.find_spec over `entries`."""
    trace.add("meta-path", "PathFinder", "walking", f"{len(entries)} path entries")
    namespace_path: list[str] = []
    for entry in entries:
        if not isinstance(entry, (str, bytes)):
            trace.add("path-entry", repr(entry), "skipped", "not a string", depth=1)
            continue
        finder = _entry_finder_for(trace, os.fsdecode(entry))
        if finder is None:
            continue
        name = describe(finder)
        find_spec = getattr(finder, "find_spec", None)
        if find_spec is None:
            trace.add("entry-finder", name, "skipped", "path entry finder has no find_spec", depth=2)
            continue
        try:
            spec = find_spec(trace.fullname)
        except Exception as ex:
            trace.add("entry-finder", name, "error", f"{type(ex).__name__}: {ex}", depth=2)
            continue
        if spec is None:
            trace.add("entry-finder", name, "declined", depth=2)
            continue
        if spec.loader is not None:
            trace.add("entry-finder", name, "found", f"{describe(spec.loader)} at {spec.origin}", depth=2)
            return spec
        portions = list(spec.submodule_search_locations or [])
        if portions:
            trace.add("entry-finder", name, "portion", ", ".join(portions), depth=2)
            namespace_path.extend(portions)
        else:
            trace.add("entry-finder", name, "declined", "spec without loader or locations", depth=2)

    if namespace_path:
        spec = ModuleSpec(trace.fullname, None, is_package=True)
        spec.submodule_search_locations = namespace_path
        trace.add("namespace", trace.fullname, "found", f"{len(namespace_path)} portion(s)", depth=1)
        return spec
    trace.add("meta-path", "PathFinder", "declined")
    return None


def _entry_finder_for(trace: ImportTrace, entry: str) -> Any:
    """Return the path entry finder for `entry` as the path-based finder would."""
    key = entry
    if entry == "":
        # The empty entry means the current working directory
        try:
            key = os.getcwd()
        except FileNotFoundError:
            trace.add("path-entry", "''", "error", "current directory no longer exists", depth=1)
            return None

    if key in sys.path_importer_cache:
        finder = sys.path_importer_cache[key]
        if finder is None:
            trace.add("path-entry", key, "cache-hit", "cached None: no finder handles this entry", depth=1)
        else:
            trace.add("path-entry", key, "cache-hit", describe(finder), depth=1)
        return finder

    trace.add("path-entry", key, "cache-miss", "asking sys.path_hooks", depth=1)
    for hook in sys.path_hooks:
        try:
            finder = hook(key)
        except ImportError:
            trace.add("path-hook", describe(hook), "declined", depth=2)
            continue
        trace.add("path-hook", describe(hook), "accepted", describe(finder), depth=2)
        return finder
    trace.add("path-entry", key, "no-finder", "no path hook accepted this entry", depth=1)
    return None
