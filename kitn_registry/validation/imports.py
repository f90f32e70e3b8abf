"""Import extraction and resolution for registry source files.

Extraction is pattern based rather than a full parse: the import grammar
used by registry components is small, and only the module specifier matters.
Two reference forms are recognised:

- alias imports, ``from "@kitn/<typeDir>/<sub/path>.js"``, which name a file
  in the installed layout directly
- relative imports, ``from "./x.js"`` / ``from "../x.js"`` (and bare
  ``import "./x.js"``), which resolve against the importing file's
  installed directory

Specifiers are written with the runtime extension (``.js``) and mapped back
to the source extension (``.ts``) for lookup. Extension-less specifiers are
matched exactly; no extensions are probed.
"""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass

from kitn_registry.schema import TYPE_DIRS

# import x from "..." / export { x } from "..." / export * from "..."
_FROM_TEMPLATE = r"""(?:import|export)\s+[\s\S]*?\s+from\s+["']({specifier})["']"""

_RELATIVE_SPECIFIER = r"""\.[^"']+"""

_RELATIVE_FROM_RE = re.compile(_FROM_TEMPLATE.format(specifier=_RELATIVE_SPECIFIER))

# import "./side-effect.js"
_RELATIVE_BARE_RE = re.compile(r"""\bimport\s+["'](""" + _RELATIVE_SPECIFIER + r""")["']""")


@dataclass(frozen=True)
class AliasImport:
    """An ``@scope/<typeDir>/<path>`` import."""

    scope: str
    type_dir: str
    path: str

    @property
    def specifier(self) -> str:
        return f"{self.scope}/{self.type_dir}/{self.path}"


def _alias_pattern(scope: str) -> re.Pattern:
    specifier = re.escape(scope) + r"""/([\w-]+)/([^"']+)"""
    return re.compile(
        r"""(?:import|export)\s+[\s\S]*?\s+from\s+["']""" + specifier + r"""["']"""
    )


def extract_relative_imports(source: str) -> list[str]:
    """Return relative module specifiers in order of appearance."""
    found = [(m.start(), m.group(1)) for m in _RELATIVE_FROM_RE.finditer(source)]
    found += [(m.start(), m.group(1)) for m in _RELATIVE_BARE_RE.finditer(source)]
    return [specifier for _, specifier in sorted(found)]


def extract_alias_imports(
    source: str,
    scope: str = "@kitn",
    type_dirs: tuple[str, ...] = TYPE_DIRS,
) -> list[AliasImport]:
    """Return alias imports whose type segment is a known type directory.

    ``@kitn/core`` style package imports are not layout references and are
    ignored.
    """
    imports = []
    for match in _alias_pattern(scope).finditer(source):
        type_dir, path = match.group(1), match.group(2)
        if type_dir in type_dirs:
            imports.append(AliasImport(scope=scope, type_dir=type_dir, path=path))
    return imports


def normalize_extension(path: str, runtime_extension: str = ".js", source_extension: str = ".ts") -> str:
    """Map a runtime-extension path back to the authoring extension."""
    if path.endswith(runtime_extension):
        return path[: -len(runtime_extension)] + source_extension
    return path


def resolve_alias(alias: AliasImport, runtime_extension: str = ".js", source_extension: str = ".ts") -> str:
    """Installed path an alias import points at."""
    return normalize_extension(f"{alias.type_dir}/{alias.path}", runtime_extension, source_extension)


def resolve_relative(
    specifier: str,
    from_installed_path: str,
    runtime_extension: str = ".js",
    source_extension: str = ".ts",
) -> str:
    """Installed path a relative import points at, anchored at the installed root.

    ``..`` segments cannot climb above the installed root.
    """
    from_dir = posixpath.dirname(from_installed_path)
    resolved = posixpath.normpath(posixpath.join("/", from_dir, specifier)).lstrip("/")
    return normalize_extension(resolved, runtime_extension, source_extension)
