"""Tests for import extraction and resolution."""

from kitn_registry.validation.imports import (
    AliasImport,
    extract_alias_imports,
    extract_relative_imports,
    normalize_extension,
    resolve_alias,
    resolve_relative,
)

SOURCE = '''
import { registerAgent } from "@kitn/core";
import { tool } from "ai";
import { weatherTool } from "@kitn/tools/weather.js";
import type { Store } from '@kitn/storage/memory/store.js';
import {
  format,
  parse,
} from "./lib/format.js";
export * from "../shared/types.js";
export { helper } from "./helper.js";
import "./polyfill.js";
'''


def test_extract_relative_imports_in_order():
    assert extract_relative_imports(SOURCE) == [
        "./lib/format.js",
        "../shared/types.js",
        "./helper.js",
        "./polyfill.js",
    ]


def test_extract_alias_imports_ignores_non_layout_packages():
    imports = extract_alias_imports(SOURCE)
    assert imports == [
        AliasImport(scope="@kitn", type_dir="tools", path="weather.js"),
        AliasImport(scope="@kitn", type_dir="storage", path="memory/store.js"),
    ]
    assert imports[0].specifier == "@kitn/tools/weather.js"


def test_extract_alias_imports_custom_scope():
    source = 'import { x } from "@acme/agents/x.js";\nimport { y } from "@kitn/agents/y.js";'
    imports = extract_alias_imports(source, scope="@acme")
    assert [i.path for i in imports] == ["x.js"]


def test_no_imports():
    assert extract_relative_imports("const x = 1;") == []
    assert extract_alias_imports("const x = 1;") == []


def test_normalize_extension():
    assert normalize_extension("tools/x.js") == "tools/x.ts"
    assert normalize_extension("tools/x") == "tools/x"
    assert normalize_extension("tools/x.json") == "tools/x.json"


def test_resolve_alias():
    alias = AliasImport(scope="@kitn", type_dir="tools", path="sub/echo.js")
    assert resolve_alias(alias) == "tools/sub/echo.ts"


def test_resolve_relative_same_dir():
    assert resolve_relative("./helper.js", "tools/echo.ts") == "tools/helper.ts"


def test_resolve_relative_parent_dir():
    assert resolve_relative("../agents/y.js", "tools/x.ts") == "agents/y.ts"
    assert resolve_relative("../util.js", "tools/lib/x.ts") == "tools/util.ts"


def test_resolve_relative_cannot_climb_above_root():
    assert resolve_relative("../../../x.js", "tools/x.ts") == "x.ts"


def test_resolve_relative_extensionless_is_exact():
    assert resolve_relative("./helper", "tools/echo.ts") == "tools/helper"
