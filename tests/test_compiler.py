"""Tests for resource compilation into registration statements."""

from __future__ import annotations

import json
import re
from pathlib import Path

import pytest

from localepack.compiler import ResourceFile, compile_as_function, compile_root, load_resource
from localepack.diagnostics import LocaleResolutionError, ResourceParseError
from localepack.filesystem import MemoryFileSystem
from localepack.locale_utils import default_determine_locale, locale_from_filename


def accept_all(path: str) -> bool:
    return True


class ErrorLog:
    """on_error handler recording every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Exception]] = []

    def __call__(self, path: str, error: Exception) -> None:
        self.calls.append((path, error))


def extract_defines_literal(statement: str, target: str, locale: str) -> str:
    """Return the value literal of the .defines call for target/locale."""
    prefix = f".defines('{target}', '{locale}', "
    start = statement.index(prefix) + len(prefix)
    end = statement.index(")\n", start) if ")\n" in statement[start:] else statement.rindex(");")
    return statement[start:end]


class TestNamespaceDeclaration:
    """define(...) comes first in every root statement."""

    def test_define_emitted_without_files(self, tmp_path: Path) -> None:
        """An empty root still declares its submodules."""
        (tmp_path / "locales").mkdir()

        result = compile_as_function(
            str(tmp_path), {"locales": ["mod1", "mod2"]}, accept_all, default_determine_locale
        )

        assert result.statements == ("modDef.define('mod1','mod2');",)

    def test_define_precedes_defines(self, write_tree) -> None:
        """The define call is textually before any defines call of the root."""
        root = write_tree({"locales/en/a.json": "{}"})

        result = compile_as_function(
            str(root), {"locales": ["mod1", "mod2"]}, accept_all, default_determine_locale
        )

        statement = result.statements[0]
        assert statement.index("define('mod1','mod2')") < statement.index(".defines(")

    def test_empty_submodule_list(self, tmp_path: Path) -> None:
        """No submodules emits define()."""
        (tmp_path / "locales").mkdir()

        result = compile_as_function(
            str(tmp_path), {"locales": []}, accept_all, default_determine_locale
        )

        assert result.statements == ("modDef.define();",)

    def test_duplicate_submodules_kept(self, tmp_path: Path) -> None:
        """Submodule declarations are emitted verbatim, duplicates included."""
        (tmp_path / "locales").mkdir()

        result = compile_as_function(
            str(tmp_path), {"locales": ["a", "a"]}, accept_all, default_determine_locale
        )

        assert result.statements == ("modDef.define('a','a');",)


class TestPerFileIsolation:
    """One bad file never breaks the others."""

    def test_malformed_file_skipped(self, write_tree) -> None:
        """A malformed file is reported once and omitted; valid files remain."""
        root = write_tree({"locales/en/a.json": '{"k": "v"}', "locales/en/b.json": '{"k": '})
        errors = ErrorLog()

        result = compile_as_function(
            str(root), {"locales": []}, accept_all, default_determine_locale, errors
        )

        assert len(errors.calls) == 1
        path, error = errors.calls[0]
        assert path.endswith("b.json")
        assert isinstance(error, ResourceParseError)
        assert ".defines('a', 'en', " in result.statements[0]
        assert "'b'" not in result.statements[0]
        assert [d.path for d in result.diagnostics] == [path]
        assert result.has_errors

    def test_resolver_failure_isolated(self) -> None:
        """A resolver raising for one path skips just that file."""
        fs = MemoryFileSystem(
            {"/app/locales/messages.fr.json": '{"a": 1}', "/app/locales/messages.json": "{}"}
        )
        errors = ErrorLog()

        result = compile_as_function(
            "/app", {"locales": []}, accept_all, locale_from_filename, errors, fs=fs
        )

        assert [type(e) for _, e in errors.calls] == [LocaleResolutionError]
        assert result.statements == (
            "modDef.define()\n    .defines('messages.fr', 'fr', {\"a\":1});",
        )

    def test_arbitrary_resolver_exception_isolated(self) -> None:
        """Exceptions of any type raised by a custom resolver are isolated."""

        def broken(path: str) -> str:
            raise KeyError(path)

        fs = MemoryFileSystem({"/app/locales/en/a.json": "{}"})
        errors = ErrorLog()

        result = compile_as_function(
            "/app", {"locales": []}, accept_all, broken, errors, fs=fs
        )

        assert len(errors.calls) == 1
        assert isinstance(errors.calls[0][1], KeyError)
        assert result.statements == ("modDef.define();",)

    @pytest.mark.parametrize("returned", [None, 42, ["en"], ""])
    def test_non_string_locale_isolated(self, returned: object) -> None:
        """A resolver result that is not a non-empty string skips the file."""
        fs = MemoryFileSystem(
            {"/app/locales/en/a.json": "{}", "/app/locales/en/b.json": '{"k": 1}'}
        )
        errors = ErrorLog()

        def resolve(path: str) -> object:
            return returned if path.endswith("a.json") else "en"

        result = compile_as_function(
            "/app", {"locales": []}, accept_all, resolve, errors, fs=fs
        )

        assert [(p, type(e)) for p, e in errors.calls] == [
            ("/app/locales/en/a.json", LocaleResolutionError)
        ]
        assert result.statements == ("modDef.define()\n    .defines('b', 'en', {\"k\":1});",)
        assert [d.path for d in result.diagnostics] == ["/app/locales/en/a.json"]

    def test_undecodable_file_isolated(self, write_tree) -> None:
        """Invalid UTF-8 is a per-file error."""
        root = write_tree({"locales/en/a.json": "{}"})
        (root / "locales" / "en" / "b.json").write_bytes(b'{"k": "\xff"}')
        errors = ErrorLog()

        compile_as_function(str(root), {"locales": []}, accept_all, default_determine_locale, errors)

        assert [Path(p).name for p, _ in errors.calls] == ["b.json"]
        assert isinstance(errors.calls[0][1], UnicodeDecodeError)

    def test_on_error_optional(self) -> None:
        """Without a handler, failures are still collected as diagnostics."""
        fs = MemoryFileSystem({"/app/l/en/a.json": "nope"})

        result = compile_as_function("/app", {"l": []}, accept_all, default_determine_locale, fs=fs)

        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].format().startswith("In /app/l/en/a.json: Invalid JSON")


class TestRootErrors:
    """Root-level I/O errors propagate."""

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        """A root directory that does not exist fails the pass."""
        with pytest.raises(FileNotFoundError):
            compile_as_function(
                str(tmp_path), {"missing": []}, accept_all, default_determine_locale
            )


class TestFiltering:
    """Filter predicate application."""

    def test_rejected_paths_skipped_silently(self) -> None:
        """Filtered paths produce neither calls nor errors."""
        fs = MemoryFileSystem({"/app/l/en/a.json": "{}", "/app/l/en/skip.json": "broken"})
        errors = ErrorLog()

        result = compile_as_function(
            "/app",
            {"l": []},
            lambda path: not path.endswith("skip.json"),
            default_determine_locale,
            errors,
            fs=fs,
        )

        assert errors.calls == []
        assert result.statements == ("modDef.define()\n    .defines('a', 'en', {});",)

    def test_filter_receives_joined_paths(self) -> None:
        """The filter sees paths joined onto cwd and root."""
        fs = MemoryFileSystem({"/app/l/en/a.json": "{}"})
        seen: list[str] = []

        def record(path: str) -> bool:
            seen.append(path)
            return True

        compile_as_function("/app", {"l": []}, record, default_determine_locale, fs=fs)

        assert seen == ["/app/l/en/a.json"]


class TestOrderingAndDeterminism:
    """Output order follows roots then traversal."""

    def test_two_passes_identical_statements(self, write_tree) -> None:
        """Statements are byte-identical across passes; names differ."""
        root = write_tree(
            {
                "locales/en/a.json": '{"x": "1"}',
                "locales/fr/a.json": '{"x": "2"}',
                "locales/en/b.json": "[1, 2]",
                "errors/lv/e.json": '{"404": "Nav atrasts"}',
            }
        )
        roots = {"locales": ["app"], "errors": ["err"]}

        first = compile_as_function(str(root), roots, accept_all, default_determine_locale)
        second = compile_as_function(str(root), roots, accept_all, default_determine_locale)

        assert first.statements == second.statements
        assert first.name != second.name
        assert first.code.replace(first.name, "") == second.code.replace(second.name, "")

    def test_roots_in_mapping_order(self) -> None:
        """Roots are compiled in configuration order."""
        fs = MemoryFileSystem({"/app/a/en/x.json": "1", "/app/b/en/y.json": "2"})

        result = compile_as_function(
            "/app", {"b": ["second"], "a": ["first"]}, accept_all, default_determine_locale, fs=fs
        )

        assert result.code.index("define('second')") < result.code.index("define('first')")
        assert [r.root for r in result.resources] == ["b", "a"]

    def test_files_in_traversal_order(self) -> None:
        """Calls within a root follow the scanner's order."""
        fs = MemoryFileSystem(
            {
                "/app/l/fr/m.json": '"fr"',
                "/app/l/en/m.json": '"en"',
                "/app/l/en/n.json": '"en2"',
            }
        )

        result = compile_as_function("/app", {"l": []}, accept_all, default_determine_locale, fs=fs)

        assert [(r.target_name, r.locale) for r in result.resources] == [
            ("m", "fr"),
            ("m", "en"),
            ("n", "en"),
        ]


class TestGeneratedFunction:
    """Shape of the generated function source."""

    def test_code_wraps_statements(self) -> None:
        """The function takes modDef and contains every statement."""
        fs = MemoryFileSystem({"/app/l/en/a.json": "{}"})

        result = compile_as_function(
            "/app",
            {"l": ["x"]},
            accept_all,
            default_determine_locale,
            fs=fs,
            name_generator=lambda: "__fixed",
        )

        assert result.code == (
            "function __fixed(modDef) {\n"
            "  modDef.define('x')\n"
            "    .defines('a', 'en', {});\n"
            "}"
        )

    def test_no_roots(self) -> None:
        """No roots yields an empty function body."""
        result = compile_as_function(
            "/app", {}, accept_all, default_determine_locale, name_generator=lambda: "__empty"
        )

        assert result.code == "function __empty(modDef) {\n}"

    def test_quotes_in_names_escaped(self) -> None:
        """Target names, locales and submodules are safely quoted."""
        fs = MemoryFileSystem({"/app/l/it's/o'clock.json": "{}"})

        result = compile_as_function(
            "/app", {"l": ["a'b"]}, accept_all, default_determine_locale, fs=fs
        )

        assert result.statements == (
            "modDef.define('a\\'b')\n    .defines('o\\'clock', 'it\\'s', {});",
        )


class TestRoundTrip:
    """Parsed values reappear as equal literals."""

    def test_value_embedded_structurally_equal(self, write_tree) -> None:
        """{"greeting": "hi"} is embedded as an equal literal."""
        root = write_tree({"locales/en/messages.json": '{\n  "greeting": "hi"\n}\n'})

        result = compile_as_function(
            str(root), {"locales": []}, accept_all, default_determine_locale
        )

        literal = extract_defines_literal(result.statements[0], "messages", "en")
        assert json.loads(literal) == {"greeting": "hi"}
        assert result.resources[0].value == {"greeting": "hi"}

    def test_special_characters_survive(self) -> None:
        """Quotes, newlines and line separators survive embedding."""
        value = {"q": "it's \"quoted\"\nnext line", "n": [1.5, None, True]}
        fs = MemoryFileSystem({"/app/l/en/a.json": json.dumps(value)})

        result = compile_as_function("/app", {"l": []}, accept_all, default_determine_locale, fs=fs)

        literal = extract_defines_literal(result.statements[0], "a", "en")
        assert "\n" not in literal
        assert json.loads(literal) == value


class TestLoadResource:
    """Single-file loading."""

    def test_fields(self) -> None:
        """load_resource resolves every ResourceFile field."""
        fs = MemoryFileSystem({"/app/l/fr/messages.json": '{"bonjour": "Bonjour"}'})

        resource = load_resource("l", "/app/l/fr/messages.json", default_determine_locale, fs=fs)

        assert resource == ResourceFile(
            root="l",
            path="/app/l/fr/messages.json",
            target_name="messages",
            locale="fr",
            value={"bonjour": "Bonjour"},
        )
        assert resource.render_call() == ".defines('messages', 'fr', {\"bonjour\":\"Bonjour\"})"

    def test_parse_error_carries_path(self) -> None:
        """Parse errors name the offending file."""
        fs = MemoryFileSystem({"/app/l/fr/m.json": "{,}"})

        with pytest.raises(ResourceParseError, match="Invalid JSON") as exc_info:
            load_resource("l", "/app/l/fr/m.json", default_determine_locale, fs=fs)

        assert exc_info.value.path == "/app/l/fr/m.json"


class TestCompileRoot:
    """compile_root in isolation."""

    def test_returns_statement_and_resources(self) -> None:
        """The statement ends with a semicolon; resources are in call order."""
        fs = MemoryFileSystem({"/r/en/a.json": "1", "/r/en/b.json": "2"})

        statement, resources = compile_root(
            "r", ["m"], "/r", accept_all, default_determine_locale, ErrorLog(), fs=fs
        )

        assert statement.endswith(";")
        assert re.findall(r"\.defines\('(\w+)'", statement) == ["a", "b"]
        assert [r.value for r in resources] == [1, 2]
