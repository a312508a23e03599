"""Tests for routegen.discovery.query — QueryParams contract extraction."""

from routegen.discovery.query import extract_query_params, scan_query_contract
from routegen.routes.model import QueryParamSpec


class TestInterfaceContract:
    """``export interface QueryParams { ... }``."""

    def test_fields_in_order(self) -> None:
        text = """
        export interface QueryParams {
          q: string;
          page?: number;
          category?: string[];
        }
        """
        assert extract_query_params(text) == (
            QueryParamSpec("q", "string", False),
            QueryParamSpec("page", "number", True),
            QueryParamSpec("category", "string[]", True),
        )

    def test_kinds(self) -> None:
        text = "export interface QueryParams { a: string; b: boolean; c: string[]; d: 'x' | 'y' }"
        kinds = [f.kind for f in extract_query_params(text)]
        assert kinds == ["string", "boolean", "string[]", "raw"]

    def test_raw_type_text_kept(self) -> None:
        text = "export interface QueryParams { sort?: 'asc' | 'desc' }"
        (field,) = extract_query_params(text)
        assert field.type == "'asc' | 'desc'"
        assert field.optional

    def test_comments_stripped(self) -> None:
        text = """
        export interface QueryParams {
          // search text
          q: string; /* required */
          tags?: number[]; // one pair per tag
        }
        """
        fields = extract_query_params(text)
        assert [f.name for f in fields] == ["q", "tags"]
        assert fields[1].is_list

    def test_trailing_commas(self) -> None:
        text = "export interface QueryParams {\n  a: string,\n  b?: number,\n}"
        assert [f.name for f in extract_query_params(text)] == ["a", "b"]

    def test_unparseable_fields_skipped(self) -> None:
        text = "export interface QueryParams {\n  q: string;\n  [key: string]: string;\n}"
        assert [f.name for f in extract_query_params(text)] == ["q"]


class TestTypeAliasContract:
    def test_type_alias(self) -> None:
        text = "export type QueryParams = { q: string; page?: number };"
        assert [f.name for f in extract_query_params(text)] == ["q", "page"]


class TestScanOutcome:
    """scan_query_contract never raises and diagnoses unsupported shapes."""

    def test_absent(self) -> None:
        scan = scan_query_contract("export default function Page() {}")
        assert scan.found is False
        assert scan.params == ()
        assert scan.problem is None

    def test_not_exported(self) -> None:
        assert scan_query_contract("interface QueryParams { q: string }").found is False

    def test_nested_braces(self) -> None:
        text = "export interface QueryParams { range: { from: number; to: number } }"
        scan = scan_query_contract(text)
        assert scan.found is True
        assert scan.params == ()
        assert scan.problem is not None
        assert "nested" in scan.problem

    def test_unterminated(self) -> None:
        scan = scan_query_contract("export interface QueryParams {\n  q: string;\n")
        assert scan.params == ()
        assert scan.problem is not None
        assert "unterminated" in scan.problem

    def test_empty_block(self) -> None:
        scan = scan_query_contract("export interface QueryParams {}")
        assert scan.found is True
        assert scan.params == ()
        assert scan.problem is None

    def test_duplicate_field_first_wins(self) -> None:
        text = "export interface QueryParams { q: string; q?: number }"
        assert extract_query_params(text) == (QueryParamSpec("q", "string", False),)
