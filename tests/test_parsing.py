"""
Tests for Parsing — Lexer and statement parser

Tests validate:
- Comment stripping outside string literals only
- Escape handling that keeps LaTeX intact
- Entity, MATCH and relationship statement shapes
- Tolerated variations (inline endpoints, reverse arrows, comma patterns)
- Property value variants
- Unrecognized fragments instead of exceptions
"""

from kgcheck.core.parsing import (
    TokenKind, tokenize, strip_comments, parse_statements,
    EntityStatement, MatchStatement, RelationshipStatement, Unrecognized,
)
from kgcheck.core.values import (
    StringValue, NumberValue, BooleanValue, NullValue, BareValue, ListValue, MapValue,
)


# =============================================================================
# Lexer Tests
# =============================================================================

class TestLexer:
    """Test tokenize() and strip_comments()."""

    def test_line_comment_dropped(self):
        """Line comments produce no tokens."""
        tokens = tokenize('CREATE (n) // a remark about n')
        values = [t.value for t in tokens]
        assert "remark" not in values
        assert tokens[-1].kind == TokenKind.EOF

    def test_url_inside_string_survives(self):
        """'//' inside a string is not a comment."""
        tokens = tokenize('{url: "https://example.org/a"} // trailing')
        strings = [t.value for t in tokens if t.kind == TokenKind.STRING]
        assert strings == ["https://example.org/a"]

    def test_latex_escapes_kept(self):
        """Backslash sequences other than quotes and backslash are verbatim."""
        tokens = tokenize(r'"\nabla f \theta"')
        assert tokens[0].kind == TokenKind.STRING
        assert tokens[0].value == r"\nabla f \theta"

    def test_quote_escapes_resolved(self):
        tokens = tokenize(r'"say \"hi\"" ' + r"'it\'s'")
        strings = [t.value for t in tokens if t.kind == TokenKind.STRING]
        assert strings == ['say "hi"', "it's"]

    def test_double_backslash_resolved(self):
        tokens = tokenize(r'"a \\ b"')
        assert tokens[0].value == "a \\ b"

    def test_unterminated_string_is_error_token(self):
        """An unterminated string swallows the rest of the input."""
        tokens = tokenize('CREATE (n {name: "open')
        assert tokens[-2].kind == TokenKind.ERROR
        assert tokens[-1].kind == TokenKind.EOF

    def test_line_numbers(self):
        tokens = tokenize("/* header\nstill header */\nCREATE\n(n)")
        create = next(t for t in tokens if t.value == "CREATE")
        paren = next(t for t in tokens if t.kind == TokenKind.LPAREN)
        assert create.line == 3
        assert paren.line == 4

    def test_arrows(self):
        kinds = [t.kind for t in tokenize("-[:R]->(b)<-[:S]-")]
        assert TokenKind.ARROW_RIGHT in kinds
        assert TokenKind.ARROW_LEFT in kinds

    def test_strip_comments_keeps_strings(self):
        text = 'CREATE (n {url: "http://x.org"}) // gone\n/* also gone */'
        stripped = strip_comments(text)
        assert "http://x.org" in stripped
        assert "gone" not in stripped


# =============================================================================
# Statement Shape Tests
# =============================================================================

class TestEntityStatements:
    """Test CREATE of labelled nodes."""

    def test_simple_entity(self):
        result = parse_statements('CREATE (c:MathematicalConcept {name: "GradientDescent", year: 1847})')
        assert len(result.entities) == 1
        entity = result.entities[0]
        assert isinstance(entity, EntityStatement)
        assert entity.label == "MathematicalConcept"
        assert entity.node.name == "GradientDescent"
        assert entity.node.properties["year"] == NumberValue(value=1847, raw="1847")

    def test_entity_without_variable(self):
        result = parse_statements('CREATE (:Algorithm {name: "Adam"})')
        assert result.entities[0].label == "Algorithm"
        assert result.entities[0].node.variable is None

    def test_multiline_and_single_quotes(self):
        text = """
        CREATE (s:Symbol {
            name: 'v',
            context: 'fluid dynamics'
        });
        """
        result = parse_statements(text)
        assert result.entities[0].node.properties["context"] == StringValue("fluid dynamics")
        assert result.entities[0].line == 2

    def test_several_entities(self):
        text = 'CREATE (a:Algorithm {name: "Adam"});\nCREATE (b:Algorithm {name: "RmsProp"});'
        result = parse_statements(text)
        assert [e.node.name for e in result.entities] == ["Adam", "RmsProp"]

    def test_extra_labels_use_first(self):
        result = parse_statements('CREATE (n:Algorithm:Deprecated {name: "Sgd"})')
        assert result.entities[0].label == "Algorithm"

    def test_backtick_label(self):
        result = parse_statements('CREATE (n:`Algorithm` {name: "Sgd"})')
        assert result.entities[0].label == "Algorithm"

    def test_keyword_is_case_sensitive(self):
        result = parse_statements('create (n:Algorithm {name: "Sgd"})')
        assert result.entities == []
        assert len(result.unrecognized) == 1


class TestRelationshipStatements:
    """Test MATCH ... CREATE (a)-[:R]->(b) forms."""

    def test_match_match_create(self):
        text = """
        MATCH (a:Algorithm {name: "Adam"})
        MATCH (b:MathematicalConcept {name: "GradientDescent"})
        CREATE (a)-[:BASED_ON {since: 2014}]->(b);
        """
        result = parse_statements(text)
        assert len(result.matches) == 2
        rel = result.relationships[0]
        assert isinstance(rel, RelationshipStatement)
        assert rel.label == "BASED_ON"
        assert rel.source.label == "Algorithm"
        assert rel.source.name == "Adam"
        assert rel.target.label == "MathematicalConcept"
        assert rel.properties["since"].to_python() == 2014
        assert rel.source_variable == "a"
        assert not rel.unbound_source and not rel.unbound_target

    def test_comma_separated_match(self):
        text = """
        MATCH (a:Algorithm {name: "Adam"}), (b:MathematicalConcept {name: "GradientDescent"})
        CREATE (a)-[:BASED_ON]->(b)
        """
        result = parse_statements(text)
        assert isinstance(result.matches[0], MatchStatement)
        assert len(result.matches[0].nodes) == 2
        assert result.relationships[0].target.name == "GradientDescent"

    def test_inline_endpoints(self):
        text = 'CREATE (a:Algorithm {name: "Adam"})-[:BASED_ON]->(b:MathematicalConcept {name: "GradientDescent"})'
        result = parse_statements(text)
        assert len(result.entities) == 2
        rel = result.relationships[0]
        assert rel.source.label == "Algorithm"
        assert rel.target.label == "MathematicalConcept"

    def test_endpoint_bound_by_earlier_create(self):
        text = """
        CREATE (a:Algorithm {name: "Adam"})
        CREATE (b:MathematicalConcept {name: "GradientDescent"})
        CREATE (a)-[:BASED_ON]->(b)
        """
        rel = parse_statements(text).relationships[0]
        assert rel.source.name == "Adam"
        assert rel.target.name == "GradientDescent"

    def test_reverse_arrow_swaps_endpoints(self):
        text = """
        MATCH (a:Algorithm {name: "Adam"})
        MATCH (p:Paper {id: "Kingma2014"})
        CREATE (a)<-[:INTRODUCES]-(p)
        """
        rel = parse_statements(text).relationships[0]
        assert rel.source.label == "Paper"
        assert rel.target.label == "Algorithm"
        assert rel.source_variable == "p"

    def test_unbound_variables_flagged(self):
        rel = parse_statements("CREATE (a)-[:BASED_ON]->(b)").relationships[0]
        assert rel.unbound_source
        assert rel.unbound_target
        assert rel.source_variable == "a"

    def test_variables_scoped_to_statement(self):
        """A ';' ends the scope of MATCH bindings."""
        text = 'MATCH (a:Algorithm {name: "Adam"});\nMATCH (b:Algorithm {name: "Sgd"})\nCREATE (a)-[:BASED_ON]->(b)'
        rel = parse_statements(text).relationships[0]
        assert rel.unbound_source
        assert not rel.unbound_target

    def test_undirected_create_is_unrecognized(self):
        text = """
        MATCH (a:Algorithm {name: "Adam"})
        MATCH (b:Algorithm {name: "Sgd"})
        CREATE (a)-[:BASED_ON]-(b)
        """
        result = parse_statements(text)
        assert result.relationships == []
        assert "direction" in result.unrecognized[0].reason

    def test_undirected_match_allowed(self):
        result = parse_statements("MATCH (a:Algorithm)-[:BASED_ON]-(b:MathematicalConcept)")
        assert result.unrecognized == []
        assert len(result.matches[0].nodes) == 2


# =============================================================================
# Property Value Tests
# =============================================================================

class TestPropertyValues:
    """Test the value variants produced for property maps."""

    def _props(self, body: str):
        return parse_statements(f"CREATE (s:Symbol {{{body}}})").entities[0].node.properties

    def test_nested_list_and_map(self):
        props = self._props('dims: [1, [2, 3]], unit: {si: "m/s"}')
        assert isinstance(props["dims"], ListValue)
        assert props["dims"].to_python() == [1, [2, 3]]
        assert isinstance(props["unit"], MapValue)
        assert props["unit"].to_python() == {"si": "m/s"}

    def test_negative_and_float_numbers(self):
        props = self._props("offset: -1.5, count: -3, big: 6.02e23")
        assert props["offset"].to_python() == -1.5
        assert props["count"].to_python() == -3
        assert props["big"].raw == "6.02e23"

    def test_boolean_and_null(self):
        props = self._props("active: TRUE, hidden: false, alias: null")
        assert props["active"] == BooleanValue(True)
        assert props["hidden"] == BooleanValue(False)
        assert isinstance(props["alias"], NullValue)
        assert props["alias"].text == ""

    def test_bare_values_kept_verbatim(self):
        props = self._props('created: date("2020-01-01"), ref: $param, src: other.name')
        assert props["created"] == BareValue('date("2020-01-01")')
        assert props["ref"] == BareValue("$param")
        assert props["src"] == BareValue("other.name")

    def test_trailing_comma_and_quoted_key(self):
        props = self._props('"name": "x", context: "y",')
        assert props["name"].text == "x"
        assert props["context"].text == "y"

    def test_duplicate_key_keeps_first(self):
        result = parse_statements('CREATE (c:Algorithm {name: "Adam", name: "Sgd"})')
        assert result.entities[0].node.name == "Adam"
        note = result.unrecognized[0]
        assert note.reason == "duplicate property 'name', first value kept"
        assert note.text == 'name: "Sgd"'

    def test_duplicate_key_in_nested_map(self):
        result = parse_statements('CREATE (s:Symbol {unit: {si: "m", si: "s"}})')
        assert result.entities[0].node.properties["unit"].to_python() == {"si": "m"}
        assert len(result.unrecognized) == 1

    def test_duplicate_key_in_discarded_clause_not_reported(self):
        result = parse_statements('CREATE (c:Algorithm {name: "Adam", name: "Sgd"}')
        assert result.entities == []
        assert len(result.unrecognized) == 1
        assert "duplicate" not in result.unrecognized[0].reason

    def test_latex_value_text(self):
        props = self._props(r'latex: "\frac{\partial u}{\partial t}"')
        assert props["latex"].text == r"\frac{\partial u}{\partial t}"


# =============================================================================
# Tolerance Tests
# =============================================================================

class TestUnrecognized:
    """Anything outside the recognized shapes becomes an Unrecognized node."""

    def test_return_clause(self):
        """Only the RETURN tail is unrecognized; the MATCH before it stands."""
        result = parse_statements("MATCH (n:Paper) RETURN n")
        assert len(result.unrecognized) == 1
        assert result.unrecognized[0].reason == "unsupported clause 'RETURN'"
        assert result.unrecognized[0].text == "RETURN n"
        assert result.matches[0].nodes[0].label == "Paper"

    def test_create_then_return_keeps_entity(self):
        text = 'CREATE (c:MathematicalConcept {name: "Heat", year: "20A4"})\nRETURN c'
        result = parse_statements(text)
        assert [e.node.name for e in result.entities] == ["Heat"]
        assert result.unrecognized[0].line == 2

    def test_create_with_match_create(self):
        """The usual way to link a new node: bindings carry across WITH."""
        text = """
        CREATE (s:Symbol {name: "v", context: "optics"})
        WITH s
        MATCH (o:Symbol {name: "v", context: "fluid dynamics"})
        CREATE (s)-[:CONFLICTS_WITH]->(o);
        """
        result = parse_statements(text)
        assert [e.node.properties["context"].text for e in result.entities] == ["optics"]
        assert [u.reason for u in result.unrecognized] == ["unsupported clause 'WITH'"]
        rel = result.relationships[0]
        assert rel.source.name == "v"
        assert rel.source.properties["context"].text == "optics"
        assert rel.target.properties["context"].text == "fluid dynamics"
        assert not rel.unbound_source and not rel.unbound_target

    def test_match_where_keeps_bindings(self):
        text = """
        MATCH (a:Algorithm), (b:MathematicalConcept)
        WHERE a.name = "Adam" AND b.name = "GradientDescent"
        CREATE (a)-[:BASED_ON]->(b)
        """
        result = parse_statements(text)
        assert len(result.matches[0].nodes) == 2
        assert result.unrecognized[0].text.startswith("WHERE a.name")
        rel = result.relationships[0]
        assert rel.source.label == "Algorithm"
        assert rel.target.label == "MathematicalConcept"
        assert not rel.unbound_source and not rel.unbound_target

    def test_text_after_pattern(self):
        result = parse_statements('CREATE (a:Algorithm {name: "Adam"}) (b)')
        assert [e.node.name for e in result.entities] == ["Adam"]
        assert result.unrecognized[0].reason == "text outside a CREATE or MATCH clause"

    def test_unsupported_clause_then_recovery(self):
        text = 'MERGE (n:Paper {id: "Smith2020"})\nCREATE (c:Algorithm {name: "Adam"})'
        result = parse_statements(text)
        assert result.unrecognized[0].reason == "unsupported clause 'MERGE'"
        assert result.unrecognized[0].text.startswith("MERGE")
        assert [e.node.name for e in result.entities] == ["Adam"]

    def test_malformed_pattern_then_recovery(self):
        text = 'CREATE (c:Algorithm {name: "Adam"\nCREATE (d:Algorithm {name: "Sgd"})'
        result = parse_statements(text)
        assert len(result.unrecognized) == 1
        assert result.unrecognized[0].line == 1
        assert [e.node.name for e in result.entities] == ["Sgd"]

    def test_garbage_never_raises(self):
        result = parse_statements('}}} ((( "')
        assert all(isinstance(s, Unrecognized) for s in result.statements)
        assert result.statements

    def test_empty_and_comment_only(self):
        assert parse_statements("").statements == []
        assert parse_statements("// nothing here\n/* at all */").statements == []
