"""
Tests for the rule pattern compiler.
"""
import unittest

from morphgen.automaton import (
    DisjunctiveNode,
    FinalNode,
    LiteralNode,
    OptionalDisjunctiveNode,
    VariableNode,
)
from morphgen.compiler import TemplateToken, compile_pattern, compile_template, compile_templates
from morphgen.diagnostics import DiagnosticSink

RYKA_GROUPS = {
    "#C": ["kh", "th", "ph", "sh", "h", "k", "t", "p", "r", "q", "g", "d", "b", "l"],
    "#V": ["a", "e", "o", "u", "y", "n"],
    "#sep": ["|", "&", "<", ">", "<>"],
}


def chain(node):
    """The nodes of a chain, FinalNode excluded."""
    nodes = []
    while not isinstance(node, FinalNode):
        nodes.append(node)
        node = node.next_node
    return nodes


class TestCompilePattern(unittest.TestCase):

    def test_literals_and_positional_variables(self):
        start, declared = compile_pattern("[*]a[*]", {})
        nodes = chain(start)

        self.assertEqual([type(n) for n in nodes], [VariableNode, LiteralNode, VariableNode])
        self.assertEqual(nodes[0].var_name, "1")
        self.assertEqual(nodes[1].char, "a")
        self.assertEqual(nodes[2].var_name, "2")
        self.assertEqual(declared, {"1", "2"})

    def test_named_variables_keep_their_names(self):
        start, declared = compile_pattern("[C1]a[C2]a", {})

        self.assertEqual([n.var_name for n in chain(start) if isinstance(n, VariableNode)], ["C1", "C2"])
        self.assertEqual(declared, {"C1", "C2"})

    def test_groups_take_positional_labels(self):
        start, declared = compile_pattern("[stem][#C][#V][#C]<>PC", RYKA_GROUPS)
        nodes = chain(start)

        self.assertIsInstance(nodes[0], VariableNode)
        self.assertEqual(nodes[0].var_name, "stem")
        self.assertEqual([n.var_name for n in nodes[1:4]], ["1", "2", "3"])
        self.assertEqual(nodes[1].alternatives, tuple(RYKA_GROUPS["#C"]))
        self.assertEqual(nodes[2].alternatives, tuple(RYKA_GROUPS["#V"]))
        self.assertEqual("".join(n.char for n in nodes[4:]), "<>PC")
        self.assertEqual(declared, {"stem", "1", "2", "3"})

    def test_star_and_alternatives_share_one_counter(self):
        _, declared = compile_pattern("[*][!l r]|GEN", {})

        self.assertEqual(declared, {"1", "2"})

    def test_inline_alternatives(self):
        start, _ = compile_pattern("[!l r]", {})
        node = chain(start)[0]

        self.assertIsInstance(node, DisjunctiveNode)
        self.assertEqual(node.alternatives, ("l", "r"))

    def test_bare_alternatives_without_prefix(self):
        start, _ = compile_pattern("[l r]", {})
        node = chain(start)[0]

        self.assertIsInstance(node, DisjunctiveNode)
        self.assertEqual(node.alternatives, ("l", "r"))

    def test_optional_group(self):
        start, _ = compile_pattern("[?#sep]", RYKA_GROUPS)
        node = chain(start)[0]

        self.assertIsInstance(node, OptionalDisjunctiveNode)
        self.assertEqual(node.alternatives, ("|", "&", "<", ">", "<>"))
        self.assertEqual(node.var_name, "1")

    def test_optional_inline_alternatives(self):
        start, _ = compile_pattern("[?a e]", {})
        node = chain(start)[0]

        self.assertIsInstance(node, OptionalDisjunctiveNode)
        self.assertEqual(node.alternatives, ("a", "e"))

    def test_unknown_group_is_reported(self):
        sink = DiagnosticSink()
        start, _ = compile_pattern("[*][#X]", {}, name="r1", sink=sink)

        self.assertEqual(sink.kinds(), ["MalformedRuleSyntax"])
        self.assertEqual(sink.diagnostics[0].source, "r1")
        self.assertEqual(chain(start)[1].alternatives, ())

    def test_unclosed_bracket_becomes_literal(self):
        sink = DiagnosticSink()
        start, declared = compile_pattern("ab[cd", {}, sink=sink)

        self.assertEqual(sink.kinds(), ["MalformedRuleSyntax"])
        self.assertEqual("".join(n.char for n in chain(start)), "ab[cd")
        self.assertEqual(declared, set())

    def test_empty_brackets_are_reported(self):
        sink = DiagnosticSink()
        start, _ = compile_pattern("a[]", {}, sink=sink)

        self.assertEqual(sink.kinds(), ["MalformedRuleSyntax"])
        self.assertEqual("".join(n.char for n in chain(start)), "a[]")


class TestCompileTemplate(unittest.TestCase):

    def test_literal_runs_and_references(self):
        self.assertEqual(compile_template("[1];n|;na.l[§end]"), (
            TemplateToken("1", True),
            TemplateToken(";n|;na.l"),
            TemplateToken("§end", True),
        ))

    def test_infix_template(self):
        tokens = compile_template("[stem][1][2]<[1][2]>[3]")

        self.assertEqual([t.text for t in tokens], ["stem", "1", "2", "<", "1", "2", ">", "3"])
        self.assertEqual([t.is_variable for t in tokens], [True, True, True, False, True, True, False, True])

    def test_empty_template(self):
        self.assertEqual(compile_template(""), ())

    def test_stray_bracket_is_literal(self):
        self.assertEqual(compile_template("a[b"), (TemplateToken("a"), TemplateToken("["), TemplateToken("b")))

    def test_unbound_reference_is_reported(self):
        sink = DiagnosticSink()
        compile_templates(["[1]x", "[nope]"], {"1"}, name="r2", sink=sink)

        self.assertEqual(sink.kinds(), ["UnboundVariableReference"])
        self.assertIn("nope", sink.diagnostics[0].message)


if __name__ == '__main__':
    unittest.main()
