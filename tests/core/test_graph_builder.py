import unittest
from locktree.core.exceptions import AmbiguousDependency, LockTreeError, UnresolvedDependency
from locktree.core.graph import build_graph
from locktree.core.model import DependencyRef, Package, PackageRecord


def record(name, *deps, version="1.0.0"):
    return PackageRecord(
        Package(name, version),
        tuple(DependencyRef(dep, "1.0.0") for dep in deps),
    )


class TestGraphBuilder(unittest.TestCase):

    def test_one_node_per_record_in_input_order(self):
        graph = build_graph([record("app", "serde"), record("serde")])

        self.assertEqual(len(graph), 2)
        self.assertEqual(graph[0], Package("app", "1.0.0"))
        self.assertEqual(graph[1], Package("serde", "1.0.0"))
        self.assertEqual(graph.find("serde", "1.0.0"), 1)

    def test_edges_follow_dependency_order(self):
        graph = build_graph([
            record("app", "zlib", "anyhow", "log"),
            record("log"),
            record("anyhow"),
            record("zlib"),
        ])

        names = [graph[dep].name for dep in graph.dependencies(0)]
        self.assertEqual(names, ["zlib", "anyhow", "log"])

    def test_same_name_different_versions_are_distinct_nodes(self):
        graph = build_graph([
            PackageRecord(Package("app", "0.1.0"), (DependencyRef("rand", "0.7.3"), DependencyRef("rand", "0.8.5"))),
            PackageRecord(Package("rand", "0.8.5")),
            PackageRecord(Package("rand", "0.7.3")),
        ])

        self.assertEqual(graph.dependencies(0), [2, 1])

    def test_repeated_reference_adds_a_single_edge(self):
        graph = build_graph([record("app", "log", "log"), record("log")])

        self.assertEqual(graph.dependencies(0), [1])
        self.assertEqual(graph.edge_count, 1)

    def test_unresolved_dependency_aborts_the_build(self):
        with self.assertRaises(UnresolvedDependency) as ctx:
            build_graph([record("app", "missing")])

        self.assertEqual(ctx.exception.package, Package("app", "1.0.0"))
        self.assertEqual(ctx.exception.dependency, DependencyRef("missing", "1.0.0"))
        self.assertIn("missing 1.0.0", str(ctx.exception))

    def test_version_mismatch_is_unresolved(self):
        records = [
            PackageRecord(Package("app", "1.0.0"), (DependencyRef("log", "0.4.20"),)),
            PackageRecord(Package("log", "0.4.21")),
        ]

        with self.assertRaises(UnresolvedDependency):
            build_graph(records)

    def test_duplicate_package_is_ambiguous(self):
        with self.assertRaises(AmbiguousDependency) as ctx:
            build_graph([record("app", "log"), record("log"), record("log")])

        self.assertEqual(ctx.exception.name, "log")
        self.assertEqual(ctx.exception.version, "1.0.0")
        self.assertIsInstance(ctx.exception, LockTreeError)

    def test_cycles_are_accepted(self):
        graph = build_graph([record("a", "b"), record("b", "a")])

        self.assertEqual(graph.dependencies(0), [1])
        self.assertEqual(graph.dependencies(1), [0])

    def test_empty_input(self):
        graph = build_graph([])

        self.assertEqual(len(graph), 0)
        self.assertEqual(graph.roots(), [])


class TestRootSelection(unittest.TestCase):

    def test_roots_are_packages_nobody_depends_on(self):
        graph = build_graph([
            record("lib", "log"),
            record("cli", "lib"),
            record("log"),
            record("bench", "log"),
        ])

        roots = [graph[node_id].name for node_id in graph.roots()]
        self.assertEqual(roots, ["cli", "bench"])

    def test_roots_keep_input_order(self):
        graph = build_graph([record("zeta"), record("alpha"), record("mid")])

        self.assertEqual(graph.roots(), [0, 1, 2])

    def test_full_cycle_has_no_roots(self):
        graph = build_graph([record("a", "b"), record("b", "c"), record("c", "a")])

        self.assertEqual(graph.roots(), [])

    def test_self_dependency_does_not_hide_a_root(self):
        graph = build_graph([record("a", "a")])

        self.assertEqual(graph.roots(), [0])
