"""Tests for significance scoring, pattern rules and layer clustering."""

from __future__ import annotations

import pytest

from repograph.config import ScoringConfig
from repograph.graph.metrics import MetricsEngine, NodeMetrics
from repograph.graph.models import FileNode
from repograph.scoring.categories import (
    cluster_by_domain,
    domain_of,
    is_config_file,
    is_entry_point,
    is_schema_file,
    language_breakdown,
)
from repograph.scoring.layers import classify_layer, cluster_by_directory, cluster_by_layer
from repograph.scoring.rules import (
    PatternRule,
    keyword_matches,
    match_rules,
    name_tokens,
    tokenize,
)
from repograph.scoring.scorer import SignificanceScorer


class TestRules:
    def test_tokenize_camel_case(self):
        assert tokenize("userController") == ["user", "controller"]

    def test_tokenize_acronym(self):
        assert tokenize("HTTPServer") == ["http", "server"]

    def test_tokenize_dunder(self):
        assert tokenize("__tests__") == ["tests"]

    def test_name_tokens_drop_extension(self):
        assert name_tokens("user.schema.ts") == ["user", "schema"]
        assert name_tokens("Makefile") == ["makefile"]

    def test_plural_forms(self):
        assert keyword_matches("models", "model")
        assert keyword_matches("entity", "entities")
        assert not keyword_matches("modal", "model")

    def test_tie_goes_to_first_rule(self):
        rules = [
            PatternRule(category="first", keywords=["alpha"], score=10),
            PatternRule(category="second", keywords=["beta"], score=10),
        ]
        assert match_rules(["beta", "alpha"], rules).category == "first"

    def test_no_match(self):
        assert match_rules(["random"], [PatternRule(category="x", keywords=["y"], score=1)]) is None


class TestNameScore:
    @pytest.mark.parametrize(
        ("path", "score", "category"),
        [
            ("src/user.schema.ts", 30, "schema"),
            ("UserController.ts", 28, "service"),
            ("routes.ts", 25, "api"),
            ("store/cart.reducer.ts", 22, "state"),
            ("index.ts", 15, "index"),
            ("helpers.py", 10, "util"),
            ("user.test.ts", 5, "test"),
            ("user.model.test.ts", 30, "schema"),
            ("random.py", 0, ""),
        ],
    )
    def test_name_rules(self, path, score, category):
        assert SignificanceScorer().name_score(path) == (score, category)


class TestPathScore:
    @pytest.mark.parametrize(
        ("path", "score"),
        [
            ("src/models/user.ts", 25),
            ("src/core/engine.ts", 23),
            ("src/api/v1/users.ts", 20),
            ("src/components/Button.tsx", 18),
            ("packages/shared/index.ts", 15),
            ("src/__tests__/app.ts", 5),
            ("tests/models/user.py", 25),
            ("main.py", 0),
        ],
    )
    def test_path_rules(self, path, score):
        assert SignificanceScorer().path_score(path)[0] == score


class TestStructureScore:
    def test_one_interface(self):
        node = FileNode(path="x.ts", interface_count=1)
        assert SignificanceScorer().structure_score(node) == 3

    def test_sub_caps(self):
        scorer = SignificanceScorer()
        assert scorer.structure_score(FileNode(path="x.ts", class_count=10)) == 15
        assert scorer.structure_score(FileNode(path="x.ts", interface_count=10)) == 12
        assert scorer.structure_score(FileNode(path="x.ts", function_count=10)) == 10

    def test_total_cap(self):
        node = FileNode(path="x.ts", class_count=9, interface_count=9, function_count=9)
        assert SignificanceScorer().structure_score(node) == 25

    def test_mixed(self):
        node = FileNode(path="x.ts", class_count=1, function_count=2)
        assert SignificanceScorer().structure_score(node) == 9


class TestConnectivityScore:
    def test_full(self):
        metrics = NodeMetrics(path="x", normalized_in_degree=1.0, normalized_importance=1.0)
        assert SignificanceScorer().connectivity_score(metrics) == 20

    def test_partial(self):
        metrics = NodeMetrics(path="x", normalized_in_degree=0.5, normalized_importance=0.0)
        assert SignificanceScorer().connectivity_score(metrics) == 5

    def test_missing_metrics(self):
        assert SignificanceScorer().connectivity_score(None) == 0


class TestSignificanceScorer:
    def test_schema_beats_index(self):
        scorer = SignificanceScorer()
        schema = scorer.score_file(FileNode(path="src/models/user.schema.ts", interface_count=1))
        index = scorer.score_file(FileNode(path="src/models/index.ts"))

        assert schema.name_score == 30
        assert schema.path_score == 25
        assert schema.structure_score > 0
        assert schema.total > index.total

    def test_total_is_capped(self):
        config = ScoringConfig(total_cap=50)
        score = SignificanceScorer(config).score_file(
            FileNode(path="src/models/user.schema.ts", class_count=3)
        )
        assert score.total == 50

    def test_ranks_are_unique_and_ordered(self, sample_graph):
        report = MetricsEngine().compute(sample_graph)
        scores = SignificanceScorer().score(sample_graph, report)

        assert [s.rank for s in scores] == list(range(1, len(scores) + 1))
        totals = [s.total for s in scores]
        assert totals == sorted(totals, reverse=True)

    def test_ties_broken_by_path(self):
        ranked = SignificanceScorer.rank(
            [
                SignificanceScorer().score_file(FileNode(path="b.py")),
                SignificanceScorer().score_file(FileNode(path="a.py")),
            ]
        )
        assert [s.path for s in ranked] == ["a.py", "b.py"]
        assert [s.rank for s in ranked] == [1, 2]

    def test_test_file_ranks_last(self, sample_graph):
        report = MetricsEngine().compute(sample_graph)
        scores = SignificanceScorer().score(sample_graph, report)

        assert scores[-1].path == "tests/user.test.ts"
        assert scores[-1].total < scores[0].total


class TestLayers:
    @pytest.mark.parametrize(
        ("path", "layer"),
        [
            ("components/Button.tsx", "presentation"),
            ("src/routes/users.ts", "presentation"),
            ("services/api.service.ts", "business"),
            ("src/controllers/userController.ts", "business"),
            ("models/user.model.ts", "data"),
            ("user.model.ts", "data"),
            ("utils/format.util.ts", "infrastructure"),
            ("src/middleware/auth.ts", "infrastructure"),
            ("README.md", "other"),
        ],
    )
    def test_classify_layer(self, path, layer):
        assert classify_layer(path) == layer

    def test_cluster_by_layer_has_every_layer(self):
        clusters = cluster_by_layer(["models/b.ts", "models/a.ts"])

        assert set(clusters) == {"presentation", "business", "data", "infrastructure", "other"}
        assert clusters["data"] == ["models/a.ts", "models/b.ts"]

    def test_cluster_by_directory(self):
        clusters = cluster_by_directory(["src/b.ts", "lib/c.ts", "src/a.ts", "main.ts"])

        assert clusters == {
            ".": ["main.ts"],
            "lib": ["lib/c.ts"],
            "src": ["src/a.ts", "src/b.ts"],
        }


class TestCategories:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("src/index.ts", True),
            ("server.js", True),
            ("pkg/__main__.py", True),
            ("manage.py", True),
            ("src/user.ts", False),
            ("src/mainframe.ts", False),
        ],
    )
    def test_is_entry_point(self, path, expected):
        assert is_entry_point(path) is expected

    def test_is_schema_file(self):
        rules = ScoringConfig().name_rules

        assert is_schema_file("src/user.schema.ts", rules)
        assert is_schema_file("models/UserEntity.java", rules)
        assert not is_schema_file("src/user.service.ts", rules)

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("Dockerfile", True),
            ("pyproject.toml", True),
            (".babelrc", True),
            ("jest.config.js", True),
            ("app/settings.py", True),
            (".gitignore", False),
            ("src/configService.ts", False),
        ],
    )
    def test_is_config_file(self, path, expected):
        assert is_config_file(path, ScoringConfig().name_rules) is expected

    @pytest.mark.parametrize(
        "path, domain",
        [
            ("src/billing/invoice.ts", "billing"),
            ("packages/auth/src/token.ts", "auth"),
            ("src/services/payment.ts", None),
            ("tests/api/user.test.ts", None),
            ("index.ts", None),
        ],
    )
    def test_domain_of(self, path, domain):
        assert domain_of(path) == domain

    def test_cluster_by_domain(self):
        clusters = cluster_by_domain(["src/b/x.ts", "src/a/y.ts", "src/a/x.ts", "src/utils/z.ts"])
        assert clusters == {"a": ["src/a/x.ts", "src/a/y.ts"], "b": ["src/b/x.ts"]}

    def test_language_breakdown_prefers_node_language(self):
        nodes = [
            FileNode(path="a.py", language="python3"),
            FileNode(path="b.py"),
            FileNode(path="C.PY"),
            FileNode(path="c.rs"),
        ]
        stats = language_breakdown(nodes)

        assert [(s.extension, s.language, s.file_count) for s in stats] == [
            (".py", "python3", 3),
            (".rs", "rust", 1),
        ]
