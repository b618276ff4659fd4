"""Tests for pattern typo suggestions."""

from __future__ import annotations

from focusscope.scope.suggest import format_suggestion, suggest_patterns, top_level_directories

TRACKED = [
    "src/main.go",
    "src/api/handler.go",
    "srv/server.go",
    "lib/util.go",
    "docs/guide.md",
    "README.md",
]


def test_suggests_near_miss_directory() -> None:
    suggestions = suggest_patterns("srce/**", ["src/main.go", "src/api/handler.go", "docs/a.md"])

    assert suggestions == ["src/**"]
    assert format_suggestion(suggestions[0]) == "Did you mean: 'src/**'"


def test_suggestions_are_ranked_by_distance() -> None:
    suggestions = suggest_patterns("srcx/**", TRACKED)

    # src is one edit away, srv two.
    assert suggestions[0] == "src/**"
    assert "srv/**" in suggestions


def test_never_suggests_exact_directory() -> None:
    assert "src/**" not in suggest_patterns("src/**", TRACKED)


def test_returns_at_most_three_suggestions() -> None:
    tracked = [f"{name}/file.txt" for name in ("aa", "ab", "ac", "ad", "ae")]

    suggestions = suggest_patterns("a/**", tracked)

    assert len(suggestions) == 3
    assert suggestions == ["aa/**", "ab/**", "ac/**"]


def test_far_directories_and_root_files_are_ignored() -> None:
    assert suggest_patterns("frontend/**", TRACKED) == []
    assert "README.md" not in top_level_directories(TRACKED)


def test_glob_tokens_produce_no_suggestions() -> None:
    assert suggest_patterns("**/*.go", TRACKED) == []
    assert suggest_patterns("s*c/**", TRACKED) == []
