"""Tests for ESLint config generation.

Covers:
- None when ESLint is disabled
- Base config and key order
- TypeScript plugin, preset and rules
- Testing Library plugin and test-file override
- Storybook preset
- prettier always last in extends
- Empty plugins / rules / overrides left out
"""

from __future__ import annotations

import json

import pytest

from nextra.scaffolder.eslint_gen import TEST_FILE_GLOBS, make_eslintrc


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestDisabled:
    def test_returns_none(self):
        assert make_eslintrc(eslint=False, prettier=True, typescript=True) is None


class TestBase:
    def test_minimal_config(self):
        assert make_eslintrc(eslint=True) == {
            "root": True,
            "extends": ["next/core-web-vitals"],
        }

    def test_no_empty_keys(self):
        config = make_eslintrc(eslint=True, storybook=True)
        assert "plugins" not in config
        assert "rules" not in config
        assert "overrides" not in config

    def test_serialises_to_json(self):
        config = make_eslintrc(
            eslint=True, react_testing_library=True, prettier=True, storybook=True, typescript=True
        )
        assert json.loads(json.dumps(config)) == config


class TestTypeScript:
    def test_plugin_extends_and_rules(self):
        config = make_eslintrc(eslint=True, typescript=True)
        assert config["plugins"] == ["@typescript-eslint"]
        assert config["extends"] == [
            "next/core-web-vitals",
            "plugin:@typescript-eslint/recommended",
        ]
        assert config["rules"] == {
            "@typescript-eslint/no-unused-vars": "error",
            "@typescript-eslint/no-explicit-any": "error",
        }


class TestReactTestingLibrary:
    def test_plugin_and_override(self):
        config = make_eslintrc(eslint=True, react_testing_library=True)
        assert config["plugins"] == ["testing-library"]
        assert config["overrides"] == [
            {
                "files": list(TEST_FILE_GLOBS),
                "extends": ["plugin:testing-library/react"],
            }
        ]
        assert "**/__tests__/**/*.[jt]s?(x)" in config["overrides"][0]["files"]

    def test_plugin_order_with_typescript(self):
        config = make_eslintrc(eslint=True, react_testing_library=True, typescript=True)
        assert config["plugins"] == ["@typescript-eslint", "testing-library"]


class TestExtendsOrder:
    def test_prettier_last_with_storybook(self):
        config = make_eslintrc(eslint=True, prettier=True, storybook=True)
        assert config["extends"][-1] == "prettier"
        assert config["extends"] == [
            "next/core-web-vitals",
            "plugin:storybook/recommended",
            "prettier",
        ]

    def test_everything_enabled(self):
        config = make_eslintrc(
            eslint=True, react_testing_library=True, prettier=True, storybook=True, typescript=True
        )
        assert list(config) == ["root", "plugins", "extends", "rules", "overrides"]
        assert config["extends"] == [
            "next/core-web-vitals",
            "plugin:@typescript-eslint/recommended",
            "plugin:storybook/recommended",
            "prettier",
        ]
