"""Nextra scaffolder -- generated config files, template assets and README.

Quick usage::

    from nextra.scaffolder import make_eslintrc, make_lint_staged_config

    eslintrc = make_eslintrc(eslint=True, prettier=True, typescript=True)
    rules = make_lint_staged_config(eslint=True, prettier=True)
"""

from nextra.scaffolder.eslint_gen import make_eslintrc
from nextra.scaffolder.husky_gen import make_husky_pre_commit
from nextra.scaffolder.lint_staged_gen import make_lint_staged_config
from nextra.scaffolder.prettier_gen import make_prettierignore, make_prettierrc
from nextra.scaffolder.readme import ReadmeBuilder
from nextra.scaffolder.templates import TemplateRenderer

__all__ = [
    "ReadmeBuilder",
    "TemplateRenderer",
    "make_eslintrc",
    "make_husky_pre_commit",
    "make_lint_staged_config",
    "make_prettierignore",
    "make_prettierrc",
]
