"""Interactive questions that build an ``Options`` instance.

Every question goes through ``questionary``; a ``None`` answer means the
user aborted (Ctrl-C / Escape) and is surfaced as ``KeyboardInterrupt`` so
the CLI can exit with status 1.
"""

from __future__ import annotations

from typing import Any

import questionary

from .options import OptionalDependency, Options, PackageManagerKind

# ---------------------------------------------------------------------------
# Catalogues
# ---------------------------------------------------------------------------

OPTIONAL_DEPENDENCY_CATALOGUE: tuple[OptionalDependency, ...] = (
    OptionalDependency(
        module="classnames",
        github="https://github.com/JedWatson/classnames",
        description="Conditionally joining classNames together",
    ),
    OptionalDependency(
        module="jotai",
        github="https://github.com/pmndrs/jotai",
        description="Primitive and flexible state management for React",
    ),
    OptionalDependency(
        module="zustand",
        github="https://github.com/pmndrs/zustand",
        description="Bear necessities for state management in React",
    ),
    OptionalDependency(
        module="formik",
        github="https://github.com/jaredpalmer/formik",
        description="Build forms in React, without the tears",
    ),
    OptionalDependency(
        module="@reduxjs/toolkit",
        github="https://github.com/reduxjs/redux-toolkit",
        description="The official, opinionated toolset for efficient Redux development",
    ),
    OptionalDependency(
        module="react-redux",
        github="https://github.com/reduxjs/react-redux",
        description="Official React bindings for Redux",
    ),
    OptionalDependency(
        module="@apollo/client",
        github="https://github.com/apollographql/apollo-client",
        description="A fully-featured caching GraphQL client",
    ),
    OptionalDependency(
        module="graphql",
        github="https://github.com/graphql/graphql-js",
        description="A reference implementation of GraphQL for JavaScript",
    ),
    OptionalDependency(
        module="swr",
        github="https://github.com/vercel/swr",
        description="React Hooks for data fetching",
    ),
    OptionalDependency(
        module="@tanstack/react-query",
        github="https://github.com/TanStack/query",
        description="Powerful asynchronous state management for React",
    ),
    OptionalDependency(
        module="@tanstack/react-query-devtools",
        save_dev=True,
        github="https://github.com/TanStack/query",
        description="Devtools for React Query",
    ),
    OptionalDependency(
        module="yup",
        github="https://github.com/jquense/yup",
        description="Dead simple object schema validation",
    ),
    OptionalDependency(
        module="mobx",
        github="https://github.com/mobxjs/mobx",
        description="Simple, scalable state management",
    ),
    OptionalDependency(
        module="mobx-react",
        github="https://github.com/mobxjs/mobx",
        description="React bindings for MobX",
    ),
    OptionalDependency(
        module="react-spring",
        github="https://github.com/pmndrs/react-spring",
        description="Spring-physics based animation library",
    ),
    OptionalDependency(
        module="styled-components",
        github="https://github.com/styled-components/styled-components",
        description="Visual primitives for the component age",
    ),
    OptionalDependency(
        module="react-hook-form",
        github="https://github.com/react-hook-form/react-hook-form",
        description="Performant, flexible and extensible forms with easy-to-use validation",
    ),
    OptionalDependency(
        module="react-i18next",
        github="https://github.com/i18next/react-i18next",
        description="Internationalization for React done right",
    ),
    OptionalDependency(
        module="@emotion/css",
        github="https://github.com/emotion-js/emotion",
        description="CSS-in-JS library designed for high performance style composition",
    ),
    OptionalDependency(
        module="@stripe/react-stripe-js",
        github="https://github.com/stripe/react-stripe-js",
        description="React components for Stripe.js and Elements",
    ),
    OptionalDependency(
        module="react-virtualized",
        github="https://github.com/bvaughn/react-virtualized",
        description="React components for efficiently rendering large lists and tabular data",
    ),
    OptionalDependency(
        module="@mui/material",
        github="https://github.com/mui/material-ui",
        description="React components implementing Material Design",
    ),
    OptionalDependency(
        module="@mui/icons-material",
        github="https://github.com/mui/material-ui",
        description="Material Design icons as React components",
    ),
    OptionalDependency(
        module="next-auth",
        github="https://github.com/nextauthjs/next-auth",
        description="Authentication for Next.js",
    ),
    OptionalDependency(
        module="react-toastify",
        github="https://github.com/fkhadra/react-toastify",
        description="React notifications made easy",
    ),
    OptionalDependency(
        module="@svgr/core",
        github="https://github.com/gregberge/svgr",
        description="Transform SVGs into React components",
    ),
    OptionalDependency(
        module="recharts",
        github="https://github.com/recharts/recharts",
        description="Redefined chart library built with React and D3",
    ),
)

ENV_FILE_CHOICES: tuple[str, ...] = (
    ".env",
    ".env.local",
    ".env.development",
    ".env.production",
    ".env.test",
)

DEFAULT_ENV_FILES: tuple[str, ...] = (".env", ".env.local")

# (option field, question, default)
FEATURE_QUESTIONS: tuple[tuple[str, str, bool], ...] = (
    ("eslint", "Would you like to configure ESLint? (recommended)", True),
    ("prettier", "Would you like to install and configure Prettier? (recommended)", True),
    ("storybook", "Would you like to install and configure Storybook? (recommended)", True),
    ("docker", "Would you like to add Docker configuration? (recommended)", True),
    ("jest", "Would you like to install and configure Jest and React Testing Library? (recommended)", True),
    ("cypress", "Would you like to install and configure Cypress? (recommended)", True),
    ("husky", "Would you like to install and configure Git and Husky? (recommended)", True),
    ("lint_staged", "Would you like to install and configure Lint Staged? (recommended)", True),
    ("image_optimisation", "Will you be using Next's image optimisation?", False),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _ask(question: Any) -> Any:
    answer = question.ask()
    if answer is None:
        raise KeyboardInterrupt
    return answer


def _feature_flags(answers: dict[str, bool]) -> dict[str, bool]:
    flags = dict(answers)
    # Jest and React Testing Library are offered as one choice.
    flags["react_testing_library"] = flags.get("jest", False)
    return flags


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------


def prompt_package_manager(default: PackageManagerKind = PackageManagerKind.NPM) -> PackageManagerKind:
    """Ask which package manager the project should use."""
    choice = _ask(
        questionary.select(
            "Pick a package manager",
            choices=[
                questionary.Choice(kind.value.capitalize(), value=kind.value) for kind in PackageManagerKind
            ],
            default=default.value,
        )
    )
    return PackageManagerKind(choice)


def prompt_features() -> dict[str, bool]:
    """Ask one yes/no question per feature."""
    answers = {
        field: bool(_ask(questionary.confirm(message, default=default)))
        for field, message, default in FEATURE_QUESTIONS
    }
    return _feature_flags(answers)


def prompt_optional_dependencies() -> tuple[OptionalDependency, ...]:
    """Offer the catalogue of popular packages; order follows the catalogue."""
    selected = _ask(
        questionary.checkbox(
            "Install some popular packages?",
            choices=[questionary.Choice(dep.module, value=dep.module) for dep in OPTIONAL_DEPENDENCY_CATALOGUE],
        )
    )
    return tuple(dep for dep in OPTIONAL_DEPENDENCY_CATALOGUE if dep.module in selected)


def prompt_env_files() -> tuple[str, ...]:
    selected = _ask(
        questionary.checkbox(
            "Which env files should be created?",
            choices=[
                questionary.Choice(name, value=name, checked=name in DEFAULT_ENV_FILES)
                for name in ENV_FILE_CHOICES
            ],
        )
    )
    return tuple(selected)


def default_options(package_manager: PackageManagerKind = PackageManagerKind.NPM) -> Options:
    """Options used when every question is answered with its default."""
    flags = _feature_flags({field: default for field, _, default in FEATURE_QUESTIONS})
    return Options(
        package_manager=package_manager,
        dot_env_files=DEFAULT_ENV_FILES,
        **flags,
    )


def ask_options(package_manager: PackageManagerKind | None = None) -> Options:
    """Run the full questionnaire.

    Args:
        package_manager: Pre-selected package manager; skips that question.

    Raises:
        KeyboardInterrupt: If the user aborts any question.
    """
    kind = package_manager or prompt_package_manager()
    flags = prompt_features()
    optional_dependencies = prompt_optional_dependencies()
    dot_env_files = prompt_env_files()
    return Options(
        package_manager=kind,
        optional_dependencies=optional_dependencies,
        dot_env_files=dot_env_files,
        **flags,
    )
