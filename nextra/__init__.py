"""Nextra -- scaffold a Next.js project with a curated tooling baseline.

Quick usage::

    from nextra.options import Options, PackageManagerKind
    from nextra.derive import derive_config

    options = Options(package_manager=PackageManagerKind.YARN, prettier=True)
    config = derive_config(options)
"""

__version__ = "1.0.0"
