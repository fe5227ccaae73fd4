"""Setup configuration for docs-importer."""
from setuptools import setup, find_packages

setup(
    name="docs-importer",
    version="1.0.0",
    description="Import versioned release documentation into a docs site content tree",
    author="artqcid",
    url="https://github.com/artqcid/docs-importer",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "httpx>=0.27.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.0.0",
        "python-dotenv>=1.0.0",
        "PyYAML>=6.0",
        "click>=8.1.0",
    ],
    extras_require={
        "dev": ["pytest", "pytest-asyncio", "httpx"],
    },
    entry_points={
        "console_scripts": [
            "docs-import=docs_importer.cli:main",
        ],
    },
)
