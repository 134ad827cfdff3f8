from setuptools import setup, find_packages

setup(
    name="httpopts",
    version="0.1.0",
    description="Command line settings and listening socket resolution for an HTTP server front",
    packages=find_packages(exclude=["test", "test.*"]),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0",
        "pydantic>=2.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "httpopts=httpopts.cli:cli",
            "httpopts-daemon=httpopts.daemon_cli:main",
        ],
    },
)
