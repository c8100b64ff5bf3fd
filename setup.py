# setup.py
from setuptools import setup, find_packages

setup(
    name="pocketledger",
    version="0.1.0",
    description="A personal income and expense tracker with monthly balances and recurring projections",
    author="Your Name",
    author_email="you@example.com",
    url="https://github.com/yourusername/pocketledger",
    packages=find_packages(include=["ledger_tracker", "ledger_tracker.*"]),
    python_requires=">=3.10",
    install_requires=[
        "click>=7.0",
        "pyyaml>=5.3",
        "pandas>=1.1",
        "python-dotenv>=0.19",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "pocketledger=ledger_tracker.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
