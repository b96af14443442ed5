"""Setup file for behavepro package."""

from setuptools import setup, find_packages

setup(
    name="behavepro",
    version="0.1.0",
    description="Download Cucumber feature files of JIRA projects from Behave Pro",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        "requests",
        "python-dotenv"
    ],
    extras_require={
        "dev": [
            "pytest",
            "responses",
            "black",
            "flake8",
            "mypy"
        ]
    },
    entry_points={
        "console_scripts": [
            "behavepro=behavepro.main:main"
        ]
    }
)
