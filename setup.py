from setuptools import setup, find_packages
import re

# Extract version from __init__.py
with open('td_cmd/__init__.py', 'r') as f:
    version_match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]", f.read(), re.M)
    version = version_match.group(1) if version_match else '0.1.0'

setup(
    name="td-cmd",
    version=version,
    packages=find_packages(exclude=["test", "test.*"]),
    install_requires=[
        "requests>=2.27.1",
        "click>=8.0.3",
        "rich>=12.0.0",
    ],
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'flake8>=4.0.0',
            'black>=22.0.0',
        ],
    },
    entry_points={
        "console_scripts": [
            "td-cmd=td_cmd.cli:main",
        ],
    },
    description="A client library and command line tool for the Treasure Data REST API",
    keywords="treasure-data, hive, cli, rest-api",
    python_requires=">=3.7",
)
