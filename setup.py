"""Setup configuration for Runnel."""

from setuptools import setup, find_packages

setup(
    name="runnel-chat",
    version="0.1.0",
    description="Streaming chat client that renders code blocks while they are written",
    packages=find_packages(include=["runnel", "runnel.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Environment :: Console",
    ],
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0",
        "rich>=13.0",
        "pyyaml>=6.0",
        "httpx>=0.24.0",
        "pygments>=2.14.0",
        "textual>=0.47.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "runnel=runnel.cli:cli",
        ],
    },
)
