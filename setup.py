from setuptools import find_packages, setup

setup(
    name="querybot",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "python-dotenv>=1.0",
        "structlog>=23.1",
        "python-a2s>=1.3",
        "irc>=20.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "querybot=querybot.core.cli:main",
        ],
    },
    description="Chat command router that answers Steam game server status queries.",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
)
