from setuptools import setup, find_packages

setup(
    name="social-network",
    version="0.1.0",
    description="Player relationship groups (friends, children) for multiplayer game servers",
    author="Social Network Developer",
    python_requires=">=3.11",
    packages=find_packages(include=["social_network", "social_network.*"]),
    install_requires=[
        "aiofiles>=23.2.0",
        "orjson>=3.9.0",
        "pydantic>=2.5.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
        ]
    },
)
