from setuptools import setup, find_packages

setup(
    name="forum-search",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn[standard]",
        "pydantic>=2.0.0",
        "slowapi",
        "elasticsearch[async]>=8.0.0,<9",
        "motor>=3.3.0",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "httpx",
        ],
    },
)
