from setuptools import setup, find_packages

setup(
    name="az_doc_scraper",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "aiohttp>=3.8.0",
        "beautifulsoup4>=4.9.0",
        "python-dotenv>=0.19.0"
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0"
        ]
    },
    entry_points={
        "console_scripts": [
            "az-doc-scraper=az_doc_scraper.cli:main",
        ],
    },
    python_requires=">=3.8",
)
