# setup.py
from setuptools import setup, find_packages

setup(
    name="address_scout",
    version="0.1.0",
    description="Async scraper of blockchain addresses from web pages and their scripts",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"address_scout": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "jinja2>=3.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "tldextract>=5.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "address-scout=address_scout.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
