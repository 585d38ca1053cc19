"""Setup file for the package."""

from setuptools import setup, find_packages

setup(
    name="adlib-scraper",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "playwright>=1.40.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        'test': [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'adlib-scraper=adlib_scraper.main:main',
        ],
    },
    description="Browser-driven ads library scraper that rebuilds ads from network payloads",
    python_requires='>=3.8',
)
