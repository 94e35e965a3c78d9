from setuptools import setup, find_packages

setup(
    name="sankgrap",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        "requests",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "sankgrap = sankgrap.cli:main",
        ],
    },
    description="Concurrent subdomain extractor for HTTP response headers and bodies",
    license="MIT",
    keywords="subdomain enumeration recon security http",
)
