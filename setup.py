# setup.py
from setuptools import setup, find_packages

setup(
    name="quasi",
    version="0.1.0",
    description="Quotation and quasiquotation engine: capture, unquote, splice and tidy evaluation of expression trees",
    packages=find_packages(include=["quasi", "quasi.*"]),
    python_requires=">=3.10",
    install_requires=[],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    zip_safe=False,
)
