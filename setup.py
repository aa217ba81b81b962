# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="treemirror",
    version="0.1.0",
    description="One-way directory tree mirroring with dry-run support",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["treemirror", "treemirror.*"]),
    python_requires=">=3.9",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'treemirror=treemirror.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
