# setup.py
from setuptools import find_namespace_packages, setup

setup(
    name="memoguard",
    version="1.0.0",
    description="Static checker for reference-stable props and hook dependency lists in Python UI components",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["memoguard", "memoguard.*"]),
    package_data={"memoguard": ["py.typed"]},
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'memoguard=memoguard.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
