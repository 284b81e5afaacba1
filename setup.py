"""Setup configuration for squad_analytics"""

from setuptools import setup, find_packages

setup(
    name="squad-analytics",
    version="0.1.0",
    description=(
        "Temporal analytics for squad dashboards: velocity timeline, activity "
        "heatmap, task swimlanes and milestone burndown."
    ),
    author="Squad Analytics Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "squad-analytics=squad_analytics.main:main",
        ],
    },
)
