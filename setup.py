from setuptools import find_packages, setup


setup(
    name="social-graph-analytics",
    version="0.1.0",
    description="Social interaction graph assembly, centrality, community and anomaly analytics",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0.0",
        "redis>=5.0.1",
        "prometheus-client>=0.17.0",
    ],
    extras_require={
        "test": ["pytest>=7.0.0"],
    },
    entry_points={
        "console_scripts": [
            "social-graph-analyze=graph_algorithms.main:main",
        ],
    },
)
