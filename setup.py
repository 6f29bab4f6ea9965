from setuptools import setup, find_packages

setup(
    name="cs-cohort",
    version="1.0.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "pandas>=2.1.0",
        "numpy>=1.26.0",
        "sqlalchemy>=2.0.19",
        "psycopg2-binary>=2.9.6",
        "python-dotenv>=1.0.0",
        "pytest>=8.0.0",
    ],
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "cs-cohort=cs_cohort.scripts.run_cohort:main",
            "cs-cohort-consort=cs_cohort.scripts.consort_report:main",
            "cs-cohort-check-db=cs_cohort.scripts.check_db:main",
        ],
    },
)
