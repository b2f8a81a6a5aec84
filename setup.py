from setuptools import find_packages, setup

setup(
    name="akeyless_pipeline",
    packages=find_packages(exclude=["akeyless_pipeline_tests"]),
    install_requires=[
        "dagster",
        "dagster-cloud",
        "pydantic>=2",
        "python-dotenv",
        "requests",
        "urllib3",
    ],
    extras_require={"dev": ["dagster-webserver", "pytest"]},
)
