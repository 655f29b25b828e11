import setuptools

setuptools.setup(
    name="duskbench",
    version="0.1.0",
    description="Browser tests for PHP applications from pytest: a PHP built-in server plus pooled WebDriver sessions.",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    package_data={"duskbench": ["server/server.php"]},
    python_requires=">=3.10",
    install_requires=[
        "pytest>=8.0",
        "selenium>=4.10",
        "urllib3",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-timeout>=2.3",
        ],
    },
    entry_points={
        "pytest11": ["duskbench.pytest_plugin = duskbench.pytest_plugin"],
    },
)
