from setuptools import find_packages, setup

about: dict[str, str] = {}
with open("src/silasign/__about__.py") as f:
    exec(f.read(), about)

if __name__ == "__main__":
    setup(
        name="silasign",
        version=about["__version__"],
        description="Dual-signature request authentication for the Sila gateway",
        packages=find_packages(where="src"),
        package_dir={"": "src"},
        python_requires=">=3.10",
        install_requires=[
            "httpx>=0.27",
            "pydantic>=2.5",
        ],
        extras_require={
            "test": [
                "pytest>=8",
                "pytest-httpx>=0.30",
            ],
        },
    )
