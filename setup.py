from setuptools import setup, find_packages

setup(
    name="subsplice",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        "requests",
        "urllib3",
        "dnspython",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "subsplice = subsplice.cli:main",
        ],
    },
    description="Subdomain splicer: wordlist insertion between domain labels with DNS + HTTP(S) verification",
    license="MIT",
    keywords="subdomain enumeration recon security",
)
