from setuptools import setup, find_packages
from version import version


with open("README.rst") as f:
    long_description = f.read()

setup(
    name="LazySeq",
    version=version,
    description="Lazy synchronous and asynchronous sequences with a pull-based operator engine",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    keywords=['lazy', 'iterator', 'asyncio', 'pipeline', 'stream'],
    license="Mozilla Public License 2.0 (MPL 2.0)",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: Implementation :: CPython",
        "Operating System :: OS Independent",
        "License :: OSI Approved :: Mozilla Public License 2.0 (MPL 2.0)",
        "Development Status :: 3 - Alpha",
        "Framework :: AsyncIO",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Intended Audience :: Developers"],
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        'tblib>=3.0'],
    extras_require={
        'documentation': [
            'sphinx'],
        'tests': [
            'pytest', 'pytest-asyncio', 'pytest-timeout', 'numpy', 'coverage']
    }
)
