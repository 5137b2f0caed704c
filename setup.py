import os.path

from setuptools import setup

setup_dir = os.path.split(os.path.abspath(__file__))[0]
DOCUMENTATION = open(os.path.join(setup_dir, "README.rst")).read()

version_path = os.path.join(setup_dir, "fylki", "version.py")
globals_dict: dict = {}
with open(version_path) as f:
    exec(f.read(), globals_dict)
VERSION = ".".join([str(x) for x in globals_dict["VERSION"]])

dependencies = ["mako>=1.2", "numpy>=1.24"]

setup(
    name="fylki",
    packages=["fylki", "fylki.linalg", "fylki.parallel", "fylki.providers"],
    provides=["fylki"],
    install_requires=dependencies,
    extras_require={
        "test": ["pytest>=7"],
    },
    package_data={"fylki.linalg": ["*.mako"]},
    python_requires=">=3.10",
    version=VERSION,
    description="Column-major dense matrices with parallel kernels and pluggable numeric backends",
    long_description=DOCUMENTATION,
    long_description_content_type="text/x-rst",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
)
