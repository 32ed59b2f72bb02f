import os
import sys
from setuptools import setup, find_packages

if sys.version_info[:2] < (3, 8):
    error = (
        "Mldecomp requires Python 3.8 or later (%d.%d detected). \n"
    )
    sys.stderr.write(error % sys.version_info[:2] + "\n")
    sys.exit(1)


name = "mldecomp"
description = "Multilinear (HOSVD) and CP decompositions of named-index arrays"
authors = {
    "Mldecomp": ("Mldecomp Developers", None),
}

maintainer = "Mldecomp Developers"
maintainer_email = None
url = None
platforms = ["Linux", "Mac OSX"]
keywords = [
    "Tensor Decomposition",
    "HOSVD",
    "Tucker",
    "CANDECOMP/PARAFAC",
    "Alternating Least Squares",
    "Numerical Linear Algebra",
    "Dimensionality Reduction",
]

try:
    with open("requirements.txt") as fid:
        install_requires = [
            l.strip() for l in fid.readlines() if l.strip() and not l.startswith("#")
        ]
except FileNotFoundError:
    install_requires = ["numpy>=1.20.0"]

extras_require = {
    "examples": ["matplotlib"],
    "test": ["pytest"],
}

with open("README.org") as fh:
    long_description = fh.read()

# Get version number
with open(os.path.join("mldecomp", "__init__.py"), "r") as f:
    for line in f:
        if line.startswith("__version__"):
            version = line.strip().split("=")[1].strip(' "\'')
            break

packages = find_packages(include=["mldecomp", "mldecomp.*"])
package_data = {
    "mldecomp": ["tests/*.py"],
}

classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

if __name__ == "__main__":
    setup(
        name=name,
        version=version,
        maintainer=maintainer,
        maintainer_email=maintainer_email,
        author=authors["Mldecomp"][0],
        description=description,
        keywords=keywords,
        long_description=long_description,
        long_description_content_type="text/x-org",
        platforms=platforms,
        url=url,
        classifiers=classifiers,
        packages=packages,
        package_data=package_data,
        install_requires=install_requires,
        extras_require=extras_require,
        python_requires=">=3.8",
        zip_safe=False,
    )
