import setuptools

with open("README.rst", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="gravray",
    version="0.4.0",
    author="Michael J Hayford",
    author_email="mjhoptics@gmail.com",
    description="Geodesic tracing and image-plane inversion around compact objects",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    license="BSD-3-Clause",
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src"),
    python_requires=">=3.10",
    classifiers=[
        "Programming Language :: Python :: 3.10",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Topic :: Scientific/Engineering :: Astronomy",
        "Topic :: Scientific/Engineering :: Physics",
    ],
    keywords=['general relativity', 'geodesics', 'ray tracing',
              'black holes', 'accretion discs', 'radiative transfer',
              'reflection spectroscopy'],
    install_requires=[
        "numpy>=1.22.0",
        "scipy>=1.9.0",
        "pandas>=1.4.0",
        ],
    extras_require={
        'test':  ["pytest"],
    },
)
