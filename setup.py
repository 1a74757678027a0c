from setuptools import setup, find_packages

setup(
    name="boxcorr",
    version="0.1.0",
    author="DillyDilly",
    author_email="aidend@uoregon.edu",
    description="Box-assisted correlation sums for estimating the correlation dimension of point clouds",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Topic :: Scientific/Engineering :: Physics",
    ],
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.19.0",
        "scipy>=1.6.0",
        "numba>=0.53.0",
        "tqdm>=4.50.0",
        "scikit-learn>=0.24.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
