import setuptools

with open("README.rst", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="jot-notes",
    version="0.1.0",
    description="Jot notes in a git-backed directory, delegating finding, listing and editing to programs you choose.",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    packages=setuptools.find_packages('src'),
    package_dir={'': 'src'},
    entry_points={
        'console_scripts': [
            'jot = jot.cli:main'
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX",
    ],
    install_requires=[
        'pyyaml>=5.3.1',
    ],
    extras_require={
        'test': [
            'freezegun',
            'pyfakefs',
            'pytest',
        ],
    },
    python_requires='>=3.7',
)
