from setuptools import setup

# run:
#   pip install .
# or (if you'll be modifying the package):
#   pip install -e .
#
# Tag the release in github!
#

classifiers = [
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "License :: OSI Approved :: Apache Software License",
    "Natural Language :: English",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Topic :: System :: Operating System Kernels :: Linux",
    "Topic :: Text Processing :: Filters",
]

install_requires = [
    "aiofiles",
    "pyyaml",
    "simplejson",
]


setup(
    name="ksymglob",
    version="0.1.0",
    description="Glob filtering for kernel symbol and tracepoint listings",
    license="Apache",
    packages=["ksymglob", "ksymglob.util"],
    package_data={"ksymglob": ["default_config.yml"]},
    install_requires=install_requires,
    setup_requires=["setuptools"],
    extras_require={"test": ["pytest"]},
    python_requires=">=3.8",
    zip_safe=False,
    classifiers=classifiers,
    include_package_data=True,
    entry_points={
        "console_scripts": [
            "ksymglob = ksymglob.app:main",
        ]
    },
)
