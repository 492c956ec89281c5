from setuptools import find_namespace_packages, setup

# with open("README.md", "r") as fh:
#     long_description = fh.read()

setup(
    name="smg-screws",
    version="0.0.1",
    author="Stuart Golodetz",
    author_email="stuart.golodetz@cs.ox.ac.uk",
    description="Conversions between transforms, twists and screws, and screw motion animation",
    long_description="",  #long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/sgolodetz/smg-screws",
    packages=find_namespace_packages(include=["smg.screws", "smg.screws.*"]),
    include_package_data=True,
    install_requires=[
        "numpy",
        "scipy",
        "vg"
    ],
    extras_require={
        "test": [
            "pytest"
        ]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.7',
)
