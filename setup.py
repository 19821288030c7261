"""
Installation setup for hlfproximity
"""
import configparser
import pathlib

import setuptools

# Establish project directory
project_root: pathlib.Path = pathlib.Path(__file__).resolve().parent

# Read config details to determine version-ing
config_file = project_root.joinpath("hlfproximity/resources/hlf.properties.example")
config = configparser.ConfigParser()
if config_file.is_file():
    config.read(str(config_file))

setuptools.setup(
    name="hlf-proximity",
    version=config.get("HLF", "version", fallback="1.0.0+fallback"),
    description="Half Magic proxy generator driving Proximity over the Scryfall catalog",
    long_description=project_root.joinpath("README.md").open(encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    license="MIT",
    classifiers=[
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: MacOS :: MacOS X",
        "Operating System :: Microsoft :: Windows :: Windows 10",
        "Operating System :: Unix",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python",
        "Topic :: Games/Entertainment",
        "Topic :: Multimedia :: Graphics",
    ],
    keywords=[
        "Card Games",
        "Half Magic",
        "MTG",
        "Proximity",
        "Proxies",
        "Scryfall",
        "Magic: The Gathering",
    ],
    python_requires=">=3.8",
    include_package_data=True,
    package_data={"hlfproximity": ["resources/*.example"]},
    packages=setuptools.find_packages(include=["hlfproximity", "hlfproximity.*"]),
    install_requires=project_root.joinpath("requirements.txt")
    .open(encoding="utf-8")
    .readlines()
    if project_root.joinpath("requirements.txt").is_file()
    else [],  # Use the requirements file, if able
    extras_require={"test": ["pytest", "responses"]},
    entry_points={"console_scripts": ["hlfproximity=hlfproximity.__main__:main"]},
)
