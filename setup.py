from setuptools import setup

setup(
    name="geocodec",
    version="0.1.0",
    description="Typed encoding and decoding of GeoJSON geometries, built on msgspec",
    license="BSD",
    packages=["geocodec"],
    package_data={"geocodec": ["py.typed"]},
    python_requires=">=3.9",
    install_requires=["msgspec>=0.18"],
    extras_require={"test": ["pytest"]},
)
