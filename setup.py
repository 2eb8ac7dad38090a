from setuptools import setup, find_packages

setup(
    name="multi-region-mesh",
    version="0.1.0",
    description="Laplacian mesh relaxation and multi-region 2D triangulation with vertex welding",
    author="",
    packages=find_packages(exclude=["tests"]),
    py_modules=["multi_region_mesh"],
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "trimesh",
        "networkx",
        "tqdm",
        "triangle",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
