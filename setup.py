from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as f:
    requirements = [line.strip() for line in f if line.strip() and not line.startswith("#")]

setup(
    name="dye-profile-analysis",
    version="1.0.0",
    author="Dye Profile Analysis Team",
    author_email="",
    description="离心管染料分布图像的逐列通道比例分析工具",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=[
        "main",
        "solvent_front_analysis",
        "waterfall_plot",
        "mass_temperature_analysis",
    ],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Topic :: Scientific/Engineering :: Image Processing",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "dye-profile=main:main",
            "dye-solvent-front=solvent_front_analysis:main",
            "dye-waterfall=waterfall_plot:main",
            "dye-mass-temperature=mass_temperature_analysis:main",
        ],
    },
)
