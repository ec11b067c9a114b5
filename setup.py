import os
from setuptools import setup, find_packages

setup(
    name="pngtoico",
    version="1.0.0",
    author="Your Name",
    author_email="your.email@example.com",
    description="Convert PNG images to multi-resolution ICO files and unpack ICO files to PNG",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    license="MIT",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    include_package_data=True,
    zip_safe=False,
    install_requires=[
        # Imaging
        "Pillow>=9.1.0",

        # Configuration
        "pyyaml>=6.0.1",
        "python-dotenv>=1.0.0",
        "pydantic>=2.0",
    ],
    extras_require={
        # Development
        "test": [
            "pytest>=7.4.2",
        ],
    },
    entry_points={
        "console_scripts": [
            "pngtoico=pngtoico.cli:main",
        ],
    },
)
