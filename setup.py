"""
Setup file.
"""

import os

from setuptools import find_packages, setup

URL = "https://github.com/getAsterisk/claudia"
KEYWORDS = "release build cross-compile tauri cargo packaging archive toolchain"
HERE = os.path.dirname(os.path.abspath(__file__))

INSTALL_REQUIRES = [
    "psutil>=5.9",
    "tqdm>=4.60",
]

TEST_REQUIRES = [
    "pytest>=7.0",
]


if __name__ == "__main__":
    setup(
        name="claudia-build",
        version="0.1.0",
        description="Cross-platform build and release tool for the Claudia desktop app",
        keywords=KEYWORDS,
        url=URL,
        python_requires=">=3.9",
        package_dir={"": "src"},
        packages=find_packages(where="src", include=["claudia_build", "claudia_build.*"]),
        install_requires=INSTALL_REQUIRES,
        extras_require={"test": TEST_REQUIRES},
        entry_points={
            "console_scripts": [
                "claudia-build=claudia_build.cli:main",
            ],
        },
        include_package_data=True)
