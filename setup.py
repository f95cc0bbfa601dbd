from setuptools import setup, find_packages

setup(
    name="spatiotemporal-filters",
    version="1.0.0",
    description="Gabor and 9-tap spatiotemporal motion energy filters for video.",
    author="Julian Parsert, Florian Meßner",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=[
        "opencv-python",
        "Pillow",
        "numpy"
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'stfilters=stfilters.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.8',
)
