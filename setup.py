from setuptools import setup


setup(
    name='ctrcalc',
    version='0.1.0',
    description='RPN calculator with aliases',
    install_requires=[
        'regex',
        'prompt_toolkit',
    ],
    packages=['ctrcalc'],
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    python_requires='>=3.11',
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
            'coverage',
            'flake8',
        ],
    },
    entry_points={
        'console_scripts': [
            'ctrcalc = ctrcalc.cli:main',
        ],
    },
    license='ISC',
)
