from setuptools import setup, find_packages

setup(
    name='dynimport-vars',
    version='0.1.0',
    description='Resolve variable dynamic imports into globs and runtime dispatch tables',
    py_modules=['dynimport', 'compiler'],
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'importvars': ['runtime/*.js'],
    },
    python_requires='>=3.10',
    install_requires=[
        'lark',
        'pydantic>=2.0',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'dynimport = dynimport:main',
        ],
    },
)
