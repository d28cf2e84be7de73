# setup.py
from setuptools import setup, find_packages

setup(
    name='fragnav',
    version='0.1.0',
    author='fragnav contributors',
    description='View-fragment navigation for single host pages, with a desktop webview shell.',
    long_description=open('README.md', encoding='utf-8').read(),
    long_description_content_type='text/markdown',

    # Finds the `fragnav` and `fragnav_cli` packages
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,

    install_requires=[
        'PySide6',
        'typer[all]',
        'PyYAML',
        'httpx',
        'beautifulsoup4',
    ],

    # Creates an executable script named `fragnav` that calls the `app`
    # object inside `fragnav_cli.main`.
    entry_points={
        'console_scripts': [
            'fragnav = fragnav_cli.main:app',
        ],
    },

    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: User Interfaces',
    ],
    python_requires='>=3.10',
)
