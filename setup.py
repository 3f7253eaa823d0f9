# pylint: skip-file
"""inlets provisioner.

Provisions short-lived cloud instances that run an inlets tunnel server on
behalf of a cluster-side controller, and reports their status back to it.
"""
import io
import os
import re
import runpy

import setuptools

ROOT_DIR = os.path.dirname(__file__)
DEPENDENCIES_FILE_PATH = os.path.join(ROOT_DIR, 'inlets', 'setup_files',
                                      'dependencies.py')
INIT_FILE_PATH = os.path.join(ROOT_DIR, 'inlets', '__init__.py')

# setuptools does not include the script dir on the search path, so we can't
# just do `import dependencies`. Instead, use runpy to manually load it. Note:
# dependencies here is a dict, not a module, so we access it by subscripting.
dependencies = runpy.run_path(DEPENDENCIES_FILE_PATH)


def find_version():
    with open(INIT_FILE_PATH, 'r', encoding='utf-8') as fp:
        version_match = re.search(r'^__version__ = [\'"]([^\'"]*)[\'"]',
                                  fp.read(), re.M)
        if version_match:
            return version_match.group(1)
        raise RuntimeError('Unable to find version string.')


long_description = ''
readme_filepath = os.path.join(ROOT_DIR, 'README.md')
if os.path.exists(readme_filepath):
    long_description = io.open(readme_filepath, 'r', encoding='utf-8').read()

setuptools.setup(
    name='inlets-provisioner',
    version=find_version(),
    packages=setuptools.find_packages(include=['inlets', 'inlets.*']),
    license='MIT',
    description='Provision inlets tunnel servers on cloud backends.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    setup_requires=['wheel'],
    python_requires='>=3.9',
    install_requires=dependencies['install_requires'],
    extras_require=dependencies['extras_require'],
    include_package_data=True,
    classifiers=[
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Operating System :: OS Independent',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'Topic :: System :: Networking',
    ],
)
